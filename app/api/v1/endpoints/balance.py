# fleamarket-backend/app/api/v1/endpoints/balance.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.endpoints.users import get_current_user_id
from app.db.account_store import AccountStore
from app.db.database import get_db
from app.schemas.user import AddBalanceRequest, BalanceResponse

router = APIRouter()


@router.get("", response_model=BalanceResponse, summary="残高取得")
def get_balance(
    db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)
):
    user = AccountStore(db).get_account(user_id)
    return BalanceResponse(balance=user.balance)


@router.post("", response_model=BalanceResponse, summary="入金")
def add_balance(
    req: AddBalanceRequest,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """残高に加算する。読み取り→書き込みではなく1回の条件付き更新で行う"""
    new_balance = AccountStore(db).apply_delta(user_id, req.balance)
    db.commit()
    return BalanceResponse(balance=new_balance)
