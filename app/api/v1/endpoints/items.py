# fleamarket-backend/app/api/v1/endpoints/items.py
"""
商品関連 API エンドポイント
- 商品登録・詳細・更新
- 出品・購入
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.v1.endpoints.users import get_current_user_id
from app.core.config import settings
from app.core.errors import ForbiddenError
from app.db.account_store import AccountStore
from app.db.database import get_db, get_session_factory
from app.db.item_store import ItemStore
from app.schemas import item as item_schema
from app.services.listing_service import ListingService
from app.services.transaction_engine import EngineConfig, TransactionEngine


router = APIRouter()


def get_transaction_engine(session_factory=Depends(get_session_factory)):
    return TransactionEngine(session_factory, EngineConfig.from_settings(settings))


def get_listing_service(session_factory=Depends(get_session_factory)):
    return ListingService(session_factory)


# =============================================================================
# 商品登録・詳細・更新
# =============================================================================

@router.post(
    "",
    response_model=item_schema.ItemCreated,
    summary="新規商品登録",
    status_code=status.HTTP_201_CREATED,
)
def create_item(
    item_in: item_schema.ItemCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """ログイン中のユーザーとして商品を登録（この時点では initial）"""
    AccountStore(db).get_account(user_id)
    item = ItemStore(db).add_item(seller_id=user_id, **item_in.model_dump())
    db.commit()
    return item_schema.ItemCreated(id=item.id)


@router.get("/{item_id}", response_model=item_schema.ItemBase)
def get_item(item_id: int, db: Session = Depends(get_db)):
    """商品詳細を取得"""
    return ItemStore(db).get_item(item_id)


@router.patch("/{item_id}", response_model=item_schema.ItemBase, summary="商品情報の更新")
def update_item(
    item_id: int,
    item_in: item_schema.ItemUpdate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """説明系の項目のみ更新。価格・ステータスは変わらない"""
    store = ItemStore(db)
    item = store.get_item(item_id)
    if item.seller_id != user_id:
        raise ForbiddenError("only the seller can update the item")

    item = store.update_fields(item_id, **item_in.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(item)
    return item


# =============================================================================
# 出品・購入
# =============================================================================

@router.post("/{item_id}/sell", summary="出品（販売開始）")
def sell_item(
    item_id: int,
    user_id: int = Depends(get_current_user_id),
    listing: ListingService = Depends(get_listing_service),
):
    listing.sell(user_id, item_id)
    return "successful"


@router.post("/{item_id}/purchase", summary="商品の購入")
def purchase_item(
    item_id: int,
    user_id: int = Depends(get_current_user_id),
    engine: TransactionEngine = Depends(get_transaction_engine),
):
    """
    商品を購入
    - 商品のステータス更新と残高移動は1つのトランザクションで行う
    """
    engine.purchase(user_id, item_id)
    return "successful"
