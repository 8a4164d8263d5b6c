# fleamarket-backend/app/db/account_store.py
"""
アカウント（残高）の読み取り・条件付き更新
"""

from sqlalchemy.orm import Session

from app.core.errors import InsufficientFundsError, NotFoundError
from app.db import models


class AccountStore:
    def __init__(self, db: Session):
        self.db = db

    def get_account(self, user_id: int, for_update: bool = False) -> models.User:
        """アカウントを取得。存在しなければ NotFoundError"""
        q = self.db.query(models.User).filter(models.User.id == user_id)
        if for_update:
            q = q.with_for_update()
        user = q.first()
        if user is None:
            raise NotFoundError("account", user_id)
        return user

    def exists(self, user_id: int) -> bool:
        return (
            self.db.query(models.User.id).filter(models.User.id == user_id).first()
            is not None
        )

    def get_balance(self, user_id: int) -> int:
        """残高だけを読む。存在しなければ NotFoundError"""
        balance = (
            self.db.query(models.User.balance)
            .filter(models.User.id == user_id)
            .scalar()
        )
        if balance is None:
            raise NotFoundError("account", user_id)
        return balance

    def create_account(self, name: str, balance: int = 0) -> models.User:
        if balance < 0:
            raise ValueError(f"balance must not be negative: {balance}")

        user = models.User(name=name, balance=balance)
        self.db.add(user)
        self.db.flush()
        return user

    def apply_delta(self, user_id: int, delta: int, floor: int = 0) -> int:
        """
        残高に delta を加算し、更新後の残高を返す
        読み取りと書き込みを1つの UPDATE で行い、結果が floor を下回るなら書かない
        """
        updated = (
            self.db.query(models.User)
            .filter(
                models.User.id == user_id,
                models.User.balance + delta >= floor,
            )
            .update({models.User.balance: models.User.balance + delta})
        )
        if updated != 1:
            if not self.exists(user_id):
                raise NotFoundError("account", user_id)
            raise InsufficientFundsError(user_id, delta)

        return (
            self.db.query(models.User.balance)
            .filter(models.User.id == user_id)
            .scalar()
        )
