# fleamarket-backend/app/services/transaction_engine.py
"""
購入トランザクション

商品を on_sale -> sold_out にし、購入者から出品者へ代金を移す。
ステータス更新・デビット・クレジットは1つのDBトランザクションで行い、
どれか1つでも失敗したら全てロールバックする。
"""

import logging

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import (
    InsufficientFundsError,
    InternalError,
    MarketError,
    NotFoundError,
    PreconditionFailedError,
    UnauthenticatedError,
)
from app.db.account_store import AccountStore
from app.db.item_store import ItemStore
from app.db.models import ItemStatus
from app.schemas.transaction import Purchase

logger = logging.getLogger(__name__)


class EngineConfig(BaseModel):
    """購入処理の設定。グローバルな settings は読まず、構築時に渡す"""

    # デビット後に残すべき最低残高
    balance_floor: int = Field(default=0, ge=0)
    # True なら商品行を SELECT ... FOR UPDATE で読む (MySQL向け)
    lock_rows: bool = False

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_settings(cls, settings) -> "EngineConfig":
        return cls(lock_rows=settings.PURCHASE_LOCK_ROWS)


class TransactionEngine:
    def __init__(self, session_factory, config: EngineConfig | None = None):
        self.session_factory = session_factory
        self.config = config or EngineConfig()

    def purchase(self, buyer_id: int, item_id: int) -> None:
        """
        buyer_id のユーザーが item_id の商品を購入する

        Raises:
            UnauthenticatedError: buyer_id が不正
            NotFoundError: 購入者または商品が存在しない
            PreconditionFailedError: 販売中でない・自分の商品・残高不足・競合に負けた
            InternalError: 出品者アカウントがない等のデータ不整合、DB障害
        """
        if buyer_id is None or buyer_id < 0:
            raise UnauthenticatedError()

        try:
            with self.session_factory() as db, db.begin():
                purchase = self._validate(db, buyer_id, item_id)
                self._transfer(db, purchase)
        except InternalError as e:
            logger.error(
                f"purchase aborted: buyer={buyer_id} item={item_id}: {e.message}"
            )
            raise
        except MarketError as e:
            logger.warning(
                f"purchase rejected: buyer={buyer_id} item={item_id}: {e.message}"
            )
            raise
        except SQLAlchemyError as e:
            logger.exception(f"purchase failed in DB: buyer={buyer_id} item={item_id}")
            raise InternalError("database error during purchase") from e

        logger.info(
            f"purchase completed: buyer={purchase.buyer_id} seller={purchase.seller_id} "
            f"item={purchase.item_id} price={purchase.price}"
        )

    def _validate(self, db: Session, buyer_id: int, item_id: int) -> Purchase:
        accounts = AccountStore(db)
        items = ItemStore(db)

        # 1. 購入者 (残高はまだ読まない)
        if not accounts.exists(buyer_id):
            raise NotFoundError("account", buyer_id)

        # 2. 商品
        item = items.get_item(item_id, for_update=self.config.lock_rows)

        # 3. 販売中のみ購入可
        if item.status != ItemStatus.ON_SALE.value:
            raise PreconditionFailedError("not on sale")

        # 4. 自分の商品は買えない
        if buyer_id == item.seller_id:
            raise PreconditionFailedError("cannot buy own item")

        # 5. 出品者アカウントがないのはデータ不整合
        try:
            accounts.get_account(item.seller_id)
        except NotFoundError as e:
            raise InternalError(
                f"item {item.id} references missing seller account {item.seller_id}"
            ) from e

        # 6. 残高チェック (ステータス確認後、同じトランザクション内で読む)
        balance = accounts.get_balance(buyer_id)
        if balance - item.price < self.config.balance_floor:
            raise PreconditionFailedError("insufficient balance")

        return Purchase(
            buyer_id=buyer_id,
            item_id=item.id,
            seller_id=item.seller_id,
            price=item.price,
        )

    def _transfer(self, db: Session, purchase: Purchase) -> None:
        accounts = AccountStore(db)
        items = ItemStore(db)

        # 7. ステータス更新 (CAS)
        try:
            items.update_status(purchase.item_id, ItemStatus.ON_SALE, ItemStatus.SOLD_OUT)
        except PreconditionFailedError as e:
            raise PreconditionFailedError("already sold") from e

        # 口座の更新はID順（同時購入どうしのデッドロック回避）
        debit = (purchase.buyer_id, -purchase.price)
        credit = (purchase.seller_id, purchase.price)
        for user_id, delta in sorted([debit, credit]):
            # 下限はデビットにだけ適用する
            floor = self.config.balance_floor if user_id == purchase.buyer_id else 0
            try:
                accounts.apply_delta(user_id, delta, floor=floor)
            except InsufficientFundsError as e:
                if user_id == purchase.buyer_id:
                    raise
                raise InternalError(f"credit to seller {user_id} was refused") from e
            except NotFoundError as e:
                raise InternalError(f"account {user_id} vanished during purchase") from e
