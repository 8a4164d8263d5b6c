# fleamarket-backend/app/services/listing_service.py
"""
出品（initial -> on_sale）のビジネスロジック
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from app.core.errors import (
    ForbiddenError,
    InternalError,
    MarketError,
    PreconditionFailedError,
)
from app.db.item_store import ItemStore
from app.db.models import ItemStatus

logger = logging.getLogger(__name__)


class ListingService:
    def __init__(self, session_factory):
        self.session_factory = session_factory

    def sell(self, seller_id: int, item_id: int) -> None:
        """出品者本人が initial の商品を販売中にする"""
        try:
            with self.session_factory() as db, db.begin():
                items = ItemStore(db)
                item = items.get_item(item_id)

                if item.seller_id != seller_id:
                    raise ForbiddenError("only the seller can put the item on sale")
                if item.status != ItemStatus.INITIAL.value:
                    raise PreconditionFailedError("not in initial status")

                try:
                    items.update_status(item_id, ItemStatus.INITIAL, ItemStatus.ON_SALE)
                except PreconditionFailedError as e:
                    # 読み取り後に別リクエストが先に出品した
                    raise PreconditionFailedError("not in initial status") from e
        except MarketError as e:
            logger.warning(f"sell rejected: seller={seller_id} item={item_id}: {e.message}")
            raise
        except SQLAlchemyError as e:
            logger.exception(f"sell failed in DB: seller={seller_id} item={item_id}")
            raise InternalError("database error during sell") from e

        logger.info(f"item {item_id} is now on sale")
