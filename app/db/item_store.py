# fleamarket-backend/app/db/item_store.py
"""
商品レコードの読み取り・条件付き更新

トランザクションは呼び出し側（サービス）が張る。
ここではコミットせず flush までしか行わない。
"""

from typing import List

from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, PreconditionFailedError
from app.db import models
from app.db.models import DESCRIPTIVE_FIELDS, NEXT_STATUS, ItemStatus


class ItemStore:
    def __init__(self, db: Session):
        self.db = db

    def get_item(self, item_id: int, for_update: bool = False) -> models.Item:
        """商品を取得。存在しなければ NotFoundError"""
        q = self.db.query(models.Item).filter(models.Item.id == item_id)
        if for_update:
            q = q.with_for_update()
        item = q.first()
        if item is None:
            raise NotFoundError("item", item_id)
        return item

    def exists(self, item_id: int) -> bool:
        return (
            self.db.query(models.Item.id).filter(models.Item.id == item_id).first()
            is not None
        )

    def update_status(
        self, item_id: int, expected: ItemStatus, new: ItemStatus
    ) -> None:
        """
        ステータスの条件付き更新 (compare-and-set)
        - 現在のステータスが expected のときだけ new に書き換える
        - 一致しなければ何も書かずに PreconditionFailedError
        """
        if NEXT_STATUS.get(expected) != new:
            raise ValueError(f"invalid status transition: {expected.value} -> {new.value}")

        updated = (
            self.db.query(models.Item)
            .filter(
                models.Item.id == item_id,
                models.Item.status == expected.value,
            )
            .update({models.Item.status: new.value})
        )
        if updated == 1:
            return

        if not self.exists(item_id):
            raise NotFoundError("item", item_id)
        raise PreconditionFailedError(f"item is not {expected.value}")

    def add_item(
        self,
        seller_id: int,
        name: str,
        price: int,
        description: str | None = None,
        category: str | None = None,
        image_url: str | None = None,
    ) -> models.Item:
        """新規商品を initial で登録"""
        if price < 0:
            raise ValueError(f"price must not be negative: {price}")

        item = models.Item(
            seller_id=seller_id,
            name=name,
            price=price,
            description=description,
            category=category,
            image_url=image_url,
            status=ItemStatus.INITIAL.value,
        )
        self.db.add(item)
        self.db.flush()
        return item

    def update_fields(self, item_id: int, **fields) -> models.Item:
        """説明系のカラムのみ更新する。価格・出品者・ステータスは変えない"""
        rejected = set(fields) - set(DESCRIPTIVE_FIELDS)
        if rejected:
            raise ValueError(f"fields cannot be updated: {', '.join(sorted(rejected))}")

        item = self.get_item(item_id)
        for key, value in fields.items():
            setattr(item, key, value)
        self.db.flush()
        return item

    def list_user_items(self, seller_id: int) -> List[models.Item]:
        """出品者の商品一覧（新しい順）"""
        return (
            self.db.query(models.Item)
            .filter(models.Item.seller_id == seller_id)
            .order_by(models.Item.id.desc())
            .all()
        )
