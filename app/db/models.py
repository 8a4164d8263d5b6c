import enum
from sqlalchemy import (
    CheckConstraint,
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.database import Base


class ItemStatus(str, enum.Enum):
    """
    商品のライフサイクル
    initial (出品登録のみ) -> on_sale (出品中) -> sold_out (売り切れ)
    逆戻り・飛び越しは不可
    """

    INITIAL = "initial"
    ON_SALE = "on_sale"
    SOLD_OUT = "sold_out"


# 許可される遷移: 現在 -> 次
NEXT_STATUS = {
    ItemStatus.INITIAL: ItemStatus.ON_SALE,
    ItemStatus.ON_SALE: ItemStatus.SOLD_OUT,
}

# 出品後に更新してよいのは説明系のカラムのみ（価格・出品者・ステータスは不可）
DESCRIPTIVE_FIELDS = ("name", "description", "category", "image_url")


# --- 1. User Model (アカウント・残高) ---
class User(Base):
    __tablename__ = "users"
    __table_args__ = (CheckConstraint("balance >= 0", name="ck_users_balance"),)

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255))

    # 残高: 購入時のデビット/クレジットと入金でのみ変化する
    balance = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # リレーション
    items = relationship("Item", back_populates="seller")


# --- 2. Item Model ---
class Item(Base):
    __tablename__ = "items"
    __table_args__ = (CheckConstraint("price >= 0", name="ck_items_price"),)

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String(255))
    description = Column(Text)  # Text型は長さ指定不要
    category = Column(String(255), nullable=True)
    image_url = Column(String(512), nullable=True)

    # 作成後は変更しない
    price = Column(Integer, nullable=False)
    seller_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # ステータス: ItemStatus の値
    status = Column(String(50), nullable=False, default=ItemStatus.INITIAL.value)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # リレーション
    seller = relationship("User", back_populates="items")
