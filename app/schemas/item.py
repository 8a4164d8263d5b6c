from pydantic import BaseModel, ConfigDict, Field


class ItemBase(BaseModel):
    """
    APIで商品データを返すときの基本スキーマ
    """

    id: int
    name: str
    description: str | None = None
    category: str | None = None
    image_url: str | None = None
    price: int
    seller_id: int
    status: str

    # SQLAlchemyモデル（models.Item）からの自動変換を有効にする
    model_config = ConfigDict(from_attributes=True)


class ItemCreate(BaseModel):
    """
    商品登録リクエスト用のスキーマ (クライアントから受け取るデータ)
    """

    # 必須フィールド
    name: str = Field(min_length=1)
    price: int = Field(ge=0)

    # 任意フィールド (NULL許容)
    description: str | None = None
    category: str | None = None
    image_url: str | None = None


class ItemUpdate(BaseModel):
    """
    商品情報の更新リクエスト。価格・ステータスは変更できない
    """

    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    category: str | None = None
    image_url: str | None = None

    model_config = ConfigDict(extra="forbid")


class ItemCreated(BaseModel):
    id: int
