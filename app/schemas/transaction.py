from pydantic import BaseModel, ConfigDict, Field


class Purchase(BaseModel):
    """
    1回の購入処理の単位（永続化しない）
    価格は商品の読み取り時に1度だけ確定し、デビットとクレジットの両方に使う
    """

    buyer_id: int
    item_id: int
    seller_id: int
    price: int = Field(ge=0)

    model_config = ConfigDict(frozen=True)
