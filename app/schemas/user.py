from pydantic import BaseModel, ConfigDict, Field


class UserBase(BaseModel):
    """
    APIでユーザー情報を返すときの基本スキーマ
    """

    id: int
    name: str
    balance: int = 0

    # SQLAlchemyモデル（models.User）から
    # Pydanticモデル（UserBase）への自動変換を有効にする
    model_config = ConfigDict(from_attributes=True)


class UserCreate(BaseModel):
    """
    ユーザー登録時にリクエストボディとして受け取るスキーマ
    """

    name: str = Field(min_length=1)


# --- 残高 ---
class AddBalanceRequest(BaseModel):
    """入金リクエスト (正の値のみ)"""

    balance: int = Field(gt=0)


class BalanceResponse(BaseModel):
    balance: int
