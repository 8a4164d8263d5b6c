# fleamarket-backend/app/core/errors.py
"""
購入・出品処理で使う例外の階層

- ストア/サービスは例外を投げるだけで、HTTP には変換しない
- api/error_handlers.py が http_status と to_response() でレスポンスにする
- InternalError は内部情報をレスポンスに含めない
"""


class MarketError(Exception):
    """全ドメイン例外の基底クラス"""

    code: str = "MARKET_ERROR"
    http_status: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        return {"error": {"code": self.code, "message": self.message}}


class UnauthenticatedError(MarketError):
    code = "UNAUTHENTICATED"
    http_status = 401

    def __init__(self, message: str = "invalid token"):
        super().__init__(message)


class ForbiddenError(MarketError):
    code = "FORBIDDEN"
    http_status = 403


class NotFoundError(MarketError):
    code = "NOT_FOUND"
    http_status = 404

    def __init__(self, resource: str, resource_id):
        super().__init__(f"{resource} '{resource_id}' not found")
        self.resource = resource
        self.resource_id = resource_id


class PreconditionFailedError(MarketError):
    """業務ルール違反。同じリクエストを再試行しても外部状態が変わらない限り失敗する"""

    code = "PRECONDITION_FAILED"
    http_status = 412

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class InsufficientFundsError(PreconditionFailedError):
    """残高の下限チェックに失敗"""

    def __init__(self, user_id: int, delta: int):
        super().__init__("insufficient balance")
        self.user_id = user_id
        self.delta = delta


class InternalError(MarketError):
    """データ不整合・永続化層の障害"""

    code = "INTERNAL_ERROR"
    http_status = 500

    def to_response(self) -> dict:
        # 詳細はログにのみ出す
        return {"error": {"code": self.code, "message": "internal server error"}}
