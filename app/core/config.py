# fleamarket-backend/app/core/config.py

import os
from dotenv import load_dotenv

# .envファイルを読み込む（ローカル開発用）
# 本番環境（Cloud Runなど）ではファイルがないため無視されます
load_dotenv()


class Settings:
    # API設定
    API_V1_STR: str = "/api/v1"

    # DB設定
    # INSTANCE_CONNECTION_NAME があれば Cloud SQL (MySQL) に接続、なければ DATABASE_URL を使う
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./fleamarket.db")
    DB_USER: str = os.getenv("DB_USER", "root")

    # .envではDB_PASSとなっているため、ここで名前を合わせて読み込みます
    DB_PASSWORD: str = os.getenv("DB_PASS", "password")

    # Cloud SQL接続名
    DB_HOST: str = os.getenv("INSTANCE_CONNECTION_NAME", "")
    DB_NAME: str = os.getenv("DB_NAME", "mercari")
    DB_ECHO: bool = os.getenv("DB_ECHO", "false").lower() == "true"

    # 残高関連
    # 新規登録ユーザーの初期残高
    INITIAL_BALANCE: int = int(os.getenv("INITIAL_BALANCE", "0"))

    # 購入処理: True なら読み取り時に SELECT ... FOR UPDATE で行ロックを取る
    PURCHASE_LOCK_ROWS: bool = os.getenv("PURCHASE_LOCK_ROWS", "false").lower() == "true"

    # ログ
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # CORS設定
    CORS_ORIGINS: list = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
        if origin.strip()
    ]

    # DEBUG mode
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"


# 設定インスタンスを作成してエクスポート
settings = Settings()
