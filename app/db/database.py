import sqlalchemy
from google.cloud.sql.connector import Connector
from sqlalchemy import event
from sqlalchemy.orm import sessionmaker, declarative_base
from app.core.config import settings

# Cloud SQL Connectorは初回接続時に初期化（ローカルでは使わない）
_connector = None


def getconnection():
    """
    Cloud SQL への接続を確立する関数.
    config.py (settings) の値を使用します。
    """
    global _connector
    if _connector is None:
        _connector = Connector()

    # settings.DB_HOST には INSTANCE_CONNECTION_NAME が入っています
    conn = _connector.connect(
        settings.DB_HOST,
        "pymysql",
        user=settings.DB_USER,
        password=settings.DB_PASSWORD,
        db=settings.DB_NAME,
        charset="utf8mb4",
    )
    return conn


def _use_immediate_transactions(engine):
    """
    SQLite のトランザクションを BEGIN IMMEDIATE で開始する.
    書き込みロックを最初に取るので、同時購入は直列化され、
    待たされた側はコミット済みの状態を読み直す。
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        # pysqlite 独自の BEGIN 発行を止める
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_db_engine(url: str, echo: bool = False):
    """URL からエンジンを作る。SQLite の場合はトランザクション開始方法を差し替える"""
    if url.startswith("sqlite"):
        engine = sqlalchemy.create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False, "timeout": 15},
        )
        _use_immediate_transactions(engine)
        return engine

    return sqlalchemy.create_engine(url, echo=echo, pool_pre_ping=True)


# エンジンの作成
if settings.DB_HOST:
    engine = sqlalchemy.create_engine(
        "mysql+pymysql://",
        creator=getconnection,
        echo=settings.DB_ECHO,
        pool_pre_ping=True,
    )
else:
    engine = create_db_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)

# セッション作成
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    """
    DBセッションを取得するための依存関係.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory():
    """
    トランザクションを自前で張るサービス（購入・出品）用の依存関係.
    """
    return SessionLocal
