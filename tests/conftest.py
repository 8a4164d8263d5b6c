"""共通フィクスチャ: 一時ファイルの SQLite と、テストデータ作成用ヘルパー"""

import os
import tempfile

# app のインポート前に設定する（本番DBや作業ディレクトリに書き込まないため）
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="fleamarket-"), "startup.db"
)
os.environ["INITIAL_BALANCE"] = "0"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.db import models
from app.db.database import Base, create_db_engine, get_db, get_session_factory
from app.db.models import ItemStatus
from app.main import app


@pytest.fixture
def db_engine(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


class Market:
    """
    テストデータの作成と状態確認。
    SQLite は BEGIN IMMEDIATE で書き込みロックを取るので、
    各操作は自分のセッションでコミットして閉じる。
    """

    def __init__(self, session_factory):
        self.session_factory = session_factory

    def user(self, name: str = "user", balance: int = 0) -> int:
        with self.session_factory() as db, db.begin():
            user = models.User(name=name, balance=balance)
            db.add(user)
            db.flush()
            return user.id

    def item(
        self,
        seller_id: int,
        price: int = 10,
        status: ItemStatus = ItemStatus.ON_SALE,
        name: str = "item",
    ) -> int:
        with self.session_factory() as db, db.begin():
            item = models.Item(
                seller_id=seller_id,
                name=name,
                description="desc",
                category="books",
                price=price,
                status=status.value,
            )
            db.add(item)
            db.flush()
            return item.id

    def balance(self, user_id: int) -> int:
        with self.session_factory() as db:
            return db.get(models.User, user_id).balance

    def status(self, item_id: int) -> str:
        with self.session_factory() as db:
            return db.get(models.Item, item_id).status


@pytest.fixture
def market(session_factory):
    return Market(session_factory)


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
