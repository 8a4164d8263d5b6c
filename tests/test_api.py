"""HTTP レイヤー: ステータスコードとエラーレスポンスの形"""

import pytest

from app.db.models import ItemStatus


def headers(user_id):
    return {"X-User-Id": str(user_id)}


@pytest.fixture
def accounts(client):
    seller = client.post("/api/v1/users", json={"name": "seller"}).json()
    buyer = client.post("/api/v1/users", json={"name": "buyer"}).json()
    return seller["id"], buyer["id"]


def create_item(client, seller_id, price=30):
    res = client.post(
        "/api/v1/items",
        json={"name": "camera", "price": price, "category": "electronics"},
        headers=headers(seller_id),
    )
    assert res.status_code == 201
    return res.json()["id"]


def test_ping(client):
    assert client.get("/api/v1/ping").json() == {"status": "success"}


def test_register_and_me(client):
    res = client.post("/api/v1/users", json={"name": "alice"})
    assert res.status_code == 201
    user = res.json()
    assert user["balance"] == 0

    me = client.get("/api/v1/users/me", headers=headers(user["id"]))
    assert me.status_code == 200
    assert me.json()["name"] == "alice"


def test_missing_or_invalid_identity(client):
    res = client.get("/api/v1/balance")
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "UNAUTHENTICATED"
    assert client.get("/api/v1/balance", headers={"X-User-Id": "abc"}).status_code == 401
    assert client.post("/api/v1/items/1/purchase").status_code == 401


def test_unknown_user_balance(client):
    res = client.get("/api/v1/balance", headers=headers(12345))
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "NOT_FOUND"


def test_add_balance(client, accounts):
    _, buyer = accounts
    res = client.post("/api/v1/balance", json={"balance": 100}, headers=headers(buyer))
    assert res.status_code == 200
    assert res.json() == {"balance": 100}
    assert client.get("/api/v1/balance", headers=headers(buyer)).json() == {"balance": 100}


@pytest.mark.parametrize("amount", [0, -10])
def test_add_balance_rejects_non_positive(client, accounts, amount):
    _, buyer = accounts
    res = client.post("/api/v1/balance", json={"balance": amount}, headers=headers(buyer))
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


def test_create_item_is_initial(client, accounts):
    seller, _ = accounts
    item_id = create_item(client, seller)

    res = client.get(f"/api/v1/items/{item_id}")
    assert res.status_code == 200
    assert res.json()["status"] == ItemStatus.INITIAL.value
    assert res.json()["seller_id"] == seller

    own = client.get("/api/v1/users/me/items", headers=headers(seller)).json()
    assert [i["id"] for i in own] == [item_id]


def test_create_item_rejects_negative_price(client, accounts):
    seller, _ = accounts
    res = client.post(
        "/api/v1/items", json={"name": "x", "price": -1}, headers=headers(seller)
    )
    assert res.status_code == 400


def test_get_unknown_item(client):
    assert client.get("/api/v1/items/999").status_code == 404


def test_update_item_fields(client, accounts):
    seller, buyer = accounts
    item_id = create_item(client, seller)

    res = client.patch(
        f"/api/v1/items/{item_id}", json={"name": "film camera"}, headers=headers(seller)
    )
    assert res.status_code == 200
    assert res.json()["name"] == "film camera"
    assert res.json()["price"] == 30
    assert res.json()["status"] == ItemStatus.INITIAL.value

    # 価格は変更できない
    res = client.patch(
        f"/api/v1/items/{item_id}", json={"price": 1}, headers=headers(seller)
    )
    assert res.status_code == 400

    # 出品者以外は更新できない
    res = client.patch(
        f"/api/v1/items/{item_id}", json={"name": "mine"}, headers=headers(buyer)
    )
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "FORBIDDEN"


def test_sell_and_purchase_flow(client, accounts):
    seller, buyer = accounts
    client.post("/api/v1/balance", json={"balance": 100}, headers=headers(buyer))
    item_id = create_item(client, seller, price=30)

    # 出品前は購入できない
    res = client.post(f"/api/v1/items/{item_id}/purchase", headers=headers(buyer))
    assert res.status_code == 412
    assert res.json()["error"]["message"] == "not on sale"

    # 出品者以外は出品できない
    res = client.post(f"/api/v1/items/{item_id}/sell", headers=headers(buyer))
    assert res.status_code == 403

    res = client.post(f"/api/v1/items/{item_id}/sell", headers=headers(seller))
    assert res.status_code == 200
    assert res.json() == "successful"

    # 二重出品
    res = client.post(f"/api/v1/items/{item_id}/sell", headers=headers(seller))
    assert res.status_code == 412

    # 自分の商品
    res = client.post(f"/api/v1/items/{item_id}/purchase", headers=headers(seller))
    assert res.status_code == 412
    assert res.json()["error"]["message"] == "cannot buy own item"

    res = client.post(f"/api/v1/items/{item_id}/purchase", headers=headers(buyer))
    assert res.status_code == 200
    assert res.json() == "successful"

    assert client.get("/api/v1/balance", headers=headers(buyer)).json() == {"balance": 70}
    assert client.get("/api/v1/balance", headers=headers(seller)).json() == {"balance": 30}
    assert client.get(f"/api/v1/items/{item_id}").json()["status"] == ItemStatus.SOLD_OUT.value

    # 売り切れ
    res = client.post(f"/api/v1/items/{item_id}/purchase", headers=headers(buyer))
    assert res.status_code == 412
    assert res.json()["error"]["message"] == "not on sale"


def test_purchase_insufficient_balance(client, accounts):
    seller, buyer = accounts
    item_id = create_item(client, seller, price=30)
    client.post(f"/api/v1/items/{item_id}/sell", headers=headers(seller))

    res = client.post(f"/api/v1/items/{item_id}/purchase", headers=headers(buyer))
    assert res.status_code == 412
    assert res.json()["error"] == {
        "code": "PRECONDITION_FAILED",
        "message": "insufficient balance",
    }


def test_purchase_unknown_item(client, accounts):
    _, buyer = accounts
    res = client.post("/api/v1/items/999/purchase", headers=headers(buyer))
    assert res.status_code == 404


def test_purchase_item_with_missing_seller_returns_generic_500(client, accounts, market):
    _, buyer = accounts
    client.post("/api/v1/balance", json={"balance": 100}, headers=headers(buyer))
    item_id = market.item(seller_id=9999, price=10, status=ItemStatus.ON_SALE)

    res = client.post(f"/api/v1/items/{item_id}/purchase", headers=headers(buyer))
    assert res.status_code == 500
    assert res.json()["error"] == {
        "code": "INTERNAL_ERROR",
        "message": "internal server error",
    }
