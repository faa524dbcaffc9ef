import pytest

from models.cart import CartItem
from models.order import Order, OrderItem
from services import orders as order_service


def _fill_cart(client, who, rows):
    for product, qty in rows:
        response = client.post(
            "/api/cart",
            json={"product_id": product.id, "quantity": qty},
            headers=who["headers"],
        )
        assert response.status_code == 200, response.text


@pytest.fixture
def alice_cart(client, alice, products):
    rows = [(products[0], 2), (products[2], 1), (products[9], 3)]
    _fill_cart(client, alice, rows)
    return rows


def test_assembly_creates_one_order_with_all_items(client, db_session, alice, alice_cart):
    expected_total = sum(p.price * q for p, q in alice_cart)

    response = client.post(
        "/api/orders",
        json={"shipping_address": "Jl. Kopi 7, Bandung", "payment_method": "cash"},
        headers=alice["headers"],
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["order"]["status"] == "pending"
    assert data["order"]["total_amount"] == pytest.approx(expected_total)
    assert data["order"]["shipping_address"] == "Jl. Kopi 7, Bandung"
    assert data["order"]["payment_method"] == "cash"
    assert len(data["items"]) == len(alice_cart)
    assert sum(i["subtotal"] for i in data["items"]) == pytest.approx(expected_total)
    for item in data["items"]:
        assert item["subtotal"] == pytest.approx(item["product_price"] * item["quantity"])

    assert db_session.query(Order).count() == 1
    assert db_session.query(OrderItem).count() == len(alice_cart)
    assert db_session.query(CartItem).filter(CartItem.user_id == alice["user"]["id"]).count() == 0


def test_items_follow_cart_insertion_order(client, alice, alice_cart):
    data = client.post("/api/orders", json={}, headers=alice["headers"]).json()["data"]

    assert [i["product_id"] for i in data["items"]] == [p.id for p, _ in alice_cart]


def test_assembly_uses_cart_price_snapshot(client, db_session, alice, products):
    espresso = products[0]
    _fill_cart(client, alice, [(espresso, 2)])
    espresso.price = 99999
    db_session.commit()

    data = client.post("/api/orders", headers=alice["headers"]).json()["data"]

    assert data["items"][0]["product_price"] == 18000
    assert data["order"]["total_amount"] == pytest.approx(36000)


def test_empty_cart_creates_nothing(client, db_session, alice):
    response = client.post("/api/orders", json={}, headers=alice["headers"])

    assert response.status_code == 400
    assert response.json()["error"] == "Cart is empty"
    assert db_session.query(Order).count() == 0
    assert db_session.query(OrderItem).count() == 0


def test_failure_on_last_item_rolls_everything_back(client, db_session, alice, alice_cart, monkeypatch):
    real_build = order_service._order_item_from_cart_row
    calls = {"n": 0}

    def failing_build(order, row):
        calls["n"] += 1
        if calls["n"] == len(alice_cart):
            raise RuntimeError("disk full")
        return real_build(order, row)

    monkeypatch.setattr(order_service, "_order_item_from_cart_row", failing_build)

    response = client.post("/api/orders", json={}, headers=alice["headers"])

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert "disk full" in body["error"]
    assert body["message"] == "Failed to create order from cart"
    assert db_session.query(Order).count() == 0
    assert db_session.query(OrderItem).count() == 0
    assert db_session.query(CartItem).filter(CartItem.user_id == alice["user"]["id"]).count() == len(alice_cart)


def test_orders_require_token(client):
    assert client.post("/api/orders", json={}).status_code == 401
    assert client.get("/api/orders").status_code == 401


def test_list_orders_only_returns_own(client, alice, bob, products):
    _fill_cart(client, alice, [(products[0], 1)])
    client.post("/api/orders", json={}, headers=alice["headers"])
    _fill_cart(client, bob, [(products[1], 1)])
    client.post("/api/orders", json={}, headers=bob["headers"])

    body = client.get("/api/orders", headers=alice["headers"]).json()

    assert body["count"] == 1
    assert body["data"][0]["user_id"] == alice["user"]["id"]


def test_get_order_detail(client, alice, alice_cart):
    order = client.post("/api/orders", json={}, headers=alice["headers"]).json()["data"]["order"]

    response = client.get(f"/api/orders/{order['id']}", headers=alice["headers"])

    assert response.status_code == 200
    assert response.json()["data"]["order"]["id"] == order["id"]
    assert len(response.json()["data"]["items"]) == len(alice_cart)


def test_other_users_order_is_not_found(client, alice, bob, alice_cart):
    order = client.post("/api/orders", json={}, headers=alice["headers"]).json()["data"]["order"]

    assert client.get(f"/api/orders/{order['id']}", headers=bob["headers"]).status_code == 404


def test_confirm_order(client, alice, alice_cart):
    order = client.post("/api/orders", json={}, headers=alice["headers"]).json()["data"]["order"]

    response = client.put(f"/api/orders/{order['id']}/confirm", headers=alice["headers"])

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "completed"


def test_confirming_someone_elses_order_changes_nothing(client, db_session, alice, bob, alice_cart):
    order = client.post("/api/orders", json={}, headers=alice["headers"]).json()["data"]["order"]

    response = client.put(f"/api/orders/{order['id']}/confirm", headers=bob["headers"])

    assert response.status_code == 404
    db_session.expire_all()
    assert db_session.get(Order, order["id"]).status == "pending"


def test_confirm_missing_order_is_404(client, alice):
    assert client.put("/api/orders/12345/confirm", headers=alice["headers"]).status_code == 404


def test_cart_total_uses_snapshot_prices():
    rows = [
        CartItem(product_price=18000, quantity=2),
        CartItem(product_price=2500.5, quantity=1),
    ]

    assert order_service.cart_total(rows) == 38500.5
