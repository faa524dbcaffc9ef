from models.product import Product


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["status"] == "OK"


def test_root_lists_endpoints(client):
    body = client.get("/").json()

    assert body["success"] is True
    assert "POST /api/orders" in body["endpoints"]["orders"]


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/nope")

    assert response.status_code == 404
    assert response.json()["success"] is False


def test_cors_allows_configured_frontend(client):
    response = client.options(
        "/api/products",
        headers={"Origin": "http://localhost:5173", "Access-Control-Request-Method": "GET"},
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"


def test_test_register_echoes_body(client):
    response = client.post("/api/auth/test/register", json={"hello": "world"})

    assert response.json()["received"] == {"hello": "world"}


def test_session_and_client_share_database(client, db_session, products):
    assert db_session.query(Product).count() == len(products)

    response = client.get("/api/health")

    assert response.status_code == 200
    assert len(client.get("/api/products").json()["products"]) == len(products)
