from conftest import register_user


def test_list_users_hides_passwords(client, alice, bob):
    response = client.get("/api/users")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["count"] == 2
    assert {u["username"] for u in body["users"]} == {"alice", "bob"}
    assert all("password" not in u for u in body["users"])


def test_get_user_by_id(client, alice):
    response = client.get(f"/api/users/{alice['user']['id']}")

    assert response.status_code == 200
    assert response.json()["user"]["email"] == "alice@caffinity.com"


def test_get_missing_user_is_404(client):
    response = client.get("/api/users/999")

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "User not found", "message": "User not found"}


def test_users_profile_is_not_treated_as_id(client, alice):
    response = client.get("/api/users/profile", headers=alice["headers"])

    assert response.status_code == 200
    assert response.json()["user"]["id"] == alice["user"]["id"]


def test_update_self(client, alice):
    response = client.put(
        f"/api/users/{alice['user']['id']}",
        json={"username": "alice_new"},
        headers=alice["headers"],
    )

    assert response.status_code == 200
    user = response.json()["user"]
    assert user["username"] == "alice_new"
    assert user["email"] == "alice@caffinity.com"


def test_update_other_user_is_forbidden(client, alice, bob):
    response = client.put(
        f"/api/users/{bob['user']['id']}",
        json={"username": "hijacked"},
        headers=alice["headers"],
    )

    assert response.status_code == 403
    assert client.get(f"/api/users/{bob['user']['id']}").json()["user"]["username"] == "bob"


def test_update_with_empty_body_is_400(client, alice):
    response = client.put(f"/api/users/{alice['user']['id']}", json={}, headers=alice["headers"])

    assert response.status_code == 400


def test_update_to_taken_username_is_400(client, alice):
    register_user(client, username="carol", email="carol@caffinity.com")

    response = client.put(
        f"/api/users/{alice['user']['id']}",
        json={"username": "carol"},
        headers=alice["headers"],
    )

    assert response.status_code == 400
    assert response.json()["existing"]["username"] == "carol"


def test_db_check_reports_counts(client, alice, products):
    response = client.get("/api/users/debug/db-check")

    assert response.status_code == 200
    body = response.json()
    assert body["database"] == "connected"
    assert body["tables"] == {"users": 1, "products": len(products)}
