from conftest import OWNER_PASSWORD, auth_headers


def test_login_returns_bearer_token(client, owner):
    response = client.post("/auth/login", json={"email": "  OWNER@harbour.test ", "password": OWNER_PASSWORD})
    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["expires_in"] > 0

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "owner@harbour.test"
    assert me.json()["last_login_at"] is not None


def test_login_rejects_wrong_password(client, owner):
    response = client.post("/auth/login", json={"email": "owner@harbour.test", "password": "nope"})
    assert response.status_code == 401


def test_login_rejects_unknown_email(client, owner):
    response = client.post("/auth/login", json={"email": "ghost@harbour.test", "password": OWNER_PASSWORD})
    assert response.status_code == 401


def test_me_lists_roles_and_permissions(auth_client):
    body = auth_client.get("/auth/me").json()
    assert body["role_names"] == ["owner"]
    assert body["display_name"] == "Olive Owner"
    assert all(body["permissions"].values())


def test_update_me(auth_client):
    response = auth_client.patch("/auth/me", json={"first_name": "Olivia"})
    assert response.status_code == 200
    assert response.json()["display_name"] == "Olivia Owner"


def test_missing_token_is_rejected(client, owner):
    assert client.get("/auth/me").status_code in (401, 403)


def test_malformed_token_is_rejected(client, owner):
    response = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_tampered_token_is_rejected(client, owner):
    token = auth_headers(owner)["Authorization"] + "x"
    response = client.get("/auth/me", headers={"Authorization": token})
    assert response.status_code == 401
    assert response.headers.get("X-Token-Expired") == "true"


def test_disabled_account(client, db, make_user):
    user = make_user("gone@harbour.test", "technician")
    user.is_active = False
    db.commit()
    assert client.get("/auth/me", headers=auth_headers(user)).status_code == 403


def test_customer_cannot_manage_inventory(client, make_user):
    customer = make_user("customer@harbour.test", "customer")
    response = client.post(
        "/inventory",
        headers=auth_headers(customer),
        json={"sku": "F-1", "name": "Filter", "category": "filters", "supplier": "Acme", "unit_price": 5},
    )
    assert response.status_code == 403


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
