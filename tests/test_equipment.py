from conftest import auth_headers


def test_create_and_get(auth_client, vessel):
    response = auth_client.get(f"/equipment/{vessel['id']}")
    assert response.status_code == 200
    assert response.json()["name"] == "MV Northern Light"
    assert response.json()["is_active"] is True


def test_duplicate_asset_number_conflicts(auth_client, vessel):
    response = auth_client.post("/equipment", json={"name": "Other boat", "asset_number": "V-001"})
    assert response.status_code == 409


def test_invalid_status_rejected(auth_client):
    response = auth_client.post("/equipment", json={"name": "Crane", "status": "sunk"})
    assert response.status_code == 422


def test_components_hang_off_parent(auth_client, vessel):
    engine = auth_client.post(
        "/equipment", json={"name": "Port main engine", "equipment_type": "engine", "parent_id": vessel["id"]}
    ).json()
    children = auth_client.get(f"/equipment/{vessel['id']}/children").json()
    assert [child["id"] for child in children] == [engine["id"]]


def test_parent_cycle_rejected(auth_client, vessel):
    engine = auth_client.post("/equipment", json={"name": "Engine", "parent_id": vessel["id"]}).json()
    response = auth_client.patch(f"/equipment/{vessel['id']}", json={"parent_id": engine["id"]})
    assert response.status_code == 400


def test_unknown_parent(auth_client):
    assert auth_client.post("/equipment", json={"name": "Engine", "parent_id": 999}).status_code == 404


def test_readings_only_move_forward(auth_client, vessel):
    response = auth_client.patch(f"/equipment/{vessel['id']}/readings", json={"current_hours": 1250.5})
    assert response.status_code == 200
    assert response.json()["current_hours"] == 1250.5

    response = auth_client.patch(f"/equipment/{vessel['id']}/readings", json={"current_hours": 1100})
    assert response.status_code == 400

    assert auth_client.patch(f"/equipment/{vessel['id']}/readings", json={}).status_code == 400


def test_archive_hides_from_list(auth_client, vessel):
    response = auth_client.delete(f"/equipment/{vessel['id']}")
    assert response.status_code == 200
    assert response.json()["is_active"] is False
    assert response.json()["archived_at"] is not None

    # archiving again is a no-op
    assert auth_client.delete(f"/equipment/{vessel['id']}").status_code == 200

    assert auth_client.get("/equipment").json() == []
    archived = auth_client.get("/equipment", params={"include_archived": True}).json()
    assert [item["id"] for item in archived] == [vessel["id"]]


def test_search(auth_client, vessel):
    auth_client.post("/equipment", json={"name": "Forklift", "equipment_type": "vehicle"})
    results = auth_client.get("/equipment", params={"search": "northern"}).json()
    assert [item["name"] for item in results] == ["MV Northern Light"]


def test_other_shops_cannot_see_equipment(client, db, vessel, make_user):
    from fleetops.models import Shop

    other_shop = Shop(name="Rival Towing")
    db.add(other_shop)
    db.commit()
    outsider = make_user("boss@rival.test", "owner", shop_id=other_shop.id)

    assert client.get(f"/equipment/{vessel['id']}", headers=auth_headers(outsider)).status_code == 404
    assert client.get("/equipment", headers=auth_headers(outsider)).json() == []
