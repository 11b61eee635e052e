import pytest


@pytest.fixture()
def wrench(auth_client) -> dict:
    response = auth_client.post(
        "/tools", json={"name": "Torque wrench", "tool_number": "T-100", "category": "hand tools"}
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture()
def mechanic(auth_client) -> dict:
    response = auth_client.post(
        "/team/members", json={"first_name": "Max", "last_name": "Mechanic", "email": "max@harbour.test"}
    )
    assert response.status_code == 201
    return response.json()


def test_new_tool_is_available(wrench):
    assert wrench["status"] == "available"
    assert wrench["condition"] == "good"
    assert wrench["checked_out_to"] is None


def test_duplicate_tool_number(auth_client, wrench):
    assert auth_client.post("/tools", json={"name": "Spare", "tool_number": "T-100"}).status_code == 409


def test_checkout_and_checkin(auth_client, wrench, mechanic):
    response = auth_client.post(f"/tools/{wrench['id']}/checkout", json={"team_member_id": mechanic["id"]})
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "checked_out"
    assert body["checked_out_to"] == mechanic["id"]
    assert body["checked_out_at"] is not None

    response = auth_client.post(f"/tools/{wrench['id']}/checkin", json={"condition": "fair", "location": "Bay 2"})
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "available"
    assert body["checked_out_to"] is None
    assert body["condition"] == "fair"
    assert body["location"] == "Bay 2"


def test_cannot_check_out_twice(auth_client, wrench):
    assert auth_client.post(f"/tools/{wrench['id']}/checkout", json={}).status_code == 200
    assert auth_client.post(f"/tools/{wrench['id']}/checkout", json={}).status_code == 400


def test_cannot_check_in_an_available_tool(auth_client, wrench):
    assert auth_client.post(f"/tools/{wrench['id']}/checkin", json={}).status_code == 400


def test_checkout_to_unknown_member(auth_client, wrench):
    response = auth_client.post(f"/tools/{wrench['id']}/checkout", json={"team_member_id": 4242})
    assert response.status_code == 404


def test_sending_to_repair_clears_holder(auth_client, wrench, mechanic):
    auth_client.post(f"/tools/{wrench['id']}/checkout", json={"team_member_id": mechanic["id"]})
    body = auth_client.patch(f"/tools/{wrench['id']}", json={"status": "in_repair"}).json()
    assert body["status"] == "in_repair"
    assert body["checked_out_to"] is None


def test_status_update_cannot_check_out(auth_client, wrench):
    auth_client.patch(f"/tools/{wrench['id']}", json={"status": "in_repair"})
    response = auth_client.patch(f"/tools/{wrench['id']}", json={"status": "checked_out"})
    assert response.status_code == 400
    assert "/checkout" in response.json()["detail"]
    assert auth_client.get(f"/tools/{wrench['id']}").json()["status"] == "in_repair"

    assert auth_client.post("/tools", json={"name": "Flare nut wrench", "status": "checked_out"}).status_code == 400


def test_filter_by_status(auth_client, wrench):
    auth_client.post("/tools", json={"name": "Multimeter", "status": "retired"})
    names = [tool["name"] for tool in auth_client.get("/tools", params={"status": "available"}).json()]
    assert names == ["Torque wrench"]


def test_delete(auth_client, wrench):
    assert auth_client.delete(f"/tools/{wrench['id']}").status_code == 200
    assert auth_client.get(f"/tools/{wrench['id']}").status_code == 404
