import pytest

from conftest import auth_headers


@pytest.fixture()
def deckhand(auth_client) -> dict:
    response = auth_client.post(
        "/team/members",
        json={"first_name": "Dee", "last_name": "Deckhand", "email": "Dee@Harbour.test", "job_title": "Deckhand"},
    )
    assert response.status_code == 201
    return response.json()


class TestDepartments:
    def test_predefined_catalogue(self, auth_client):
        auth_client.post("/team/departments", json={"name": "quality control"})
        catalogue = auth_client.get("/team/departments/predefined").json()
        assert len(catalogue) == 8
        added = [entry["name"] for entry in catalogue if entry["added"]]
        assert added == ["Quality Control"]

    def test_catalogue_names_are_not_custom(self, auth_client):
        body = auth_client.post("/team/departments", json={"name": "quality control"}).json()
        assert body["name"] == "Quality Control"
        assert body["is_custom"] is False
        assert body["description"] == "Inspections and work sign-off"

        body = auth_client.post("/team/departments", json={"name": "Dive Team"}).json()
        assert body["is_custom"] is True

    def test_duplicate_name_case_insensitive(self, auth_client):
        auth_client.post("/team/departments", json={"name": "Dive Team"})
        assert auth_client.post("/team/departments", json={"name": "DIVE TEAM"}).status_code == 409

    def test_name_too_short(self, auth_client):
        assert auth_client.post("/team/departments", json={"name": "X"}).status_code == 422

    def test_assign_members_and_delete_detaches(self, auth_client, deckhand):
        department = auth_client.post("/team/departments", json={"name": "Deck Crew"}).json()

        response = auth_client.post(
            f"/team/departments/{department['id']}/members", json={"member_ids": [deckhand["id"]]}
        )
        assert response.json()["member_count"] == 1
        assert auth_client.get(f"/team/members/{deckhand['id']}").json()["department_id"] == department["id"]

        response = auth_client.post(
            f"/team/departments/{department['id']}/members", json={"member_ids": [deckhand["id"], 999]}
        )
        assert response.status_code == 404

        response = auth_client.delete(f"/team/departments/{department['id']}")
        assert response.json() == {"message": "Department deleted", "members_detached": 1}
        assert auth_client.get(f"/team/members/{deckhand['id']}").json()["department_id"] is None

    def test_unassign(self, auth_client, deckhand):
        department = auth_client.post("/team/departments", json={"name": "Deck Crew"}).json()
        url = f"/team/departments/{department['id']}/members"
        auth_client.post(url, json={"member_ids": [deckhand["id"]]})
        response = auth_client.post(f"{url}/remove", json={"member_ids": [deckhand["id"]]})
        assert response.json()["member_count"] == 0


class TestMembers:
    def test_create_normalises_email(self, deckhand):
        assert deckhand["email"] == "dee@harbour.test"
        assert deckhand["full_name"] == "Dee Deckhand"
        assert deckhand["status"] == "active"

    def test_email_unique_per_shop(self, auth_client, deckhand):
        response = auth_client.post("/team/members", json={"first_name": "Other", "email": "dee@harbour.test"})
        assert response.status_code == 409

    def test_unknown_department(self, auth_client):
        response = auth_client.post("/team/members", json={"email": "x@harbour.test", "department_id": 999})
        assert response.status_code == 404

    def test_update_and_search(self, auth_client, deckhand):
        auth_client.patch(f"/team/members/{deckhand['id']}", json={"job_title": "Bosun"})
        results = auth_client.get("/team/members", params={"search": "dee"}).json()
        assert [m["job_title"] for m in results] == ["Bosun"]

    def test_cannot_delete_while_holding_tools(self, auth_client, deckhand):
        tool = auth_client.post("/tools", json={"name": "Marlinspike"}).json()
        auth_client.post(f"/tools/{tool['id']}/checkout", json={"team_member_id": deckhand["id"]})
        assert auth_client.delete(f"/team/members/{deckhand['id']}").status_code == 409

        auth_client.post(f"/tools/{tool['id']}/checkin", json={})
        assert auth_client.delete(f"/team/members/{deckhand['id']}").status_code == 200

    def test_delete_clears_work_order_technician(self, auth_client, vessel, deckhand):
        work_order = auth_client.post(
            "/work-orders", json={"equipment_id": vessel["id"], "technician_id": deckhand["id"]}
        ).json()
        auth_client.delete(f"/team/members/{deckhand['id']}")
        assert auth_client.get(f"/work-orders/{work_order['id']}").json()["technician_id"] is None


class TestRoles:
    def test_list_roles(self, auth_client):
        names = {role["name"] for role in auth_client.get("/team/roles").json()}
        assert {"owner", "admin", "captain", "technician", "customer"} <= names

    def test_assign_and_remove_with_audit(self, auth_client, make_user, owner):
        tech = make_user("tech@harbour.test", "technician")

        response = auth_client.post(f"/team/users/{tech.id}/roles", json={"role": "captain"})
        assert response.status_code == 200
        body = response.json()
        assert set(body["roles"]) == {"technician", "captain"}
        assert body["highest_role"] == "captain"

        assert auth_client.post(f"/team/users/{tech.id}/roles", json={"role": "captain"}).status_code == 409

        response = auth_client.delete(f"/team/users/{tech.id}/roles/captain")
        assert response.json()["roles"] == ["technician"]
        assert auth_client.delete(f"/team/users/{tech.id}/roles/captain").status_code == 404

        log = auth_client.get("/team/roles/audit-log", params={"user_id": tech.id}).json()
        assert [(entry["role_name"], entry["action"]) for entry in log] == [("captain", "removed"), ("captain", "added")]
        assert all(entry["performed_by"] == owner.id for entry in log)

    def test_unknown_role(self, auth_client, make_user):
        tech = make_user("tech@harbour.test", "technician")
        assert auth_client.post(f"/team/users/{tech.id}/roles", json={"role": "emperor"}).status_code == 400

    def test_admin_cannot_make_owners(self, client, make_user):
        admin = make_user("admin@harbour.test", "admin")
        tech = make_user("tech@harbour.test", "technician")
        headers = auth_headers(admin)

        response = client.post(f"/team/users/{tech.id}/roles", headers=headers, json={"role": "owner"})
        assert response.status_code == 403

        response = client.post(f"/team/users/{tech.id}/roles", headers=headers, json={"role": "manager"})
        assert response.status_code == 200

    def test_customer_cannot_view_roles(self, client, make_user):
        customer = make_user("customer@harbour.test", "customer")
        assert client.get("/team/roles", headers=auth_headers(customer)).status_code == 403

    def test_technician_can_view_roles(self, client, make_user):
        tech = make_user("tech@harbour.test", "technician")
        assert client.get("/team/roles", headers=auth_headers(tech)).status_code == 200

    def test_user_roles(self, auth_client, owner):
        body = auth_client.get(f"/team/users/{owner.id}/roles").json()
        assert body["roles"] == ["owner"]
        assert all(body["permissions"].values())
