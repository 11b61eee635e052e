import re
from datetime import date, timedelta

import pytest

from conftest import auth_headers


def _interval(vessel, **overrides) -> dict:
    payload = {
        "equipment_id": vessel["id"],
        "item_name": "Main engine oil",
        "item_category": "engine",
        "interval_type": "engine_hours",
        "interval_value": 250,
        "interval_unit": "hours",
        "last_service_hours": 1000,
        "parts_needed": [{"name": "Oil filter", "qty": 1}],
    }
    payload.update(overrides)
    return payload


class TestIntervals:
    def test_create_computes_next_service(self, auth_client, vessel):
        response = auth_client.post("/maintenance/intervals", json=_interval(vessel))
        assert response.status_code == 201
        body = response.json()
        assert body["next_service_hours"] == 1250
        assert body["due_status"] == "scheduled"
        assert body["units_remaining"] == 50
        assert body["equipment_name"] == "MV Northern Light"

    def test_unit_must_match_type(self, auth_client, vessel):
        response = auth_client.post("/maintenance/intervals", json=_interval(vessel, interval_unit="months"))
        assert response.status_code == 422

    def test_unknown_equipment(self, auth_client, vessel):
        response = auth_client.post("/maintenance/intervals", json=_interval(vessel, equipment_id=999))
        assert response.status_code == 404

    def test_due_list(self, auth_client, vessel):
        auth_client.post("/maintenance/intervals", json=_interval(vessel))  # scheduled
        auth_client.post("/maintenance/intervals", json=_interval(vessel, item_name="Impeller", last_service_hours=930))
        auth_client.post(
            "/maintenance/intervals",
            json=_interval(
                vessel,
                item_name="Life raft inspection",
                item_category="life_raft",
                interval_type="time",
                interval_value=12,
                interval_unit="months",
                last_service_hours=None,
                last_service_date=(date.today() - timedelta(days=400)).isoformat(),
            ),
        )
        # 25 hours left on a 250 hour interval is inside the 10% window
        auth_client.post(
            "/maintenance/intervals", json=_interval(vessel, item_name="Belts", last_service_hours=975)
        )

        due = auth_client.get("/maintenance/due").json()
        assert {item["item_name"] for item in due} == {"Impeller", "Life raft inspection", "Belts"}
        assert [item["due_status"] for item in due] == ["overdue", "overdue", "due_soon"]

    def test_record_service_rolls_schedule_forward(self, auth_client, vessel):
        interval = auth_client.post("/maintenance/intervals", json=_interval(vessel)).json()

        response = auth_client.post(
            f"/maintenance/intervals/{interval['id']}/performed",
            json={"performed_date": date.today().isoformat(), "hours_reading": 1260, "notes": "Oil and filter"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["last_service_hours"] == 1260
        assert body["next_service_hours"] == 1510

        # the meter moved forward with the service reading
        assert auth_client.get(f"/equipment/{vessel['id']}").json()["current_hours"] == 1260

        records = auth_client.get(f"/maintenance/equipment/{vessel['id']}/records").json()
        assert len(records) == 1
        assert records[0]["performed_by"] == "Olive Owner"

    def test_record_service_without_reading_uses_current_meter(self, auth_client, vessel):
        interval = auth_client.post("/maintenance/intervals", json=_interval(vessel, last_service_hours=900)).json()
        assert interval["due_status"] == "overdue"

        response = auth_client.post(
            f"/maintenance/intervals/{interval['id']}/performed", json={"performed_date": date.today().isoformat()}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["last_service_hours"] == 1200
        assert body["next_service_hours"] == 1450
        assert body["due_status"] == "scheduled"

        records = auth_client.get(f"/maintenance/equipment/{vessel['id']}/records").json()
        assert records[0]["hours_reading"] == 1200

    def test_record_service_needs_a_reading_when_no_meter(self, auth_client):
        skiff = auth_client.post(
            "/equipment", json={"name": "Work skiff", "asset_number": "V-002", "equipment_type": "vessel"}
        ).json()
        interval = auth_client.post(
            "/maintenance/intervals", json=_interval(skiff, last_service_hours=None)
        ).json()

        response = auth_client.post(
            f"/maintenance/intervals/{interval['id']}/performed", json={"performed_date": date.today().isoformat()}
        )
        assert response.status_code == 400

    def test_deactivated_interval_disappears(self, auth_client, vessel):
        interval = auth_client.post("/maintenance/intervals", json=_interval(vessel)).json()
        assert auth_client.delete(f"/maintenance/intervals/{interval['id']}").status_code == 200
        assert auth_client.get(f"/maintenance/equipment/{vessel['id']}/intervals").json() == []

        response = auth_client.post(
            f"/maintenance/intervals/{interval['id']}/performed", json={"performed_date": date.today().isoformat()}
        )
        assert response.status_code == 400

    def test_update_recomputes_schedule(self, auth_client, vessel):
        interval = auth_client.post("/maintenance/intervals", json=_interval(vessel)).json()
        body = auth_client.patch(f"/maintenance/intervals/{interval['id']}", json={"interval_value": 500}).json()
        assert body["next_service_hours"] == 1500


@pytest.fixture()
def leak_request(auth_client, vessel) -> dict:
    response = auth_client.post(
        "/maintenance/requests",
        json={
            "equipment_id": vessel["id"],
            "title": "Stern gland leak",
            "description": "Dripping faster than usual",
            "priority": "high",
        },
    )
    assert response.status_code == 201
    return response.json()


class TestRequests:
    def test_create_assigns_number(self, leak_request):
        assert re.fullmatch(r"MR-\d{8}-0001", leak_request["request_number"])
        assert leak_request["status"] == "pending"
        assert leak_request["requested_by_name"] == "Olive Owner"

    def test_numbers_increase(self, auth_client, vessel, leak_request):
        second = auth_client.post(
            "/maintenance/requests",
            json={"equipment_id": vessel["id"], "title": "Bilge alarm", "description": "False alarms"},
        ).json()
        assert second["request_number"].endswith("-0002")

    def test_edit_records_history(self, auth_client, leak_request):
        response = auth_client.patch(
            f"/maintenance/requests/{leak_request['id']}",
            json={"priority": "urgent", "change_summary": "Getting worse"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["priority"] == "urgent"
        assert len(body["history"]) == 1
        version = body["history"][0]
        assert version["version_number"] == 1
        assert version["priority"] == "urgent"
        assert version["changes"] == {"priority": {"from": "high", "to": "urgent"}}
        assert version["change_summary"] == "Getting worse"

        body = auth_client.patch(
            f"/maintenance/requests/{leak_request['id']}",
            json={"attachments": [{"name": "gland.jpg", "url": "https://files.test/gland.jpg"}]},
        ).json()
        assert [h["version_number"] for h in body["history"]] == [2, 1]
        assert body["history"][0]["change_summary"] == "Updated request details"

    def test_only_submitter_edits(self, client, leak_request, make_user):
        tech = make_user("tech@harbour.test", "technician")
        response = client.patch(
            f"/maintenance/requests/{leak_request['id']}", headers=auth_headers(tech), json={"title": "Mine now"}
        )
        assert response.status_code == 403

    def test_status_transitions(self, auth_client, leak_request):
        url = f"/maintenance/requests/{leak_request['id']}/status"
        assert auth_client.post(url, json={"status": "completed"}).status_code == 400
        assert auth_client.post(url, json={"status": "approved"}).json()["status"] == "approved"
        assert auth_client.post(url, json={"status": "in_progress"}).status_code == 200
        assert auth_client.post(url, json={"status": "completed"}).status_code == 200
        assert auth_client.post(url, json={"status": "pending"}).status_code == 400

    def test_convert_to_work_order(self, auth_client, leak_request):
        response = auth_client.post(
            f"/maintenance/requests/{leak_request['id']}/convert", json={"customer_name": "Harbour Ferries"}
        )
        assert response.status_code == 200
        body = response.json()
        assert re.fullmatch(r"WO-\d{8}-0001", body["work_order_number"])
        assert body["request_status"] == "in_progress"

        work_order = auth_client.get(f"/work-orders/{body['work_order_id']}").json()
        assert work_order["maintenance_request_id"] == leak_request["id"]
        assert work_order["status"] == "open"
        assert work_order["description"].startswith("Stern gland leak")

        again = auth_client.post(f"/maintenance/requests/{leak_request['id']}/convert", json={})
        assert again.status_code == 400

    def test_rejected_request_cannot_convert(self, auth_client, leak_request):
        auth_client.post(f"/maintenance/requests/{leak_request['id']}/status", json={"status": "rejected"})
        response = auth_client.post(f"/maintenance/requests/{leak_request['id']}/convert", json={})
        assert response.status_code == 400

    def test_stats(self, auth_client, vessel, leak_request):
        other = auth_client.post(
            "/maintenance/requests",
            json={"equipment_id": vessel["id"], "title": "Radar", "description": "Intermittent"},
        ).json()
        auth_client.post(f"/maintenance/requests/{other['id']}/status", json={"status": "approved"})
        auth_client.post(f"/maintenance/requests/{other['id']}/status", json={"status": "in_progress"})

        assert auth_client.get("/maintenance/requests/stats/summary").json() == {
            "pending": 1,
            "in_progress": 1,
            "completed_this_month": 0,
        }

    def test_search(self, auth_client, leak_request):
        results = auth_client.get("/maintenance/requests", params={"search": "gland"}).json()
        assert [r["id"] for r in results] == [leak_request["id"]]
        assert auth_client.get("/maintenance/requests", params={"status": "completed"}).json() == []
