import pytest


@pytest.fixture()
def voyage(auth_client, vessel) -> dict:
    response = auth_client.post(
        "/voyages",
        json={
            "vessel_id": vessel["id"],
            "voyage_number": "VOY-0042",
            "voyage_type": "towing",
            "departure_datetime": "2024-05-01T06:00:00",
            "origin_location": "Port Alberni",
            "destination_location": "Ucluelet",
            "master_name": "Cal Captain",
            "crew_members": [{"name": "Dee Deckhand", "role": "deckhand"}],
            "barge_name": "Barge 7",
            "engine_hours_start": 1200,
            "fuel_start": 3000,
            "weather_conditions": {"wind_speed": "15 kn", "sea_state": "moderate"},
        },
    )
    assert response.status_code == 201
    return response.json()


def test_create(voyage):
    assert voyage["voyage_status"] == "planned"
    assert voyage["vessel_name"] == "MV Northern Light"
    assert voyage["crew_members"] == [{"name": "Dee Deckhand", "role": "deckhand"}]
    assert voyage["weather_conditions"]["sea_state"] == "moderate"
    assert voyage["has_incidents"] is False


def test_duplicate_voyage_number(auth_client, vessel, voyage):
    response = auth_client.post(
        "/voyages",
        json={
            "vessel_id": vessel["id"],
            "voyage_number": "VOY-0042",
            "departure_datetime": "2024-05-02T06:00:00",
            "origin_location": "A",
            "destination_location": "B",
            "master_name": "Cal Captain",
        },
    )
    assert response.status_code == 409


def test_arrival_before_departure(auth_client, voyage):
    response = auth_client.patch(f"/voyages/{voyage['id']}", json={"arrival_datetime": "2024-04-30T06:00:00"})
    assert response.status_code == 400


def test_activity_and_incident_logs(auth_client, voyage):
    response = auth_client.post(
        f"/voyages/{voyage['id']}/activities",
        json={"timestamp": "2024-05-01T07:15:00", "type": "hookup", "description": "Took barge in tow"},
    )
    assert response.status_code == 200
    assert response.json()["activity_log"][0]["type"] == "hookup"

    response = auth_client.post(
        f"/voyages/{voyage['id']}/incidents",
        json={"timestamp": "2024-05-01T09:00:00", "type": "equipment", "severity": "medium", "description": "Tow line chafe"},
    )
    body = response.json()
    assert body["has_incidents"] is True
    assert body["incidents"][0]["reported_by"] == "Olive Owner"


def test_communications(auth_client, voyage):
    response = auth_client.post(
        f"/voyages/{voyage['id']}/communications",
        json={"communication_time": "2024-05-01T06:05:00", "channel": "VHF 16", "contact_station": "Tofino Coast Guard Radio"},
    )
    assert response.status_code == 201
    assert response.json()["call_type"] == "routine"

    logs = auth_client.get(f"/voyages/{voyage['id']}/communications").json()
    assert [log["channel"] for log in logs] == ["VHF 16"]


def test_confirm_requires_arrival(auth_client, voyage):
    assert auth_client.post(f"/voyages/{voyage['id']}/confirm", json={}).status_code == 400


def test_confirm_locks_the_log(auth_client, voyage):
    response = auth_client.post(
        f"/voyages/{voyage['id']}/confirm",
        json={"arrival_datetime": "2024-05-01T14:30:00", "master_signature": "C. Captain"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["voyage_status"] == "completed"
    assert body["confirmed_at"] is not None

    assert auth_client.patch(f"/voyages/{voyage['id']}", json={"notes": "late edit"}).status_code == 400
    assert auth_client.post(f"/voyages/{voyage['id']}/confirm", json={}).status_code == 400


def test_summary(auth_client, voyage):
    auth_client.patch(
        f"/voyages/{voyage['id']}",
        json={"arrival_datetime": "2024-05-01T14:30:00", "engine_hours_end": 1208.5, "fuel_end": 2650},
    )
    summary = auth_client.get(f"/voyages/{voyage['id']}/summary").json()
    assert summary["duration_minutes"] == 510
    assert summary["duration_display"] == "8h 30m"
    assert summary["engine_hours_used"] == 8.5
    assert summary["fuel_consumed"] == 350
    assert summary["is_confirmed"] is False


def test_pdf_report(auth_client, voyage):
    auth_client.post(
        f"/voyages/{voyage['id']}/incidents",
        json={"timestamp": "2024-05-01T09:00:00", "type": "weather", "description": "Squall"},
    )
    response = auth_client.get(f"/voyages/{voyage['id']}/pdf")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert 'filename="voyage_log_VOY-0042.pdf"' in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")


def test_filter_by_vessel(auth_client, vessel, voyage):
    assert len(auth_client.get("/voyages", params={"vessel_id": vessel["id"]}).json()) == 1
    assert auth_client.get("/voyages", params={"status": "completed"}).json() == []
