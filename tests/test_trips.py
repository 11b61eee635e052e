def _trip(vessel, trip_date, **overrides) -> dict:
    payload = {
        "equipment_id": vessel["id"],
        "trip_date": trip_date,
        "start_reading": 100,
        "end_reading": 142.5,
        "reading_type": "hours",
        "driver_name": "Cal Captain",
        "destination": "Outer harbour",
    }
    payload.update(overrides)
    return payload


def test_log_trip_computes_distance(auth_client, vessel):
    response = auth_client.post("/trips", json=_trip(vessel, "2024-05-01"))
    assert response.status_code == 201
    body = response.json()
    assert body["distance"] == 42.5
    assert body["equipment_name"] == "MV Northern Light"


def test_distance_unknown_without_both_readings(auth_client, vessel):
    body = auth_client.post("/trips", json=_trip(vessel, "2024-05-01", end_reading=None)).json()
    assert body["distance"] is None


def test_end_before_start_rejected(auth_client, vessel):
    response = auth_client.post("/trips", json=_trip(vessel, "2024-05-01", end_reading=90))
    assert response.status_code == 400


def test_unknown_reading_type(auth_client, vessel):
    assert auth_client.post("/trips", json=_trip(vessel, "2024-05-01", reading_type="knots")).status_code == 422


def test_recent_trips_newest_first(auth_client, vessel):
    for day in ("2024-05-01", "2024-05-03", "2024-05-02"):
        auth_client.post("/trips", json=_trip(vessel, day))

    trips = auth_client.get("/trips", params={"limit": 2}).json()
    assert [trip["trip_date"] for trip in trips] == ["2024-05-03", "2024-05-02"]


def test_delete_trip(auth_client, vessel):
    trip = auth_client.post("/trips", json=_trip(vessel, "2024-05-01")).json()
    assert auth_client.delete(f"/trips/{trip['id']}").status_code == 200
    assert auth_client.delete(f"/trips/{trip['id']}").status_code == 404
