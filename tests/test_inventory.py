import pytest


def _item(**overrides) -> dict:
    payload = {
        "sku": "OF-200",
        "name": "Oil filter",
        "category": "filters",
        "supplier": "Marine Parts Co",
        "unit_price": 12.5,
        "quantity": 10,
        "reorder_point": 4,
        "reorder_quantity": 12,
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def oil_filter(auth_client) -> dict:
    response = auth_client.post("/inventory", json=_item())
    assert response.status_code == 201
    return response.json()


def test_create_derives_status(oil_filter):
    assert oil_filter["status"] == "in_stock"


def test_required_fields(auth_client):
    assert auth_client.post("/inventory", json=_item(supplier="  ")).status_code == 422
    assert auth_client.post("/inventory", json=_item(unit_price=-1)).status_code == 422


def test_duplicate_sku(auth_client, oil_filter):
    assert auth_client.post("/inventory", json=_item(name="Another")).status_code == 409


def test_adjust_quantity(auth_client, oil_filter):
    response = auth_client.post(f"/inventory/{oil_filter['id']}/adjust", json={"delta": -7, "reason": "used"})
    assert response.status_code == 200
    assert response.json()["quantity"] == 3
    assert response.json()["status"] == "low_stock"

    response = auth_client.post(f"/inventory/{oil_filter['id']}/adjust", json={"delta": 5})
    assert response.json()["quantity"] == 8


def test_stock_never_goes_negative(auth_client, oil_filter):
    response = auth_client.post(f"/inventory/{oil_filter['id']}/adjust", json={"delta": -11})
    assert response.status_code == 409
    assert auth_client.get(f"/inventory/{oil_filter['id']}").json()["quantity"] == 10


def test_zero_delta_rejected(auth_client, oil_filter):
    assert auth_client.post(f"/inventory/{oil_filter['id']}/adjust", json={"delta": 0}).status_code == 422


def test_reorder_alerts(auth_client, oil_filter):
    auth_client.post("/inventory", json=_item(sku="IMP-1", name="Impeller", quantity=0, reorder_point=2, reorder_quantity=1))
    auth_client.post("/inventory", json=_item(sku="BELT-1", name="Drive belt", quantity=3, reorder_point=3, reorder_quantity=6))

    alerts = auth_client.get("/inventory/reorder-alerts").json()
    assert [alert["sku"] for alert in alerts] == ["IMP-1", "BELT-1"]

    impeller, belt = alerts
    assert impeller["status"] == "out_of_stock"
    # shortfall of 3 beats the reorder batch of 1
    assert impeller["suggested_order_quantity"] == 3
    assert belt["suggested_order_quantity"] == 6


def test_filter_by_status(auth_client, oil_filter):
    auth_client.post("/inventory", json=_item(sku="IMP-1", name="Impeller", quantity=0))
    names = [item["name"] for item in auth_client.get("/inventory", params={"status": "out_of_stock"}).json()]
    assert names == ["Impeller"]


def test_csv_export(auth_client, oil_filter):
    response = auth_client.get("/inventory/export")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "attachment" in response.headers["content-disposition"]

    lines = response.text.strip().splitlines()
    assert lines[0].startswith("SKU,Name,Category")
    assert lines[1].startswith("OF-200,Oil filter,filters,Marine Parts Co,12.50,10")


def test_delete(auth_client, oil_filter):
    assert auth_client.delete(f"/inventory/{oil_filter['id']}").status_code == 200
    assert auth_client.get(f"/inventory/{oil_filter['id']}").status_code == 404
