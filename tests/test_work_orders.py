import re

import pytest

from conftest import auth_headers


@pytest.fixture()
def work_order(auth_client, vessel) -> dict:
    response = auth_client.post(
        "/work-orders",
        json={"equipment_id": vessel["id"], "customer_name": "Harbour Ferries", "description": "Annual refit"},
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture()
def oil_filter(auth_client) -> dict:
    response = auth_client.post(
        "/inventory",
        json={
            "sku": "OF-200",
            "name": "Oil filter",
            "category": "filters",
            "supplier": "Marine Parts Co",
            "unit_price": 25.5,
            "quantity": 5,
        },
    )
    return response.json()


def _url(work_order, suffix="") -> str:
    return f"/work-orders/{work_order['id']}{suffix}"


def _job_line(auth_client, work_order, name, hours, rate) -> dict:
    response = auth_client.post(
        _url(work_order, "/job-lines"), json={"name": name, "estimated_hours": hours, "labor_rate": rate}
    )
    assert response.status_code == 201
    return response.json()


def test_create_assigns_number_and_default_tax(work_order):
    assert re.fullmatch(r"WO-\d{8}-0001", work_order["work_order_number"])
    assert work_order["status"] == "open"
    assert work_order["tax_rate"] == 0.08
    assert work_order["total_cost"] == 0


def test_create_with_unknown_equipment(auth_client):
    assert auth_client.post("/work-orders", json={"equipment_id": 404}).status_code == 404


def test_job_line_total(auth_client, work_order):
    line = _job_line(auth_client, work_order, "Replace impeller", 1.5, 80)
    assert line["total_amount"] == 120

    response = auth_client.patch(_url(work_order, f"/job-lines/{line['id']}"), json={"estimated_hours": 2})
    assert response.json()["total_amount"] == 160
    assert auth_client.get(_url(work_order)).json()["total_cost"] == 172.8


def test_job_line_needs_positive_hours(auth_client, work_order):
    response = auth_client.post(
        _url(work_order, "/job-lines"), json={"name": "Inspect", "estimated_hours": 0, "labor_rate": 90}
    )
    assert response.status_code == 422


class TestParts:
    def test_inventory_part_reserves_stock(self, auth_client, work_order, oil_filter):
        response = auth_client.post(_url(work_order, "/parts"), json={"inventory_item_id": oil_filter["id"], "quantity": 2})
        assert response.status_code == 201
        part = response.json()
        assert part["name"] == "Oil filter"
        assert part["part_number"] == "OF-200"
        assert part["part_type"] == "inventory"
        assert part["customer_price"] == 25.5
        assert auth_client.get(f"/inventory/{oil_filter['id']}").json()["quantity"] == 3

        auth_client.patch(_url(work_order, f"/parts/{part['id']}"), json={"quantity": 3})
        assert auth_client.get(f"/inventory/{oil_filter['id']}").json()["quantity"] == 2

        assert auth_client.delete(_url(work_order, f"/parts/{part['id']}")).status_code == 200
        assert auth_client.get(f"/inventory/{oil_filter['id']}").json()["quantity"] == 5

    def test_insufficient_stock(self, auth_client, work_order, oil_filter):
        response = auth_client.post(_url(work_order, "/parts"), json={"inventory_item_id": oil_filter["id"], "quantity": 6})
        assert response.status_code == 409
        assert auth_client.get(f"/inventory/{oil_filter['id']}").json()["quantity"] == 5
        assert auth_client.get(_url(work_order)).json()["parts"] == []

    def test_non_inventory_part_markup(self, auth_client, work_order):
        response = auth_client.post(
            _url(work_order, "/parts"),
            json={"name": "Custom shaft seal", "supplier_cost": 40, "markup_percentage": 25},
        )
        part = response.json()
        assert part["part_type"] == "non_inventory"
        assert part["customer_price"] == 50

        part = auth_client.patch(_url(work_order, f"/parts/{part['id']}"), json={"markup_percentage": 50}).json()
        assert part["customer_price"] == 60

    def test_non_inventory_part_needs_name(self, auth_client, work_order):
        assert auth_client.post(_url(work_order, "/parts"), json={"supplier_cost": 10}).status_code == 422

    def test_inventory_item_in_use_cannot_be_deleted(self, auth_client, work_order, oil_filter):
        auth_client.post(_url(work_order, "/parts"), json={"inventory_item_id": oil_filter["id"]})
        assert auth_client.delete(f"/inventory/{oil_filter['id']}").status_code == 409


class TestDiscounts:
    @pytest.fixture()
    def priced(self, auth_client, work_order, oil_filter) -> dict:
        first = _job_line(auth_client, work_order, "Haul out", 2, 100)
        second = _job_line(auth_client, work_order, "Replace impeller", 1.5, 80)
        auth_client.post(_url(work_order, "/parts"), json={"inventory_item_id": oil_filter["id"], "quantity": 2})
        auth_client.post(_url(work_order, "/parts"), json={"name": "Impeller kit", "customer_price": 49})
        return {"first": first, "second": second}

    def test_seeded_discount_types(self, auth_client):
        types = auth_client.get("/work-orders/discount-types").json()
        assert {t["name"] for t in types} >= {"Senior Discount", "Fleet Customer", "Loyalty Parts Discount"}
        parts_only = auth_client.get("/work-orders/discount-types", params={"applies_to": "parts"}).json()
        assert {t["applies_to"] for t in parts_only} == {"parts"}

    def test_multi_level_totals(self, auth_client, work_order, priced):
        loyalty = next(
            t for t in auth_client.get("/work-orders/discount-types").json() if t["name"] == "Loyalty Parts Discount"
        )
        url = _url(work_order, "/discounts")

        line_discount = auth_client.post(
            url,
            json={
                "discount_name": "Haul out goodwill",
                "discount_type": "percentage",
                "discount_value": 10,
                "scope": "labor",
                "job_line_id": priced["first"]["id"],
            },
        )
        assert line_discount.status_code == 201
        assert line_discount.json()["discount_amount"] == 20

        auth_client.post(
            url, json={"discount_name": "Labor credit", "discount_type": "fixed_amount", "discount_value": 30, "scope": "labor"}
        )
        preset = auth_client.post(url, json={"discount_type_id": loyalty["id"], "discount_value": 10}).json()
        assert preset["reason"] == "Applied Loyalty Parts Discount"
        assert preset["scope"] == "parts"
        assert preset["created_by"] == "Olive Owner"
        auth_client.post(
            url, json={"discount_name": "Order promo", "discount_type": "percentage", "discount_value": 5, "scope": "work_order"}
        )

        totals = auth_client.get(_url(work_order, "/totals")).json()
        assert totals["labor_subtotal"] == 320
        assert totals["parts_subtotal"] == 100
        assert totals["discount_total"] == 78
        assert totals["subtotal"] == 342
        assert totals["tax_amount"] == 27.36
        assert totals["total"] == 369.36
        assert auth_client.get(_url(work_order)).json()["total_cost"] == 369.36

    def test_preset_scope_mismatch(self, auth_client, work_order, priced):
        loyalty = next(
            t for t in auth_client.get("/work-orders/discount-types").json() if t["name"] == "Loyalty Parts Discount"
        )
        response = auth_client.post(_url(work_order, "/discounts"), json={"discount_type_id": loyalty["id"], "scope": "labor"})
        assert response.status_code == 400

    def test_custom_discount_needs_details(self, auth_client, work_order):
        response = auth_client.post(_url(work_order, "/discounts"), json={"discount_name": "Half off"})
        assert response.status_code == 422

    def test_deleting_line_drops_its_discounts(self, auth_client, work_order, priced):
        auth_client.post(
            _url(work_order, "/discounts"),
            json={
                "discount_name": "Haul out goodwill",
                "discount_type": "percentage",
                "discount_value": 10,
                "scope": "labor",
                "job_line_id": priced["first"]["id"],
            },
        )
        assert auth_client.delete(_url(work_order, f"/job-lines/{priced['first']['id']}")).status_code == 200
        detail = auth_client.get(_url(work_order)).json()
        assert detail["discounts"] == []
        assert [line["name"] for line in detail["job_lines"]] == ["Replace impeller"]

    def test_remove_discount(self, auth_client, work_order, priced):
        discount = auth_client.post(
            _url(work_order, "/discounts"),
            json={"discount_name": "Promo", "discount_type": "fixed_amount", "discount_value": 20, "scope": "work_order"},
        ).json()
        assert auth_client.delete(_url(work_order, f"/discounts/{discount['id']}")).status_code == 200
        assert auth_client.get(_url(work_order, "/totals")).json()["discount_total"] == 0


class TestStatus:
    def test_invalid_transition(self, auth_client, work_order):
        response = auth_client.post(_url(work_order, "/status"), json={"status": "invoiced"})
        assert response.status_code == 400

    def test_invoiced_orders_are_locked(self, auth_client, work_order):
        _job_line(auth_client, work_order, "Haul out", 2, 100)
        assert auth_client.post(_url(work_order, "/status"), json={"status": "completed"}).status_code == 200
        response = auth_client.post(_url(work_order, "/status"), json={"status": "invoiced"})
        assert response.status_code == 200
        assert response.json()["invoiced_at"] is not None
        assert response.json()["total_cost"] == 216

        response = auth_client.post(
            _url(work_order, "/job-lines"), json={"name": "Extra", "estimated_hours": 1, "labor_rate": 50}
        )
        assert response.status_code == 400
        assert auth_client.patch(_url(work_order), json={"customer_name": "Someone else"}).status_code == 400
        assert auth_client.delete(_url(work_order)).status_code == 400
        assert auth_client.post(_url(work_order, "/status"), json={"status": "open"}).status_code == 400

    def test_cancel_returns_stock(self, auth_client, work_order, oil_filter):
        auth_client.post(_url(work_order, "/parts"), json={"inventory_item_id": oil_filter["id"], "quantity": 4})
        assert auth_client.get(f"/inventory/{oil_filter['id']}").json()["quantity"] == 1

        auth_client.post(_url(work_order, "/status"), json={"status": "cancelled"})
        assert auth_client.get(f"/inventory/{oil_filter['id']}").json()["quantity"] == 5

        # already returned on cancel, deleting must not return it twice
        assert auth_client.delete(_url(work_order)).status_code == 200
        assert auth_client.get(f"/inventory/{oil_filter['id']}").json()["quantity"] == 5

    def test_delete_returns_stock(self, auth_client, work_order, oil_filter):
        auth_client.post(_url(work_order, "/parts"), json={"inventory_item_id": oil_filter["id"], "quantity": 2})
        assert auth_client.delete(_url(work_order)).status_code == 200
        assert auth_client.get(f"/inventory/{oil_filter['id']}").json()["quantity"] == 5
        assert auth_client.get(_url(work_order)).status_code == 404


def test_invoice(auth_client, work_order):
    member = auth_client.post("/team/members", json={"first_name": "Max", "last_name": "Mechanic", "email": "max@harbour.test"}).json()
    auth_client.patch(_url(work_order), json={"technician_id": member["id"], "tax_rate": 0})
    _job_line(auth_client, work_order, "Haul out", 2, 100)

    invoice = auth_client.get(_url(work_order, "/invoice")).json()
    assert invoice["equipment_name"] == "MV Northern Light"
    assert invoice["technician_name"] == "Max Mechanic"
    assert invoice["totals"]["total"] == 200
    assert invoice["work_order"]["work_order_number"] == work_order["work_order_number"]
    assert len(invoice["job_lines"]) == 1


def test_linked_request(auth_client, vessel):
    request = auth_client.post(
        "/maintenance/requests",
        json={"equipment_id": vessel["id"], "title": "Radar fault", "description": "No returns"},
    ).json()
    work_order = auth_client.post(
        "/work-orders", json={"equipment_id": vessel["id"], "maintenance_request_id": request["id"]}
    ).json()
    assert auth_client.get(f"/maintenance/requests/{request['id']}").json()["work_order_id"] == work_order["id"]

    response = auth_client.post("/work-orders", json={"maintenance_request_id": request["id"]})
    assert response.status_code == 409

    auth_client.delete(_url(work_order))
    assert auth_client.get(f"/maintenance/requests/{request['id']}").json()["work_order_id"] is None


def test_customer_can_view_but_not_manage(client, make_user, work_order):
    customer = make_user("customer@harbour.test", "customer")
    headers = auth_headers(customer)
    assert client.get("/work-orders", headers=headers).status_code == 200
    assert client.post("/work-orders", headers=headers, json={}).status_code == 403
