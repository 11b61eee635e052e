from datetime import date

from fleetops.models_work_order import WorkOrder
from fleetops.shared.numbering import next_document_number

DAY = date(2026, 10, 19)


def _issue(db, shop_id, *numbers):
    for number in numbers:
        db.add(WorkOrder(shop_id=shop_id, work_order_number=number, tax_rate=0.08))
    db.commit()


def _next(db, shop_id, on=DAY):
    return next_document_number(db, WorkOrder.work_order_number, WorkOrder.shop_id, shop_id, "WO", on=on)


def test_first_number_of_the_day(db, owner):
    assert _next(db, owner.shop_id) == "WO-20261019-0001"


def test_continues_from_highest(db, owner):
    _issue(db, owner.shop_id, "WO-20261019-0001", "WO-20261019-0007", "WO-20261018-0042")
    assert _next(db, owner.shop_id) == "WO-20261019-0008"


def test_sequence_past_four_digits(db, owner):
    _issue(db, owner.shop_id, "WO-20261019-9998", "WO-20261019-9999", "WO-20261019-10000")
    assert _next(db, owner.shop_id) == "WO-20261019-10001"


def test_sequences_are_per_shop(db, owner):
    _issue(db, owner.shop_id, "WO-20261019-0003")
    assert _next(db, owner.shop_id + 1) == "WO-20261019-0001"
