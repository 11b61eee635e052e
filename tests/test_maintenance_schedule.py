from datetime import date
from types import SimpleNamespace

import pytest

from fleetops.maintenance_schedule import (
    STATUS_DUE_SOON,
    STATUS_OVERDUE,
    STATUS_SCHEDULED,
    compute_due,
    compute_interval_due,
    compute_next_service,
    diff_snapshots,
    next_service_date,
    validate_interval_unit,
)

TODAY = date(2024, 6, 15)


class TestNextService:
    def test_months_clamp_to_month_end(self):
        assert next_service_date(date(2024, 1, 31), 1, "months") == date(2024, 2, 29)

    def test_weeks(self):
        assert next_service_date(date(2024, 6, 1), 2, "weeks") == date(2024, 6, 15)

    def test_years(self):
        assert next_service_date(date(2023, 3, 10), 1, "years") == date(2024, 3, 10)

    def test_without_last_service(self):
        assert next_service_date(None, 3, "months") is None

    def test_fractional_time_interval_rejected(self):
        with pytest.raises(ValueError):
            next_service_date(date(2024, 1, 1), 1.5, "months")

    def test_hours_interval(self):
        result = compute_next_service("engine_hours", 250, "hours", last_service_hours=1000)
        assert result == {"next_service_date": None, "next_service_hours": 1250, "next_service_mileage": None}

    def test_mileage_interval(self):
        result = compute_next_service("mileage", 5000, "km", last_service_mileage=12000)
        assert result["next_service_mileage"] == 17000
        assert result["next_service_hours"] is None

    def test_time_interval(self):
        result = compute_next_service("time", 6, "months", last_service_date=date(2024, 1, 15))
        assert result["next_service_date"] == date(2024, 7, 15)

    def test_non_positive_interval_rejected(self):
        with pytest.raises(ValueError):
            compute_next_service("hours", 0, "hours", last_service_hours=10)

    @pytest.mark.parametrize("interval_type,unit", [("time", "hours"), ("mileage", "months"), ("hours", "km")])
    def test_unit_must_match_type(self, interval_type, unit):
        with pytest.raises(ValueError):
            validate_interval_unit(interval_type, unit)


class TestComputeDue:
    def test_time_overdue(self):
        due = compute_due("time", 3, next_date=date(2024, 6, 10), today=TODAY)
        assert due.status == STATUS_OVERDUE
        assert due.days_remaining == -5
        assert due.is_due

    def test_time_due_soon_within_window(self):
        due = compute_due("time", 3, next_date=date(2024, 6, 22), today=TODAY, due_soon_days=7)
        assert due.status == STATUS_DUE_SOON

    def test_time_scheduled(self):
        due = compute_due("time", 3, next_date=date(2024, 7, 1), today=TODAY, due_soon_days=7)
        assert due.status == STATUS_SCHEDULED
        assert not due.is_due

    def test_hours_due_soon_uses_interval_fraction(self):
        # 10% of a 250 hour interval is 25 hours
        due = compute_due("hours", 250, next_reading=1250, current_reading=1230, due_soon_ratio=0.1)
        assert due.status == STATUS_DUE_SOON
        assert due.units_remaining == 20

    def test_hours_scheduled(self):
        due = compute_due("hours", 250, next_reading=1250, current_reading=1200, due_soon_ratio=0.1)
        assert due.status == STATUS_SCHEDULED

    def test_mileage_overdue(self):
        due = compute_due("mileage", 5000, next_reading=17000, current_reading=17100)
        assert due.status == STATUS_OVERDUE

    def test_unknown_reading_stays_scheduled(self):
        assert compute_due("hours", 250, next_reading=1250, current_reading=None).status == STATUS_SCHEDULED
        assert compute_due("time", 3, next_date=None).status == STATUS_SCHEDULED

    def test_interval_row_reads_equipment_meters(self):
        equipment = SimpleNamespace(current_hours=600, current_mileage=99_000)
        interval = SimpleNamespace(
            interval_type="engine_hours",
            interval_value=500,
            next_service_date=None,
            next_service_hours=550,
            next_service_mileage=None,
            equipment=equipment,
        )
        assert compute_interval_due(interval).status == STATUS_OVERDUE


def test_diff_snapshots_reports_changed_fields_only():
    before = {"title": "Leak", "priority": "low", "attachments": []}
    after = {"title": "Leak", "priority": "high", "attachments": [{"name": "a.jpg"}]}
    assert diff_snapshots(before, after) == {
        "attachments": {"from": [], "to": [{"name": "a.jpg"}]},
        "priority": {"from": "low", "to": "high"},
    }
