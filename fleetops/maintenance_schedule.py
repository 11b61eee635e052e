"""
Maintenance interval scheduling.

An interval repeats every `interval_value` units of calendar time, operating hours or
distance. Given the last service and the equipment's current readings we work out when
the next service falls and whether it is overdue, due soon or simply scheduled.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from dateutil.relativedelta import relativedelta

from .config import MAINTENANCE_DUE_SOON_DAYS, MAINTENANCE_DUE_SOON_RATIO

INTERVAL_TIME = "time"
INTERVAL_HOURS = "hours"
INTERVAL_ENGINE_HOURS = "engine_hours"
INTERVAL_MILEAGE = "mileage"
INTERVAL_TYPES = (INTERVAL_TIME, INTERVAL_HOURS, INTERVAL_ENGINE_HOURS, INTERVAL_MILEAGE)

TIME_UNITS = ("days", "weeks", "months", "years")
HOUR_UNITS = ("hours", "engine_hours")
DISTANCE_UNITS = ("km", "miles")

UNITS_BY_TYPE = {
    INTERVAL_TIME: TIME_UNITS,
    INTERVAL_HOURS: HOUR_UNITS,
    INTERVAL_ENGINE_HOURS: HOUR_UNITS,
    INTERVAL_MILEAGE: DISTANCE_UNITS,
}

STATUS_OVERDUE = "overdue"
STATUS_DUE_SOON = "due_soon"
STATUS_SCHEDULED = "scheduled"


@dataclass
class DueInfo:
    status: str
    next_service_date: Optional[date] = None
    next_service_reading: Optional[float] = None
    days_remaining: Optional[int] = None
    units_remaining: Optional[float] = None

    @property
    def is_due(self) -> bool:
        return self.status in (STATUS_OVERDUE, STATUS_DUE_SOON)


def is_reading_based(interval_type: str) -> bool:
    return interval_type in (INTERVAL_HOURS, INTERVAL_ENGINE_HOURS, INTERVAL_MILEAGE)


def validate_interval_unit(interval_type: str, unit: str) -> None:
    """Raise ValueError unless `unit` belongs to the unit family of `interval_type`"""
    if interval_type not in UNITS_BY_TYPE:
        raise ValueError(f"interval_type must be one of {', '.join(INTERVAL_TYPES)}")
    allowed = UNITS_BY_TYPE[interval_type]
    if unit not in allowed:
        raise ValueError(f"Unit '{unit}' is not valid for {interval_type} intervals (use {', '.join(allowed)})")


def next_service_date(last_date: Optional[date], value: float, unit: str) -> Optional[date]:
    """Calendar date of the next service; months/years respect month lengths"""
    if last_date is None:
        return None
    if unit not in TIME_UNITS:
        raise ValueError(f"Unit '{unit}' is not a time unit")
    if int(value) != value:
        raise ValueError("Time intervals must be a whole number of days, weeks, months or years")
    return last_date + relativedelta(**{unit: int(value)})


def next_service_reading(last_reading: Optional[float], value: float) -> Optional[float]:
    if last_reading is None:
        return None
    return last_reading + value


def compute_next_service(
    interval_type: str,
    interval_value: float,
    interval_unit: str,
    last_service_date: Optional[date] = None,
    last_service_hours: Optional[float] = None,
    last_service_mileage: Optional[float] = None,
) -> dict:
    """Next-service fields for an interval, keyed like the interval columns"""
    if interval_value is None or interval_value <= 0:
        raise ValueError("interval_value must be greater than 0")
    validate_interval_unit(interval_type, interval_unit)

    result = {"next_service_date": None, "next_service_hours": None, "next_service_mileage": None}
    if interval_type == INTERVAL_TIME:
        result["next_service_date"] = next_service_date(last_service_date, interval_value, interval_unit)
    elif interval_type == INTERVAL_MILEAGE:
        result["next_service_mileage"] = next_service_reading(last_service_mileage, interval_value)
    else:
        result["next_service_hours"] = next_service_reading(last_service_hours, interval_value)
    return result


def compute_due(
    interval_type: str,
    interval_value: float,
    next_date: Optional[date] = None,
    next_reading: Optional[float] = None,
    current_reading: Optional[float] = None,
    today: Optional[date] = None,
    due_soon_days: int = MAINTENANCE_DUE_SOON_DAYS,
    due_soon_ratio: float = MAINTENANCE_DUE_SOON_RATIO,
) -> DueInfo:
    """
    Due status of one interval.

    Time intervals compare `next_date` against today: past it is overdue, within
    `due_soon_days` is due soon. Reading intervals compare the equipment's current reading
    against `next_reading`: past it is overdue, within `interval_value * due_soon_ratio`
    units is due soon. Anything we cannot measure stays scheduled.
    """
    if interval_type not in INTERVAL_TYPES:
        raise ValueError(f"interval_type must be one of {', '.join(INTERVAL_TYPES)}")

    if interval_type == INTERVAL_TIME:
        if next_date is None:
            return DueInfo(status=STATUS_SCHEDULED)
        days = (next_date - (today or date.today())).days
        if days < 0:
            status = STATUS_OVERDUE
        elif days <= due_soon_days:
            status = STATUS_DUE_SOON
        else:
            status = STATUS_SCHEDULED
        return DueInfo(status=status, next_service_date=next_date, days_remaining=days)

    if next_reading is None or current_reading is None:
        return DueInfo(status=STATUS_SCHEDULED, next_service_reading=next_reading)

    remaining = next_reading - current_reading
    if remaining < 0:
        status = STATUS_OVERDUE
    elif remaining <= interval_value * due_soon_ratio:
        status = STATUS_DUE_SOON
    else:
        status = STATUS_SCHEDULED
    return DueInfo(status=status, next_service_reading=next_reading, units_remaining=remaining)


def compute_interval_due(interval, equipment=None, today: Optional[date] = None) -> DueInfo:
    """compute_due for a MaintenanceInterval row, reading the equipment's meters"""
    equipment = equipment if equipment is not None else interval.equipment
    if interval.interval_type == INTERVAL_TIME:
        return compute_due(INTERVAL_TIME, interval.interval_value, next_date=interval.next_service_date, today=today)
    if interval.interval_type == INTERVAL_MILEAGE:
        next_reading = interval.next_service_mileage
        current = equipment.current_mileage if equipment is not None else None
    else:
        next_reading = interval.next_service_hours
        current = equipment.current_hours if equipment is not None else None
    return compute_due(
        interval.interval_type,
        interval.interval_value,
        next_reading=next_reading,
        current_reading=current,
        today=today,
    )


def diff_snapshots(before: dict[str, Any], after: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Field-level changes between two snapshots: {field: {"from": old, "to": new}}"""
    changes = {}
    for key in sorted(set(before) | set(after)):
        old = before.get(key)
        new = after.get(key)
        if old != new:
            changes[key] = {"from": old, "to": new}
    return changes
