"""Maintenance interval service - schedules, due status and performed service"""

import logging
from datetime import date
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...maintenance_schedule import (
    INTERVAL_ENGINE_HOURS,
    INTERVAL_HOURS,
    INTERVAL_MILEAGE,
    STATUS_DUE_SOON,
    STATUS_OVERDUE,
    compute_interval_due,
    compute_next_service,
)
from ...models import Equipment, User
from ...models_maintenance import MaintenanceInterval, MaintenanceRecord
from .repository import MaintenanceRepository
from .schemas import IntervalCreate, IntervalResponse, IntervalUpdate, ServicePerformed

logger = logging.getLogger(__name__)

SCHEDULE_FIELDS = (
    "interval_type",
    "interval_value",
    "interval_unit",
    "last_service_date",
    "last_service_hours",
    "last_service_mileage",
)


def interval_response(interval: MaintenanceInterval, today: Optional[date] = None) -> IntervalResponse:
    due = compute_interval_due(interval, today=today)
    return IntervalResponse(
        id=interval.id,
        equipment_id=interval.equipment_id,
        equipment_name=interval.equipment.name if interval.equipment else None,
        item_name=interval.item_name,
        item_category=interval.item_category,
        description=interval.description,
        interval_type=interval.interval_type,
        interval_value=interval.interval_value,
        interval_unit=interval.interval_unit,
        quantity=interval.quantity,
        quantity_unit=interval.quantity_unit,
        part_numbers=interval.part_numbers,
        parts_needed=interval.parts_needed,
        last_service_date=interval.last_service_date,
        last_service_hours=interval.last_service_hours,
        last_service_mileage=interval.last_service_mileage,
        next_service_date=interval.next_service_date,
        next_service_hours=interval.next_service_hours,
        next_service_mileage=interval.next_service_mileage,
        is_active=interval.is_active,
        notes=interval.notes,
        due_status=due.status,
        days_remaining=due.days_remaining,
        units_remaining=due.units_remaining,
    )


class MaintenanceIntervalService:
    """Service layer for maintenance interval business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = MaintenanceRepository()

    def _get_equipment(self, equipment_id: int, user: User) -> Equipment:
        equipment = (
            self.db.query(Equipment)
            .filter(Equipment.id == equipment_id, Equipment.shop_id == user.shop_id)
            .first()
        )
        if not equipment:
            raise HTTPException(status_code=404, detail="Equipment not found")
        return equipment

    def get_interval(self, interval_id: int, user: User) -> MaintenanceInterval:
        interval = self.repo.get_interval(self.db, interval_id, user.shop_id)
        if not interval:
            raise HTTPException(status_code=404, detail="Maintenance interval not found")
        return interval

    def list_intervals(self, equipment_id: int, user: User) -> list[IntervalResponse]:
        self._get_equipment(equipment_id, user)
        return [interval_response(i) for i in self.repo.get_active_intervals(self.db, equipment_id, user.shop_id)]

    @staticmethod
    def _apply_schedule(interval: MaintenanceInterval) -> None:
        try:
            next_fields = compute_next_service(
                interval.interval_type,
                interval.interval_value,
                interval.interval_unit,
                interval.last_service_date,
                interval.last_service_hours,
                interval.last_service_mileage,
            )
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        for key, value in next_fields.items():
            setattr(interval, key, value)

    def create_interval(self, data: IntervalCreate, user: User) -> IntervalResponse:
        self._get_equipment(data.equipment_id, user)
        interval = MaintenanceInterval(shop_id=user.shop_id, is_active=True, **data.model_dump())
        self._apply_schedule(interval)

        self.db.add(interval)
        self.db.commit()
        self.db.refresh(interval)
        logger.info(f"✅ Maintenance interval {interval.id} ({interval.item_name}) created for equipment {data.equipment_id}")
        return interval_response(interval)

    def update_interval(self, interval_id: int, data: IntervalUpdate, user: User) -> IntervalResponse:
        interval = self.get_interval(interval_id, user)
        updates = data.model_dump(exclude_unset=True)
        for required in ("item_name", "item_category", "interval_type", "interval_value", "interval_unit"):
            if required in updates and updates[required] in (None, ""):
                raise HTTPException(status_code=400, detail=f"{required} is required")

        for key, value in updates.items():
            setattr(interval, key, value)
        if any(field in updates for field in SCHEDULE_FIELDS):
            self._apply_schedule(interval)

        self.db.commit()
        self.db.refresh(interval)
        return interval_response(interval)

    def deactivate_interval(self, interval_id: int, user: User) -> dict:
        interval = self.get_interval(interval_id, user)
        interval.is_active = False
        self.db.commit()
        logger.info(f"🗑️ Maintenance interval {interval_id} deactivated")
        return {"message": "Maintenance interval deactivated"}

    def record_service(self, interval_id: int, data: ServicePerformed, user: User) -> IntervalResponse:
        """
        Log maintenance performed against an interval.

        The interval's last-service fields take the new readings, the next service is
        recomputed, and equipment meters move forward when the service reading is higher.
        """
        interval = self.get_interval(interval_id, user)
        if not interval.is_active:
            raise HTTPException(status_code=400, detail="Maintenance interval is inactive")
        equipment = interval.equipment

        # A reading interval with no reading supplied is serviced at the current meter
        hours_reading = data.hours_reading
        mileage_reading = data.mileage_reading
        if interval.interval_type in (INTERVAL_HOURS, INTERVAL_ENGINE_HOURS) and hours_reading is None:
            hours_reading = equipment.current_hours
            if hours_reading is None:
                raise HTTPException(status_code=400, detail="hours_reading is required for an hours interval")
        elif interval.interval_type == INTERVAL_MILEAGE and mileage_reading is None:
            mileage_reading = equipment.current_mileage
            if mileage_reading is None:
                raise HTTPException(status_code=400, detail="mileage_reading is required for a mileage interval")

        parts_used = [p.model_dump() for p in data.parts_used] if data.parts_used else None
        record = MaintenanceRecord(
            shop_id=user.shop_id,
            equipment_id=interval.equipment_id,
            interval_id=interval.id,
            performed_date=data.performed_date,
            hours_reading=hours_reading,
            mileage_reading=mileage_reading,
            performed_by=data.performed_by or user.display_name,
            parts_used=parts_used,
            notes=data.notes,
            entered_by=user.id,
        )
        self.db.add(record)

        interval.last_service_date = data.performed_date
        if hours_reading is not None:
            interval.last_service_hours = hours_reading
        if mileage_reading is not None:
            interval.last_service_mileage = mileage_reading
        self._apply_schedule(interval)

        if hours_reading is not None and (equipment.current_hours is None or hours_reading > equipment.current_hours):
            equipment.current_hours = hours_reading
        if mileage_reading is not None and (
            equipment.current_mileage is None or mileage_reading > equipment.current_mileage
        ):
            equipment.current_mileage = mileage_reading

        self.db.commit()
        self.db.refresh(interval)
        logger.info(f"🔧 Service recorded for interval {interval.id} on equipment {equipment.id}")
        return interval_response(interval)

    def list_records(self, equipment_id: int, user: User) -> list[MaintenanceRecord]:
        self._get_equipment(equipment_id, user)
        return self.repo.get_records(self.db, equipment_id, user.shop_id)

    def get_due_items(self, user: User, today: Optional[date] = None) -> list[IntervalResponse]:
        """Overdue and due-soon intervals across the shop, overdue first"""
        due = [
            interval_response(interval, today)
            for interval in self.repo.get_shop_intervals(self.db, user.shop_id)
        ]
        due = [item for item in due if item.due_status in (STATUS_OVERDUE, STATUS_DUE_SOON)]
        return sorted(due, key=lambda item: (item.due_status != STATUS_OVERDUE, item.equipment_name or ""))
