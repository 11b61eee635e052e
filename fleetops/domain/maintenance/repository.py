"""Maintenance repository - Database operations for intervals, service records and requests"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from ...models import Equipment
from ...models_maintenance import (
    MaintenanceInterval,
    MaintenanceRecord,
    MaintenanceRequest,
    MaintenanceRequestHistory,
)


class MaintenanceRepository:
    """Repository for maintenance database operations"""

    # Intervals
    @staticmethod
    def get_active_intervals(db: Session, equipment_id: int, shop_id: int) -> list[MaintenanceInterval]:
        return (
            db.query(MaintenanceInterval)
            .options(joinedload(MaintenanceInterval.equipment))
            .filter(
                MaintenanceInterval.equipment_id == equipment_id,
                MaintenanceInterval.shop_id == shop_id,
                MaintenanceInterval.is_active.is_(True),
            )
            .order_by(MaintenanceInterval.item_name)
            .all()
        )

    @staticmethod
    def get_shop_intervals(db: Session, shop_id: int) -> list[MaintenanceInterval]:
        """Active intervals on active equipment across the shop"""
        return (
            db.query(MaintenanceInterval)
            .join(Equipment, MaintenanceInterval.equipment_id == Equipment.id)
            .options(joinedload(MaintenanceInterval.equipment))
            .filter(
                MaintenanceInterval.shop_id == shop_id,
                MaintenanceInterval.is_active.is_(True),
                Equipment.is_active.is_(True),
            )
            .order_by(Equipment.name, MaintenanceInterval.item_name)
            .all()
        )

    @staticmethod
    def get_interval(db: Session, interval_id: int, shop_id: int) -> Optional[MaintenanceInterval]:
        return (
            db.query(MaintenanceInterval)
            .filter(MaintenanceInterval.id == interval_id, MaintenanceInterval.shop_id == shop_id)
            .first()
        )

    @staticmethod
    def get_records(db: Session, equipment_id: int, shop_id: int) -> list[MaintenanceRecord]:
        return (
            db.query(MaintenanceRecord)
            .filter(MaintenanceRecord.equipment_id == equipment_id, MaintenanceRecord.shop_id == shop_id)
            .order_by(MaintenanceRecord.performed_date.desc(), MaintenanceRecord.id.desc())
            .all()
        )

    # Requests
    @staticmethod
    def search_requests(
        db: Session,
        shop_id: int,
        search: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        equipment_id: Optional[int] = None,
    ) -> list[MaintenanceRequest]:
        query = (
            db.query(MaintenanceRequest)
            .join(Equipment, MaintenanceRequest.equipment_id == Equipment.id)
            .options(joinedload(MaintenanceRequest.equipment))
            .filter(MaintenanceRequest.shop_id == shop_id)
        )
        if status:
            query = query.filter(MaintenanceRequest.status == status)
        if priority:
            query = query.filter(MaintenanceRequest.priority == priority)
        if equipment_id:
            query = query.filter(MaintenanceRequest.equipment_id == equipment_id)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    MaintenanceRequest.title.ilike(pattern),
                    MaintenanceRequest.description.ilike(pattern),
                    MaintenanceRequest.request_number.ilike(pattern),
                    Equipment.name.ilike(pattern),
                )
            )
        return query.order_by(MaintenanceRequest.requested_at.desc(), MaintenanceRequest.id.desc()).all()

    @staticmethod
    def get_request(db: Session, request_id: int, shop_id: int) -> Optional[MaintenanceRequest]:
        return (
            db.query(MaintenanceRequest)
            .options(joinedload(MaintenanceRequest.equipment))
            .filter(MaintenanceRequest.id == request_id, MaintenanceRequest.shop_id == shop_id)
            .first()
        )

    @staticmethod
    def get_latest_version(db: Session, request_id: int) -> int:
        latest = (
            db.query(func.max(MaintenanceRequestHistory.version_number))
            .filter(MaintenanceRequestHistory.maintenance_request_id == request_id)
            .scalar()
        )
        return latest or 0

    @staticmethod
    def count_by_status(db: Session, shop_id: int, status: str, since: Optional[datetime] = None) -> int:
        query = db.query(func.count(MaintenanceRequest.id)).filter(
            MaintenanceRequest.shop_id == shop_id, MaintenanceRequest.status == status
        )
        if since:
            query = query.filter(MaintenanceRequest.requested_at >= since)
        return query.scalar() or 0
