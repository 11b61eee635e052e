"""Equipment repository - Database operations for equipment assets"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...models import Equipment


class EquipmentRepository:
    """Repository for equipment database operations"""

    @staticmethod
    def search_equipment(
        db: Session,
        shop_id: int,
        search: Optional[str] = None,
        status: Optional[str] = None,
        equipment_type: Optional[str] = None,
        include_archived: bool = False,
    ) -> list[Equipment]:
        query = db.query(Equipment).filter(Equipment.shop_id == shop_id)

        if not include_archived:
            query = query.filter(Equipment.is_active.is_(True))
        if status:
            query = query.filter(Equipment.status == status)
        if equipment_type:
            query = query.filter(Equipment.equipment_type == equipment_type)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    Equipment.name.ilike(pattern),
                    Equipment.asset_number.ilike(pattern),
                    Equipment.serial_number.ilike(pattern),
                    Equipment.manufacturer.ilike(pattern),
                    Equipment.model.ilike(pattern),
                )
            )

        return query.order_by(Equipment.name).all()

    @staticmethod
    def get_by_id(db: Session, equipment_id: int, shop_id: int) -> Optional[Equipment]:
        return (
            db.query(Equipment)
            .filter(Equipment.id == equipment_id, Equipment.shop_id == shop_id)
            .first()
        )

    @staticmethod
    def get_by_asset_number(db: Session, asset_number: str, shop_id: int) -> Optional[Equipment]:
        return (
            db.query(Equipment)
            .filter(Equipment.asset_number == asset_number, Equipment.shop_id == shop_id)
            .first()
        )

    @staticmethod
    def get_children(db: Session, parent_id: int, shop_id: int) -> list[Equipment]:
        return (
            db.query(Equipment)
            .filter(
                Equipment.parent_id == parent_id,
                Equipment.shop_id == shop_id,
                Equipment.is_active.is_(True),
            )
            .order_by(Equipment.name)
            .all()
        )

    @staticmethod
    def create(db: Session, shop_id: int, **data) -> Equipment:
        equipment = Equipment(shop_id=shop_id, **data)
        db.add(equipment)
        db.commit()
        db.refresh(equipment)
        return equipment

    @staticmethod
    def update(db: Session, equipment: Equipment, **updates) -> Equipment:
        """Update equipment with provided fields"""
        for key, value in updates.items():
            if hasattr(equipment, key):
                setattr(equipment, key, value)

        db.commit()
        db.refresh(equipment)
        return equipment
