"""Equipment service - Business logic for equipment assets"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Equipment, User
from .repository import EquipmentRepository
from .schemas import EquipmentCreate, EquipmentUpdate, ReadingsUpdate

logger = logging.getLogger(__name__)


class EquipmentService:
    """Service layer for equipment business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = EquipmentRepository()

    def list_equipment(
        self,
        user: User,
        search: Optional[str] = None,
        status: Optional[str] = None,
        equipment_type: Optional[str] = None,
        include_archived: bool = False,
    ) -> list[Equipment]:
        return self.repo.search_equipment(
            self.db, user.shop_id, search, status, equipment_type, include_archived
        )

    def get_equipment(self, equipment_id: int, user: User) -> Equipment:
        equipment = self.repo.get_by_id(self.db, equipment_id, user.shop_id)
        if not equipment:
            raise HTTPException(status_code=404, detail="Equipment not found")
        return equipment

    def _check_asset_number(self, asset_number: Optional[str], user: User, exclude_id: Optional[int] = None):
        if not asset_number:
            return
        existing = self.repo.get_by_asset_number(self.db, asset_number, user.shop_id)
        if existing and existing.id != exclude_id:
            raise HTTPException(status_code=409, detail=f"Asset number {asset_number} is already in use")

    def _check_parent(self, parent_id: Optional[int], user: User, equipment_id: Optional[int] = None):
        if parent_id is None:
            return
        parent = self.repo.get_by_id(self.db, parent_id, user.shop_id)
        if not parent:
            raise HTTPException(status_code=404, detail="Parent equipment not found")

        # Walk up from the new parent; meeting ourselves means a cycle
        node = parent
        while node is not None and equipment_id is not None:
            if node.id == equipment_id:
                raise HTTPException(status_code=400, detail="Equipment cannot be its own ancestor")
            node = node.parent

    def create_equipment(self, data: EquipmentCreate, user: User) -> Equipment:
        self._check_asset_number(data.asset_number, user)
        self._check_parent(data.parent_id, user)

        equipment = self.repo.create(self.db, user.shop_id, **data.model_dump())
        logger.info(f"✅ Equipment {equipment.id} ({equipment.name}) created for shop {user.shop_id}")
        return equipment

    def update_equipment(self, equipment_id: int, data: EquipmentUpdate, user: User) -> Equipment:
        equipment = self.get_equipment(equipment_id, user)
        updates = data.model_dump(exclude_unset=True)

        if "name" in updates and not (updates["name"] or "").strip():
            raise HTTPException(status_code=400, detail="Equipment name is required")
        if "asset_number" in updates:
            self._check_asset_number(updates["asset_number"], user, exclude_id=equipment.id)
        if "parent_id" in updates:
            self._check_parent(updates["parent_id"], user, equipment_id=equipment.id)

        return self.repo.update(self.db, equipment, **updates)

    def archive_equipment(self, equipment_id: int, user: User) -> Equipment:
        """Soft delete; archiving an archived asset is a no-op"""
        equipment = self.get_equipment(equipment_id, user)
        if not equipment.is_active:
            return equipment

        logger.info(f"📦 Archiving equipment {equipment.id} for shop {user.shop_id}")
        return self.repo.update(self.db, equipment, is_active=False, archived_at=datetime.utcnow())

    def update_readings(self, equipment_id: int, data: ReadingsUpdate, user: User) -> Equipment:
        """Meters only move forward"""
        equipment = self.get_equipment(equipment_id, user)
        updates = {}

        if data.current_hours is not None:
            if equipment.current_hours is not None and data.current_hours < equipment.current_hours:
                raise HTTPException(
                    status_code=400,
                    detail=f"Hours reading cannot decrease (current: {equipment.current_hours})",
                )
            updates["current_hours"] = data.current_hours

        if data.current_mileage is not None:
            if equipment.current_mileage is not None and data.current_mileage < equipment.current_mileage:
                raise HTTPException(
                    status_code=400,
                    detail=f"Mileage reading cannot decrease (current: {equipment.current_mileage})",
                )
            updates["current_mileage"] = data.current_mileage

        if not updates:
            raise HTTPException(status_code=400, detail="No readings provided")
        return self.repo.update(self.db, equipment, **updates)

    def list_children(self, equipment_id: int, user: User) -> list[Equipment]:
        equipment = self.get_equipment(equipment_id, user)
        return self.repo.get_children(self.db, equipment.id, user.shop_id)
