"""Equipment router - FastAPI endpoints for equipment assets"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_permission
from ...database import get_db
from ...models import User
from ...permissions import CAN_MANAGE_INVENTORY, CAN_VIEW_INVENTORY
from .schemas import EquipmentCreate, EquipmentResponse, EquipmentUpdate, ReadingsUpdate
from .service import EquipmentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/equipment", tags=["Equipment"])


def get_equipment_service(db: Session = Depends(get_db)) -> EquipmentService:
    """Dependency injection for EquipmentService"""
    return EquipmentService(db)


@router.get("", response_model=list[EquipmentResponse])
async def list_equipment(
    search: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    equipment_type: Optional[str] = Query(None),
    include_archived: bool = Query(False),
    current_user: User = Depends(require_permission(CAN_VIEW_INVENTORY)),
    service: EquipmentService = Depends(get_equipment_service),
):
    """List equipment assets, active only unless include_archived"""
    return service.list_equipment(current_user, search, status, equipment_type, include_archived)


@router.get("/{equipment_id}", response_model=EquipmentResponse)
async def get_equipment(
    equipment_id: int,
    current_user: User = Depends(require_permission(CAN_VIEW_INVENTORY)),
    service: EquipmentService = Depends(get_equipment_service),
):
    return service.get_equipment(equipment_id, current_user)


@router.get("/{equipment_id}/children", response_model=list[EquipmentResponse])
async def list_children(
    equipment_id: int,
    current_user: User = Depends(require_permission(CAN_VIEW_INVENTORY)),
    service: EquipmentService = Depends(get_equipment_service),
):
    """Components attached to an asset (e.g. engines on a vessel)"""
    return service.list_children(equipment_id, current_user)


@router.post("", response_model=EquipmentResponse, status_code=201)
async def create_equipment(
    data: EquipmentCreate,
    current_user: User = Depends(require_permission(CAN_MANAGE_INVENTORY)),
    service: EquipmentService = Depends(get_equipment_service),
):
    return service.create_equipment(data, current_user)


@router.patch("/{equipment_id}", response_model=EquipmentResponse)
async def update_equipment(
    equipment_id: int,
    data: EquipmentUpdate,
    current_user: User = Depends(require_permission(CAN_MANAGE_INVENTORY)),
    service: EquipmentService = Depends(get_equipment_service),
):
    return service.update_equipment(equipment_id, data, current_user)


@router.patch("/{equipment_id}/readings", response_model=EquipmentResponse)
async def update_readings(
    equipment_id: int,
    data: ReadingsUpdate,
    current_user: User = Depends(require_permission(CAN_VIEW_INVENTORY)),
    service: EquipmentService = Depends(get_equipment_service),
):
    """Record new hour meter / odometer readings"""
    return service.update_readings(equipment_id, data, current_user)


@router.delete("/{equipment_id}", response_model=EquipmentResponse)
async def archive_equipment(
    equipment_id: int,
    current_user: User = Depends(require_permission(CAN_MANAGE_INVENTORY)),
    service: EquipmentService = Depends(get_equipment_service),
):
    """Archive (soft delete) an asset"""
    return service.archive_equipment(equipment_id, current_user)
