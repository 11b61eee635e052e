"""Inventory router - FastAPI endpoints for stocked parts"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_permission
from ...database import get_db
from ...models import User
from ...permissions import CAN_MANAGE_INVENTORY, CAN_VIEW_INVENTORY
from .schemas import (
    InventoryItemCreate,
    InventoryItemResponse,
    InventoryItemUpdate,
    QuantityAdjustment,
    ReorderAlert,
)
from .service import InventoryService

router = APIRouter(prefix="/inventory", tags=["Inventory"])


def get_inventory_service(db: Session = Depends(get_db)) -> InventoryService:
    """Dependency injection for InventoryService"""
    return InventoryService(db)


@router.get("", response_model=list[InventoryItemResponse])
async def list_items(
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    status: Optional[str] = Query(None, description="in_stock, low_stock or out_of_stock"),
    current_user: User = Depends(require_permission(CAN_VIEW_INVENTORY)),
    service: InventoryService = Depends(get_inventory_service),
):
    return service.list_items(current_user, search, category, status)


@router.get("/export")
async def export_inventory_csv(
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    current_user: User = Depends(require_permission(CAN_VIEW_INVENTORY)),
    service: InventoryService = Depends(get_inventory_service),
):
    """Export inventory as CSV with optional filters"""
    return service.export_csv(current_user, search, category)


@router.get("/reorder-alerts", response_model=list[ReorderAlert])
async def get_reorder_alerts(
    current_user: User = Depends(require_permission(CAN_VIEW_INVENTORY)),
    service: InventoryService = Depends(get_inventory_service),
):
    """Items at or below their reorder point with a suggested order quantity"""
    return service.get_reorder_alerts(current_user)


@router.get("/{item_id}", response_model=InventoryItemResponse)
async def get_item(
    item_id: int,
    current_user: User = Depends(require_permission(CAN_VIEW_INVENTORY)),
    service: InventoryService = Depends(get_inventory_service),
):
    return service.get_item(item_id, current_user)


@router.post("", response_model=InventoryItemResponse, status_code=201)
async def create_item(
    data: InventoryItemCreate,
    current_user: User = Depends(require_permission(CAN_MANAGE_INVENTORY)),
    service: InventoryService = Depends(get_inventory_service),
):
    return service.create_item(data, current_user)


@router.patch("/{item_id}", response_model=InventoryItemResponse)
async def update_item(
    item_id: int,
    data: InventoryItemUpdate,
    current_user: User = Depends(require_permission(CAN_MANAGE_INVENTORY)),
    service: InventoryService = Depends(get_inventory_service),
):
    return service.update_item(item_id, data, current_user)


@router.post("/{item_id}/adjust", response_model=InventoryItemResponse)
async def adjust_quantity(
    item_id: int,
    data: QuantityAdjustment,
    current_user: User = Depends(require_permission(CAN_MANAGE_INVENTORY)),
    service: InventoryService = Depends(get_inventory_service),
):
    """Add (positive delta) or remove (negative delta) stock"""
    return service.adjust_quantity(item_id, data, current_user)


@router.delete("/{item_id}")
async def delete_item(
    item_id: int,
    current_user: User = Depends(require_permission(CAN_MANAGE_INVENTORY)),
    service: InventoryService = Depends(get_inventory_service),
):
    return service.delete_item(item_id, current_user)
