"""Inventory service - Business logic for stocked parts"""

import csv
import logging
from datetime import datetime
from io import StringIO
from typing import Optional

from fastapi import HTTPException
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from ...models import InventoryItem, User
from ...models_work_order import WorkOrderPart
from .repository import InventoryRepository
from .schemas import InventoryItemCreate, InventoryItemUpdate, QuantityAdjustment, ReorderAlert

logger = logging.getLogger(__name__)


def apply_stock_delta(item: InventoryItem, delta: int) -> InventoryItem:
    """Move stock by `delta` without committing; stock never goes negative"""
    new_quantity = (item.quantity or 0) + delta
    if new_quantity < 0:
        raise HTTPException(
            status_code=409,
            detail=f"Insufficient stock for {item.sku}: {item.quantity} on hand, {-delta} requested",
        )
    item.quantity = new_quantity
    return item


def suggested_order_quantity(item: InventoryItem) -> int:
    """Enough to get back above the reorder point, at least one reorder batch"""
    shortfall = (item.reorder_point or 0) - (item.quantity or 0) + 1
    return max(item.reorder_quantity or 0, shortfall)


class InventoryService:
    """Service layer for inventory business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = InventoryRepository()

    def list_items(
        self, user: User, search: Optional[str] = None, category: Optional[str] = None, status: Optional[str] = None
    ) -> list[InventoryItem]:
        items = self.repo.search_items(self.db, user.shop_id, search, category)
        if status:
            # status is derived from quantity, filter after loading
            items = [item for item in items if item.status == status]
        return items

    def get_item(self, item_id: int, user: User) -> InventoryItem:
        item = self.repo.get_by_id(self.db, item_id, user.shop_id)
        if not item:
            raise HTTPException(status_code=404, detail="Inventory item not found")
        return item

    def _check_sku(self, sku: Optional[str], user: User, exclude_id: Optional[int] = None):
        if not sku:
            return
        existing = self.repo.get_by_sku(self.db, sku, user.shop_id)
        if existing and existing.id != exclude_id:
            raise HTTPException(status_code=409, detail=f"SKU {sku} already exists")

    def create_item(self, data: InventoryItemCreate, user: User) -> InventoryItem:
        self._check_sku(data.sku, user)
        item = self.repo.create(self.db, user.shop_id, **data.model_dump())
        logger.info(f"✅ Inventory item {item.sku} created for shop {user.shop_id}")
        return item

    def update_item(self, item_id: int, data: InventoryItemUpdate, user: User) -> InventoryItem:
        item = self.get_item(item_id, user)
        updates = data.model_dump(exclude_unset=True)
        for required in ("sku", "name", "category", "supplier", "unit_price"):
            if required in updates and updates[required] in (None, ""):
                raise HTTPException(status_code=400, detail=f"{required} is required")
        if "sku" in updates:
            self._check_sku(updates["sku"], user, exclude_id=item.id)
        return self.repo.update(self.db, item, **updates)

    def delete_item(self, item_id: int, user: User) -> dict:
        item = self.get_item(item_id, user)
        in_use = self.db.query(WorkOrderPart.id).filter(WorkOrderPart.inventory_item_id == item.id).first()
        if in_use:
            raise HTTPException(status_code=409, detail="Item is used on work orders and cannot be deleted")
        self.repo.delete(self.db, item)
        logger.info(f"🗑️ Inventory item {item_id} deleted for shop {user.shop_id}")
        return {"message": "Inventory item deleted"}

    def adjust_quantity(self, item_id: int, data: QuantityAdjustment, user: User) -> InventoryItem:
        item = self.get_item(item_id, user)
        before = item.quantity
        apply_stock_delta(item, data.delta)
        self.db.commit()
        self.db.refresh(item)
        logger.info(
            f"📦 Stock {item.sku}: {before} -> {item.quantity} by user {user.id}"
            + (f" ({data.reason})" if data.reason else "")
        )
        return item

    def get_reorder_alerts(self, user: User) -> list[ReorderAlert]:
        return [
            ReorderAlert(
                id=item.id,
                sku=item.sku,
                name=item.name,
                supplier=item.supplier,
                quantity=item.quantity,
                reorder_point=item.reorder_point,
                suggested_order_quantity=suggested_order_quantity(item),
                status=item.status,
            )
            for item in self.repo.get_reorder_items(self.db, user.shop_id)
        ]

    def export_csv(self, user: User, search: Optional[str] = None, category: Optional[str] = None) -> StreamingResponse:
        """Export inventory as CSV"""
        logger.info(f"📊 Inventory CSV export requested by user {user.id}")
        items = self.repo.search_items(self.db, user.shop_id, search, category)

        output = StringIO()
        writer = csv.writer(output)
        writer.writerow(
            [
                "SKU",
                "Name",
                "Category",
                "Supplier",
                "Unit Price",
                "Quantity",
                "Reorder Point",
                "Reorder Quantity",
                "Status",
                "Location",
                "Description",
            ]
        )
        for item in items:
            writer.writerow(
                [
                    item.sku,
                    item.name,
                    item.category,
                    item.supplier,
                    f"{item.unit_price:.2f}",
                    item.quantity,
                    item.reorder_point,
                    item.reorder_quantity,
                    item.status,
                    item.location or "",
                    item.description or "",
                ]
            )

        output.seek(0)
        filename = f"inventory_export_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv"
        logger.info(f"✅ CSV export successful: {filename} ({len(items)} items)")

        return StreamingResponse(
            iter([output.getvalue()]),
            media_type="text/csv",
            headers={
                "Content-Disposition": f"attachment; filename={filename}",
                "Cache-Control": "no-cache",
            },
        )
