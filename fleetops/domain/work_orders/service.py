"""Work order service - labor, parts, discounts, totals and invoicing"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import DEFAULT_TAX_RATE
from ...models import User
from ...models_work_order import DiscountType, WorkOrder, WorkOrderDiscount, WorkOrderJobLine, WorkOrderPart
from ...pricing import (
    SCOPE_LABOR,
    SCOPE_PARTS,
    Discount,
    LaborLine,
    PartLine,
    WorkOrderTotals,
    calculate_markup_price,
    calculate_work_order_totals,
    labor_line_total,
    validate_discount,
)
from ...shared.numbering import next_document_number
from ..inventory.service import apply_stock_delta
from .repository import WorkOrderRepository
from .schemas import (
    DiscountApply,
    DiscountResponse,
    DiscountTypeCreate,
    InvoiceResponse,
    JobLineCreate,
    JobLineResponse,
    JobLineUpdate,
    PartCreate,
    PartResponse,
    PartUpdate,
    WorkOrderCreate,
    WorkOrderResponse,
    WorkOrderStatusUpdate,
    WorkOrderUpdate,
)

logger = logging.getLogger(__name__)

STATUS_TRANSITIONS = {
    "open": ("in_progress", "on_hold", "completed", "cancelled"),
    "in_progress": ("open", "on_hold", "completed", "cancelled"),
    "on_hold": ("open", "in_progress", "cancelled"),
    "completed": ("in_progress", "invoiced"),
    "invoiced": (),
    "cancelled": (),
}

# Orders in these states are closed for edits
LOCKED_STATUSES = ("invoiced", "cancelled")


def totals_for(work_order: WorkOrder) -> WorkOrderTotals:
    """Run the pricing engine over a work order's current lines and discounts"""
    labor = [LaborLine(line.id, line.estimated_hours, line.labor_rate) for line in work_order.job_lines]
    parts = [PartLine(part.id, part.quantity, part.customer_price) for part in work_order.parts]
    discounts = [
        Discount(
            kind=d.discount_type,
            value=d.discount_value,
            scope=d.scope,
            target_id=d.job_line_id if d.scope == SCOPE_LABOR else d.part_id if d.scope == SCOPE_PARTS else None,
            id=d.id,
        )
        for d in work_order.discounts
    ]
    return calculate_work_order_totals(labor, parts, discounts, work_order.tax_rate)


class WorkOrderService:
    """Service layer for work order business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = WorkOrderRepository()

    # Work orders

    def list_work_orders(
        self,
        user: User,
        status: Optional[str] = None,
        equipment_id: Optional[int] = None,
        search: Optional[str] = None,
    ) -> list[WorkOrder]:
        return self.repo.search_work_orders(self.db, user.shop_id, status, equipment_id, search)

    def get_work_order(self, work_order_id: int, user: User) -> WorkOrder:
        work_order = self.repo.get_by_id(self.db, work_order_id, user.shop_id)
        if not work_order:
            raise HTTPException(status_code=404, detail="Work order not found")
        return work_order

    def _editable(self, work_order_id: int, user: User) -> WorkOrder:
        work_order = self.get_work_order(work_order_id, user)
        if work_order.status in LOCKED_STATUSES:
            raise HTTPException(status_code=400, detail=f"Work order is {work_order.status} and cannot be changed")
        return work_order

    def _check_links(self, values: dict, user: User):
        if values.get("equipment_id") and not self.repo.get_equipment(self.db, values["equipment_id"], user.shop_id):
            raise HTTPException(status_code=404, detail="Equipment not found")
        if values.get("technician_id") and not self.repo.get_team_member(
            self.db, values["technician_id"], user.shop_id
        ):
            raise HTTPException(status_code=404, detail="Technician not found")

    def _refresh_totals(self, work_order: WorkOrder) -> WorkOrderTotals:
        """Recalculate totals and write the cached amounts back; caller commits"""
        self.db.flush()
        try:
            totals = totals_for(work_order)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        amounts = {applied.discount.id: applied.amount for applied in totals.applied}
        for discount in work_order.discounts:
            discount.discount_amount = float(amounts.get(discount.id, 0))
        work_order.total_cost = float(totals.total)
        return totals

    def create_work_order(self, data: WorkOrderCreate, user: User) -> WorkOrder:
        values = data.model_dump()
        self._check_links(values, user)

        request = None
        if data.maintenance_request_id is not None:
            request = self.repo.get_request(self.db, data.maintenance_request_id, user.shop_id)
            if not request:
                raise HTTPException(status_code=404, detail="Maintenance request not found")
            if request.work_order_id:
                raise HTTPException(status_code=409, detail="Request already has a work order")

        if values["tax_rate"] is None:
            shop_rate = user.shop.default_tax_rate if user.shop else None
            values["tax_rate"] = shop_rate if shop_rate is not None else DEFAULT_TAX_RATE

        work_order = WorkOrder(
            shop_id=user.shop_id,
            work_order_number=next_document_number(
                self.db, WorkOrder.work_order_number, WorkOrder.shop_id, user.shop_id, "WO"
            ),
            status="open",
            total_cost=0,
            created_by=user.id,
            **values,
        )
        self.db.add(work_order)
        self.db.flush()
        if request:
            request.work_order_id = work_order.id
        self.db.commit()
        self.db.refresh(work_order)
        logger.info(f"✅ Work order {work_order.work_order_number} created for shop {user.shop_id}")
        return work_order

    def update_work_order(self, work_order_id: int, data: WorkOrderUpdate, user: User) -> WorkOrder:
        work_order = self._editable(work_order_id, user)
        updates = data.model_dump(exclude_unset=True)
        if "tax_rate" in updates and updates["tax_rate"] is None:
            raise HTTPException(status_code=400, detail="tax_rate cannot be cleared")
        self._check_links(updates, user)
        for key, value in updates.items():
            setattr(work_order, key, value)
        self._refresh_totals(work_order)
        self.db.commit()
        self.db.refresh(work_order)
        return work_order

    def _return_reserved_stock(self, work_order: WorkOrder, user: User):
        for part in work_order.parts:
            if part.inventory_item_id:
                item = self.repo.get_inventory_item(self.db, part.inventory_item_id, user.shop_id)
                if item:
                    apply_stock_delta(item, part.quantity)

    def update_status(self, work_order_id: int, data: WorkOrderStatusUpdate, user: User) -> WorkOrder:
        work_order = self.get_work_order(work_order_id, user)
        if data.status == work_order.status:
            return work_order
        if data.status not in STATUS_TRANSITIONS.get(work_order.status, ()):
            raise HTTPException(
                status_code=400,
                detail=f"Cannot change status from {work_order.status} to {data.status}",
            )

        if data.status == "invoiced":
            work_order.invoiced_at = datetime.utcnow()
            self._refresh_totals(work_order)
        elif data.status == "cancelled":
            self._return_reserved_stock(work_order, user)

        work_order.status = data.status
        self.db.commit()
        self.db.refresh(work_order)
        logger.info(f"🔄 Work order {work_order.work_order_number} -> {data.status} by user {user.id}")
        return work_order

    def delete_work_order(self, work_order_id: int, user: User) -> dict:
        work_order = self.get_work_order(work_order_id, user)
        if work_order.status == "invoiced":
            raise HTTPException(status_code=400, detail="Invoiced work orders cannot be deleted")
        if work_order.status != "cancelled":
            self._return_reserved_stock(work_order, user)
        if work_order.maintenance_request_id:
            request = self.repo.get_request(self.db, work_order.maintenance_request_id, user.shop_id)
            if request and request.work_order_id == work_order.id:
                request.work_order_id = None
        number = work_order.work_order_number
        self.db.delete(work_order)
        self.db.commit()
        logger.info(f"🗑️ Work order {number} deleted for shop {user.shop_id}")
        return {"message": "Work order deleted"}

    # Job lines

    def _get_job_line(self, work_order: WorkOrder, job_line_id: int) -> WorkOrderJobLine:
        line = self.repo.get_job_line(self.db, work_order.id, job_line_id)
        if not line:
            raise HTTPException(status_code=404, detail="Job line not found")
        return line

    def add_job_line(self, work_order_id: int, data: JobLineCreate, user: User) -> WorkOrderJobLine:
        work_order = self._editable(work_order_id, user)
        line = WorkOrderJobLine(**data.model_dump())
        line.total_amount = float(labor_line_total(line.estimated_hours, line.labor_rate))
        work_order.job_lines.append(line)
        self._refresh_totals(work_order)
        self.db.commit()
        self.db.refresh(line)
        return line

    def update_job_line(self, work_order_id: int, job_line_id: int, data: JobLineUpdate, user: User) -> WorkOrderJobLine:
        work_order = self._editable(work_order_id, user)
        line = self._get_job_line(work_order, job_line_id)
        updates = data.model_dump(exclude_unset=True)
        for required in ("name", "estimated_hours", "labor_rate"):
            if required in updates and not updates[required]:
                raise HTTPException(status_code=400, detail=f"{required} is required")
        for key, value in updates.items():
            setattr(line, key, value)
        line.total_amount = float(labor_line_total(line.estimated_hours, line.labor_rate))
        self._refresh_totals(work_order)
        self.db.commit()
        self.db.refresh(line)
        return line

    def delete_job_line(self, work_order_id: int, job_line_id: int, user: User) -> dict:
        """Remove a labor line; its parts stay on the order and its targeted discounts go"""
        work_order = self._editable(work_order_id, user)
        line = self._get_job_line(work_order, job_line_id)
        for part in work_order.parts:
            if part.job_line_id == line.id:
                part.job_line_id = None
        self.db.flush()
        for discount in [d for d in work_order.discounts if d.job_line_id == line.id]:
            work_order.discounts.remove(discount)
        self.db.flush()
        work_order.job_lines.remove(line)
        self._refresh_totals(work_order)
        self.db.commit()
        return {"message": "Job line deleted"}

    # Parts

    def _get_part(self, work_order: WorkOrder, part_id: int) -> WorkOrderPart:
        part = self.repo.get_part(self.db, work_order.id, part_id)
        if not part:
            raise HTTPException(status_code=404, detail="Part not found")
        return part

    def add_part(self, work_order_id: int, data: PartCreate, user: User) -> WorkOrderPart:
        work_order = self._editable(work_order_id, user)
        values = data.model_dump()
        if data.job_line_id is not None:
            self._get_job_line(work_order, data.job_line_id)

        if data.inventory_item_id is not None:
            item = self.repo.get_inventory_item(self.db, data.inventory_item_id, user.shop_id)
            if not item:
                raise HTTPException(status_code=404, detail="Inventory item not found")
            values["name"] = values["name"] or item.name
            values["part_number"] = values["part_number"] or item.sku
            values["supplier"] = values["supplier"] or item.supplier
            if values["supplier_cost"] is None:
                values["supplier_cost"] = item.unit_price
            apply_stock_delta(item, -data.quantity)
            logger.info(f"📦 Reserved {data.quantity} x {item.sku} for work order {work_order.work_order_number}")

        if values["supplier_cost"] is None:
            values["supplier_cost"] = 0
        if values["customer_price"] is None:
            values["customer_price"] = float(
                calculate_markup_price(values["supplier_cost"], values["markup_percentage"])
            )

        part = WorkOrderPart(**values)
        work_order.parts.append(part)
        self._refresh_totals(work_order)
        self.db.commit()
        self.db.refresh(part)
        return part

    def update_part(self, work_order_id: int, part_id: int, data: PartUpdate, user: User) -> WorkOrderPart:
        work_order = self._editable(work_order_id, user)
        part = self._get_part(work_order, part_id)
        updates = data.model_dump(exclude_unset=True)
        if "name" in updates and not updates["name"]:
            raise HTTPException(status_code=400, detail="name is required")
        if "quantity" in updates and updates["quantity"] is None:
            raise HTTPException(status_code=400, detail="quantity is required")
        if updates.get("job_line_id") is not None:
            self._get_job_line(work_order, updates["job_line_id"])

        if part.inventory_item_id and "quantity" in updates and updates["quantity"] != part.quantity:
            item = self.repo.get_inventory_item(self.db, part.inventory_item_id, user.shop_id)
            if item:
                apply_stock_delta(item, part.quantity - updates["quantity"])

        pricing_changed = {"supplier_cost", "markup_percentage"} & updates.keys()
        for key, value in updates.items():
            setattr(part, key, value)
        if pricing_changed and "customer_price" not in updates:
            part.customer_price = float(calculate_markup_price(part.supplier_cost or 0, part.markup_percentage or 0))

        self._refresh_totals(work_order)
        self.db.commit()
        self.db.refresh(part)
        return part

    def delete_part(self, work_order_id: int, part_id: int, user: User) -> dict:
        """Remove a part, returning inventory stock it had reserved"""
        work_order = self._editable(work_order_id, user)
        part = self._get_part(work_order, part_id)
        if part.inventory_item_id:
            item = self.repo.get_inventory_item(self.db, part.inventory_item_id, user.shop_id)
            if item:
                apply_stock_delta(item, part.quantity)
        for discount in [d for d in work_order.discounts if d.part_id == part.id]:
            work_order.discounts.remove(discount)
        self.db.flush()
        work_order.parts.remove(part)
        self._refresh_totals(work_order)
        self.db.commit()
        return {"message": "Part deleted"}

    # Discounts

    def list_discount_types(self, user: User, applies_to: Optional[str] = None) -> list[DiscountType]:
        return self.repo.get_discount_types(self.db, user.shop_id, applies_to)

    def create_discount_type(self, data: DiscountTypeCreate, user: User) -> DiscountType:
        discount_type = self.repo.save(self.db, DiscountType(shop_id=user.shop_id, **data.model_dump()))
        logger.info(f"🏷️ Discount type '{discount_type.name}' created for shop {user.shop_id}")
        return discount_type

    def apply_discount(self, work_order_id: int, data: DiscountApply, user: User) -> WorkOrderDiscount:
        work_order = self._editable(work_order_id, user)

        if data.discount_type_id is not None:
            preset = self.repo.get_discount_type(self.db, data.discount_type_id, user.shop_id)
            if not preset or not preset.is_active:
                raise HTTPException(status_code=404, detail="Discount type not found")
            if data.scope and data.scope != preset.applies_to:
                raise HTTPException(
                    status_code=400, detail=f"Discount type '{preset.name}' applies to {preset.applies_to}"
                )
            name = data.discount_name or preset.name
            kind = preset.discount_type
            value = data.discount_value if data.discount_value is not None else preset.default_value
            scope = preset.applies_to
        else:
            name, kind, value, scope = data.discount_name, data.discount_type, data.discount_value, data.scope

        try:
            validate_discount(kind, value)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        if data.job_line_id is not None:
            if scope != SCOPE_LABOR:
                raise HTTPException(status_code=400, detail="Job line discounts must use the labor scope")
            self._get_job_line(work_order, data.job_line_id)
        if data.part_id is not None:
            if scope != SCOPE_PARTS:
                raise HTTPException(status_code=400, detail="Part discounts must use the parts scope")
            self._get_part(work_order, data.part_id)

        discount = WorkOrderDiscount(
            scope=scope,
            job_line_id=data.job_line_id,
            part_id=data.part_id,
            discount_type_id=data.discount_type_id,
            discount_name=name,
            discount_type=kind,
            discount_value=value,
            discount_amount=0,
            reason=data.reason or (f"Applied {name}" if data.discount_type_id is not None else None),
            created_by=user.display_name,
        )
        work_order.discounts.append(discount)
        self._refresh_totals(work_order)
        self.db.commit()
        self.db.refresh(discount)
        logger.info(f"🏷️ Discount '{name}' ({kind} {value}) applied to {work_order.work_order_number}")
        return discount

    def remove_discount(self, work_order_id: int, discount_id: int, user: User) -> dict:
        work_order = self._editable(work_order_id, user)
        discount = self.repo.get_discount(self.db, work_order.id, discount_id)
        if not discount:
            raise HTTPException(status_code=404, detail="Discount not found")
        work_order.discounts.remove(discount)
        self._refresh_totals(work_order)
        self.db.commit()
        return {"message": "Discount removed"}

    # Totals

    def get_totals(self, work_order_id: int, user: User) -> dict:
        work_order = self.get_work_order(work_order_id, user)
        totals = self._refresh_totals(work_order)
        self.db.commit()
        return totals.as_dict()

    def get_invoice(self, work_order_id: int, user: User) -> InvoiceResponse:
        work_order = self.get_work_order(work_order_id, user)
        totals = self._refresh_totals(work_order)
        self.db.commit()
        self.db.refresh(work_order)

        equipment = (
            self.repo.get_equipment(self.db, work_order.equipment_id, user.shop_id) if work_order.equipment_id else None
        )
        technician = (
            self.repo.get_team_member(self.db, work_order.technician_id, user.shop_id)
            if work_order.technician_id
            else None
        )
        return InvoiceResponse(
            work_order=WorkOrderResponse.model_validate(work_order),
            equipment_name=equipment.name if equipment else None,
            technician_name=technician.full_name if technician else None,
            job_lines=[JobLineResponse.model_validate(line) for line in work_order.job_lines],
            parts=[PartResponse.model_validate(part) for part in work_order.parts],
            discounts=[DiscountResponse.model_validate(d) for d in work_order.discounts],
            totals=totals.as_dict(),
        )
