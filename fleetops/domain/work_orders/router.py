"""Work order router - FastAPI endpoints for work orders, labor, parts and discounts"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_permission
from ...database import get_db
from ...models import User
from ...permissions import CAN_MANAGE_SETTINGS, CAN_MANAGE_WORK_ORDERS, CAN_VIEW_WORK_ORDERS
from .schemas import (
    DiscountApply,
    DiscountResponse,
    DiscountTypeCreate,
    DiscountTypeResponse,
    InvoiceResponse,
    JobLineCreate,
    JobLineResponse,
    JobLineUpdate,
    PartCreate,
    PartResponse,
    PartUpdate,
    WorkOrderCreate,
    WorkOrderDetailResponse,
    WorkOrderResponse,
    WorkOrderStatusUpdate,
    WorkOrderTotalsResponse,
    WorkOrderUpdate,
)
from .service import WorkOrderService

router = APIRouter(prefix="/work-orders", tags=["Work Orders"])


def get_work_order_service(db: Session = Depends(get_db)) -> WorkOrderService:
    """Dependency injection for WorkOrderService"""
    return WorkOrderService(db)


# Discount catalogue (declared before /{work_order_id} routes)


@router.get("/discount-types", response_model=list[DiscountTypeResponse])
async def list_discount_types(
    applies_to: Optional[str] = Query(None, description="labor, parts or work_order"),
    current_user: User = Depends(require_permission(CAN_VIEW_WORK_ORDERS)),
    service: WorkOrderService = Depends(get_work_order_service),
):
    return service.list_discount_types(current_user, applies_to)


@router.post("/discount-types", response_model=DiscountTypeResponse, status_code=201)
async def create_discount_type(
    data: DiscountTypeCreate,
    current_user: User = Depends(require_permission(CAN_MANAGE_SETTINGS)),
    service: WorkOrderService = Depends(get_work_order_service),
):
    return service.create_discount_type(data, current_user)


# Work orders


@router.get("", response_model=list[WorkOrderResponse])
async def list_work_orders(
    status: Optional[str] = Query(None),
    equipment_id: Optional[int] = Query(None),
    search: Optional[str] = Query(None),
    current_user: User = Depends(require_permission(CAN_VIEW_WORK_ORDERS)),
    service: WorkOrderService = Depends(get_work_order_service),
):
    return service.list_work_orders(current_user, status, equipment_id, search)


@router.get("/{work_order_id}", response_model=WorkOrderDetailResponse)
async def get_work_order(
    work_order_id: int,
    current_user: User = Depends(require_permission(CAN_VIEW_WORK_ORDERS)),
    service: WorkOrderService = Depends(get_work_order_service),
):
    return service.get_work_order(work_order_id, current_user)


@router.post("", response_model=WorkOrderResponse, status_code=201)
async def create_work_order(
    data: WorkOrderCreate,
    current_user: User = Depends(require_permission(CAN_MANAGE_WORK_ORDERS)),
    service: WorkOrderService = Depends(get_work_order_service),
):
    return service.create_work_order(data, current_user)


@router.patch("/{work_order_id}", response_model=WorkOrderResponse)
async def update_work_order(
    work_order_id: int,
    data: WorkOrderUpdate,
    current_user: User = Depends(require_permission(CAN_MANAGE_WORK_ORDERS)),
    service: WorkOrderService = Depends(get_work_order_service),
):
    return service.update_work_order(work_order_id, data, current_user)


@router.post("/{work_order_id}/status", response_model=WorkOrderResponse)
async def update_work_order_status(
    work_order_id: int,
    data: WorkOrderStatusUpdate,
    current_user: User = Depends(require_permission(CAN_MANAGE_WORK_ORDERS)),
    service: WorkOrderService = Depends(get_work_order_service),
):
    """Move a work order through its lifecycle; invoicing stamps invoiced_at"""
    return service.update_status(work_order_id, data, current_user)


@router.delete("/{work_order_id}")
async def delete_work_order(
    work_order_id: int,
    current_user: User = Depends(require_permission(CAN_MANAGE_WORK_ORDERS)),
    service: WorkOrderService = Depends(get_work_order_service),
):
    return service.delete_work_order(work_order_id, current_user)


@router.get("/{work_order_id}/totals", response_model=WorkOrderTotalsResponse)
async def get_work_order_totals(
    work_order_id: int,
    current_user: User = Depends(require_permission(CAN_VIEW_WORK_ORDERS)),
    service: WorkOrderService = Depends(get_work_order_service),
):
    return service.get_totals(work_order_id, current_user)


@router.get("/{work_order_id}/invoice", response_model=InvoiceResponse)
async def get_work_order_invoice(
    work_order_id: int,
    current_user: User = Depends(require_permission(CAN_VIEW_WORK_ORDERS)),
    service: WorkOrderService = Depends(get_work_order_service),
):
    return service.get_invoice(work_order_id, current_user)


# Job lines


@router.post("/{work_order_id}/job-lines", response_model=JobLineResponse, status_code=201)
async def add_job_line(
    work_order_id: int,
    data: JobLineCreate,
    current_user: User = Depends(require_permission(CAN_MANAGE_WORK_ORDERS)),
    service: WorkOrderService = Depends(get_work_order_service),
):
    return service.add_job_line(work_order_id, data, current_user)


@router.patch("/{work_order_id}/job-lines/{job_line_id}", response_model=JobLineResponse)
async def update_job_line(
    work_order_id: int,
    job_line_id: int,
    data: JobLineUpdate,
    current_user: User = Depends(require_permission(CAN_MANAGE_WORK_ORDERS)),
    service: WorkOrderService = Depends(get_work_order_service),
):
    return service.update_job_line(work_order_id, job_line_id, data, current_user)


@router.delete("/{work_order_id}/job-lines/{job_line_id}")
async def delete_job_line(
    work_order_id: int,
    job_line_id: int,
    current_user: User = Depends(require_permission(CAN_MANAGE_WORK_ORDERS)),
    service: WorkOrderService = Depends(get_work_order_service),
):
    return service.delete_job_line(work_order_id, job_line_id, current_user)


# Parts


@router.post("/{work_order_id}/parts", response_model=PartResponse, status_code=201)
async def add_part(
    work_order_id: int,
    data: PartCreate,
    current_user: User = Depends(require_permission(CAN_MANAGE_WORK_ORDERS)),
    service: WorkOrderService = Depends(get_work_order_service),
):
    """Add a part; inventory parts reserve stock"""
    return service.add_part(work_order_id, data, current_user)


@router.patch("/{work_order_id}/parts/{part_id}", response_model=PartResponse)
async def update_part(
    work_order_id: int,
    part_id: int,
    data: PartUpdate,
    current_user: User = Depends(require_permission(CAN_MANAGE_WORK_ORDERS)),
    service: WorkOrderService = Depends(get_work_order_service),
):
    return service.update_part(work_order_id, part_id, data, current_user)


@router.delete("/{work_order_id}/parts/{part_id}")
async def delete_part(
    work_order_id: int,
    part_id: int,
    current_user: User = Depends(require_permission(CAN_MANAGE_WORK_ORDERS)),
    service: WorkOrderService = Depends(get_work_order_service),
):
    return service.delete_part(work_order_id, part_id, current_user)


# Applied discounts


@router.post("/{work_order_id}/discounts", response_model=DiscountResponse, status_code=201)
async def apply_discount(
    work_order_id: int,
    data: DiscountApply,
    current_user: User = Depends(require_permission(CAN_MANAGE_WORK_ORDERS)),
    service: WorkOrderService = Depends(get_work_order_service),
):
    return service.apply_discount(work_order_id, data, current_user)


@router.delete("/{work_order_id}/discounts/{discount_id}")
async def remove_discount(
    work_order_id: int,
    discount_id: int,
    current_user: User = Depends(require_permission(CAN_MANAGE_WORK_ORDERS)),
    service: WorkOrderService = Depends(get_work_order_service),
):
    return service.remove_discount(work_order_id, discount_id, current_user)
