"""Maintenance router - interval schedules and maintenance requests"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_permission
from ...database import get_db
from ...models import User
from ...permissions import CAN_MANAGE_WORK_ORDERS
from .request_service import MaintenanceRequestService
from .schemas import (
    ConvertToWorkOrder,
    IntervalCreate,
    IntervalResponse,
    IntervalUpdate,
    MaintenanceRecordResponse,
    RequestCreate,
    RequestDetailResponse,
    RequestEdit,
    RequestResponse,
    RequestStats,
    RequestStatusUpdate,
    ServicePerformed,
)
from .service import MaintenanceIntervalService

router = APIRouter(prefix="/maintenance", tags=["Maintenance"])


def get_interval_service(db: Session = Depends(get_db)) -> MaintenanceIntervalService:
    """Dependency injection for MaintenanceIntervalService"""
    return MaintenanceIntervalService(db)


def get_request_service(db: Session = Depends(get_db)) -> MaintenanceRequestService:
    """Dependency injection for MaintenanceRequestService"""
    return MaintenanceRequestService(db)


# ============================================================================
# MAINTENANCE INTERVALS
# ============================================================================


@router.get("/due", response_model=list[IntervalResponse])
async def get_due_items(
    current_user: User = Depends(get_current_user),
    service: MaintenanceIntervalService = Depends(get_interval_service),
):
    """Overdue and due-soon maintenance across the fleet"""
    return service.get_due_items(current_user)


@router.get("/equipment/{equipment_id}/intervals", response_model=list[IntervalResponse])
async def list_intervals(
    equipment_id: int,
    current_user: User = Depends(get_current_user),
    service: MaintenanceIntervalService = Depends(get_interval_service),
):
    """Active intervals for one asset, with due status"""
    return service.list_intervals(equipment_id, current_user)


@router.get("/equipment/{equipment_id}/records", response_model=list[MaintenanceRecordResponse])
async def list_records(
    equipment_id: int,
    current_user: User = Depends(get_current_user),
    service: MaintenanceIntervalService = Depends(get_interval_service),
):
    return service.list_records(equipment_id, current_user)


@router.post("/intervals", response_model=IntervalResponse, status_code=201)
async def create_interval(
    data: IntervalCreate,
    current_user: User = Depends(require_permission(CAN_MANAGE_WORK_ORDERS)),
    service: MaintenanceIntervalService = Depends(get_interval_service),
):
    return service.create_interval(data, current_user)


@router.patch("/intervals/{interval_id}", response_model=IntervalResponse)
async def update_interval(
    interval_id: int,
    data: IntervalUpdate,
    current_user: User = Depends(require_permission(CAN_MANAGE_WORK_ORDERS)),
    service: MaintenanceIntervalService = Depends(get_interval_service),
):
    return service.update_interval(interval_id, data, current_user)


@router.delete("/intervals/{interval_id}")
async def deactivate_interval(
    interval_id: int,
    current_user: User = Depends(require_permission(CAN_MANAGE_WORK_ORDERS)),
    service: MaintenanceIntervalService = Depends(get_interval_service),
):
    return service.deactivate_interval(interval_id, current_user)


@router.post("/intervals/{interval_id}/performed", response_model=IntervalResponse)
async def record_service(
    interval_id: int,
    data: ServicePerformed,
    current_user: User = Depends(get_current_user),
    service: MaintenanceIntervalService = Depends(get_interval_service),
):
    """Record maintenance performed and roll the schedule forward"""
    return service.record_service(interval_id, data, current_user)


# ============================================================================
# MAINTENANCE REQUESTS
# ============================================================================


@router.get("/requests/stats/summary", response_model=RequestStats)
async def get_request_stats(
    current_user: User = Depends(get_current_user),
    service: MaintenanceRequestService = Depends(get_request_service),
):
    return service.get_stats(current_user)


@router.get("/requests", response_model=list[RequestResponse])
async def list_requests(
    search: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    priority: Optional[str] = Query(None),
    equipment_id: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    service: MaintenanceRequestService = Depends(get_request_service),
):
    return service.list_requests(current_user, search, status, priority, equipment_id)


@router.get("/requests/{request_id}", response_model=RequestDetailResponse)
async def get_request(
    request_id: int,
    current_user: User = Depends(get_current_user),
    service: MaintenanceRequestService = Depends(get_request_service),
):
    """Request with its version history, newest first"""
    return service.get_request(request_id, current_user)


@router.post("/requests", response_model=RequestResponse, status_code=201)
async def create_request(
    data: RequestCreate,
    current_user: User = Depends(get_current_user),
    service: MaintenanceRequestService = Depends(get_request_service),
):
    return service.create_request(data, current_user)


@router.patch("/requests/{request_id}", response_model=RequestDetailResponse)
async def edit_request(
    request_id: int,
    data: RequestEdit,
    current_user: User = Depends(get_current_user),
    service: MaintenanceRequestService = Depends(get_request_service),
):
    """Submitter edit, tracked in version history"""
    return service.edit_request(request_id, data, current_user)


@router.post("/requests/{request_id}/status", response_model=RequestResponse)
async def update_request_status(
    request_id: int,
    data: RequestStatusUpdate,
    current_user: User = Depends(require_permission(CAN_MANAGE_WORK_ORDERS)),
    service: MaintenanceRequestService = Depends(get_request_service),
):
    return service.update_status(request_id, data, current_user)


@router.post("/requests/{request_id}/convert")
async def convert_to_work_order(
    request_id: int,
    data: ConvertToWorkOrder,
    current_user: User = Depends(require_permission(CAN_MANAGE_WORK_ORDERS)),
    service: MaintenanceRequestService = Depends(get_request_service),
):
    """Create a work order from a pending or approved request"""
    return service.convert_to_work_order(request_id, data, current_user)
