"""Maintenance request service - request workflow, versioned edits and work order conversion"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import DEFAULT_TAX_RATE
from ...maintenance_schedule import diff_snapshots
from ...models import Equipment, TeamMember, User
from ...models_maintenance import MaintenanceRequest, MaintenanceRequestHistory
from ...models_work_order import WorkOrder
from ...shared.numbering import next_document_number
from .repository import MaintenanceRepository
from .schemas import (
    ConvertToWorkOrder,
    HistoryResponse,
    RequestCreate,
    RequestDetailResponse,
    RequestEdit,
    RequestResponse,
    RequestStats,
    RequestStatusUpdate,
)

logger = logging.getLogger(__name__)

# Allowed status moves; anything not listed is rejected
STATUS_TRANSITIONS = {
    "pending": ("approved", "rejected"),
    "approved": ("in_progress",),
    "in_progress": ("completed",),
    "rejected": (),
    "completed": (),
}

CONVERTIBLE_STATUSES = ("pending", "approved")

EDITABLE_FIELDS = ("title", "description", "reported_by_person", "priority", "request_type", "attachments")


def request_snapshot(request: MaintenanceRequest) -> dict:
    return {field: getattr(request, field) for field in EDITABLE_FIELDS}


def request_response(request: MaintenanceRequest, include_history: bool = False):
    data = dict(
        id=request.id,
        request_number=request.request_number,
        equipment_id=request.equipment_id,
        equipment_name=request.equipment.name if request.equipment else None,
        title=request.title,
        description=request.description,
        reported_by_person=request.reported_by_person,
        priority=request.priority,
        request_type=request.request_type,
        status=request.status,
        attachments=request.attachments or [],
        parts_requested=request.parts_requested or [],
        estimated_cost=request.estimated_cost,
        estimated_hours=request.estimated_hours,
        scheduled_date=request.scheduled_date,
        notes=request.notes,
        requested_by=request.requested_by,
        requested_by_name=request.requested_by_name,
        requested_at=request.requested_at,
        work_order_id=request.work_order_id,
        updated_at=request.updated_at,
    )
    if include_history:
        return RequestDetailResponse(
            **data, history=[HistoryResponse.model_validate(h) for h in request.history]
        )
    return RequestResponse(**data)


class MaintenanceRequestService:
    """Service layer for maintenance request business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = MaintenanceRepository()

    def _get_request(self, request_id: int, user: User) -> MaintenanceRequest:
        request = self.repo.get_request(self.db, request_id, user.shop_id)
        if not request:
            raise HTTPException(status_code=404, detail="Maintenance request not found")
        return request

    def list_requests(
        self,
        user: User,
        search: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        equipment_id: Optional[int] = None,
    ) -> list[RequestResponse]:
        requests = self.repo.search_requests(self.db, user.shop_id, search, status, priority, equipment_id)
        return [request_response(r) for r in requests]

    def get_request(self, request_id: int, user: User) -> RequestDetailResponse:
        return request_response(self._get_request(request_id, user), include_history=True)

    def get_stats(self, user: User, now: Optional[datetime] = None) -> RequestStats:
        """Pending and in-progress counts, plus completed requests raised this month"""
        month_start = (now or datetime.utcnow()).replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        return RequestStats(
            pending=self.repo.count_by_status(self.db, user.shop_id, "pending"),
            in_progress=self.repo.count_by_status(self.db, user.shop_id, "in_progress"),
            completed_this_month=self.repo.count_by_status(self.db, user.shop_id, "completed", since=month_start),
        )

    def create_request(self, data: RequestCreate, user: User) -> RequestResponse:
        equipment = (
            self.db.query(Equipment)
            .filter(Equipment.id == data.equipment_id, Equipment.shop_id == user.shop_id)
            .first()
        )
        if not equipment:
            raise HTTPException(status_code=404, detail="Equipment not found")

        payload = data.model_dump()
        payload["attachments"] = [a.model_dump() for a in data.attachments]
        request = MaintenanceRequest(
            shop_id=user.shop_id,
            request_number=next_document_number(
                self.db, MaintenanceRequest.request_number, MaintenanceRequest.shop_id, user.shop_id, "MR"
            ),
            status="pending",
            requested_by=user.id,
            requested_by_name=user.display_name,
            requested_at=datetime.utcnow(),
            **payload,
        )
        self.db.add(request)
        self.db.commit()
        self.db.refresh(request)
        logger.info(f"📥 Maintenance request {request.request_number} created by user {user.id}")
        return request_response(request)

    def edit_request(self, request_id: int, data: RequestEdit, user: User) -> RequestDetailResponse:
        """
        Edit a request's details. Only the original submitter may edit. Each edit writes a
        history row (the new version of the editable fields plus a field diff) before the
        request itself changes; both land in one commit.
        """
        request = self._get_request(request_id, user)
        if request.requested_by != user.id:
            logger.warning(f"🚫 User {user.id} tried to edit request {request.id} submitted by {request.requested_by}")
            raise HTTPException(status_code=403, detail="Only the submitter can edit this request")

        updates = data.model_dump(exclude_unset=True, exclude={"change_summary"})
        if "attachments" in updates:
            updates["attachments"] = [a.model_dump() for a in data.attachments or []]
        for required in ("title", "description", "priority", "request_type"):
            if required in updates and updates[required] is None:
                raise HTTPException(status_code=400, detail=f"{required} cannot be empty")

        before = request_snapshot(request)
        after = {**before, **updates}
        changes = diff_snapshots(before, after)

        version = self.repo.get_latest_version(self.db, request.id) + 1
        history = MaintenanceRequestHistory(
            maintenance_request_id=request.id,
            version_number=version,
            title=after["title"],
            description=after["description"],
            reported_by_person=after["reported_by_person"],
            priority=after["priority"],
            request_type=after["request_type"],
            attachments=after["attachments"] or [],
            changes=changes,
            edited_by=user.id,
            edited_by_name=user.display_name,
            change_summary=data.change_summary or "Updated request details",
        )
        self.db.add(history)
        self.db.flush()

        for key, value in updates.items():
            setattr(request, key, value)

        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.error(f"❌ Failed to save edit of request {request.id}")
            raise
        self.db.refresh(request)
        logger.info(f"✏️ Request {request.request_number} edited, version {version} ({len(changes)} field(s))")
        return request_response(request, include_history=True)

    def update_status(self, request_id: int, data: RequestStatusUpdate, user: User) -> RequestResponse:
        request = self._get_request(request_id, user)
        allowed = STATUS_TRANSITIONS.get(request.status, ())
        if data.status not in allowed:
            raise HTTPException(
                status_code=400,
                detail=f"Cannot change status from {request.status} to {data.status}",
            )

        request.status = data.status
        if data.notes:
            request.notes = data.notes
        self.db.commit()
        self.db.refresh(request)
        logger.info(f"🔄 Request {request.request_number} -> {data.status} by user {user.id}")
        return request_response(request)

    def convert_to_work_order(self, request_id: int, data: ConvertToWorkOrder, user: User) -> dict:
        request = self._get_request(request_id, user)
        if request.status not in CONVERTIBLE_STATUSES:
            raise HTTPException(
                status_code=400,
                detail=f"Only pending or approved requests can be converted (status: {request.status})",
            )
        if request.work_order_id:
            raise HTTPException(status_code=409, detail="Request already has a work order")
        if data.technician_id is not None and not (
            self.db.query(TeamMember)
            .filter(TeamMember.id == data.technician_id, TeamMember.shop_id == user.shop_id)
            .first()
        ):
            raise HTTPException(status_code=404, detail="Technician not found")

        tax_rate = data.tax_rate
        if tax_rate is None:
            tax_rate = user.shop.default_tax_rate if user.shop and user.shop.default_tax_rate is not None else DEFAULT_TAX_RATE

        work_order = WorkOrder(
            shop_id=user.shop_id,
            work_order_number=next_document_number(
                self.db, WorkOrder.work_order_number, WorkOrder.shop_id, user.shop_id, "WO"
            ),
            equipment_id=request.equipment_id,
            maintenance_request_id=request.id,
            technician_id=data.technician_id,
            customer_name=data.customer_name,
            description=f"{request.title}\n\n{request.description}",
            status="open",
            tax_rate=tax_rate,
            total_cost=0,
            created_by=user.id,
        )
        self.db.add(work_order)
        self.db.flush()

        request.work_order_id = work_order.id
        request.status = "in_progress"
        self.db.commit()
        logger.info(f"🛠️ Request {request.request_number} converted to work order {work_order.work_order_number}")
        return {
            "message": "Work order created",
            "work_order_id": work_order.id,
            "work_order_number": work_order.work_order_number,
            "request_status": request.status,
        }
