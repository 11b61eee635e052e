"""Maintenance domain schemas - intervals, performed service, requests and history"""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, field_validator, model_validator

from ...maintenance_schedule import INTERVAL_TYPES, validate_interval_unit
from ...shared.validators import clean_text, validate_choice, validate_non_negative, validate_positive

ITEM_CATEGORIES = (
    "engine",
    "gearbox",
    "hydraulics",
    "transmission",
    "electrical",
    "cooling",
    "fuel",
    "life_vest",
    "survival_suit",
    "life_raft",
    "fire_extinguisher",
    "safety_equipment",
    "filters",
    "belts",
    "other",
)

REQUEST_PRIORITIES = ("low", "medium", "high", "urgent")
REQUEST_TYPES = ("repair", "preventive", "inspection", "other")
REQUEST_STATUSES = ("pending", "approved", "rejected", "in_progress", "completed")


# ============================================================================
# MAINTENANCE INTERVALS
# ============================================================================


class PartNeeded(BaseModel):
    name: str
    qty: Optional[float] = None
    unit: Optional[str] = None


class IntervalCreate(BaseModel):
    equipment_id: int
    item_name: str
    item_category: str = "other"
    description: Optional[str] = None
    interval_type: str
    interval_value: float
    interval_unit: str
    quantity: Optional[float] = None
    quantity_unit: Optional[str] = None
    part_numbers: Optional[list[str]] = None
    parts_needed: Optional[list[PartNeeded]] = None
    last_service_date: Optional[date] = None
    last_service_hours: Optional[float] = None
    last_service_mileage: Optional[float] = None
    notes: Optional[str] = None

    @field_validator("item_name")
    @classmethod
    def validate_item_name(cls, v):
        v = clean_text(v, 255)
        if not v:
            raise ValueError("item_name is required")
        return v

    @field_validator("item_category")
    @classmethod
    def validate_category(cls, v):
        return validate_choice(v, ITEM_CATEGORIES, "item_category")

    @field_validator("interval_type")
    @classmethod
    def validate_type(cls, v):
        return validate_choice(v, INTERVAL_TYPES, "interval_type")

    @field_validator("interval_value")
    @classmethod
    def validate_value(cls, v):
        return validate_positive(v, "interval_value")

    @field_validator("last_service_hours", "last_service_mileage", "quantity")
    @classmethod
    def validate_readings(cls, v, info):
        return validate_non_negative(v, info.field_name)

    @model_validator(mode="after")
    def validate_unit(self):
        validate_interval_unit(self.interval_type, self.interval_unit)
        return self


class IntervalUpdate(BaseModel):
    item_name: Optional[str] = None
    item_category: Optional[str] = None
    description: Optional[str] = None
    interval_type: Optional[str] = None
    interval_value: Optional[float] = None
    interval_unit: Optional[str] = None
    quantity: Optional[float] = None
    quantity_unit: Optional[str] = None
    part_numbers: Optional[list[str]] = None
    parts_needed: Optional[list[PartNeeded]] = None
    last_service_date: Optional[date] = None
    last_service_hours: Optional[float] = None
    last_service_mileage: Optional[float] = None
    notes: Optional[str] = None

    @field_validator("item_category")
    @classmethod
    def validate_category(cls, v):
        return validate_choice(v, ITEM_CATEGORIES, "item_category")

    @field_validator("interval_type")
    @classmethod
    def validate_type(cls, v):
        return validate_choice(v, INTERVAL_TYPES, "interval_type")

    @field_validator("interval_value")
    @classmethod
    def validate_value(cls, v):
        return validate_positive(v, "interval_value")


class ServicePerformed(BaseModel):
    performed_date: date
    hours_reading: Optional[float] = None
    mileage_reading: Optional[float] = None
    performed_by: Optional[str] = None
    parts_used: Optional[list[PartNeeded]] = None
    notes: Optional[str] = None

    @field_validator("hours_reading", "mileage_reading")
    @classmethod
    def validate_readings(cls, v, info):
        return validate_non_negative(v, info.field_name)


class MaintenanceRecordResponse(BaseModel):
    id: int
    equipment_id: int
    interval_id: Optional[int]
    performed_date: date
    hours_reading: Optional[float]
    mileage_reading: Optional[float]
    performed_by: Optional[str]
    parts_used: Optional[list[dict[str, Any]]]
    notes: Optional[str]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class IntervalResponse(BaseModel):
    id: int
    equipment_id: int
    equipment_name: Optional[str] = None
    item_name: str
    item_category: str
    description: Optional[str]
    interval_type: str
    interval_value: float
    interval_unit: str
    quantity: Optional[float]
    quantity_unit: Optional[str]
    part_numbers: Optional[list[str]]
    parts_needed: Optional[list[dict[str, Any]]]
    last_service_date: Optional[date]
    last_service_hours: Optional[float]
    last_service_mileage: Optional[float]
    next_service_date: Optional[date]
    next_service_hours: Optional[float]
    next_service_mileage: Optional[float]
    is_active: bool
    notes: Optional[str]
    due_status: str
    days_remaining: Optional[int] = None
    units_remaining: Optional[float] = None


# ============================================================================
# MAINTENANCE REQUESTS
# ============================================================================


class Attachment(BaseModel):
    """File metadata; the file itself lives wherever the client uploaded it"""

    name: str
    url: str
    type: Optional[str] = None
    size: Optional[int] = None


class RequestCreate(BaseModel):
    equipment_id: int
    title: str
    description: str
    reported_by_person: Optional[str] = None
    priority: str = "medium"
    request_type: str = "repair"
    attachments: list[Attachment] = []
    parts_requested: list[dict[str, Any]] = []
    estimated_cost: Optional[float] = None
    estimated_hours: Optional[float] = None
    scheduled_date: Optional[date] = None
    notes: Optional[str] = None

    @field_validator("title", "description")
    @classmethod
    def validate_required(cls, v, info):
        v = clean_text(v, 255 if info.field_name == "title" else 5000)
        if not v:
            raise ValueError(f"{info.field_name} is required")
        return v

    @field_validator("priority")
    @classmethod
    def validate_priority(cls, v):
        return validate_choice(v, REQUEST_PRIORITIES, "priority")

    @field_validator("request_type")
    @classmethod
    def validate_request_type(cls, v):
        return validate_choice(v, REQUEST_TYPES, "request_type")

    @field_validator("estimated_cost", "estimated_hours")
    @classmethod
    def validate_estimates(cls, v, info):
        return validate_non_negative(v, info.field_name)


class RequestEdit(BaseModel):
    """Submitter edit; every edit becomes a new history version"""

    title: Optional[str] = None
    description: Optional[str] = None
    reported_by_person: Optional[str] = None
    priority: Optional[str] = None
    request_type: Optional[str] = None
    attachments: Optional[list[Attachment]] = None
    change_summary: Optional[str] = None

    @field_validator("title", "description")
    @classmethod
    def validate_required(cls, v, info):
        if v is None:
            return v
        v = clean_text(v, 255 if info.field_name == "title" else 5000)
        if not v:
            raise ValueError(f"{info.field_name} cannot be empty")
        return v

    @field_validator("priority")
    @classmethod
    def validate_priority(cls, v):
        return validate_choice(v, REQUEST_PRIORITIES, "priority")

    @field_validator("request_type")
    @classmethod
    def validate_request_type(cls, v):
        return validate_choice(v, REQUEST_TYPES, "request_type")


class RequestStatusUpdate(BaseModel):
    status: str
    notes: Optional[str] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return validate_choice(v, REQUEST_STATUSES, "status")


class ConvertToWorkOrder(BaseModel):
    customer_name: Optional[str] = None
    technician_id: Optional[int] = None
    tax_rate: Optional[float] = None

    @field_validator("tax_rate")
    @classmethod
    def validate_tax(cls, v):
        return validate_non_negative(v, "tax_rate")


class HistoryResponse(BaseModel):
    id: int
    version_number: int
    title: str
    description: str
    reported_by_person: Optional[str]
    priority: Optional[str]
    request_type: Optional[str]
    attachments: Optional[list[dict[str, Any]]]
    changes: Optional[dict[str, Any]]
    edited_by: int
    edited_by_name: Optional[str]
    change_summary: Optional[str]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RequestResponse(BaseModel):
    id: int
    request_number: str
    equipment_id: int
    equipment_name: Optional[str] = None
    title: str
    description: str
    reported_by_person: Optional[str]
    priority: str
    request_type: str
    status: str
    attachments: Optional[list[dict[str, Any]]]
    parts_requested: Optional[list[dict[str, Any]]]
    estimated_cost: Optional[float]
    estimated_hours: Optional[float]
    scheduled_date: Optional[date]
    notes: Optional[str]
    requested_by: int
    requested_by_name: Optional[str]
    requested_at: Optional[datetime] = None
    work_order_id: Optional[int] = None
    updated_at: Optional[datetime] = None


class RequestDetailResponse(RequestResponse):
    history: list[HistoryResponse] = []


class RequestStats(BaseModel):
    pending: int
    in_progress: int
    completed_this_month: int
