"""Work order schemas - orders, labor lines, parts and discounts"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

from ...pricing import DISCOUNT_KINDS, DISCOUNT_SCOPES, SCOPE_LABOR, SCOPE_PARTS, validate_discount
from ...shared.validators import clean_text, validate_choice, validate_non_negative, validate_positive

WORK_ORDER_STATUSES = ("open", "in_progress", "on_hold", "completed", "invoiced", "cancelled")
JOB_LINE_STATUSES = ("pending", "in-progress", "completed", "on-hold")
LABOR_RATE_TYPES = ("standard", "overtime", "premium", "flat_rate")
PART_STATUSES = ("ordered", "received", "installed", "backordered", "defective", "returned")


class WorkOrderUpdate(BaseModel):
    equipment_id: Optional[int] = None
    technician_id: Optional[int] = None
    customer_name: Optional[str] = None
    description: Optional[str] = None
    tax_rate: Optional[float] = None  # Fraction, 0.08 = 8%

    @field_validator("customer_name")
    @classmethod
    def validate_customer_name(cls, v):
        return clean_text(v, 255)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return clean_text(v, 5000)

    @field_validator("tax_rate")
    @classmethod
    def validate_tax_rate(cls, v):
        return validate_non_negative(v, "tax_rate")


class WorkOrderCreate(WorkOrderUpdate):
    maintenance_request_id: Optional[int] = None


class WorkOrderStatusUpdate(BaseModel):
    status: str

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return validate_choice(v, WORK_ORDER_STATUSES, "status")


class JobLineCreate(BaseModel):
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    estimated_hours: float
    labor_rate: float
    labor_rate_type: str = "standard"
    status: str = "pending"
    notes: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        v = clean_text(v, 255)
        if not v:
            raise ValueError("Job line name is required")
        return v

    @field_validator("estimated_hours", "labor_rate")
    @classmethod
    def validate_amounts(cls, v, info):
        return validate_positive(v, info.field_name)

    @field_validator("labor_rate_type")
    @classmethod
    def validate_rate_type(cls, v):
        return validate_choice(v, LABOR_RATE_TYPES, "labor_rate_type")

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return validate_choice(v, JOB_LINE_STATUSES, "status")


class JobLineUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    estimated_hours: Optional[float] = None
    labor_rate: Optional[float] = None
    labor_rate_type: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("estimated_hours", "labor_rate")
    @classmethod
    def validate_amounts(cls, v, info):
        return validate_positive(v, info.field_name)

    @field_validator("labor_rate_type")
    @classmethod
    def validate_rate_type(cls, v):
        return validate_choice(v, LABOR_RATE_TYPES, "labor_rate_type")

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return validate_choice(v, JOB_LINE_STATUSES, "status")


class JobLineResponse(BaseModel):
    id: int
    work_order_id: int
    name: str
    description: Optional[str]
    category: Optional[str]
    estimated_hours: float
    labor_rate: float
    labor_rate_type: Optional[str]
    total_amount: float
    status: Optional[str]
    notes: Optional[str]

    class Config:
        from_attributes = True


class PartCreate(BaseModel):
    """Inventory parts pull name, number and cost from the stock item when omitted"""

    inventory_item_id: Optional[int] = None
    job_line_id: Optional[int] = None
    part_number: Optional[str] = None
    name: Optional[str] = None
    supplier_cost: Optional[float] = None
    markup_percentage: float = 0
    customer_price: Optional[float] = None
    quantity: int = 1
    status: str = "ordered"
    supplier: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("supplier_cost", "markup_percentage", "customer_price")
    @classmethod
    def validate_money(cls, v, info):
        return validate_non_negative(v, info.field_name)

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v):
        if v < 1:
            raise ValueError("Quantity must be at least 1")
        return v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return validate_choice(v, PART_STATUSES, "status")

    @model_validator(mode="after")
    def validate_name(self):
        self.name = clean_text(self.name, 255)
        if not self.name and self.inventory_item_id is None:
            raise ValueError("Non-inventory parts need a name")
        return self


class PartUpdate(BaseModel):
    job_line_id: Optional[int] = None
    part_number: Optional[str] = None
    name: Optional[str] = None
    supplier_cost: Optional[float] = None
    markup_percentage: Optional[float] = None
    customer_price: Optional[float] = None
    quantity: Optional[int] = None
    status: Optional[str] = None
    supplier: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("supplier_cost", "markup_percentage", "customer_price")
    @classmethod
    def validate_money(cls, v, info):
        return validate_non_negative(v, info.field_name)

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v):
        if v is not None and v < 1:
            raise ValueError("Quantity must be at least 1")
        return v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return validate_choice(v, PART_STATUSES, "status")


class PartResponse(BaseModel):
    id: int
    work_order_id: int
    job_line_id: Optional[int]
    inventory_item_id: Optional[int]
    part_type: str
    part_number: Optional[str]
    name: str
    supplier_cost: Optional[float]
    markup_percentage: Optional[float]
    customer_price: float
    quantity: int
    status: Optional[str]
    supplier: Optional[str]
    notes: Optional[str]

    class Config:
        from_attributes = True


class DiscountTypeCreate(BaseModel):
    name: str
    description: Optional[str] = None
    discount_type: str
    default_value: float
    applies_to: str
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        v = clean_text(v, 100)
        if not v:
            raise ValueError("Discount name is required")
        return v

    @field_validator("discount_type")
    @classmethod
    def validate_kind(cls, v):
        return validate_choice(v, DISCOUNT_KINDS, "discount_type")

    @field_validator("applies_to")
    @classmethod
    def validate_applies_to(cls, v):
        return validate_choice(v, DISCOUNT_SCOPES, "applies_to")

    @model_validator(mode="after")
    def validate_value(self):
        validate_discount(self.discount_type, self.default_value)
        return self


class DiscountTypeResponse(BaseModel):
    id: int
    shop_id: Optional[int]
    name: str
    description: Optional[str]
    discount_type: str
    default_value: float
    applies_to: str
    is_active: bool

    class Config:
        from_attributes = True


class DiscountApply(BaseModel):
    """
    Apply a discount to a work order.

    With `discount_type_id` the predefined type supplies name, kind, value and scope
    (`discount_value` may override the value). Without it the discount is custom and needs
    a name, kind, value and scope.
    """

    discount_type_id: Optional[int] = None
    discount_name: Optional[str] = None
    discount_type: Optional[str] = None
    discount_value: Optional[float] = None
    scope: Optional[str] = None
    job_line_id: Optional[int] = None
    part_id: Optional[int] = None
    reason: Optional[str] = None

    @field_validator("discount_type")
    @classmethod
    def validate_kind(cls, v):
        return validate_choice(v, DISCOUNT_KINDS, "discount_type")

    @field_validator("scope")
    @classmethod
    def validate_scope(cls, v):
        return validate_choice(v, DISCOUNT_SCOPES, "scope")

    @field_validator("reason")
    @classmethod
    def validate_reason(cls, v):
        return clean_text(v, 500)

    @model_validator(mode="after")
    def validate_custom(self):
        if self.discount_type_id is None:
            self.discount_name = clean_text(self.discount_name, 100)
            if not self.discount_name or not self.discount_type or self.discount_value is None or not self.scope:
                raise ValueError("Custom discounts need discount_name, discount_type, discount_value and scope")
            validate_discount(self.discount_type, self.discount_value)
        if self.job_line_id is not None and self.part_id is not None:
            raise ValueError("A discount can target a job line or a part, not both")
        if self.job_line_id is not None and self.scope not in (None, SCOPE_LABOR):
            raise ValueError("Job line discounts must use the labor scope")
        if self.part_id is not None and self.scope not in (None, SCOPE_PARTS):
            raise ValueError("Part discounts must use the parts scope")
        return self


class DiscountResponse(BaseModel):
    id: int
    work_order_id: int
    scope: str
    job_line_id: Optional[int]
    part_id: Optional[int]
    discount_type_id: Optional[int]
    discount_name: str
    discount_type: str
    discount_value: float
    discount_amount: float
    reason: Optional[str]
    created_by: Optional[str]
    applied_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class WorkOrderTotalsResponse(BaseModel):
    labor_subtotal: float
    labor_line_discounts: float
    labor_discounts: float
    labor_total: float
    parts_subtotal: float
    parts_line_discounts: float
    parts_discounts: float
    parts_total: float
    work_order_discounts: float
    discount_total: float
    subtotal: float
    tax_rate: float
    tax_amount: float
    total: float


class WorkOrderResponse(BaseModel):
    id: int
    work_order_number: str
    equipment_id: Optional[int]
    maintenance_request_id: Optional[int]
    technician_id: Optional[int]
    customer_name: Optional[str]
    description: Optional[str]
    status: str
    tax_rate: float
    total_cost: float
    invoiced_at: Optional[datetime]
    created_by: Optional[int]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class WorkOrderDetailResponse(WorkOrderResponse):
    job_lines: list[JobLineResponse] = []
    parts: list[PartResponse] = []
    discounts: list[DiscountResponse] = []


class InvoiceResponse(BaseModel):
    work_order: WorkOrderResponse
    equipment_name: Optional[str]
    technician_name: Optional[str]
    job_lines: list[JobLineResponse]
    parts: list[PartResponse]
    discounts: list[DiscountResponse]
    totals: WorkOrderTotalsResponse
