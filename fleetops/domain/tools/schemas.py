"""Tool domain schemas"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import clean_text, validate_choice, validate_non_negative

TOOL_STATUSES = ("available", "checked_out", "in_repair", "retired")
TOOL_CONDITIONS = ("new", "good", "fair", "poor", "damaged")


class ToolCreate(BaseModel):
    name: str
    tool_number: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    purchase_date: Optional[date] = None
    purchase_cost: Optional[float] = None
    vendor: Optional[str] = None
    status: str = "available"
    condition: str = "good"
    location: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        v = clean_text(v, 255)
        if not v:
            raise ValueError("Tool name is required")
        return v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return validate_choice(v, TOOL_STATUSES, "status")

    @field_validator("condition")
    @classmethod
    def validate_condition(cls, v):
        return validate_choice(v, TOOL_CONDITIONS, "condition")

    @field_validator("purchase_cost")
    @classmethod
    def validate_cost(cls, v):
        return validate_non_negative(v, "purchase_cost")


class ToolUpdate(BaseModel):
    name: Optional[str] = None
    tool_number: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    purchase_date: Optional[date] = None
    purchase_cost: Optional[float] = None
    vendor: Optional[str] = None
    status: Optional[str] = None
    condition: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return validate_choice(v, TOOL_STATUSES, "status")

    @field_validator("condition")
    @classmethod
    def validate_condition(cls, v):
        return validate_choice(v, TOOL_CONDITIONS, "condition")

    @field_validator("purchase_cost")
    @classmethod
    def validate_cost(cls, v):
        return validate_non_negative(v, "purchase_cost")


class ToolCheckout(BaseModel):
    team_member_id: Optional[int] = None
    notes: Optional[str] = None


class ToolCheckin(BaseModel):
    condition: Optional[str] = None
    location: Optional[str] = None

    @field_validator("condition")
    @classmethod
    def validate_condition(cls, v):
        return validate_choice(v, TOOL_CONDITIONS, "condition")


class ToolResponse(BaseModel):
    id: int
    tool_number: Optional[str]
    name: str
    description: Optional[str]
    category: Optional[str]
    manufacturer: Optional[str]
    model: Optional[str]
    serial_number: Optional[str]
    purchase_date: Optional[date]
    purchase_cost: Optional[float]
    vendor: Optional[str]
    status: str
    condition: Optional[str]
    location: Optional[str]
    checked_out_to: Optional[int] = None
    checked_out_at: Optional[datetime] = None
    notes: Optional[str]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
