"""Equipment domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import clean_text, validate_choice, validate_non_negative

EQUIPMENT_STATUSES = ("operational", "maintenance", "out_of_service", "retired")


class EquipmentCreate(BaseModel):
    """Schema for creating an equipment asset"""

    name: str
    asset_number: Optional[str] = None
    equipment_type: Optional[str] = None
    category: Optional[str] = None
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    year: Optional[int] = None
    status: str = "operational"
    location: Optional[str] = None
    current_hours: Optional[float] = None
    current_mileage: Optional[float] = None
    parent_id: Optional[int] = None
    notes: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        v = clean_text(v, 255)
        if not v:
            raise ValueError("Equipment name is required")
        return v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return validate_choice(v, EQUIPMENT_STATUSES, "status")

    @field_validator("current_hours", "current_mileage")
    @classmethod
    def validate_readings(cls, v, info):
        return validate_non_negative(v, info.field_name)

    @field_validator("year")
    @classmethod
    def validate_year(cls, v):
        if v is not None and not 1900 <= v <= 2100:
            raise ValueError("year must be between 1900 and 2100")
        return v


class EquipmentUpdate(BaseModel):
    """Schema for updating an equipment asset; readings go through /readings"""

    name: Optional[str] = None
    asset_number: Optional[str] = None
    equipment_type: Optional[str] = None
    category: Optional[str] = None
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    year: Optional[int] = None
    status: Optional[str] = None
    location: Optional[str] = None
    parent_id: Optional[int] = None
    notes: Optional[str] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return validate_choice(v, EQUIPMENT_STATUSES, "status")


class ReadingsUpdate(BaseModel):
    current_hours: Optional[float] = None
    current_mileage: Optional[float] = None

    @field_validator("current_hours", "current_mileage")
    @classmethod
    def validate_readings(cls, v, info):
        return validate_non_negative(v, info.field_name)


class EquipmentResponse(BaseModel):
    id: int
    name: str
    asset_number: Optional[str]
    equipment_type: Optional[str]
    category: Optional[str]
    manufacturer: Optional[str]
    model: Optional[str]
    serial_number: Optional[str]
    year: Optional[int]
    status: Optional[str]
    location: Optional[str]
    current_hours: Optional[float]
    current_mileage: Optional[float]
    parent_id: Optional[int]
    notes: Optional[str]
    is_active: bool
    archived_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
