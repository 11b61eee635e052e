"""Inventory domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import clean_text, validate_non_negative


class InventoryItemCreate(BaseModel):
    sku: str
    name: str
    category: str
    supplier: str
    unit_price: float
    quantity: int = 0
    reorder_point: int = 0
    reorder_quantity: int = 0
    location: Optional[str] = None
    description: Optional[str] = None

    @field_validator("sku", "name", "category", "supplier")
    @classmethod
    def validate_required(cls, v, info):
        v = clean_text(v, 255)
        if not v:
            raise ValueError(f"{info.field_name} is required")
        return v

    @field_validator("unit_price", "quantity", "reorder_point", "reorder_quantity")
    @classmethod
    def validate_amounts(cls, v, info):
        return validate_non_negative(v, info.field_name)


class InventoryItemUpdate(BaseModel):
    """Quantity changes go through /adjust so they are logged"""

    sku: Optional[str] = None
    name: Optional[str] = None
    category: Optional[str] = None
    supplier: Optional[str] = None
    unit_price: Optional[float] = None
    reorder_point: Optional[int] = None
    reorder_quantity: Optional[int] = None
    location: Optional[str] = None
    description: Optional[str] = None

    @field_validator("unit_price", "reorder_point", "reorder_quantity")
    @classmethod
    def validate_amounts(cls, v, info):
        return validate_non_negative(v, info.field_name)


class QuantityAdjustment(BaseModel):
    delta: int
    reason: Optional[str] = None

    @field_validator("delta")
    @classmethod
    def validate_delta(cls, v):
        if v == 0:
            raise ValueError("delta cannot be zero")
        return v


class InventoryItemResponse(BaseModel):
    id: int
    sku: str
    name: str
    category: str
    supplier: str
    unit_price: float
    quantity: int
    reorder_point: int
    reorder_quantity: int
    location: Optional[str]
    description: Optional[str]
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ReorderAlert(BaseModel):
    id: int
    sku: str
    name: str
    supplier: str
    quantity: int
    reorder_point: int
    suggested_order_quantity: int
    status: str
