"""Trip log schemas"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_choice, validate_non_negative

READING_TYPES = ("miles", "km", "hours")


class TripLogCreate(BaseModel):
    equipment_id: int
    trip_date: date
    start_reading: Optional[float] = None
    end_reading: Optional[float] = None
    reading_type: str = "miles"
    driver_name: Optional[str] = None
    purpose: Optional[str] = None
    destination: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("reading_type")
    @classmethod
    def validate_reading_type(cls, v):
        return validate_choice(v, READING_TYPES, "reading_type")

    @field_validator("start_reading", "end_reading")
    @classmethod
    def validate_readings(cls, v, info):
        return validate_non_negative(v, info.field_name)


class TripLogResponse(BaseModel):
    id: int
    equipment_id: int
    equipment_name: Optional[str] = None
    trip_date: date
    start_reading: Optional[float]
    end_reading: Optional[float]
    distance: Optional[float]
    reading_type: str
    driver_name: Optional[str]
    purpose: Optional[str]
    destination: Optional[str]
    notes: Optional[str]
    entered_by: Optional[int]
    created_at: Optional[datetime] = None
