"""Voyage log schemas"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, field_validator, model_validator

from ...shared.validators import clean_text, validate_choice, validate_non_negative

VOYAGE_TYPES = ("transit", "towing", "cargo", "fishing", "charter", "training", "other")
VOYAGE_STATUSES = ("planned", "in_progress", "completed", "cancelled")
CALL_TYPES = ("routine", "safety", "urgency", "distress", "traffic", "radio_check")
DIRECTIONS = ("incoming", "outgoing")
INCIDENT_SEVERITIES = ("low", "medium", "high", "critical")

VOYAGE_TYPE_LABELS = {
    "transit": "Transit",
    "towing": "Towing",
    "cargo": "Cargo",
    "fishing": "Fishing",
    "charter": "Charter",
    "training": "Training",
    "other": "Other",
}


class CrewMember(BaseModel):
    name: str
    role: Optional[str] = None


class WeatherConditions(BaseModel):
    wind_speed: Optional[str] = None
    wind_direction: Optional[str] = None
    visibility: Optional[str] = None
    sea_state: Optional[str] = None
    temperature: Optional[str] = None
    precipitation: Optional[str] = None


class ActivityEntry(BaseModel):
    timestamp: datetime
    type: str
    description: str
    location: Optional[str] = None


class IncidentReport(BaseModel):
    timestamp: datetime
    type: str
    severity: str = "low"
    description: str
    resolution: Optional[str] = None
    reported_by: Optional[str] = None

    @field_validator("severity")
    @classmethod
    def validate_severity(cls, v):
        return validate_choice(v, INCIDENT_SEVERITIES, "severity")


class _VoyageFields(BaseModel):
    voyage_type: Optional[str] = None
    arrival_datetime: Optional[datetime] = None
    master_signature: Optional[str] = None
    crew_members: Optional[list[CrewMember]] = None
    barge_name: Optional[str] = None
    cargo_description: Optional[str] = None
    cargo_weight: Optional[float] = None
    cargo_weight_unit: Optional[str] = None
    engine_hours_start: Optional[float] = None
    engine_hours_end: Optional[float] = None
    fuel_start: Optional[float] = None
    fuel_end: Optional[float] = None
    fuel_unit: Optional[str] = None
    weather_conditions: Optional[WeatherConditions] = None
    notes: Optional[str] = None

    @field_validator("voyage_type")
    @classmethod
    def validate_voyage_type(cls, v):
        return validate_choice(v, VOYAGE_TYPES, "voyage_type")

    @field_validator("cargo_weight", "engine_hours_start", "engine_hours_end", "fuel_start", "fuel_end")
    @classmethod
    def validate_amounts(cls, v, info):
        return validate_non_negative(v, info.field_name)


class VoyageCreate(_VoyageFields):
    vessel_id: int
    voyage_number: str
    voyage_status: str = "planned"
    departure_datetime: datetime
    origin_location: str
    destination_location: str
    master_name: str
    crew_members: list[CrewMember] = []
    fuel_unit: str = "litres"

    @field_validator("voyage_number", "origin_location", "destination_location", "master_name")
    @classmethod
    def validate_required(cls, v, info):
        v = clean_text(v, 255)
        if not v:
            raise ValueError(f"{info.field_name} is required")
        return v

    @field_validator("voyage_status")
    @classmethod
    def validate_status(cls, v):
        return validate_choice(v, VOYAGE_STATUSES, "voyage_status")

    @model_validator(mode="after")
    def validate_times(self):
        if self.arrival_datetime and self.arrival_datetime < self.departure_datetime:
            raise ValueError("arrival_datetime cannot be before departure_datetime")
        return self


class VoyageUpdate(_VoyageFields):
    voyage_number: Optional[str] = None
    voyage_status: Optional[str] = None
    departure_datetime: Optional[datetime] = None
    origin_location: Optional[str] = None
    destination_location: Optional[str] = None
    master_name: Optional[str] = None

    @field_validator("voyage_status")
    @classmethod
    def validate_status(cls, v):
        return validate_choice(v, VOYAGE_STATUSES, "voyage_status")


class CommunicationCreate(BaseModel):
    communication_time: datetime
    channel: Optional[str] = None
    contact_station: Optional[str] = None
    call_type: str = "routine"
    direction: str = "outgoing"
    message_summary: Optional[str] = None

    @field_validator("call_type")
    @classmethod
    def validate_call_type(cls, v):
        return validate_choice(v, CALL_TYPES, "call_type")

    @field_validator("direction")
    @classmethod
    def validate_direction(cls, v):
        return validate_choice(v, DIRECTIONS, "direction")


class CommunicationResponse(BaseModel):
    id: int
    voyage_id: int
    communication_time: datetime
    channel: Optional[str]
    contact_station: Optional[str]
    call_type: Optional[str]
    direction: Optional[str]
    message_summary: Optional[str]
    logged_by: Optional[int]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class VoyageConfirm(BaseModel):
    """Master's certification"""

    master_name: Optional[str] = None
    master_signature: Optional[str] = None
    arrival_datetime: Optional[datetime] = None


class VoyageResponse(BaseModel):
    id: int
    vessel_id: int
    vessel_name: Optional[str] = None
    voyage_number: str
    voyage_type: Optional[str]
    voyage_status: str
    departure_datetime: datetime
    arrival_datetime: Optional[datetime]
    origin_location: str
    destination_location: str
    master_name: str
    master_signature: Optional[str]
    crew_members: list[dict[str, Any]]
    barge_name: Optional[str]
    cargo_description: Optional[str]
    cargo_weight: Optional[float]
    cargo_weight_unit: Optional[str]
    engine_hours_start: Optional[float]
    engine_hours_end: Optional[float]
    fuel_start: Optional[float]
    fuel_end: Optional[float]
    fuel_unit: Optional[str]
    weather_conditions: Optional[dict[str, Any]]
    activity_log: list[dict[str, Any]]
    has_incidents: bool
    incidents: list[dict[str, Any]]
    notes: Optional[str]
    confirmed_at: Optional[datetime]
    entered_by: Optional[int]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class VoyageSummary(BaseModel):
    voyage_id: int
    voyage_number: str
    vessel_name: Optional[str]
    voyage_status: str
    duration_minutes: Optional[int]
    duration_display: Optional[str]
    engine_hours_used: Optional[float]
    fuel_consumed: Optional[float]
    fuel_unit: Optional[str]
    activity_count: int
    incident_count: int
    communication_count: int
    is_confirmed: bool
