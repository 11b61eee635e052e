"""Voyage log service - vessel trips, communications, certification and reports"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Equipment, User
from ...models_voyage import VoyageCommunicationLog, VoyageLog
from .repository import VoyageRepository
from .schemas import (
    ActivityEntry,
    CommunicationCreate,
    IncidentReport,
    VoyageConfirm,
    VoyageCreate,
    VoyageResponse,
    VoyageSummary,
    VoyageUpdate,
)

logger = logging.getLogger(__name__)


def voyage_response(voyage: VoyageLog) -> VoyageResponse:
    return VoyageResponse(
        id=voyage.id,
        vessel_id=voyage.vessel_id,
        vessel_name=voyage.vessel.name if voyage.vessel else None,
        voyage_number=voyage.voyage_number,
        voyage_type=voyage.voyage_type,
        voyage_status=voyage.voyage_status,
        departure_datetime=voyage.departure_datetime,
        arrival_datetime=voyage.arrival_datetime,
        origin_location=voyage.origin_location,
        destination_location=voyage.destination_location,
        master_name=voyage.master_name,
        master_signature=voyage.master_signature,
        crew_members=voyage.crew_members or [],
        barge_name=voyage.barge_name,
        cargo_description=voyage.cargo_description,
        cargo_weight=voyage.cargo_weight,
        cargo_weight_unit=voyage.cargo_weight_unit,
        engine_hours_start=voyage.engine_hours_start,
        engine_hours_end=voyage.engine_hours_end,
        fuel_start=voyage.fuel_start,
        fuel_end=voyage.fuel_end,
        fuel_unit=voyage.fuel_unit,
        weather_conditions=voyage.weather_conditions,
        activity_log=voyage.activity_log or [],
        has_incidents=bool(voyage.has_incidents),
        incidents=voyage.incidents or [],
        notes=voyage.notes,
        confirmed_at=voyage.confirmed_at,
        entered_by=voyage.entered_by,
        created_at=voyage.created_at,
        updated_at=voyage.updated_at,
    )


def format_duration(minutes: Optional[int]) -> Optional[str]:
    if minutes is None:
        return None
    return f"{minutes // 60}h {minutes % 60}m"


def build_summary(voyage: VoyageLog) -> VoyageSummary:
    duration = None
    if voyage.arrival_datetime and voyage.departure_datetime:
        duration = int((voyage.arrival_datetime - voyage.departure_datetime).total_seconds() // 60)

    engine_hours_used = None
    if voyage.engine_hours_start is not None and voyage.engine_hours_end is not None:
        engine_hours_used = round(voyage.engine_hours_end - voyage.engine_hours_start, 2)

    fuel_consumed = None
    if voyage.fuel_start is not None and voyage.fuel_end is not None:
        fuel_consumed = round(voyage.fuel_start - voyage.fuel_end, 2)

    return VoyageSummary(
        voyage_id=voyage.id,
        voyage_number=voyage.voyage_number,
        vessel_name=voyage.vessel.name if voyage.vessel else None,
        voyage_status=voyage.voyage_status,
        duration_minutes=duration,
        duration_display=format_duration(duration),
        engine_hours_used=engine_hours_used,
        fuel_consumed=fuel_consumed,
        fuel_unit=voyage.fuel_unit,
        activity_count=len(voyage.activity_log or []),
        incident_count=len(voyage.incidents or []),
        communication_count=len(voyage.communications),
        is_confirmed=voyage.confirmed_at is not None,
    )


class VoyageService:
    """Service layer for voyage log business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = VoyageRepository()

    def get_voyage(self, voyage_id: int, user: User) -> VoyageLog:
        voyage = self.repo.get_by_id(self.db, voyage_id, user.shop_id)
        if not voyage:
            raise HTTPException(status_code=404, detail="Voyage log not found")
        return voyage

    def list_voyages(
        self, user: User, vessel_id: Optional[int] = None, status: Optional[str] = None
    ) -> list[VoyageResponse]:
        return [voyage_response(v) for v in self.repo.search_voyages(self.db, user.shop_id, vessel_id, status)]

    def _check_number(self, voyage_number: str, user: User, exclude_id: Optional[int] = None):
        existing = self.repo.get_by_number(self.db, voyage_number, user.shop_id)
        if existing and existing.id != exclude_id:
            raise HTTPException(status_code=409, detail=f"Voyage number {voyage_number} already exists")

    def create_voyage(self, data: VoyageCreate, user: User) -> VoyageResponse:
        vessel = (
            self.db.query(Equipment)
            .filter(Equipment.id == data.vessel_id, Equipment.shop_id == user.shop_id)
            .first()
        )
        if not vessel:
            raise HTTPException(status_code=404, detail="Vessel not found")
        self._check_number(data.voyage_number, user)

        voyage = VoyageLog(
            shop_id=user.shop_id,
            entered_by=user.id,
            activity_log=[],
            incidents=[],
            has_incidents=False,
            **data.model_dump(mode="json", exclude={"departure_datetime", "arrival_datetime"}),
            departure_datetime=data.departure_datetime,
            arrival_datetime=data.arrival_datetime,
        )
        voyage = self.repo.save(self.db, voyage)
        logger.info(f"⚓ Voyage {voyage.voyage_number} created for vessel {vessel.id}")
        return voyage_response(voyage)

    def update_voyage(self, voyage_id: int, data: VoyageUpdate, user: User) -> VoyageResponse:
        voyage = self.get_voyage(voyage_id, user)
        if voyage.confirmed_at:
            raise HTTPException(status_code=400, detail="Confirmed voyage logs cannot be edited")

        updates = data.model_dump(exclude_unset=True, mode="json")
        for required in ("voyage_number", "voyage_status", "departure_datetime", "origin_location", "destination_location", "master_name"):
            if required in updates and not updates[required]:
                raise HTTPException(status_code=400, detail=f"{required} is required")
        # Keep real datetimes on the datetime columns
        for key in ("departure_datetime", "arrival_datetime"):
            if key in updates:
                updates[key] = getattr(data, key)

        if "voyage_number" in updates:
            self._check_number(updates["voyage_number"], user, exclude_id=voyage.id)

        departure = updates.get("departure_datetime", voyage.departure_datetime)
        arrival = updates.get("arrival_datetime", voyage.arrival_datetime)
        if arrival and departure and arrival < departure:
            raise HTTPException(status_code=400, detail="Arrival cannot be before departure")

        for key, value in updates.items():
            setattr(voyage, key, value)
        return voyage_response(self.repo.save(self.db, voyage))

    def add_activity(self, voyage_id: int, entry: ActivityEntry, user: User) -> VoyageResponse:
        voyage = self.get_voyage(voyage_id, user)
        # JSON columns only notice reassignment
        voyage.activity_log = [*(voyage.activity_log or []), entry.model_dump(mode="json")]
        return voyage_response(self.repo.save(self.db, voyage))

    def report_incident(self, voyage_id: int, incident: IncidentReport, user: User) -> VoyageResponse:
        voyage = self.get_voyage(voyage_id, user)
        record = incident.model_dump(mode="json")
        if not record.get("reported_by"):
            record["reported_by"] = user.display_name
        voyage.incidents = [*(voyage.incidents or []), record]
        voyage.has_incidents = True
        logger.warning(f"⚠️ Incident ({incident.severity}) reported on voyage {voyage.voyage_number}")
        return voyage_response(self.repo.save(self.db, voyage))

    def add_communication(self, voyage_id: int, data: CommunicationCreate, user: User) -> VoyageCommunicationLog:
        voyage = self.get_voyage(voyage_id, user)
        return self.repo.add_communication(self.db, voyage, logged_by=user.id, **data.model_dump())

    def list_communications(self, voyage_id: int, user: User) -> list[VoyageCommunicationLog]:
        return self.get_voyage(voyage_id, user).communications

    def confirm_voyage(self, voyage_id: int, data: VoyageConfirm, user: User) -> VoyageResponse:
        """Master's certification: needs an arrival time and the master's name"""
        voyage = self.get_voyage(voyage_id, user)
        if voyage.confirmed_at:
            raise HTTPException(status_code=400, detail="Voyage log is already confirmed")
        if voyage.voyage_status == "cancelled":
            raise HTTPException(status_code=400, detail="Cancelled voyages cannot be confirmed")

        arrival = data.arrival_datetime or voyage.arrival_datetime
        master_name = (data.master_name or voyage.master_name or "").strip()
        if not arrival:
            raise HTTPException(status_code=400, detail="Arrival time is required to confirm a voyage")
        if not master_name:
            raise HTTPException(status_code=400, detail="Master name is required to confirm a voyage")
        if arrival < voyage.departure_datetime:
            raise HTTPException(status_code=400, detail="Arrival cannot be before departure")

        voyage.arrival_datetime = arrival
        voyage.master_name = master_name
        if data.master_signature:
            voyage.master_signature = data.master_signature
        voyage.voyage_status = "completed"
        voyage.confirmed_at = datetime.utcnow()
        voyage = self.repo.save(self.db, voyage)
        logger.info(f"✅ Voyage {voyage.voyage_number} confirmed by {master_name}")
        return voyage_response(voyage)

    def get_summary(self, voyage_id: int, user: User) -> VoyageSummary:
        return build_summary(self.get_voyage(voyage_id, user))

    def generate_pdf(self, voyage_id: int, user: User) -> tuple[bytes, str]:
        from ...services.voyage_pdf_generator import VoyagePDFGenerator

        voyage = self.get_voyage(voyage_id, user)
        entered_by = self.db.query(User).filter(User.id == voyage.entered_by).first() if voyage.entered_by else None
        generator = VoyagePDFGenerator(
            voyage, build_summary(voyage), entered_by.display_name if entered_by else None
        )
        return generator.generate(), f"voyage_log_{voyage.voyage_number}.pdf"
