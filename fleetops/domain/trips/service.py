"""Trip log service"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Equipment, User
from ...models_maintenance import TripLog
from .repository import TripRepository
from .schemas import TripLogCreate, TripLogResponse

logger = logging.getLogger(__name__)


def trip_response(trip: TripLog) -> TripLogResponse:
    return TripLogResponse(
        id=trip.id,
        equipment_id=trip.equipment_id,
        equipment_name=trip.equipment.name if trip.equipment else None,
        trip_date=trip.trip_date,
        start_reading=trip.start_reading,
        end_reading=trip.end_reading,
        distance=trip.distance,
        reading_type=trip.reading_type,
        driver_name=trip.driver_name,
        purpose=trip.purpose,
        destination=trip.destination,
        notes=trip.notes,
        entered_by=trip.entered_by,
        created_at=trip.created_at,
    )


class TripService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = TripRepository()

    def list_recent(self, user: User, limit: int = 10, equipment_id: Optional[int] = None) -> list[TripLogResponse]:
        return [trip_response(t) for t in self.repo.get_recent(self.db, user.shop_id, limit, equipment_id)]

    def create_trip(self, data: TripLogCreate, user: User) -> TripLogResponse:
        equipment = (
            self.db.query(Equipment)
            .filter(Equipment.id == data.equipment_id, Equipment.shop_id == user.shop_id)
            .first()
        )
        if not equipment:
            raise HTTPException(status_code=404, detail="Equipment not found")
        if (
            data.start_reading is not None
            and data.end_reading is not None
            and data.end_reading < data.start_reading
        ):
            raise HTTPException(status_code=400, detail="End reading cannot be less than start reading")

        trip = self.repo.create(self.db, user.shop_id, entered_by=user.id, **data.model_dump())
        logger.info(f"🚚 Trip {trip.id} logged for equipment {equipment.id} (distance: {trip.distance})")
        return trip_response(trip)

    def delete_trip(self, trip_id: int, user: User) -> dict:
        trip = self.repo.get_by_id(self.db, trip_id, user.shop_id)
        if not trip:
            raise HTTPException(status_code=404, detail="Trip log not found")
        self.repo.delete(self.db, trip)
        return {"message": "Trip log deleted"}
