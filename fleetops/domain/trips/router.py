"""Trip log router"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import TripLogCreate, TripLogResponse
from .service import TripService

router = APIRouter(prefix="/trips", tags=["Trip Logs"])


def get_trip_service(db: Session = Depends(get_db)) -> TripService:
    """Dependency injection for TripService"""
    return TripService(db)


@router.get("", response_model=list[TripLogResponse])
async def list_recent_trips(
    limit: int = Query(10, ge=1, le=100),
    equipment_id: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    service: TripService = Depends(get_trip_service),
):
    """Most recent trips, newest trip date first"""
    return service.list_recent(current_user, limit, equipment_id)


@router.post("", response_model=TripLogResponse, status_code=201)
async def create_trip(
    data: TripLogCreate,
    current_user: User = Depends(get_current_user),
    service: TripService = Depends(get_trip_service),
):
    return service.create_trip(data, current_user)


@router.delete("/{trip_id}")
async def delete_trip(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    service: TripService = Depends(get_trip_service),
):
    return service.delete_trip(trip_id, current_user)
