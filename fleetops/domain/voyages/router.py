"""Voyage log router - FastAPI endpoints for vessel voyages"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import (
    ActivityEntry,
    CommunicationCreate,
    CommunicationResponse,
    IncidentReport,
    VoyageConfirm,
    VoyageCreate,
    VoyageResponse,
    VoyageSummary,
    VoyageUpdate,
)
from .service import VoyageService, voyage_response

router = APIRouter(prefix="/voyages", tags=["Voyage Logs"])


def get_voyage_service(db: Session = Depends(get_db)) -> VoyageService:
    """Dependency injection for VoyageService"""
    return VoyageService(db)


@router.get("", response_model=list[VoyageResponse])
async def list_voyages(
    vessel_id: Optional[int] = Query(None),
    status: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    service: VoyageService = Depends(get_voyage_service),
):
    return service.list_voyages(current_user, vessel_id, status)


@router.get("/{voyage_id}", response_model=VoyageResponse)
async def get_voyage(
    voyage_id: int,
    current_user: User = Depends(get_current_user),
    service: VoyageService = Depends(get_voyage_service),
):
    return voyage_response(service.get_voyage(voyage_id, current_user))


@router.post("", response_model=VoyageResponse, status_code=201)
async def create_voyage(
    data: VoyageCreate,
    current_user: User = Depends(get_current_user),
    service: VoyageService = Depends(get_voyage_service),
):
    return service.create_voyage(data, current_user)


@router.patch("/{voyage_id}", response_model=VoyageResponse)
async def update_voyage(
    voyage_id: int,
    data: VoyageUpdate,
    current_user: User = Depends(get_current_user),
    service: VoyageService = Depends(get_voyage_service),
):
    return service.update_voyage(voyage_id, data, current_user)


@router.post("/{voyage_id}/activities", response_model=VoyageResponse)
async def add_activity(
    voyage_id: int,
    entry: ActivityEntry,
    current_user: User = Depends(get_current_user),
    service: VoyageService = Depends(get_voyage_service),
):
    return service.add_activity(voyage_id, entry, current_user)


@router.post("/{voyage_id}/incidents", response_model=VoyageResponse)
async def report_incident(
    voyage_id: int,
    incident: IncidentReport,
    current_user: User = Depends(get_current_user),
    service: VoyageService = Depends(get_voyage_service),
):
    return service.report_incident(voyage_id, incident, current_user)


@router.get("/{voyage_id}/communications", response_model=list[CommunicationResponse])
async def list_communications(
    voyage_id: int,
    current_user: User = Depends(get_current_user),
    service: VoyageService = Depends(get_voyage_service),
):
    return service.list_communications(voyage_id, current_user)


@router.post("/{voyage_id}/communications", response_model=CommunicationResponse, status_code=201)
async def add_communication(
    voyage_id: int,
    data: CommunicationCreate,
    current_user: User = Depends(get_current_user),
    service: VoyageService = Depends(get_voyage_service),
):
    """Log a radio call made or received during the voyage"""
    return service.add_communication(voyage_id, data, current_user)


@router.post("/{voyage_id}/confirm", response_model=VoyageResponse)
async def confirm_voyage(
    voyage_id: int,
    data: VoyageConfirm,
    current_user: User = Depends(get_current_user),
    service: VoyageService = Depends(get_voyage_service),
):
    """Master's certification; completes the voyage"""
    return service.confirm_voyage(voyage_id, data, current_user)


@router.get("/{voyage_id}/summary", response_model=VoyageSummary)
async def get_summary(
    voyage_id: int,
    current_user: User = Depends(get_current_user),
    service: VoyageService = Depends(get_voyage_service),
):
    return service.get_summary(voyage_id, current_user)


@router.get("/{voyage_id}/pdf")
async def download_voyage_pdf(
    voyage_id: int,
    current_user: User = Depends(get_current_user),
    service: VoyageService = Depends(get_voyage_service),
):
    """Download the voyage log report"""
    pdf_bytes, filename = service.generate_pdf(voyage_id, current_user)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
