"""Tool router - FastAPI endpoints for shop tools"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_permission
from ...database import get_db
from ...models import User
from ...permissions import CAN_MANAGE_INVENTORY, CAN_VIEW_INVENTORY
from .schemas import ToolCheckin, ToolCheckout, ToolCreate, ToolResponse, ToolUpdate
from .service import ToolService

router = APIRouter(prefix="/tools", tags=["Tools"])


def get_tool_service(db: Session = Depends(get_db)) -> ToolService:
    """Dependency injection for ToolService"""
    return ToolService(db)


@router.get("", response_model=list[ToolResponse])
async def list_tools(
    search: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    current_user: User = Depends(require_permission(CAN_VIEW_INVENTORY)),
    service: ToolService = Depends(get_tool_service),
):
    return service.list_tools(current_user, search, status, category)


@router.get("/{tool_id}", response_model=ToolResponse)
async def get_tool(
    tool_id: int,
    current_user: User = Depends(require_permission(CAN_VIEW_INVENTORY)),
    service: ToolService = Depends(get_tool_service),
):
    return service.get_tool(tool_id, current_user)


@router.post("", response_model=ToolResponse, status_code=201)
async def create_tool(
    data: ToolCreate,
    current_user: User = Depends(require_permission(CAN_MANAGE_INVENTORY)),
    service: ToolService = Depends(get_tool_service),
):
    return service.create_tool(data, current_user)


@router.patch("/{tool_id}", response_model=ToolResponse)
async def update_tool(
    tool_id: int,
    data: ToolUpdate,
    current_user: User = Depends(require_permission(CAN_MANAGE_INVENTORY)),
    service: ToolService = Depends(get_tool_service),
):
    return service.update_tool(tool_id, data, current_user)


@router.delete("/{tool_id}")
async def delete_tool(
    tool_id: int,
    current_user: User = Depends(require_permission(CAN_MANAGE_INVENTORY)),
    service: ToolService = Depends(get_tool_service),
):
    return service.delete_tool(tool_id, current_user)


@router.post("/{tool_id}/checkout", response_model=ToolResponse)
async def check_out_tool(
    tool_id: int,
    data: ToolCheckout,
    current_user: User = Depends(require_permission(CAN_VIEW_INVENTORY)),
    service: ToolService = Depends(get_tool_service),
):
    """Check a tool out; only available tools can be checked out"""
    return service.check_out(tool_id, data, current_user)


@router.post("/{tool_id}/checkin", response_model=ToolResponse)
async def check_in_tool(
    tool_id: int,
    data: ToolCheckin,
    current_user: User = Depends(require_permission(CAN_VIEW_INVENTORY)),
    service: ToolService = Depends(get_tool_service),
):
    return service.check_in(tool_id, data, current_user)
