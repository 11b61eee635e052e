"""Team router - FastAPI endpoints for members, departments and roles"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_permission
from ...database import get_db
from ...models import User
from ...permissions import CAN_ASSIGN_ROLES, CAN_MANAGE_USERS, CAN_VIEW_USERS
from .schemas import (
    DepartmentCreate,
    DepartmentMembers,
    DepartmentResponse,
    DepartmentUpdate,
    RoleAssignment,
    RoleAuditEntry,
    RoleResponse,
    TeamMemberCreate,
    TeamMemberResponse,
    TeamMemberUpdate,
    UserRolesResponse,
)
from .service import TeamService

router = APIRouter(prefix="/team", tags=["Team"])


def get_team_service(db: Session = Depends(get_db)) -> TeamService:
    """Dependency injection for TeamService"""
    return TeamService(db)


# Departments


@router.get("/departments", response_model=list[DepartmentResponse])
async def list_departments(
    current_user: User = Depends(require_permission(CAN_VIEW_USERS)),
    service: TeamService = Depends(get_team_service),
):
    return service.list_departments(current_user)


@router.get("/departments/predefined")
async def list_predefined_departments(
    current_user: User = Depends(require_permission(CAN_VIEW_USERS)),
    service: TeamService = Depends(get_team_service),
):
    return service.list_predefined_departments(current_user)


@router.post("/departments", response_model=DepartmentResponse, status_code=201)
async def create_department(
    data: DepartmentCreate,
    current_user: User = Depends(require_permission(CAN_MANAGE_USERS)),
    service: TeamService = Depends(get_team_service),
):
    return service.create_department(data, current_user)


@router.patch("/departments/{department_id}", response_model=DepartmentResponse)
async def update_department(
    department_id: int,
    data: DepartmentUpdate,
    current_user: User = Depends(require_permission(CAN_MANAGE_USERS)),
    service: TeamService = Depends(get_team_service),
):
    return service.update_department(department_id, data, current_user)


@router.delete("/departments/{department_id}")
async def delete_department(
    department_id: int,
    current_user: User = Depends(require_permission(CAN_MANAGE_USERS)),
    service: TeamService = Depends(get_team_service),
):
    """Delete a department; its members stay on the team without a department"""
    return service.delete_department(department_id, current_user)


@router.post("/departments/{department_id}/members", response_model=DepartmentResponse)
async def assign_department_members(
    department_id: int,
    data: DepartmentMembers,
    current_user: User = Depends(require_permission(CAN_MANAGE_USERS)),
    service: TeamService = Depends(get_team_service),
):
    return service.assign_members(department_id, data.member_ids, current_user)


@router.post("/departments/{department_id}/members/remove", response_model=DepartmentResponse)
async def unassign_department_members(
    department_id: int,
    data: DepartmentMembers,
    current_user: User = Depends(require_permission(CAN_MANAGE_USERS)),
    service: TeamService = Depends(get_team_service),
):
    return service.unassign_members(department_id, data.member_ids, current_user)


# Members


@router.get("/members", response_model=list[TeamMemberResponse])
async def list_members(
    search: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    department_id: Optional[int] = Query(None),
    current_user: User = Depends(require_permission(CAN_VIEW_USERS)),
    service: TeamService = Depends(get_team_service),
):
    return service.list_members(current_user, search, status, department_id)


@router.get("/members/{member_id}", response_model=TeamMemberResponse)
async def get_member(
    member_id: int,
    current_user: User = Depends(require_permission(CAN_VIEW_USERS)),
    service: TeamService = Depends(get_team_service),
):
    return service.get_member(member_id, current_user)


@router.post("/members", response_model=TeamMemberResponse, status_code=201)
async def create_member(
    data: TeamMemberCreate,
    current_user: User = Depends(require_permission(CAN_MANAGE_USERS)),
    service: TeamService = Depends(get_team_service),
):
    return service.create_member(data, current_user)


@router.patch("/members/{member_id}", response_model=TeamMemberResponse)
async def update_member(
    member_id: int,
    data: TeamMemberUpdate,
    current_user: User = Depends(require_permission(CAN_MANAGE_USERS)),
    service: TeamService = Depends(get_team_service),
):
    return service.update_member(member_id, data, current_user)


@router.delete("/members/{member_id}")
async def delete_member(
    member_id: int,
    current_user: User = Depends(require_permission(CAN_MANAGE_USERS)),
    service: TeamService = Depends(get_team_service),
):
    return service.delete_member(member_id, current_user)


# Roles


@router.get("/roles", response_model=list[RoleResponse])
async def list_roles(
    current_user: User = Depends(require_permission(CAN_VIEW_USERS)),
    service: TeamService = Depends(get_team_service),
):
    return service.list_roles()


@router.get("/roles/audit-log", response_model=list[RoleAuditEntry])
async def get_role_audit_log(
    user_id: Optional[int] = Query(None),
    limit: int = Query(100, ge=1, le=500),
    current_user: User = Depends(require_permission(CAN_ASSIGN_ROLES)),
    service: TeamService = Depends(get_team_service),
):
    return service.get_audit_log(current_user, user_id, limit)


@router.get("/users/{user_id}/roles", response_model=UserRolesResponse)
async def get_user_roles(
    user_id: int,
    current_user: User = Depends(require_permission(CAN_VIEW_USERS)),
    service: TeamService = Depends(get_team_service),
):
    return service.get_user_roles(user_id, current_user)


@router.post("/users/{user_id}/roles", response_model=UserRolesResponse)
async def assign_role(
    user_id: int,
    data: RoleAssignment,
    current_user: User = Depends(require_permission(CAN_ASSIGN_ROLES)),
    service: TeamService = Depends(get_team_service),
):
    return service.assign_role(user_id, data.role, current_user)


@router.delete("/users/{user_id}/roles/{role_name}", response_model=UserRolesResponse)
async def remove_role(
    user_id: int,
    role_name: str,
    current_user: User = Depends(require_permission(CAN_ASSIGN_ROLES)),
    service: TeamService = Depends(get_team_service),
):
    return service.remove_role(user_id, role_name, current_user)
