"""Team service - members, departments and role assignments"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Department, RoleAuditLog, TeamMember, Tool, User, UserRole
from ...models_work_order import WorkOrder
from ...permissions import ROLE_HIERARCHY, can_assign_role, effective_permissions, highest_role
from .repository import TeamRepository
from .schemas import (
    PREDEFINED_DEPARTMENTS,
    DepartmentCreate,
    DepartmentResponse,
    DepartmentUpdate,
    TeamMemberCreate,
    TeamMemberUpdate,
    UserRolesResponse,
)

logger = logging.getLogger(__name__)


def department_response(department: Department, member_count: int = 0) -> DepartmentResponse:
    return DepartmentResponse(
        id=department.id,
        name=department.name,
        description=department.description,
        is_custom=bool(department.is_custom),
        member_count=member_count,
        created_at=department.created_at,
    )


class TeamService:
    """Service layer for team business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = TeamRepository()

    # Departments

    def list_departments(self, user: User) -> list[DepartmentResponse]:
        return [department_response(d, count) for d, count in self.repo.get_departments_with_counts(self.db, user.shop_id)]

    def list_predefined_departments(self, user: User) -> list[dict]:
        """Catalogue entries, flagged when the shop already has them"""
        existing = {d.name.lower() for d, _ in self.repo.get_departments_with_counts(self.db, user.shop_id)}
        return [{**entry, "added": entry["name"].lower() in existing} for entry in PREDEFINED_DEPARTMENTS]

    def get_department(self, department_id: int, user: User) -> Department:
        department = self.repo.get_department(self.db, department_id, user.shop_id)
        if not department:
            raise HTTPException(status_code=404, detail="Department not found")
        return department

    def _check_department_name(self, name: str, user: User, exclude_id: Optional[int] = None):
        existing = self.repo.get_department_by_name(self.db, name, user.shop_id)
        if existing and existing.id != exclude_id:
            raise HTTPException(status_code=409, detail=f"Department '{name}' already exists")

    def create_department(self, data: DepartmentCreate, user: User) -> DepartmentResponse:
        self._check_department_name(data.name, user)
        predefined = {entry["name"].lower(): entry for entry in PREDEFINED_DEPARTMENTS}
        catalogue_entry = predefined.get(data.name.lower())
        department = Department(
            shop_id=user.shop_id,
            name=catalogue_entry["name"] if catalogue_entry else data.name,
            description=data.description or (catalogue_entry["description"] if catalogue_entry else None),
            is_custom=catalogue_entry is None,
        )
        department = self.repo.save(self.db, department)
        logger.info(f"✅ Department '{department.name}' created for shop {user.shop_id}")
        return department_response(department)

    def update_department(self, department_id: int, data: DepartmentUpdate, user: User) -> DepartmentResponse:
        department = self.get_department(department_id, user)
        updates = data.model_dump(exclude_unset=True)
        if updates.get("name"):
            self._check_department_name(updates["name"], user, exclude_id=department.id)
        elif "name" in updates:
            raise HTTPException(status_code=400, detail="Department name is required")
        for key, value in updates.items():
            setattr(department, key, value)
        department = self.repo.save(self.db, department)
        return department_response(department, self.repo.count_department_members(self.db, department.id))

    def delete_department(self, department_id: int, user: User) -> dict:
        department = self.get_department(department_id, user)
        detached = 0
        for member in list(department.members):
            member.department_id = None
            detached += 1
        self.repo.delete(self.db, department)
        logger.info(f"🗑️ Department {department_id} deleted, {detached} member(s) detached")
        return {"message": "Department deleted", "members_detached": detached}

    def _members_for(self, member_ids: list[int], user: User) -> list[TeamMember]:
        members = self.repo.get_members_by_ids(self.db, member_ids, user.shop_id)
        missing = set(member_ids) - {m.id for m in members}
        if missing:
            raise HTTPException(status_code=404, detail=f"Team members not found: {sorted(missing)}")
        return members

    def assign_members(self, department_id: int, member_ids: list[int], user: User) -> DepartmentResponse:
        department = self.get_department(department_id, user)
        for member in self._members_for(member_ids, user):
            member.department_id = department.id
        self.db.commit()
        return department_response(department, self.repo.count_department_members(self.db, department.id))

    def unassign_members(self, department_id: int, member_ids: list[int], user: User) -> DepartmentResponse:
        department = self.get_department(department_id, user)
        for member in self._members_for(member_ids, user):
            if member.department_id == department.id:
                member.department_id = None
        self.db.commit()
        return department_response(department, self.repo.count_department_members(self.db, department.id))

    # Members

    def list_members(
        self, user: User, search: Optional[str] = None, status: Optional[str] = None, department_id: Optional[int] = None
    ) -> list[TeamMember]:
        return self.repo.search_members(self.db, user.shop_id, search, status, department_id)

    def get_member(self, member_id: int, user: User) -> TeamMember:
        member = self.repo.get_member(self.db, member_id, user.shop_id)
        if not member:
            raise HTTPException(status_code=404, detail="Team member not found")
        return member

    def _check_member_links(self, updates: dict, user: User, exclude_id: Optional[int] = None):
        if updates.get("email"):
            existing = self.repo.get_member_by_email(self.db, updates["email"], user.shop_id)
            if existing and existing.id != exclude_id:
                raise HTTPException(status_code=409, detail="A team member with this email already exists")
        if updates.get("department_id"):
            self.get_department(updates["department_id"], user)
        if updates.get("user_id") and not self.repo.get_shop_user(self.db, updates["user_id"], user.shop_id):
            raise HTTPException(status_code=404, detail="User not found")

    def create_member(self, data: TeamMemberCreate, user: User) -> TeamMember:
        values = data.model_dump()
        self._check_member_links(values, user)
        member = self.repo.save(self.db, TeamMember(shop_id=user.shop_id, **values))
        logger.info(f"✅ Team member {member.id} ({member.full_name}) created for shop {user.shop_id}")
        return member

    def update_member(self, member_id: int, data: TeamMemberUpdate, user: User) -> TeamMember:
        member = self.get_member(member_id, user)
        updates = data.model_dump(exclude_unset=True)
        if "email" in updates and not updates["email"]:
            raise HTTPException(status_code=400, detail="Email is required")
        self._check_member_links(updates, user, exclude_id=member.id)
        for key, value in updates.items():
            setattr(member, key, value)
        return self.repo.save(self.db, member)

    def delete_member(self, member_id: int, user: User) -> dict:
        member = self.get_member(member_id, user)
        holding = self.db.query(Tool).filter(Tool.checked_out_to == member.id).count()
        if holding:
            raise HTTPException(
                status_code=409, detail=f"Team member still has {holding} tool(s) checked out"
            )
        self.db.query(WorkOrder).filter(WorkOrder.technician_id == member.id).update(
            {WorkOrder.technician_id: None}, synchronize_session=False
        )
        self.repo.delete(self.db, member)
        logger.info(f"🗑️ Team member {member_id} deleted for shop {user.shop_id}")
        return {"message": "Team member deleted"}

    # Roles

    def list_roles(self) -> list:
        return self.repo.get_roles(self.db)

    def _shop_user(self, user_id: int, user: User) -> User:
        target = self.repo.get_shop_user(self.db, user_id, user.shop_id)
        if not target:
            raise HTTPException(status_code=404, detail="User not found")
        return target

    def get_user_roles(self, user_id: int, user: User) -> UserRolesResponse:
        target = self._shop_user(user_id, user)
        roles = target.role_names
        return UserRolesResponse(
            user_id=target.id,
            roles=roles,
            highest_role=highest_role(roles),
            permissions=effective_permissions(roles),
        )

    def _authorize_role_change(self, role_name: str, user: User):
        if role_name not in ROLE_HIERARCHY:
            raise HTTPException(status_code=400, detail=f"Unknown role: {role_name}")
        if not can_assign_role(user.role_names, role_name):
            logger.warning(f"🚫 User {user.id} ({user.role_names}) tried to change role '{role_name}'")
            raise HTTPException(status_code=403, detail=f"You cannot assign or remove the '{role_name}' role")
        role = self.repo.get_role_by_name(self.db, role_name)
        if not role:
            raise HTTPException(status_code=404, detail=f"Role '{role_name}' is not set up")
        return role

    def _audit(self, user: User, target: User, role_name: str, action: str):
        self.db.add(
            RoleAuditLog(
                shop_id=user.shop_id,
                target_user_id=target.id,
                role_name=role_name,
                action=action,
                performed_by=user.id,
            )
        )

    def assign_role(self, user_id: int, role_name: str, user: User) -> UserRolesResponse:
        target = self._shop_user(user_id, user)
        role = self._authorize_role_change(role_name, user)
        if self.repo.get_user_role(self.db, target.id, role.id):
            raise HTTPException(status_code=409, detail=f"User already has the '{role_name}' role")

        self.db.add(UserRole(user_id=target.id, role_id=role.id, assigned_by=user.id))
        self._audit(user, target, role_name, "added")
        self.db.commit()
        self.db.expire(target)
        logger.info(f"🔑 Role '{role_name}' assigned to user {target.id} by {user.id}")
        return self.get_user_roles(target.id, user)

    def remove_role(self, user_id: int, role_name: str, user: User) -> UserRolesResponse:
        target = self._shop_user(user_id, user)
        role = self._authorize_role_change(role_name, user)
        user_role = self.repo.get_user_role(self.db, target.id, role.id)
        if not user_role:
            raise HTTPException(status_code=404, detail=f"User does not have the '{role_name}' role")

        self.db.delete(user_role)
        self._audit(user, target, role_name, "removed")
        self.db.commit()
        self.db.expire(target)
        logger.info(f"🔑 Role '{role_name}' removed from user {target.id} by {user.id}")
        return self.get_user_roles(target.id, user)

    def get_audit_log(self, user: User, user_id: Optional[int] = None, limit: int = 100) -> list[RoleAuditLog]:
        return self.repo.get_audit_log(self.db, user.shop_id, user_id, limit)
