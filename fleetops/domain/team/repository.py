"""Team repository - Database operations for members, departments and roles"""

from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from ...models import Department, Role, RoleAuditLog, TeamMember, User, UserRole


class TeamRepository:
    # Departments

    @staticmethod
    def get_departments_with_counts(db: Session, shop_id: int) -> list[tuple[Department, int]]:
        return (
            db.query(Department, func.count(TeamMember.id))
            .outerjoin(TeamMember, TeamMember.department_id == Department.id)
            .filter(Department.shop_id == shop_id)
            .group_by(Department.id)
            .order_by(Department.name)
            .all()
        )

    @staticmethod
    def get_department(db: Session, department_id: int, shop_id: int) -> Optional[Department]:
        return (
            db.query(Department)
            .filter(Department.id == department_id, Department.shop_id == shop_id)
            .first()
        )

    @staticmethod
    def get_department_by_name(db: Session, name: str, shop_id: int) -> Optional[Department]:
        return (
            db.query(Department)
            .filter(func.lower(Department.name) == name.lower(), Department.shop_id == shop_id)
            .first()
        )

    @staticmethod
    def count_department_members(db: Session, department_id: int) -> int:
        return db.query(TeamMember).filter(TeamMember.department_id == department_id).count()

    # Members

    @staticmethod
    def search_members(
        db: Session,
        shop_id: int,
        search: Optional[str] = None,
        status: Optional[str] = None,
        department_id: Optional[int] = None,
    ) -> list[TeamMember]:
        query = db.query(TeamMember).filter(TeamMember.shop_id == shop_id)
        if status:
            query = query.filter(TeamMember.status == status)
        if department_id:
            query = query.filter(TeamMember.department_id == department_id)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    TeamMember.first_name.ilike(pattern),
                    TeamMember.last_name.ilike(pattern),
                    TeamMember.email.ilike(pattern),
                    TeamMember.job_title.ilike(pattern),
                )
            )
        return query.order_by(TeamMember.last_name, TeamMember.first_name, TeamMember.id).all()

    @staticmethod
    def get_member(db: Session, member_id: int, shop_id: int) -> Optional[TeamMember]:
        return db.query(TeamMember).filter(TeamMember.id == member_id, TeamMember.shop_id == shop_id).first()

    @staticmethod
    def get_member_by_email(db: Session, email: str, shop_id: int) -> Optional[TeamMember]:
        return db.query(TeamMember).filter(TeamMember.email == email, TeamMember.shop_id == shop_id).first()

    @staticmethod
    def get_members_by_ids(db: Session, member_ids: list[int], shop_id: int) -> list[TeamMember]:
        return (
            db.query(TeamMember)
            .filter(TeamMember.id.in_(member_ids), TeamMember.shop_id == shop_id)
            .all()
        )

    # Roles

    @staticmethod
    def get_roles(db: Session) -> list[Role]:
        return db.query(Role).order_by(Role.priority.desc(), Role.name).all()

    @staticmethod
    def get_role_by_name(db: Session, name: str) -> Optional[Role]:
        return db.query(Role).filter(Role.name == name).first()

    @staticmethod
    def get_shop_user(db: Session, user_id: int, shop_id: int) -> Optional[User]:
        return (
            db.query(User)
            .options(joinedload(User.user_roles).joinedload(UserRole.role))
            .filter(User.id == user_id, User.shop_id == shop_id)
            .first()
        )

    @staticmethod
    def get_user_role(db: Session, user_id: int, role_id: int) -> Optional[UserRole]:
        return db.query(UserRole).filter(UserRole.user_id == user_id, UserRole.role_id == role_id).first()

    @staticmethod
    def get_audit_log(db: Session, shop_id: int, user_id: Optional[int] = None, limit: int = 100) -> list[RoleAuditLog]:
        query = db.query(RoleAuditLog).filter(RoleAuditLog.shop_id == shop_id)
        if user_id:
            query = query.filter(RoleAuditLog.target_user_id == user_id)
        return query.order_by(RoleAuditLog.created_at.desc(), RoleAuditLog.id.desc()).limit(limit).all()

    @staticmethod
    def save(db: Session, obj):
        db.add(obj)
        db.commit()
        db.refresh(obj)
        return obj

    @staticmethod
    def delete(db: Session, obj) -> None:
        db.delete(obj)
        db.commit()
