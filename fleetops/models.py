import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_public_id():
    """Generate a unique public ID for secure public access"""
    return str(uuid.uuid4())


class Shop(Base):
    """A tenant: every operational record belongs to exactly one shop"""

    __tablename__ = "shops"

    id = Column(Integer, primary_key=True, index=True)
    public_id = Column(String(36), unique=True, index=True, default=generate_public_id)
    name = Column(String(255), nullable=False)
    timezone = Column(String(64), default="UTC")
    default_tax_rate = Column(Float, nullable=True)  # Falls back to DEFAULT_TAX_RATE when null
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    users = relationship("User", back_populates="shop")
    departments = relationship("Department", back_populates="shop")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    shop_id = Column(Integer, ForeignKey("shops.id"), nullable=False, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    last_login_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    shop = relationship("Shop", back_populates="users")
    user_roles = relationship(
        "UserRole", back_populates="user", foreign_keys="UserRole.user_id", cascade="all, delete-orphan"
    )

    @property
    def display_name(self) -> str:
        full_name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return full_name or self.email.split("@")[0]

    @property
    def role_names(self) -> list[str]:
        return [ur.role.name for ur in self.user_roles if ur.role]


class Role(Base):
    """System role catalogue (owner, admin, captain, technician, ...)"""

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), unique=True, nullable=False, index=True)
    display_name = Column(String(100), nullable=True)
    description = Column(String(500), nullable=True)
    priority = Column(Integer, default=0)  # Hierarchy level, higher wins
    permissions = Column(JSON, nullable=True)
    is_default = Column(Boolean, default=True)
    is_custom = Column(Boolean, default=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class UserRole(Base):
    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role_id", name="uq_user_role"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False)
    assigned_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="user_roles", foreign_keys=[user_id])
    role = relationship("Role")


class RoleAuditLog(Base):
    """Audit trail for role assignments and removals"""

    __tablename__ = "role_audit_log"

    id = Column(Integer, primary_key=True, index=True)
    shop_id = Column(Integer, ForeignKey("shops.id"), nullable=False, index=True)
    target_user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    role_name = Column(String(50), nullable=False)
    action = Column(String(20), nullable=False)  # added, removed, modified
    performed_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())


class Department(Base):
    __tablename__ = "departments"
    __table_args__ = (UniqueConstraint("shop_id", "name", name="uq_department_shop_name"),)

    id = Column(Integer, primary_key=True, index=True)
    shop_id = Column(Integer, ForeignKey("shops.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    is_custom = Column(Boolean, default=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    shop = relationship("Shop", back_populates="departments")
    members = relationship("TeamMember", back_populates="department")


class TeamMember(Base):
    __tablename__ = "team_members"
    __table_args__ = (UniqueConstraint("shop_id", "email", name="uq_team_member_shop_email"),)

    id = Column(Integer, primary_key=True, index=True)
    shop_id = Column(Integer, ForeignKey("shops.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)  # Optional login link
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    employee_id = Column(String(50), nullable=True)
    job_title = Column(String(100), nullable=True)
    employment_type = Column(String(50), nullable=True)  # full_time, part_time, contractor, seasonal
    status = Column(String(20), default="active")  # active, inactive, on_leave
    pay_type = Column(String(20), nullable=True)  # hourly, salary
    pay_rate = Column(Float, nullable=True)
    start_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    department = relationship("Department", back_populates="members")

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip() or self.email


class Equipment(Base):
    """Equipment asset: vessel, vehicle, machine or a component such as an engine"""

    __tablename__ = "equipment_assets"
    __table_args__ = (UniqueConstraint("shop_id", "asset_number", name="uq_equipment_asset_number"),)

    id = Column(Integer, primary_key=True, index=True)
    shop_id = Column(Integer, ForeignKey("shops.id"), nullable=False, index=True)
    parent_id = Column(Integer, ForeignKey("equipment_assets.id"), nullable=True)
    name = Column(String(255), nullable=False)
    asset_number = Column(String(50), nullable=True)
    equipment_type = Column(String(50), nullable=True)  # vessel, vehicle, engine, generator, ...
    category = Column(String(100), nullable=True)
    manufacturer = Column(String(255), nullable=True)
    model = Column(String(255), nullable=True)
    serial_number = Column(String(255), nullable=True)
    year = Column(Integer, nullable=True)
    status = Column(String(30), default="operational")  # operational, maintenance, out_of_service, retired
    location = Column(String(255), nullable=True)
    current_hours = Column(Float, nullable=True)
    current_mileage = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    archived_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    parent = relationship("Equipment", remote_side=[id], back_populates="children")
    children = relationship("Equipment", back_populates="parent")
    maintenance_intervals = relationship("MaintenanceInterval", back_populates="equipment")


class Tool(Base):
    __tablename__ = "tools"
    __table_args__ = (UniqueConstraint("shop_id", "tool_number", name="uq_tool_number"),)

    id = Column(Integer, primary_key=True, index=True)
    shop_id = Column(Integer, ForeignKey("shops.id"), nullable=False, index=True)
    tool_number = Column(String(50), nullable=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=True)
    manufacturer = Column(String(255), nullable=True)
    model = Column(String(255), nullable=True)
    serial_number = Column(String(255), nullable=True)
    purchase_date = Column(Date, nullable=True)
    purchase_cost = Column(Float, nullable=True)
    vendor = Column(String(255), nullable=True)
    status = Column(String(30), default="available")  # available, checked_out, in_repair, retired
    condition = Column(String(30), default="good")  # new, good, fair, poor, damaged
    location = Column(String(255), nullable=True)
    checked_out_to = Column(Integer, ForeignKey("team_members.id"), nullable=True)
    checked_out_at = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class InventoryItem(Base):
    __tablename__ = "inventory_items"
    __table_args__ = (UniqueConstraint("shop_id", "sku", name="uq_inventory_sku"),)

    id = Column(Integer, primary_key=True, index=True)
    shop_id = Column(Integer, ForeignKey("shops.id"), nullable=False, index=True)
    sku = Column(String(100), nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=False)
    supplier = Column(String(255), nullable=False)
    unit_price = Column(Float, nullable=False)
    quantity = Column(Integer, default=0, nullable=False)
    reorder_point = Column(Integer, default=0, nullable=False)
    reorder_quantity = Column(Integer, default=0, nullable=False)
    location = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    @property
    def status(self) -> str:
        if self.quantity <= 0:
            return "out_of_stock"
        if self.quantity <= self.reorder_point:
            return "low_stock"
        return "in_stock"
