"""Team schemas - members, departments and role assignments"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import clean_text, validate_choice, validate_email, validate_non_negative, validate_phone

MEMBER_STATUSES = ("active", "inactive", "on_leave")
EMPLOYMENT_TYPES = ("full_time", "part_time", "contractor", "seasonal")
PAY_TYPES = ("hourly", "salary")

PREDEFINED_DEPARTMENTS = [
    {"name": "Service Operations", "description": "Field service and repair crews"},
    {"name": "Customer Service", "description": "Customer communication and scheduling"},
    {"name": "Administration", "description": "Office and administrative staff"},
    {"name": "Management", "description": "Leadership and operations management"},
    {"name": "Parts & Inventory", "description": "Parts ordering, receiving and stock control"},
    {"name": "Quality Control", "description": "Inspections and work sign-off"},
    {"name": "Finance & Accounting", "description": "Invoicing, payroll and bookkeeping"},
    {"name": "IT & Technical Support", "description": "Systems, devices and software support"},
]


def _department_name(v: Optional[str]) -> Optional[str]:
    v = clean_text(v, 100)
    if v is not None and len(v) < 2:
        raise ValueError("Department name must be at least 2 characters")
    return v


class DepartmentCreate(BaseModel):
    name: str
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _department_name(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return clean_text(v, 500)


class DepartmentUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _department_name(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return clean_text(v, 500)


class DepartmentResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    is_custom: bool
    member_count: int = 0
    created_at: Optional[datetime] = None


class DepartmentMembers(BaseModel):
    member_ids: list[int]


class _MemberFields(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    employee_id: Optional[str] = None
    job_title: Optional[str] = None
    department_id: Optional[int] = None
    employment_type: Optional[str] = None
    pay_type: Optional[str] = None
    pay_rate: Optional[float] = None
    start_date: Optional[date] = None
    notes: Optional[str] = None
    user_id: Optional[int] = None

    @field_validator("phone")
    @classmethod
    def validate_phone_number(cls, v):
        return validate_phone(v)

    @field_validator("employment_type")
    @classmethod
    def validate_employment_type(cls, v):
        return validate_choice(v, EMPLOYMENT_TYPES, "employment_type")

    @field_validator("pay_type")
    @classmethod
    def validate_pay_type(cls, v):
        return validate_choice(v, PAY_TYPES, "pay_type")

    @field_validator("pay_rate")
    @classmethod
    def validate_pay_rate(cls, v):
        return validate_non_negative(v, "pay_rate")

    @field_validator("first_name", "last_name", "job_title")
    @classmethod
    def validate_short_text(cls, v):
        return clean_text(v, 100)

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, v):
        return clean_text(v, 5000)


class TeamMemberCreate(_MemberFields):
    email: str
    status: str = "active"

    @field_validator("email")
    @classmethod
    def validate_email_address(cls, v):
        if not v:
            raise ValueError("Email is required")
        return validate_email(v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return validate_choice(v, MEMBER_STATUSES, "status")


class TeamMemberUpdate(_MemberFields):
    email: Optional[str] = None
    status: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email_address(cls, v):
        return validate_email(v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return validate_choice(v, MEMBER_STATUSES, "status")


class TeamMemberResponse(BaseModel):
    id: int
    first_name: Optional[str]
    last_name: Optional[str]
    full_name: str
    email: str
    phone: Optional[str]
    employee_id: Optional[str]
    job_title: Optional[str]
    department_id: Optional[int]
    employment_type: Optional[str]
    status: str
    pay_type: Optional[str]
    pay_rate: Optional[float]
    start_date: Optional[date]
    notes: Optional[str]
    user_id: Optional[int]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RoleResponse(BaseModel):
    id: int
    name: str
    display_name: Optional[str]
    description: Optional[str]
    priority: int
    permissions: Optional[dict[str, bool]]

    class Config:
        from_attributes = True


class RoleAssignment(BaseModel):
    role: str


class UserRolesResponse(BaseModel):
    user_id: int
    roles: list[str]
    highest_role: str
    permissions: dict[str, bool]


class RoleAuditEntry(BaseModel):
    id: int
    target_user_id: int
    role_name: str
    action: str
    performed_by: Optional[int]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
