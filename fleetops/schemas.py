from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from .shared.validators import validate_email


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return validate_email(v)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class UserResponse(BaseModel):
    id: int
    shop_id: int
    email: str
    first_name: Optional[str]
    last_name: Optional[str]
    display_name: str
    role_names: list[str] = []
    permissions: dict[str, bool] = {}
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class MessageResponse(BaseModel):
    message: str
