from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime
from enum import Enum

from judo_hub.modules.groups.schemas import GroupResponse

BELT_OPTIONS = [
    "Blanco", "Blanco-Amarillo", "Amarillo", "Amarillo-Naranja", "Naranja", "Naranja-Verde",
    "Verde", "Verde-Azul", "Azul", "Azul-Marrón", "Marrón", "Negro"
]


class UserRole(str, Enum):
    ADMIN = "admin"
    USER = "user"


def _check_belt(value: Optional[str]) -> Optional[str]:
    # Forms send "" for "no belt selected"
    if value == "":
        return None
    if value is not None and value not in BELT_OPTIONS:
        raise ValueError(f"belt must be one of {', '.join(BELT_OPTIONS)}")
    return value


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    return value or None


class ProfileResponse(BaseModel):
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    surnames: Optional[str] = None
    phone: Optional[str] = None
    age: Optional[int] = None
    address: Optional[str] = None
    tutor_name: Optional[str] = None
    belt: Optional[str] = None
    group_id: Optional[str] = None
    role: UserRole = UserRole.USER
    created_at: datetime
    groups: Optional[GroupResponse] = None

    class Config:
        from_attributes = True


class ProfileSelfUpdate(BaseModel):
    """Fields a member may change on their own profile."""
    full_name: Optional[str] = None
    surnames: Optional[str] = None
    phone: Optional[str] = None
    age: Optional[int] = Field(default=None, ge=0)
    address: Optional[str] = None
    tutor_name: Optional[str] = None
    belt: Optional[str] = None

    validate_belt = field_validator("belt")(_check_belt)


class ProfileAdminUpdate(ProfileSelfUpdate):
    group_id: Optional[str] = None
    role: Optional[UserRole] = None

    validate_group = field_validator("group_id")(_blank_to_none)


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    full_name: Optional[str] = None
    surnames: Optional[str] = None
    phone: Optional[str] = None
    age: Optional[int] = Field(default=None, ge=0)
    address: Optional[str] = None
    tutor_name: Optional[str] = None
    belt: Optional[str] = None
    group_id: Optional[str] = None
    role: UserRole = UserRole.USER

    validate_belt = field_validator("belt")(_check_belt)
    validate_group = field_validator("group_id")(_blank_to_none)


class UserCreateResponse(BaseModel):
    user_id: str
    email: str
    message: str
