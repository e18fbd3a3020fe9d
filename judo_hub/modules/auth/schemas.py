from pydantic import BaseModel, EmailStr
from typing import Optional

from judo_hub.core.session import SessionStatus
from judo_hub.modules.profiles.schemas import ProfileResponse


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RestoreRequest(BaseModel):
    access_token: str
    refresh_token: str


class PasswordResetRequest(BaseModel):
    email: EmailStr


class UserInfo(BaseModel):
    id: str
    email: Optional[str] = None


class SessionStateResponse(BaseModel):
    status: SessionStatus
    loading: bool
    user: Optional[UserInfo] = None
    profile: Optional[ProfileResponse] = None


class LoginResponse(SessionStateResponse):
    session_token: str
    token_type: str = "bearer"
