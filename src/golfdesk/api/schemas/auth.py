"""Authentication request and response schemas."""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class SessionInfo(BaseModel):
    tenant_id: str
    username: str
    exp: int | None = None


class PasswordChangeRequest(BaseModel):
    currentPassword: str = ""
    newPassword: str = ""
    confirmPassword: str = ""


class DevLoginRequest(BaseModel):
    userType: str = "member"


class LineUser(BaseModel):
    """Profile kept in the LINE user cookie after a successful login."""

    user_id: str
    displayName: str
    pictureUrl: str | None = None
