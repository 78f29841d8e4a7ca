from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional, List
from datetime import datetime

from app.models.user import UserRole


class UserRegister(BaseModel):
    """Schema for self-registration"""
    email: EmailStr
    password: str = Field(..., min_length=8, description="Password must be at least 8 characters")
    display_name: Optional[str] = Field(None, min_length=1, max_length=255)


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class PasswordResetRequest(BaseModel):
    email: EmailStr


class PasswordResetConfirm(BaseModel):
    token: str
    new_password: str = Field(..., min_length=8)


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    display_name: str
    role: UserRole
    created_at: datetime
    last_seen_at: Optional[datetime] = None


class UpdateProfileRequest(BaseModel):
    display_name: Optional[str] = Field(None, min_length=1, max_length=255)
    current_password: Optional[str] = None
    new_password: Optional[str] = Field(None, min_length=8)


class HeartbeatResponse(BaseModel):
    last_seen_at: datetime


class StudentListItem(BaseModel):
    id: int
    email: str
    display_name: str
    role: UserRole
    created_at: datetime
    last_seen_at: Optional[datetime] = None
    enrollment_count: int = 0


class StudentListResponse(BaseModel):
    items: List[StudentListItem]
    total: int
