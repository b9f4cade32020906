"""Pydantic schemas for Users and user-facing auth."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field

from eventhub.models.user import UserRole, UserStatus
from eventhub.schemas.common import Pagination


class SignupRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    password: str = Field(..., min_length=6)


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    bio: Optional[str] = Field(None, max_length=500)
    profile_pic: Optional[str] = None


class PasswordChange(BaseModel):
    current_password: str
    new_password: str


class EmailChange(BaseModel):
    new_email: EmailStr
    password: str


class AccountDelete(BaseModel):
    password: str
    confirm_delete: str


class UserSummary(BaseModel):
    """Public subset used when embedding a user in another resource."""

    user_id: str
    name: str
    profile_pic: str = ""

    model_config = {"from_attributes": True}


class UserOut(BaseModel):
    user_id: str
    email: EmailStr
    name: str
    bio: str
    profile_pic: str
    role: UserRole
    status: UserStatus
    email_verified: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class UserStats(BaseModel):
    events_created: int
    events_attended: int
    comments_posted: int


class UserProfile(UserOut):
    stats: UserStats


class AuthResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    token: str
    user: UserOut


class UserResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    user: UserOut


class ProfileResponse(BaseModel):
    success: bool = True
    user: UserProfile


class UserListResponse(BaseModel):
    success: bool = True
    users: list[UserOut]
    pagination: Pagination


class UserSearchResponse(BaseModel):
    success: bool = True
    users: list[UserSummary]
    pagination: Pagination


class PublicUserProfile(UserSummary):
    bio: str = ""
    created_at: datetime
    stats: UserStats


class PublicProfileResponse(BaseModel):
    success: bool = True
    user: PublicUserProfile
