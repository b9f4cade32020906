"""Pydantic schemas for Admins and the moderation dashboard."""
from __future__ import annotations
from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, EmailStr, Field

from eventhub.models.admin import AdminRole, AdminStatus, Permission


class AdminLoginRequest(BaseModel):
    email: EmailStr
    password: str


class AdminCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1, max_length=100)
    role: AdminRole = AdminRole.admin
    permissions: Optional[list[Permission]] = None


class AdminOut(BaseModel):
    admin_id: str
    email: EmailStr
    name: str
    role: AdminRole
    permissions: list[Permission]
    status: AdminStatus
    last_login: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class AdminAuthResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    token: str
    admin: AdminOut


class AdminResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    admin: AdminOut


class AdminListResponse(BaseModel):
    success: bool = True
    admins: list[AdminOut]


class DashboardStatsResponse(BaseModel):
    success: bool = True
    stats: dict[str, Any]


class ActivityItem(BaseModel):
    type: str
    data: dict[str, Any]
    timestamp: datetime


class ActivityResponse(BaseModel):
    success: bool = True
    activities: list[ActivityItem]
