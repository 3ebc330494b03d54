"""User model - brokerage staff (agents, approvers, admins)."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class UserRole(str, Enum):
    AGENT = "agent"
    APPROVER = "approver"
    ADMIN = "admin"


REVIEWER_ROLES: tuple[UserRole, ...] = (UserRole.APPROVER, UserRole.ADMIN)


class User(BaseModel):
    """Authenticated brokerage user."""
    id: str = Field(..., description="User ID (text)")
    email: str = Field(..., description="Email address")
    role: UserRole = Field(default=UserRole.AGENT, description="Role determines access permissions")
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool = Field(default=True, description="Inactive users cannot log in")
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
