"""Notification model."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class NotificationType(str, Enum):
    LISTING_PUBLISHED = "listing_published"
    LISTING_NEEDS_REVISION = "listing_needs_revision"
    LISTING_REJECTED = "listing_rejected"
    LISTING_SUBMITTED = "listing_submitted"


class Notification(BaseModel):
    """In-app notification addressed to a single user."""
    id: Optional[str] = Field(None, description="Notification ID (text)")
    type: NotificationType
    recipient: str = Field(..., description="Recipient user ID")
    listing: Optional[str] = Field(None, description="Related listing ID")
    message: str
    read: bool = False
    read_at: Optional[str] = Field(None, description="Set when read flips to true")
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
