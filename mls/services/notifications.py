"""Notification persistence and the per-user inbox."""

from datetime import datetime, timezone
from typing import Any, Optional

from mls.models.notification import Notification
from mls.models.user import User
from mls.services import supabase_client as db
from mls.services.access import is_admin, require
from mls.utils.errors import NotFoundError
from mls.utils.ids import generate_id
from mls.utils.logging import get_structured_logger, mask_user_id
from mls.utils.logging_config import AppConfig

logger = get_structured_logger(__name__)

MARK_ALL_READ_BATCH_SIZE = 500


def apply_read_state(updates: dict[str, Any], original: Optional[dict[str, Any]]) -> dict[str, Any]:
    """Stamp read_at when read flips to true and clear it when it flips back."""
    was_read = bool(original and original.get("read"))
    if updates.get("read") is True and not was_read:
        updates["read_at"] = datetime.now(timezone.utc).isoformat()
    elif updates.get("read") is False and was_read:
        updates["read_at"] = None
    return updates


class NotificationStore:
    """Supabase-backed sink for dispatcher-created notifications."""

    async def create_notification(self, data: dict[str, Any]) -> dict[str, Any]:
        record = Notification.model_validate({"id": generate_id(), **data})
        return await db.insert_notification(record.model_dump(mode="json", exclude_none=True))


class NotificationService:
    """Read and read-state operations on a user's notifications."""

    def __init__(self, feed_limit: Optional[int] = None):
        self.feed_limit = feed_limit or AppConfig.NOTIFICATION_FEED_LIMIT

    async def list_for_user(self, user: User, limit: Optional[int] = None) -> list[Notification]:
        rows = await db.list_notifications_for_recipient(user.id, limit=limit or self.feed_limit)
        return [Notification.model_validate(row) for row in rows]

    async def unread_count(self, user: User) -> int:
        return await db.count_unread_notifications(user.id)

    async def mark_read(self, notification_id: str, user: User) -> Notification:
        original = await db.get_notification(notification_id)
        if original is None:
            raise NotFoundError("Notification", notification_id)
        require(
            is_admin(user) or original.get("recipient") == user.id,
            "You can only update your own notifications",
        )

        updates = apply_read_state({"read": True}, original)
        if "read_at" not in updates:
            return Notification.model_validate(original)

        row = await db.update_notification(notification_id, updates)
        logger.info(
            "Notification marked read",
            notification_id=notification_id,
            recipient_id=mask_user_id(user.id),
        )
        return Notification.model_validate(row)

    async def mark_all_read(self, user: User, batch_size: Optional[int] = None) -> int:
        """Mark every unread notification of the user as read, in batches; returns how many changed."""
        batch_size = batch_size or MARK_ALL_READ_BATCH_SIZE
        updated = 0
        while True:
            unread = await db.list_notifications_for_recipient(
                user.id, limit=batch_size, unread_only=True
            )
            for row in unread:
                await db.update_notification(row["id"], apply_read_state({"read": True}, row))
            updated += len(unread)
            # A short batch means nothing unread is left
            if len(unread) < batch_size:
                break

        logger.info(
            "Marked all notifications read",
            recipient_id=mask_user_id(user.id),
            updated=updated,
        )
        return updated
