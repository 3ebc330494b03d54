"""Notification side-effects of committed listing status changes.

Triggers:
- -> published / needs_revision / rejected: notify the listing owner
- -> submitted: notify every active approver and admin except the submitter

Dispatch is best-effort. It runs after the write has committed, so any
failure is logged and swallowed; the status change itself stands.
"""

from typing import Any, Optional, Protocol

from mls.models.listing import ListingStatus
from mls.models.notification import NotificationType
from mls.models.user import User
from mls.utils.logging import get_structured_logger, mask_sensitive_data, mask_user_id

logger = get_structured_logger(__name__)

OWNER_MESSAGES: dict[ListingStatus, str] = {
    ListingStatus.PUBLISHED: 'Your listing "{title}" has been published',
    ListingStatus.NEEDS_REVISION: 'Your listing "{title}" needs revision',
    ListingStatus.REJECTED: 'Your listing "{title}" has been rejected',
}

SUBMITTED_MESSAGE = 'New listing "{title}" submitted for review'


class RecipientDirectory(Protocol):
    async def list_active_reviewers(self) -> list[User]: ...


class NotificationSink(Protocol):
    async def create_notification(self, data: dict[str, Any]) -> dict[str, Any]: ...


def _status(value: Any) -> Optional[ListingStatus]:
    try:
        return ListingStatus(value)
    except ValueError:
        return None


def _owner_id(committed: dict[str, Any]) -> Optional[str]:
    owner = committed.get("created_by")
    if isinstance(owner, dict):
        return owner.get("id")
    return owner


async def _send(sink: NotificationSink, data: dict[str, Any]) -> Optional[dict[str, Any]]:
    try:
        return await sink.create_notification(data)
    except Exception as e:
        logger.error(
            "Failed to create notification",
            notification_type=data["type"],
            recipient_id=mask_user_id(data["recipient"]),
            listing_id=data.get("listing"),
            error=mask_sensitive_data(str(e)),
            exc_info=True,
        )
        return None


async def _notify_owner(
    committed: dict[str, Any],
    new_status: ListingStatus,
    sink: NotificationSink,
) -> list[dict[str, Any]]:
    owner_id = _owner_id(committed)
    if not owner_id:
        logger.info("Listing has no owner, skipping notification", listing_id=committed.get("id"))
        return []

    created = await _send(sink, {
        "type": f"listing_{new_status.value}",
        "recipient": owner_id,
        "listing": committed.get("id"),
        "message": OWNER_MESSAGES[new_status].format(title=committed.get("title")),
        "read": False,
    })
    return [created] if created else []


async def _notify_reviewers(
    committed: dict[str, Any],
    actor_id: Optional[str],
    recipients: RecipientDirectory,
    sink: NotificationSink,
) -> list[dict[str, Any]]:
    reviewers = await recipients.list_active_reviewers()
    message = SUBMITTED_MESSAGE.format(title=committed.get("title"))

    created: list[dict[str, Any]] = []
    for reviewer in reviewers:
        # No self-notification when the submitter is a reviewer
        if reviewer.id == actor_id:
            continue
        notification = await _send(sink, {
            "type": NotificationType.LISTING_SUBMITTED.value,
            "recipient": reviewer.id,
            "listing": committed.get("id"),
            "message": message,
            "read": False,
        })
        if notification:
            created.append(notification)
    return created


async def dispatch_status_notifications(
    committed: dict[str, Any],
    previous_status: Optional[str],
    actor_id: Optional[str],
    recipients: RecipientDirectory,
    sink: NotificationSink,
) -> list[dict[str, Any]]:
    """Create the notifications a committed status change calls for. Never raises."""
    new_status = _status(committed.get("status"))
    if new_status is None or previous_status == new_status.value:
        return []

    try:
        if new_status in OWNER_MESSAGES:
            created = await _notify_owner(committed, new_status, sink)
        elif new_status == ListingStatus.SUBMITTED:
            created = await _notify_reviewers(committed, actor_id, recipients, sink)
        else:
            created = []
    except Exception as e:
        logger.error(
            "Status notification dispatch failed",
            listing_id=committed.get("id"),
            previous_status=previous_status,
            new_status=new_status.value,
            error=str(e),
            exc_info=True,
        )
        return []

    logger.info(
        "Status notifications dispatched",
        listing_id=committed.get("id"),
        previous_status=previous_status,
        new_status=new_status.value,
        notifications_created=len(created),
    )
    return created
