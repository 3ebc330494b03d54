"""Listing write pipeline: validate, enrich, persist, then notify.

Order of a write:
1. status transition guard (updates that change status only)
2. classification hierarchy validator
3. listing-type field validator
4. location hierarchy validator
5. derived location fields
6. persist
7. status notifications (best-effort, after commit)

Any validator failure aborts the write before anything is persisted.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ValidationError

from mls.models.listing import DERIVED_LOCATION_FIELDS, Listing, ListingStatus, ListingType
from mls.models.user import User
from mls.services import supabase_client as db
from mls.services.access import can_delete_listing, can_update_listing, is_admin, is_agent, require
from mls.services.classification_validator import validate_classification
from mls.services.listing_fields import validate_listing_type_fields
from mls.services.location_rules import populate_location_derived, validate_location_hierarchy
from mls.services.notification_dispatcher import (
    NotificationSink,
    RecipientDirectory,
    dispatch_status_notifications,
)
from mls.services.notifications import NotificationStore
from mls.services.reference_lookup import ReferenceLookup, SupabaseReferenceLookup
from mls.services.status_transitions import validate_status_transition
from mls.services.users import SupabaseUserDirectory
from mls.utils.errors import FieldError, NotFoundError
from mls.utils.ids import generate_id
from mls.utils.logging import get_structured_logger, log_timing, mask_user_id
from mls.utils.logging_config import AppConfig

logger = get_structured_logger(__name__)

# Never accepted from request data
READ_ONLY_FIELDS: tuple[str, ...] = ("id", "created_by", "created_at", "updated_at") + DERIVED_LOCATION_FIELDS


def _writable(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if key not in READ_ONLY_FIELDS}


def _check_schema(document: dict[str, Any]) -> Listing:
    """Validate the final document against the Listing model, reporting bad fields as FieldError."""
    try:
        return Listing.model_validate(document)
    except ValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
        raise FieldError(
            f"Invalid listing fields: {', '.join(fields)}",
            fields=fields,
        )


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ListingService:
    """Creates, updates and deletes listings on behalf of an authenticated user."""

    def __init__(
        self,
        lookup: Optional[ReferenceLookup] = None,
        recipients: Optional[RecipientDirectory] = None,
        sink: Optional[NotificationSink] = None,
        notifications_enabled: Optional[bool] = None,
    ):
        self.lookup = lookup or SupabaseReferenceLookup()
        self.recipients = recipients or SupabaseUserDirectory()
        self.sink = sink or NotificationStore()
        if notifications_enabled is None:
            notifications_enabled = AppConfig.NOTIFICATIONS_ENABLED
        self.notifications_enabled = notifications_enabled

    async def create_listing(self, data: dict[str, Any], actor: User) -> Listing:
        candidate = _writable(data)
        candidate["id"] = generate_id()
        candidate["created_by"] = actor.id
        candidate["status"] = ListingStatus.DRAFT.value

        # Agents can only create resale listings
        if is_agent(actor) or not candidate.get("listing_type"):
            candidate["listing_type"] = ListingType.RESALE.value

        with log_timing("create_listing", logger=logger, actor_id=mask_user_id(actor.id)):
            await validate_classification(candidate, self.lookup)
            await validate_listing_type_fields(candidate, self.lookup)
            await validate_location_hierarchy(candidate, None, self.lookup)

            enriched = await populate_location_derived(candidate, self.lookup)
            document = _check_schema(enriched)

            row = await db.insert_listing(document.model_dump(mode="json", exclude_none=True))

        logger.info(
            "Created listing",
            listing_id=row.get("id"),
            listing_type=row.get("listing_type"),
            actor_id=mask_user_id(actor.id),
        )
        return Listing.model_validate(row)

    async def update_listing(self, listing_id: str, data: dict[str, Any], actor: User) -> Listing:
        existing = await db.get_listing_by_id(listing_id)
        if existing is None:
            raise NotFoundError("Listing", listing_id)

        require(can_update_listing(actor, existing), "You cannot edit this listing")

        changes = _writable(data)
        # Only admins may change the listing type after creation
        if not is_admin(actor):
            changes.pop("listing_type", None)

        previous_status = existing.get("status")
        requested_status = changes.get("status")
        status_changed = requested_status is not None and requested_status != previous_status

        with log_timing("update_listing", logger=logger, listing_id=listing_id):
            if status_changed:
                validate_status_transition(previous_status, requested_status, actor.role)

            candidate = {**existing, **changes}
            await validate_classification(candidate, self.lookup)
            await validate_listing_type_fields(candidate, self.lookup, existing)
            await validate_location_hierarchy(changes, existing, self.lookup)

            enriched = await populate_location_derived(candidate, self.lookup)
            document = _check_schema(enriched).model_dump(mode="json")

            updates = {key: document[key] for key in changes if key in document}
            updates.update({field: document.get(field) for field in DERIVED_LOCATION_FIELDS})
            updates["updated_at"] = _now()

            committed = await db.update_listing(listing_id, updates)

        logger.info(
            "Updated listing",
            listing_id=listing_id,
            previous_status=previous_status,
            new_status=committed.get("status"),
            actor_id=mask_user_id(actor.id),
        )

        if status_changed:
            await self._notify(committed, previous_status, actor)

        return Listing.model_validate(committed)

    async def delete_listing(self, listing_id: str, actor: User) -> None:
        existing = await db.get_listing_by_id(listing_id)
        if existing is None:
            raise NotFoundError("Listing", listing_id)

        require(can_delete_listing(actor, existing), "You cannot delete this listing")
        await db.delete_listing(listing_id)
        logger.info("Deleted listing", listing_id=listing_id, actor_id=mask_user_id(actor.id))

    async def _notify(self, committed: dict[str, Any], previous_status: Optional[str], actor: User) -> None:
        if not self.notifications_enabled:
            logger.debug("Status notifications disabled", listing_id=committed.get("id"))
            return
        await dispatch_status_notifications(
            committed,
            previous_status,
            actor.id,
            self.recipients,
            self.sink,
        )
