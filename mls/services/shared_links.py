"""Public sharing: curated search links under a slug and per-listing external share tokens."""

import secrets
import string
import time
from datetime import datetime, timezone
from typing import Any, Optional, Union

from mls.models.listing import Listing, ListingStatus
from mls.models.shared_link import ExternalShareLink, ListingPage, ListingSearchFilters, SharedLink
from mls.models.user import User
from mls.services import supabase_client as db
from mls.services.access import can_manage_shared_link, require
from mls.services.listing_search import ListingSearch
from mls.utils.errors import FieldError, LinkUnavailableError, ListingValidationError, NotFoundError
from mls.utils.ids import generate_id
from mls.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)

BASE36_ALPHABET = string.digits + string.ascii_lowercase
SLUG_RANDOM_LENGTH = 8


def to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def generate_slug(now_ms: Optional[int] = None) -> str:
    """Slug of the form <base36 millisecond timestamp>-<8 random base36 chars>."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = "".join(secrets.choice(BASE36_ALPHABET) for _ in range(SLUG_RANDOM_LENGTH))
    return f"{to_base36(now_ms)}-{suffix}"


def _clean_title(title: Optional[str]) -> str:
    cleaned = (title or "").strip()
    if not cleaned:
        raise FieldError("Title is required", fields=["title"])
    return cleaned


class SharedLinkService:
    """CRUD for shared links plus public resolution to a page of listings."""

    def __init__(self, search: Optional[ListingSearch] = None):
        self.search = search or ListingSearch()

    async def create_link(self, title: str, filters: Union[ListingSearchFilters, dict[str, Any]], actor: User) -> SharedLink:
        if isinstance(filters, dict):
            filters = ListingSearchFilters.model_validate(filters)

        now = datetime.now(timezone.utc).isoformat()
        link = SharedLink(
            id=generate_id(),
            title=_clean_title(title),
            slug=generate_slug(),
            filters=filters,
            created_by=actor.id,
            created_at=now,
            updated_at=now,
        )
        row = await db.insert_shared_link(link.model_dump(mode="json", exclude_none=True))
        logger.info("Created shared link", slug=link.slug, actor_id=mask_user_id(actor.id))
        return SharedLink.model_validate(row)

    async def get_link(self, slug: str) -> SharedLink:
        row = await db.get_shared_link("slug", slug)
        if row is None:
            raise NotFoundError("Shared link", slug)
        return SharedLink.model_validate(row)

    async def _load_for_change(self, link_id: str, actor: User) -> dict[str, Any]:
        row = await db.get_shared_link("id", link_id)
        if row is None:
            raise NotFoundError("Shared link", link_id)
        require(can_manage_shared_link(actor, row), "You can only manage your own shared links")
        return row

    async def rename_link(self, link_id: str, title: str, actor: User) -> SharedLink:
        cleaned = _clean_title(title)
        await self._load_for_change(link_id, actor)
        row = await db.update_shared_link(
            link_id,
            {"title": cleaned, "updated_at": datetime.now(timezone.utc).isoformat()},
        )
        return SharedLink.model_validate(row)

    async def delete_link(self, link_id: str, actor: User) -> None:
        await self._load_for_change(link_id, actor)
        await db.delete_shared_link(link_id)
        logger.info("Deleted shared link", link_id=link_id, actor_id=mask_user_id(actor.id))

    async def resolve_link(self, slug: str, page: int = 1) -> ListingPage:
        """Published listings matching the link's stored filters."""
        link = await self.get_link(slug)
        filters = link.filters.model_copy(update={"page": max(page, 1)})
        return await self.search.search(filters)


SHARE_TOKEN_BYTES = 32


def generate_share_token() -> str:
    """URL-safe token, about 43 characters for 32 random bytes."""
    return secrets.token_urlsafe(SHARE_TOKEN_BYTES)


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _as_iso(value: Union[datetime, str, None]) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = _parse_timestamp(value)
    elif value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


class ExternalShareLinkService:
    """Share tokens for single published listings, with expiry, revocation and view tracking."""

    async def create_for_listing(
        self,
        listing_id: str,
        actor: User,
        expires_at: Union[datetime, str, None] = None,
    ) -> ExternalShareLink:
        listing = await db.get_listing_by_id(listing_id)
        if listing is None:
            raise NotFoundError("Listing", listing_id)
        if listing.get("status") != ListingStatus.PUBLISHED.value:
            raise ListingValidationError("Share links can only be created for published listings")

        try:
            expiry = _as_iso(expires_at)
        except ValueError:
            raise FieldError("Invalid expiry date", fields=["expires_at"])

        now = datetime.now(timezone.utc).isoformat()
        link = ExternalShareLink(
            id=generate_id(),
            token=generate_share_token(),
            listing=listing_id,
            created_by=actor.id,
            expires_at=expiry,
            created_at=now,
            updated_at=now,
        )
        row = await db.insert_external_share_link(link.model_dump(mode="json", exclude_none=True))
        logger.info(
            "Created external share link",
            listing_id=listing_id,
            expires_at=expiry,
            actor_id=mask_user_id(actor.id),
        )
        return ExternalShareLink.model_validate(row)

    async def resolve_token(self, token: str) -> Listing:
        """The shared listing; counts the view. Revoked or expired links raise LinkUnavailableError."""
        row = await db.get_external_share_link("token", token)
        if row is None:
            raise NotFoundError("Share link")
        link = ExternalShareLink.model_validate(row)

        if not link.is_active:
            raise LinkUnavailableError(
                "This share link has been revoked and is no longer valid.",
                reason="revoked",
            )
        now = datetime.now(timezone.utc)
        if link.expires_at and _parse_timestamp(link.expires_at) < now:
            raise LinkUnavailableError(
                "This share link has expired and is no longer valid.",
                reason="expired",
            )

        listing = await db.get_listing_by_id(link.listing)
        # Unpublished listings are hidden even behind a live token
        if listing is None or listing.get("status") != ListingStatus.PUBLISHED.value:
            raise NotFoundError("Listing", link.listing)

        await db.update_external_share_link(link.id, {
            "view_count": link.view_count + 1,
            "last_viewed_at": now.isoformat(),
        })
        return Listing.model_validate(listing)

    async def deactivate(self, link_id: str, actor: User) -> ExternalShareLink:
        row = await db.get_external_share_link("id", link_id)
        if row is None:
            raise NotFoundError("Share link", link_id)
        require(can_manage_shared_link(actor, row), "You can only revoke your own share links")

        updated = await db.update_external_share_link(link_id, {
            "is_active": False,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        })
        logger.info("Revoked external share link", link_id=link_id, actor_id=mask_user_id(actor.id))
        return ExternalShareLink.model_validate(updated)
