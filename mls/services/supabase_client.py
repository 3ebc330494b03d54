"""Supabase client wrapper with async context manager support."""

import os
from typing import Optional
from supabase import create_client, Client
from supabase.client import ClientOptions
from mls.utils.errors import SupabaseError
import logging

logger = logging.getLogger(__name__)

# Table names
LISTINGS_TABLE = "listings"
NOTIFICATIONS_TABLE = "notifications"
USERS_TABLE = "users"
SHARED_LINKS_TABLE = "shared_links"
EXTERNAL_SHARE_LINKS_TABLE = "external_share_links"
PROPERTY_CATEGORIES_TABLE = "property_categories"
PROPERTY_TYPES_TABLE = "property_types"
PROPERTY_SUBTYPES_TABLE = "property_subtypes"
CITIES_TABLE = "cities"
BARANGAYS_TABLE = "barangays"
DEVELOPMENTS_TABLE = "developments"
TOWNSHIPS_TABLE = "townships"
ESTATES_TABLE = "estates"

# Global client instance (singleton pattern)
_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """Get or create Supabase client singleton."""
    global _client

    if _client is None:
        url = os.environ.get("SUPABASE_URL")
        key = os.environ.get("SUPABASE_SERVICE_ROLE_KEY")

        if not url or not key:
            raise SupabaseError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")

        options = ClientOptions(
            auto_refresh_token=False,
            persist_session=False,
        )

        _client = create_client(url, key, options)
        logger.info("Supabase client initialized", extra={"url": url})

    return _client


async def close_supabase_client() -> None:
    """Drop the cached client so the next call reconnects."""
    global _client
    if _client:
        _client = None
        logger.info("Supabase client closed")


class SupabaseClient:
    """Async context manager for Supabase client."""

    def __init__(self):
        self.client: Optional[Client] = None

    async def __aenter__(self) -> Client:
        self.client = get_supabase_client()
        return self.client

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            logger.error(
                "Supabase operation error",
                extra={"error": str(exc_val), "type": exc_type.__name__}
            )
        return False


def _first(result) -> Optional[dict]:
    return result.data[0] if result.data and len(result.data) > 0 else None


# Reference data lookups
async def get_row_by_id(table: str, record_id: str) -> Optional[dict]:
    """Get a single row from a master-data table by its ID."""
    async with SupabaseClient() as client:
        try:
            result = client.table(table).select("*").eq("id", record_id).limit(1).execute()
            return _first(result)
        except Exception as e:
            raise SupabaseError(f"Failed to get {table} row {record_id}: {e}")


async def get_row_by_psgc_code(table: str, psgc_code: str) -> Optional[dict]:
    """Get a city or barangay row by PSGC code."""
    async with SupabaseClient() as client:
        try:
            result = client.table(table).select("*").eq("psgc_code", psgc_code).limit(1).execute()
            return _first(result)
        except Exception as e:
            raise SupabaseError(f"Failed to get {table} row for PSGC code {psgc_code}: {e}")


async def list_active_townships(limit: int = 1000) -> list[dict]:
    """Get active townships (covered barangays are matched in memory)."""
    async with SupabaseClient() as client:
        try:
            result = client.table(TOWNSHIPS_TABLE).select("*").eq("is_active", True).limit(limit).execute()
            return result.data if result.data else []
        except Exception as e:
            raise SupabaseError(f"Failed to list townships: {e}")


async def find_estates_including_development(development_id: str) -> list[dict]:
    """Get estates whose included_developments contains the development."""
    async with SupabaseClient() as client:
        try:
            result = (
                client.table(ESTATES_TABLE)
                .select("*")
                .contains("included_developments", [development_id])
                .limit(1)
                .execute()
            )
            return result.data if result.data else []
        except Exception as e:
            raise SupabaseError(f"Failed to find estate for development {development_id}: {e}")


# Users table operations
async def list_active_users_by_roles(roles: list[str]) -> list[dict]:
    """Get active users holding any of the given roles."""
    async with SupabaseClient() as client:
        try:
            result = (
                client.table(USERS_TABLE)
                .select("*")
                .in_("role", roles)
                .eq("is_active", True)
                .execute()
            )
            return result.data if result.data else []
        except Exception as e:
            raise SupabaseError(f"Failed to list users by role: {e}")


# Listings table operations
async def get_listing_by_id(listing_id: str) -> Optional[dict]:
    """Get listing by ID."""
    async with SupabaseClient() as client:
        try:
            result = client.table(LISTINGS_TABLE).select("*").eq("id", listing_id).execute()
            return _first(result)
        except Exception as e:
            raise SupabaseError(f"Failed to get listing: {e}")


async def insert_listing(listing_data: dict) -> dict:
    """Create a new listing."""
    async with SupabaseClient() as client:
        try:
            result = client.table(LISTINGS_TABLE).insert(listing_data).execute()
        except Exception as e:
            raise SupabaseError(f"Failed to create listing: {e}")
        row = _first(result)
        if row is None:
            raise SupabaseError("Failed to create listing: no data returned")
        return row


async def update_listing(listing_id: str, updates: dict) -> dict:
    """Update a listing."""
    async with SupabaseClient() as client:
        try:
            result = client.table(LISTINGS_TABLE).update(updates).eq("id", listing_id).execute()
        except Exception as e:
            raise SupabaseError(f"Failed to update listing: {e}")
        row = _first(result)
        if row is None:
            raise SupabaseError(f"Failed to update listing: {listing_id}")
        return row


async def delete_listing(listing_id: str) -> None:
    async with SupabaseClient() as client:
        try:
            client.table(LISTINGS_TABLE).delete().eq("id", listing_id).execute()
        except Exception as e:
            raise SupabaseError(f"Failed to delete listing: {e}")


# Notifications table operations
async def insert_notification(notification_data: dict) -> dict:
    """Create a notification record."""
    async with SupabaseClient() as client:
        try:
            result = client.table(NOTIFICATIONS_TABLE).insert(notification_data).execute()
        except Exception as e:
            raise SupabaseError(f"Failed to create notification: {e}")
        row = _first(result)
        if row is None:
            raise SupabaseError("Failed to create notification: no data returned")
        return row


async def get_notification(notification_id: str) -> Optional[dict]:
    async with SupabaseClient() as client:
        try:
            result = client.table(NOTIFICATIONS_TABLE).select("*").eq("id", notification_id).execute()
            return _first(result)
        except Exception as e:
            raise SupabaseError(f"Failed to get notification: {e}")


async def list_notifications_for_recipient(
    recipient_id: str,
    limit: int = 50,
    unread_only: bool = False
) -> list[dict]:
    """Get a user's notifications, newest first."""
    async with SupabaseClient() as client:
        try:
            query = client.table(NOTIFICATIONS_TABLE).select("*").eq("recipient", recipient_id)
            if unread_only:
                query = query.eq("read", False)
            result = query.order("created_at", desc=True).limit(limit).execute()
            return result.data if result.data else []
        except Exception as e:
            raise SupabaseError(f"Failed to list notifications: {e}")


async def count_unread_notifications(recipient_id: str) -> int:
    async with SupabaseClient() as client:
        try:
            result = (
                client.table(NOTIFICATIONS_TABLE)
                .select("id", count="exact")
                .eq("recipient", recipient_id)
                .eq("read", False)
                .execute()
            )
            return result.count or 0
        except Exception as e:
            raise SupabaseError(f"Failed to count notifications: {e}")


async def update_notification(notification_id: str, updates: dict) -> dict:
    async with SupabaseClient() as client:
        try:
            result = client.table(NOTIFICATIONS_TABLE).update(updates).eq("id", notification_id).execute()
        except Exception as e:
            raise SupabaseError(f"Failed to update notification: {e}")
        row = _first(result)
        if row is None:
            raise SupabaseError(f"Failed to update notification: {notification_id}")
        return row


# Shared links table operations
async def insert_shared_link(link_data: dict) -> dict:
    async with SupabaseClient() as client:
        try:
            result = client.table(SHARED_LINKS_TABLE).insert(link_data).execute()
        except Exception as e:
            raise SupabaseError(f"Failed to create shared link: {e}")
        row = _first(result)
        if row is None:
            raise SupabaseError("Failed to create shared link: no data returned")
        return row


async def get_shared_link(column: str, value: str) -> Optional[dict]:
    """Get a shared link by id or slug."""
    async with SupabaseClient() as client:
        try:
            result = client.table(SHARED_LINKS_TABLE).select("*").eq(column, value).limit(1).execute()
            return _first(result)
        except Exception as e:
            raise SupabaseError(f"Failed to get shared link: {e}")


async def update_shared_link(link_id: str, updates: dict) -> dict:
    async with SupabaseClient() as client:
        try:
            result = client.table(SHARED_LINKS_TABLE).update(updates).eq("id", link_id).execute()
        except Exception as e:
            raise SupabaseError(f"Failed to update shared link: {e}")
        row = _first(result)
        if row is None:
            raise SupabaseError(f"Failed to update shared link: {link_id}")
        return row


async def delete_shared_link(link_id: str) -> None:
    async with SupabaseClient() as client:
        try:
            client.table(SHARED_LINKS_TABLE).delete().eq("id", link_id).execute()
        except Exception as e:
            raise SupabaseError(f"Failed to delete shared link: {e}")


# External share links table operations
async def insert_external_share_link(link_data: dict) -> dict:
    async with SupabaseClient() as client:
        try:
            result = client.table(EXTERNAL_SHARE_LINKS_TABLE).insert(link_data).execute()
        except Exception as e:
            raise SupabaseError(f"Failed to create external share link: {e}")
        row = _first(result)
        if row is None:
            raise SupabaseError("Failed to create external share link: no data returned")
        return row


async def get_external_share_link(column: str, value: str) -> Optional[dict]:
    """Get an external share link by id or token."""
    async with SupabaseClient() as client:
        try:
            result = client.table(EXTERNAL_SHARE_LINKS_TABLE).select("*").eq(column, value).limit(1).execute()
            return _first(result)
        except Exception as e:
            raise SupabaseError(f"Failed to get external share link: {e}")


async def update_external_share_link(link_id: str, updates: dict) -> dict:
    async with SupabaseClient() as client:
        try:
            result = client.table(EXTERNAL_SHARE_LINKS_TABLE).update(updates).eq("id", link_id).execute()
        except Exception as e:
            raise SupabaseError(f"Failed to update external share link: {e}")
        row = _first(result)
        if row is None:
            raise SupabaseError(f"Failed to update external share link: {link_id}")
        return row


async def search_listings(
    equals: dict,
    within: dict,
    minimums: dict,
    maximums: dict,
    offset: int,
    limit: int,
) -> tuple[list[dict], int]:
    """Filtered, newest-first page of listings plus the total match count."""
    async with SupabaseClient() as client:
        try:
            query = client.table(LISTINGS_TABLE).select("*", count="exact")
            for column, value in equals.items():
                query = query.eq(column, value)
            for column, values in within.items():
                query = query.in_(column, values)
            for column, value in minimums.items():
                query = query.gte(column, value)
            for column, value in maximums.items():
                query = query.lte(column, value)
            result = (
                query.order("created_at", desc=True)
                .range(offset, offset + limit - 1)
                .execute()
            )
        except Exception as e:
            raise SupabaseError(f"Failed to search listings: {e}")
        rows = result.data if result.data else []
        total = result.count if result.count is not None else len(rows)
        return rows, total
