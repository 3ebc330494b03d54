"""Search over published listings, used by shared links."""

import math
from typing import Any, Optional

from mls.models.listing import Listing, ListingStatus
from mls.models.shared_link import ListingPage, ListingSearchFilters
from mls.services import supabase_client as db
from mls.services.reference_lookup import ReferenceLookup, SupabaseReferenceLookup
from mls.utils.logging import get_structured_logger
from mls.utils.logging_config import AppConfig

logger = get_structured_logger(__name__)

# filter name -> (column, operator)
RANGE_FILTERS: dict[str, tuple[str, str]] = {
    "price_min": ("price", "gte"),
    "price_max": ("price", "lte"),
    "bedrooms_min": ("bedrooms", "gte"),
    "bathrooms_min": ("bathrooms", "gte"),
    "floor_area_min": ("floor_area_sqm", "gte"),
    "lot_area_min": ("lot_area_sqm", "gte"),
}

EQUALITY_FILTERS: tuple[str, ...] = (
    "listing_type",
    "transaction_type",
    "city",
    "barangay",
    "development",
)


def clamp_limit(limit: Optional[int]) -> int:
    if not limit or limit < 1:
        return AppConfig.SEARCH_DEFAULT_LIMIT
    return min(limit, AppConfig.SEARCH_MAX_LIMIT)


def build_page(rows: list[dict[str, Any]], total: int, page: int, limit: int) -> ListingPage:
    total_pages = math.ceil(total / limit) if total else 0
    has_next = page < total_pages
    has_prev = page > 1
    return ListingPage(
        docs=[Listing.model_validate(row) for row in rows],
        total_docs=total,
        limit=limit,
        page=page,
        total_pages=total_pages,
        has_next_page=has_next,
        has_prev_page=has_prev,
        next_page=page + 1 if has_next else None,
        prev_page=page - 1 if has_prev else None,
    )


class ListingSearch:
    """Runs ListingSearchFilters against published listings."""

    def __init__(self, lookup: Optional[ReferenceLookup] = None):
        self.lookup = lookup or SupabaseReferenceLookup()

    async def _expand(self, filters: ListingSearchFilters) -> Optional[dict[str, list[str]]]:
        """Turn township/estate filters into IN lists; None means nothing can match."""
        within: dict[str, list[str]] = {}

        if filters.township:
            township = await self.lookup.get_township(filters.township)
            barangays = township.covered_barangays if township and township.is_active else []
            if not barangays:
                return None
            within["barangay"] = list(barangays)

        if filters.estate:
            estate = await self.lookup.get_estate(filters.estate)
            developments = estate.included_developments if estate and estate.is_active else []
            if not developments:
                return None
            within["development"] = list(developments)

        return within

    async def search(self, filters: ListingSearchFilters) -> ListingPage:
        limit = clamp_limit(filters.limit)
        page = filters.page

        within = await self._expand(filters)
        if within is None:
            logger.info(
                "Location filter expanded to nothing",
                township=filters.township,
                estate=filters.estate,
            )
            return build_page([], 0, page, limit)

        equals: dict[str, Any] = {"status": ListingStatus.PUBLISHED.value}
        for name in EQUALITY_FILTERS:
            value = getattr(filters, name)
            if value is not None:
                equals[name] = value.value if hasattr(value, "value") else value

        minimums: dict[str, Any] = {}
        maximums: dict[str, Any] = {}
        for name, (column, operator) in RANGE_FILTERS.items():
            value = getattr(filters, name)
            if value is None:
                continue
            if operator == "gte":
                minimums[column] = value
            else:
                maximums[column] = value

        rows, total = await db.search_listings(
            equals,
            within,
            minimums,
            maximums,
            offset=(page - 1) * limit,
            limit=limit,
        )
        logger.debug("Listing search complete", total_docs=total, page=page, limit=limit)
        return build_page(rows, total, page, limit)
