"""Location handling for listings: derived names/relations and the barangay -> development check.

City and barangay are stored as PSGC codes. Their display names are copied
into city_name/barangay_name, a denormalized read-through cache with no
invalidation (staleness is acceptable, the names are cosmetic).

City -> barangay consistency is NOT validated here. Barangay data comes live
from the external PSGC registry and is not mirrored locally, so that check
stays in the client UI.
"""

from typing import Any, Optional

from mls.services.reference_lookup import ReferenceLookup
from mls.utils.errors import LocationError
from mls.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)


async def lookup_location_name(
    kind: str,
    code: Optional[str],
    lookup: ReferenceLookup,
) -> Optional[str]:
    """Resolve a PSGC code to a display name; None on miss or lookup failure."""
    if not code:
        return None

    resolver = lookup.get_city_name if kind == "city" else lookup.get_barangay_name
    try:
        name = await resolver(code)
    except Exception as e:
        logger.warning(
            "Location name lookup failed",
            location_kind=kind,
            psgc_code=code,
            error=str(e),
        )
        return None

    if name is None:
        logger.warning(
            "Location PSGC code not found",
            location_kind=kind,
            psgc_code=code,
        )
    return name


async def _derive_township(barangay: Optional[str], lookup: ReferenceLookup) -> Optional[str]:
    if not barangay:
        return None
    try:
        township = await lookup.find_township_for_barangay(barangay)
    except Exception as e:
        logger.warning("Township lookup failed", psgc_code=barangay, error=str(e))
        return None
    return township.id if township else None


async def _derive_estate(development: Optional[str], lookup: ReferenceLookup) -> Optional[str]:
    if not development:
        return None
    try:
        estate = await lookup.find_estate_for_development(development)
    except Exception as e:
        logger.warning("Estate lookup failed", development_id=development, error=str(e))
        return None
    return estate.id if estate else None


async def populate_location_derived(candidate: dict[str, Any], lookup: ReferenceLookup) -> dict[str, Any]:
    """
    Return a copy of the candidate with city_name, barangay_name, township and estate recomputed.

    Any value supplied for the derived fields is discarded. Never raises.
    """
    enriched = dict(candidate)
    city = candidate.get("city")
    barangay = candidate.get("barangay")
    development = candidate.get("development")

    enriched["city_name"] = await lookup_location_name("city", city, lookup)
    enriched["barangay_name"] = await lookup_location_name("barangay", barangay, lookup)
    enriched["township"] = await _derive_township(barangay, lookup)
    enriched["estate"] = await _derive_estate(development, lookup)

    logger.debug(
        "Populated derived location fields",
        city_code=city,
        barangay_code=barangay,
        development_id=development,
        township_id=enriched["township"],
        estate_id=enriched["estate"],
    )
    return enriched


def _resolve(field: str, candidate: dict[str, Any], existing: Optional[dict[str, Any]]) -> Any:
    # Incoming value wins, even an explicit None; otherwise fall back to the stored document
    if field in candidate:
        return candidate[field]
    return (existing or {}).get(field)


async def validate_location_hierarchy(
    candidate: dict[str, Any],
    existing: Optional[dict[str, Any]],
    lookup: ReferenceLookup,
) -> None:
    """Raise LocationError if the selected development is not in the selected barangay."""
    barangay = _resolve("barangay", candidate, existing)
    development_id = _resolve("development", candidate, existing)

    if not barangay or not development_id:
        return

    development = await lookup.get_development(development_id)
    if development is None:
        raise LocationError(
            f'Invalid development selected: "{development_id}" does not exist',
            details={"development": development_id},
        )

    if development.barangay != barangay:
        raise LocationError(
            f'Development "{development.name}" does not belong to the selected barangay',
            details={"development": development.id, "barangay": barangay},
        )
