"""Validates listing fields based on listing_type (resale vs preselling).

Resale and preselling listings carry disjoint field sets. Each type has its
own required fields, and any value in the other type's fields is rejected.
"""

from typing import Any, Optional

from mls.models.listing import (
    ListingType,
    PRESELLING_ONLY_FIELDS,
    RESALE_ONLY_FIELDS,
)
from mls.services.reference_lookup import ReferenceLookup
from mls.utils.errors import FieldError


def _is_filled(value: Any) -> bool:
    return value is not None and value != ""


def _positive(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return False
    try:
        return float(value) > 0
    except (TypeError, ValueError):
        return False


def _forbidden_fields(candidate: dict[str, Any], fields: tuple[str, ...]) -> list[str]:
    return [field for field in fields if _is_filled(candidate.get(field))]


def resolve_listing_type(
    candidate: dict[str, Any],
    existing: Optional[dict[str, Any]] = None,
) -> Optional[ListingType]:
    """Listing type from the incoming data, falling back to the stored document."""
    value = candidate.get("listing_type") or (existing or {}).get("listing_type")
    if not value:
        return None
    try:
        return ListingType(value)
    except ValueError:
        raise FieldError(f"Unknown listing type: {value}", fields=["listing_type"])


def validate_preselling_fields(candidate: dict[str, Any]) -> None:
    if not _is_filled(candidate.get("development")):
        raise FieldError("Preselling listings must have a Development selected", fields=["development"])

    if not _is_filled(candidate.get("model_name")):
        raise FieldError("Preselling listings must have a Model Name", fields=["model_name"])

    has_indicative_price = _positive(candidate.get("indicative_price"))
    has_price_range = (
        _positive(candidate.get("indicative_price_min"))
        and _positive(candidate.get("indicative_price_max"))
    )
    if not has_indicative_price and not has_price_range:
        raise FieldError(
            "Preselling listings must have either an Indicative Price or a Price Range (Min and Max)",
            fields=["indicative_price", "indicative_price_min", "indicative_price_max"],
        )

    if has_price_range and float(candidate["indicative_price_min"]) > float(candidate["indicative_price_max"]):
        raise FieldError(
            "Indicative Price Min cannot be greater than Indicative Price Max",
            fields=["indicative_price_min", "indicative_price_max"],
        )

    if not _positive(candidate.get("min_lot_area")) and not _positive(candidate.get("min_floor_area")):
        raise FieldError(
            "Preselling listings must have either Minimum Lot Area or Minimum Floor Area",
            fields=["min_lot_area", "min_floor_area"],
        )

    invalid = _forbidden_fields(candidate, RESALE_ONLY_FIELDS)
    if invalid:
        raise FieldError(
            f"Preselling listings cannot have these resale-only fields: {', '.join(invalid)}",
            fields=invalid,
        )


async def validate_resale_fields(candidate: dict[str, Any], lookup: ReferenceLookup) -> None:
    if not _positive(candidate.get("price")):
        raise FieldError("Resale listings must have a valid Price", fields=["price"])

    type_id = candidate.get("property_type")
    if type_id:
        property_type = await lookup.get_property_type(type_id)
        if property_type is not None and property_type.is_lot_type and not _positive(candidate.get("lot_area_sqm")):
            raise FieldError(
                "Lot/Land properties must have a valid Lot Area (sqm) for price per sqm calculation",
                fields=["lot_area_sqm"],
            )

    invalid = _forbidden_fields(candidate, PRESELLING_ONLY_FIELDS)
    if invalid:
        raise FieldError(
            f"Resale listings cannot have these preselling-only fields: {', '.join(invalid)}",
            fields=invalid,
        )


async def validate_listing_type_fields(
    candidate: dict[str, Any],
    lookup: ReferenceLookup,
    existing: Optional[dict[str, Any]] = None,
) -> None:
    """Raise FieldError when the candidate breaks its listing type's field rules."""
    listing_type = resolve_listing_type(candidate, existing)

    if listing_type == ListingType.PRESELLING:
        validate_preselling_fields(candidate)
    elif listing_type == ListingType.RESALE:
        await validate_resale_fields(candidate, lookup)
