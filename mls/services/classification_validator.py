"""Validates the property classification hierarchy on a listing.

PropertyType must belong to the selected PropertyCategory, and
PropertySubtype must belong to the selected PropertyType.
"""

from typing import Any, Optional

from mls.models.property_classification import PropertyCategory, PropertyType
from mls.services.reference_lookup import ReferenceLookup
from mls.utils.errors import ClassificationError
from mls.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)


async def _category_name(lookup: ReferenceLookup, category_id: Optional[str]) -> Optional[str]:
    if not category_id:
        return None
    category = await lookup.get_property_category(category_id)
    return category.name if category else None


async def _type_name(lookup: ReferenceLookup, type_id: Optional[str]) -> Optional[str]:
    if not type_id:
        return None
    property_type = await lookup.get_property_type(type_id)
    return property_type.name if property_type else None


async def _check_type_in_category(
    candidate: dict[str, Any],
    lookup: ReferenceLookup,
) -> None:
    type_id = candidate.get("property_type")
    if not type_id:
        return

    property_type: Optional[PropertyType] = await lookup.get_property_type(type_id)
    if property_type is None:
        raise ClassificationError("Invalid Property Type selected")

    parent: Optional[PropertyCategory] = None
    if property_type.category:
        parent = await lookup.get_property_category(property_type.category)
    if parent is None:
        logger.error(
            "Property type has no resolvable category",
            property_type_id=property_type.id,
            category_id=property_type.category,
        )
        raise ClassificationError(
            f'Property Type "{property_type.name}" is not linked to a valid category. '
            "Please contact an administrator.",
            details={"property_type": property_type.id},
        )

    selected_category = candidate.get("property_category")
    if selected_category and parent.id != selected_category:
        selected_name = await _category_name(lookup, selected_category)
        raise ClassificationError(
            f'Property Type "{property_type.name}" belongs to category "{parent.name}", '
            f'but you selected category "{selected_name}". '
            "Please select a Property Type that matches your chosen category."
        )


async def _check_subtype_in_type(
    candidate: dict[str, Any],
    lookup: ReferenceLookup,
) -> None:
    subtype_id = candidate.get("property_subtype")
    if not subtype_id:
        return

    subtype = await lookup.get_property_subtype(subtype_id)
    if subtype is None:
        raise ClassificationError("Invalid Property Subtype selected")

    parent: Optional[PropertyType] = None
    if subtype.property_type:
        parent = await lookup.get_property_type(subtype.property_type)
    if parent is None:
        logger.error(
            "Property subtype has no resolvable type",
            property_subtype_id=subtype.id,
            property_type_id=subtype.property_type,
        )
        raise ClassificationError(
            f'Property Subtype "{subtype.name}" is not linked to a valid type. '
            "Please contact an administrator.",
            details={"property_subtype": subtype.id},
        )

    selected_type = candidate.get("property_type")
    if selected_type and parent.id != selected_type:
        selected_name = await _type_name(lookup, selected_type)
        raise ClassificationError(
            f'Property Subtype "{subtype.name}" belongs to type "{parent.name}", '
            f'but you selected type "{selected_name}". '
            "Please select a Property Subtype that matches your chosen type."
        )


async def validate_classification(candidate: dict[str, Any], lookup: ReferenceLookup) -> None:
    """Raise ClassificationError if category/type/subtype selections disagree."""
    await _check_type_in_category(candidate, lookup)
    await _check_subtype_in_type(candidate, lookup)
