"""Tests for derived location fields and the barangay -> development check."""

import logging

import pytest

from mls.services.location_rules import (
    lookup_location_name,
    populate_location_derived,
    validate_location_hierarchy,
)
from mls.utils.errors import LocationError
from tests.utils.assertions import assert_derived_location
from tests.utils.factories import CARMEN, CDO_CITY, LAPASAN


@pytest.mark.unit
@pytest.mark.asyncio
async def test_populates_all_derived_fields(reference_lookup):
    candidate = {"city": CDO_CITY, "barangay": CARMEN, "development": "dev-pueblo"}

    enriched = await populate_location_derived(candidate, reference_lookup)

    assert_derived_location(
        enriched,
        city_name="Cagayan de Oro City",
        barangay_name="Carmen",
        township="town-uptown",
        estate="estate-oro",
    )
    # Input is left untouched
    assert "city_name" not in candidate


@pytest.mark.unit
@pytest.mark.asyncio
async def test_user_supplied_derived_values_are_discarded(reference_lookup):
    candidate = {
        "city": CDO_CITY,
        "barangay": LAPASAN,
        "development": "dev-centrio",
        "city_name": "Manila",
        "barangay_name": "Forged",
        "township": "town-uptown",
        "estate": "estate-oro",
    }

    enriched = await populate_location_derived(candidate, reference_lookup)

    assert_derived_location(enriched, city_name="Cagayan de Oro City", barangay_name="Lapasan")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_inactive_township_is_ignored(reference_lookup):
    """Only the active township covering the barangay is linked."""
    enriched = await populate_location_derived({"barangay": CARMEN}, reference_lookup)
    assert enriched["township"] == "town-uptown"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unknown_codes_yield_none_and_warn(reference_lookup, caplog):
    with caplog.at_level(logging.WARNING):
        enriched = await populate_location_derived(
            {"city": "999999999", "barangay": "888888888"},
            reference_lookup,
        )

    assert_derived_location(enriched)
    assert "Location PSGC code not found" in caplog.text


@pytest.mark.unit
@pytest.mark.asyncio
async def test_lookup_failures_never_raise(reference_lookup):
    reference_lookup.failing = {
        "get_city_name",
        "get_barangay_name",
        "find_township_for_barangay",
        "find_estate_for_development",
    }

    enriched = await populate_location_derived(
        {"city": CDO_CITY, "barangay": CARMEN, "development": "dev-pueblo"},
        reference_lookup,
    )

    assert_derived_location(enriched)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_populate_is_idempotent(reference_lookup):
    candidate = {"city": CDO_CITY, "barangay": CARMEN, "development": "dev-pueblo"}

    once = await populate_location_derived(candidate, reference_lookup)
    twice = await populate_location_derived(once, reference_lookup)

    assert once == twice


@pytest.mark.unit
@pytest.mark.asyncio
async def test_missing_codes_skip_lookups(reference_lookup):
    enriched = await populate_location_derived({"title": "No location"}, reference_lookup)

    assert_derived_location(enriched)
    assert reference_lookup.calls == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_lookup_location_name_kinds(reference_lookup):
    assert await lookup_location_name("city", CDO_CITY, reference_lookup) == "Cagayan de Oro City"
    assert await lookup_location_name("barangay", CARMEN, reference_lookup) == "Carmen"
    assert await lookup_location_name("city", None, reference_lookup) is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_development_in_barangay_passes(reference_lookup):
    await validate_location_hierarchy({"barangay": CARMEN, "development": "dev-pueblo"}, None, reference_lookup)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_development_outside_barangay_fails(reference_lookup):
    with pytest.raises(LocationError) as exc_info:
        await validate_location_hierarchy(
            {"barangay": LAPASAN, "development": "dev-pueblo"},
            None,
            reference_lookup,
        )
    assert exc_info.value.message == 'Development "Pueblo de Oro" does not belong to the selected barangay'


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unknown_development_fails(reference_lookup):
    with pytest.raises(LocationError, match="Invalid development"):
        await validate_location_hierarchy(
            {"barangay": CARMEN, "development": "dev-gone"},
            None,
            reference_lookup,
        )


@pytest.mark.unit
@pytest.mark.asyncio
async def test_partial_update_uses_stored_values(reference_lookup):
    existing = {"barangay": CARMEN, "development": "dev-pueblo"}

    # Changing only the barangay re-checks the stored development
    with pytest.raises(LocationError):
        await validate_location_hierarchy({"barangay": LAPASAN}, existing, reference_lookup)

    await validate_location_hierarchy({"title": "Renamed"}, existing, reference_lookup)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_explicit_none_clears_instead_of_falling_back(reference_lookup):
    existing = {"barangay": CARMEN, "development": "dev-pueblo"}

    await validate_location_hierarchy({"barangay": LAPASAN, "development": None}, existing, reference_lookup)
    assert reference_lookup.calls == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_city_barangay_consistency_not_checked(reference_lookup):
    """The barangay's parent city is not verified server-side."""
    await validate_location_hierarchy(
        {"city": "999999999", "barangay": CARMEN, "development": "dev-pueblo"},
        None,
        reference_lookup,
    )
