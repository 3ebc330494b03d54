"""Reference-data lookups used by the listing validators and populator.

Validators never reach for a global client; they receive an object with the
methods of ``ReferenceLookup``. ``SupabaseReferenceLookup`` is the production
implementation; tests pass in-memory fakes.
"""

from typing import Optional, Protocol

from mls.models.location import Development, Estate, Township
from mls.models.property_classification import (
    PropertyCategory,
    PropertySubtype,
    PropertyType,
)
from mls.services import supabase_client as db
from mls.utils.logging_config import AppConfig


class ReferenceLookup(Protocol):
    async def get_property_category(self, category_id: str) -> Optional[PropertyCategory]: ...

    async def get_property_type(self, type_id: str) -> Optional[PropertyType]: ...

    async def get_property_subtype(self, subtype_id: str) -> Optional[PropertySubtype]: ...

    async def get_city_name(self, psgc_code: str) -> Optional[str]: ...

    async def get_barangay_name(self, psgc_code: str) -> Optional[str]: ...

    async def get_development(self, development_id: str) -> Optional[Development]: ...

    async def get_township(self, township_id: str) -> Optional[Township]: ...

    async def get_estate(self, estate_id: str) -> Optional[Estate]: ...

    async def find_township_for_barangay(self, barangay_code: str) -> Optional[Township]: ...

    async def find_estate_for_development(self, development_id: str) -> Optional[Estate]: ...


class SupabaseReferenceLookup:
    """Reads master data from the Supabase reference tables."""

    def __init__(self, township_scan_limit: Optional[int] = None):
        self.township_scan_limit = township_scan_limit or AppConfig.TOWNSHIP_SCAN_LIMIT

    async def get_property_category(self, category_id: str) -> Optional[PropertyCategory]:
        row = await db.get_row_by_id(db.PROPERTY_CATEGORIES_TABLE, category_id)
        return PropertyCategory.model_validate(row) if row else None

    async def get_property_type(self, type_id: str) -> Optional[PropertyType]:
        row = await db.get_row_by_id(db.PROPERTY_TYPES_TABLE, type_id)
        return PropertyType.model_validate(row) if row else None

    async def get_property_subtype(self, subtype_id: str) -> Optional[PropertySubtype]:
        row = await db.get_row_by_id(db.PROPERTY_SUBTYPES_TABLE, subtype_id)
        return PropertySubtype.model_validate(row) if row else None

    async def get_city_name(self, psgc_code: str) -> Optional[str]:
        row = await db.get_row_by_psgc_code(db.CITIES_TABLE, psgc_code)
        return row.get("name") if row else None

    async def get_barangay_name(self, psgc_code: str) -> Optional[str]:
        row = await db.get_row_by_psgc_code(db.BARANGAYS_TABLE, psgc_code)
        return row.get("name") if row else None

    async def get_development(self, development_id: str) -> Optional[Development]:
        row = await db.get_row_by_id(db.DEVELOPMENTS_TABLE, development_id)
        return Development.model_validate(row) if row else None

    async def get_township(self, township_id: str) -> Optional[Township]:
        row = await db.get_row_by_id(db.TOWNSHIPS_TABLE, township_id)
        return Township.model_validate(row) if row else None

    async def get_estate(self, estate_id: str) -> Optional[Estate]:
        row = await db.get_row_by_id(db.ESTATES_TABLE, estate_id)
        return Estate.model_validate(row) if row else None

    async def find_township_for_barangay(self, barangay_code: str) -> Optional[Township]:
        # covered_barangays is a JSON array; containment is matched in memory
        rows = await db.list_active_townships(limit=self.township_scan_limit)
        for row in rows:
            township = Township.model_validate(row)
            if township.covers(barangay_code):
                return township
        return None

    async def find_estate_for_development(self, development_id: str) -> Optional[Estate]:
        rows = await db.find_estates_including_development(development_id)
        return Estate.model_validate(rows[0]) if rows else None
