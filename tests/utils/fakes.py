"""In-memory collaborators for listing workflow tests."""

from typing import Any, Optional

from mls.models.location import Development, Estate, Township
from mls.models.property_classification import PropertyCategory, PropertySubtype, PropertyType
from mls.models.user import User


class FakeReferenceLookup:
    """Dict-backed ReferenceLookup; records every call made to it."""

    def __init__(
        self,
        categories: Optional[list[PropertyCategory]] = None,
        types: Optional[list[PropertyType]] = None,
        subtypes: Optional[list[PropertySubtype]] = None,
        cities: Optional[dict[str, str]] = None,
        barangays: Optional[dict[str, str]] = None,
        developments: Optional[list[Development]] = None,
        townships: Optional[list[Township]] = None,
        estates: Optional[list[Estate]] = None,
    ):
        self.categories = {c.id: c for c in categories or []}
        self.types = {t.id: t for t in types or []}
        self.subtypes = {s.id: s for s in subtypes or []}
        self.cities = dict(cities or {})
        self.barangays = dict(barangays or {})
        self.developments = {d.id: d for d in developments or []}
        self.townships = list(townships or [])
        self.estates = list(estates or [])
        self.calls: list[tuple[str, Any]] = []
        self.failing: set[str] = set()

    def _record(self, method: str, arg: Any) -> None:
        self.calls.append((method, arg))
        if method in self.failing:
            raise RuntimeError(f"{method} unavailable")

    async def get_property_category(self, category_id):
        self._record("get_property_category", category_id)
        return self.categories.get(category_id)

    async def get_property_type(self, type_id):
        self._record("get_property_type", type_id)
        return self.types.get(type_id)

    async def get_property_subtype(self, subtype_id):
        self._record("get_property_subtype", subtype_id)
        return self.subtypes.get(subtype_id)

    async def get_city_name(self, psgc_code):
        self._record("get_city_name", psgc_code)
        return self.cities.get(psgc_code)

    async def get_barangay_name(self, psgc_code):
        self._record("get_barangay_name", psgc_code)
        return self.barangays.get(psgc_code)

    async def get_development(self, development_id):
        self._record("get_development", development_id)
        return self.developments.get(development_id)

    async def get_township(self, township_id):
        self._record("get_township", township_id)
        return next((t for t in self.townships if t.id == township_id), None)

    async def get_estate(self, estate_id):
        self._record("get_estate", estate_id)
        return next((e for e in self.estates if e.id == estate_id), None)

    async def find_township_for_barangay(self, barangay_code):
        self._record("find_township_for_barangay", barangay_code)
        return next((t for t in self.townships if t.is_active and t.covers(barangay_code)), None)

    async def find_estate_for_development(self, development_id):
        self._record("find_estate_for_development", development_id)
        return next((e for e in self.estates if e.includes(development_id)), None)


class FakeRecipientDirectory:
    def __init__(self, reviewers: Optional[list[User]] = None):
        self.reviewers = list(reviewers or [])

    async def list_active_reviewers(self) -> list[User]:
        return [user for user in self.reviewers if user.is_active]


class FakeNotificationSink:
    """Collects created notifications; recipients in `fail_for` raise."""

    def __init__(self, fail_for: Optional[set[str]] = None):
        self.created: list[dict[str, Any]] = []
        self.fail_for = set(fail_for or [])

    async def create_notification(self, data: dict[str, Any]) -> dict[str, Any]:
        if data["recipient"] in self.fail_for:
            raise RuntimeError("notification store unavailable")
        record = {"id": f"ntf-{len(self.created) + 1}", **data}
        self.created.append(record)
        return record
