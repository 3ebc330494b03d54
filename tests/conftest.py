"""Shared pytest fixtures and configuration."""

import os
import pytest
from unittest.mock import Mock
from freezegun import freeze_time

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-key")
os.environ.setdefault("LOG_FORMAT", "text")

from mls.models.location import Development, Estate, Township
from mls.models.property_classification import PropertyCategory, PropertySubtype, PropertyType
from mls.models.user import UserRole
from tests.utils.factories import CARMEN, CDO_CITY, LAPASAN, create_user
from tests.utils.fakes import FakeNotificationSink, FakeRecipientDirectory, FakeReferenceLookup


@pytest.fixture
def mock_supabase_client():
    """Mock Supabase client for testing."""
    client = Mock()
    client.table = Mock(return_value=Mock())
    return client


@pytest.fixture
def reference_lookup():
    """Standard master data: two categories, a lot type, an orphan, Cagayan de Oro locations."""
    return FakeReferenceLookup(
        categories=[
            PropertyCategory(id="cat-residential", name="Residential"),
            PropertyCategory(id="cat-commercial", name="Commercial"),
        ],
        types=[
            PropertyType(id="type-condo", name="Condominium", category="cat-residential"),
            PropertyType(id="type-lot", name="Residential Lot", category="cat-residential"),
            PropertyType(id="type-office", name="Office Space", category="cat-commercial"),
            PropertyType(id="type-orphan", name="Orphan Type", category="cat-deleted"),
        ],
        subtypes=[
            PropertySubtype(id="sub-studio", name="Studio", property_type="type-condo"),
            PropertySubtype(id="sub-corner", name="Corner Lot", property_type="type-lot"),
            PropertySubtype(id="sub-orphan", name="Orphan Subtype", property_type="type-deleted"),
        ],
        cities={CDO_CITY: "Cagayan de Oro City"},
        barangays={CARMEN: "Carmen", LAPASAN: "Lapasan"},
        developments=[
            Development(id="dev-pueblo", name="Pueblo de Oro", barangay=CARMEN),
            Development(id="dev-centrio", name="Centrio Towers", barangay=LAPASAN),
        ],
        townships=[
            Township(id="town-inactive", name="Old Uptown", covered_barangays=[CARMEN], is_active=False),
            Township(id="town-uptown", name="Uptown CDO", covered_barangays=[CARMEN]),
        ],
        estates=[
            Estate(id="estate-oro", name="Oro Estates", included_developments=["dev-pueblo"]),
        ],
    )


@pytest.fixture
def agent_user():
    return create_user(UserRole.AGENT, user_id="AGENT0000000000000000000001")


@pytest.fixture
def other_agent_user():
    return create_user(UserRole.AGENT, user_id="AGENT0000000000000000000002")


@pytest.fixture
def approver_user():
    return create_user(UserRole.APPROVER, user_id="APPROVER00000000000000000001")


@pytest.fixture
def admin_user():
    return create_user(UserRole.ADMIN, user_id="ADMIN0000000000000000000001")


@pytest.fixture
def recipient_directory(approver_user, admin_user):
    return FakeRecipientDirectory([approver_user, admin_user])


@pytest.fixture
def notification_sink():
    return FakeNotificationSink()


@pytest.fixture
def freeze_time_fixture():
    """Fixture for freezing time in tests."""
    with freeze_time("2024-12-09 12:00:00") as frozen_time:
        yield frozen_time


@pytest.fixture(scope="function")
def reset_environment(monkeypatch):
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)
