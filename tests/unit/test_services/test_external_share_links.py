"""Tests for per-listing external share tokens."""

import re

import pytest
from unittest.mock import AsyncMock, patch

from mls.models.listing import Listing
from mls.services.shared_links import ExternalShareLinkService, generate_share_token
from mls.utils.errors import (
    AuthorizationError,
    FieldError,
    LinkUnavailableError,
    ListingValidationError,
    NotFoundError,
)
from tests.utils.factories import create_stored_listing

DB = "mls.services.shared_links.db"


def _link_row(owner_id, listing_id="LISTING1", **overrides):
    row = {
        "id": "SHARE1",
        "token": "tok-abc",
        "listing": listing_id,
        "created_by": owner_id,
        "expires_at": None,
        "is_active": True,
        "view_count": 4,
        "last_viewed_at": None,
    }
    row.update(overrides)
    return row


@pytest.mark.unit
def test_generate_share_token():
    token = generate_share_token()
    assert re.fullmatch(r"[A-Za-z0-9_-]{43}", token)
    assert generate_share_token() != token


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_for_published_listing(agent_user, freeze_time_fixture):
    listing = create_stored_listing(agent_user.id, status="published", id="LISTING1")
    with patch(f"{DB}.get_listing_by_id", new_callable=AsyncMock, return_value=listing), \
         patch(f"{DB}.insert_external_share_link", new_callable=AsyncMock) as mock_insert:
        mock_insert.side_effect = lambda data: data
        link = await ExternalShareLinkService().create_for_listing(
            "LISTING1", agent_user, "2024-12-31T00:00:00Z"
        )

    assert link.listing == "LISTING1"
    assert link.created_by == agent_user.id
    assert link.expires_at == "2024-12-31T00:00:00+00:00"
    assert link.is_active is True
    assert link.view_count == 0
    assert len(link.token) >= 43
    stored = mock_insert.await_args.args[0]
    assert stored["token"] == link.token
    assert stored["created_at"] == "2024-12-09T12:00:00+00:00"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_without_expiry(agent_user):
    listing = create_stored_listing(agent_user.id, status="published", id="LISTING1")
    with patch(f"{DB}.get_listing_by_id", new_callable=AsyncMock, return_value=listing), \
         patch(f"{DB}.insert_external_share_link", new_callable=AsyncMock) as mock_insert:
        mock_insert.side_effect = lambda data: data
        link = await ExternalShareLinkService().create_for_listing("LISTING1", agent_user)

    assert link.expires_at is None
    assert "expires_at" not in mock_insert.await_args.args[0]


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize("status", ["draft", "submitted", "needs_revision", "rejected"])
async def test_create_requires_published_listing(agent_user, status):
    listing = create_stored_listing(agent_user.id, status=status, id="LISTING1")
    with patch(f"{DB}.get_listing_by_id", new_callable=AsyncMock, return_value=listing), \
         patch(f"{DB}.insert_external_share_link", new_callable=AsyncMock) as mock_insert:
        with pytest.raises(ListingValidationError) as exc_info:
            await ExternalShareLinkService().create_for_listing("LISTING1", agent_user)

    assert exc_info.value.message == "Share links can only be created for published listings"
    mock_insert.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_for_missing_listing(agent_user):
    with patch(f"{DB}.get_listing_by_id", new_callable=AsyncMock, return_value=None):
        with pytest.raises(NotFoundError):
            await ExternalShareLinkService().create_for_listing("GONE", agent_user)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_rejects_bad_expiry(agent_user):
    listing = create_stored_listing(agent_user.id, status="published", id="LISTING1")
    with patch(f"{DB}.get_listing_by_id", new_callable=AsyncMock, return_value=listing):
        with pytest.raises(FieldError) as exc_info:
            await ExternalShareLinkService().create_for_listing("LISTING1", agent_user, "next tuesday")

    assert exc_info.value.fields == ["expires_at"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_resolve_counts_view(agent_user, freeze_time_fixture):
    listing = create_stored_listing(agent_user.id, status="published", id="LISTING1")
    row = _link_row(agent_user.id, expires_at="2024-12-31T00:00:00+00:00")
    with patch(f"{DB}.get_external_share_link", new_callable=AsyncMock, return_value=row) as mock_get, \
         patch(f"{DB}.get_listing_by_id", new_callable=AsyncMock, return_value=listing), \
         patch(f"{DB}.update_external_share_link", new_callable=AsyncMock) as mock_update:
        result = await ExternalShareLinkService().resolve_token("tok-abc")

    assert isinstance(result, Listing)
    assert result.id == "LISTING1"
    mock_get.assert_awaited_once_with("token", "tok-abc")
    mock_update.assert_awaited_once_with("SHARE1", {
        "view_count": 5,
        "last_viewed_at": "2024-12-09T12:00:00+00:00",
    })


@pytest.mark.unit
@pytest.mark.asyncio
async def test_resolve_revoked_link(agent_user):
    row = _link_row(agent_user.id, is_active=False)
    with patch(f"{DB}.get_external_share_link", new_callable=AsyncMock, return_value=row), \
         patch(f"{DB}.update_external_share_link", new_callable=AsyncMock) as mock_update:
        with pytest.raises(LinkUnavailableError) as exc_info:
            await ExternalShareLinkService().resolve_token("tok-abc")

    assert exc_info.value.reason == "revoked"
    assert exc_info.value.status_code == 410
    mock_update.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_resolve_expired_link(agent_user, freeze_time_fixture):
    row = _link_row(agent_user.id, expires_at="2024-12-09T11:59:59+00:00")
    with patch(f"{DB}.get_external_share_link", new_callable=AsyncMock, return_value=row), \
         patch(f"{DB}.update_external_share_link", new_callable=AsyncMock) as mock_update:
        with pytest.raises(LinkUnavailableError) as exc_info:
            await ExternalShareLinkService().resolve_token("tok-abc")

    assert exc_info.value.reason == "expired"
    assert exc_info.value.to_response()["error"]["code"] == "LINK_UNAVAILABLE"
    mock_update.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_resolve_unknown_token():
    with patch(f"{DB}.get_external_share_link", new_callable=AsyncMock, return_value=None):
        with pytest.raises(NotFoundError):
            await ExternalShareLinkService().resolve_token("nope")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_resolve_hides_unpublished_listing(agent_user):
    listing = create_stored_listing(agent_user.id, status="needs_revision", id="LISTING1")
    with patch(f"{DB}.get_external_share_link", new_callable=AsyncMock, return_value=_link_row(agent_user.id)), \
         patch(f"{DB}.get_listing_by_id", new_callable=AsyncMock, return_value=listing), \
         patch(f"{DB}.update_external_share_link", new_callable=AsyncMock) as mock_update:
        with pytest.raises(NotFoundError):
            await ExternalShareLinkService().resolve_token("tok-abc")

    mock_update.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_deactivate_owner_or_admin(agent_user, other_agent_user, admin_user):
    row = _link_row(agent_user.id)
    with patch(f"{DB}.get_external_share_link", new_callable=AsyncMock, return_value=row), \
         patch(f"{DB}.update_external_share_link", new_callable=AsyncMock) as mock_update:
        mock_update.side_effect = lambda _id, updates: {**row, **updates}
        service = ExternalShareLinkService()

        revoked = await service.deactivate("SHARE1", agent_user)
        assert revoked.is_active is False

        await service.deactivate("SHARE1", admin_user)
        assert mock_update.await_count == 2

        with pytest.raises(AuthorizationError):
            await service.deactivate("SHARE1", other_agent_user)
        assert mock_update.await_count == 2


@pytest.mark.unit
@pytest.mark.asyncio
async def test_deactivate_missing_link(agent_user):
    with patch(f"{DB}.get_external_share_link", new_callable=AsyncMock, return_value=None):
        with pytest.raises(NotFoundError):
            await ExternalShareLinkService().deactivate("GONE", agent_user)
