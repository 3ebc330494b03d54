"""Role checks and record-level access rules."""

from typing import Any, Iterable, Optional

from mls.models.listing import ListingStatus, ListingType
from mls.models.user import User, UserRole
from mls.utils.errors import AuthorizationError


def has_role(user: Optional[User], roles: Iterable[UserRole]) -> bool:
    if user is None:
        return False
    return user.role in tuple(roles)


def is_admin(user: Optional[User]) -> bool:
    return has_role(user, (UserRole.ADMIN,))


def is_approver_or_admin(user: Optional[User]) -> bool:
    return has_role(user, (UserRole.APPROVER, UserRole.ADMIN))


def is_agent(user: Optional[User]) -> bool:
    return has_role(user, (UserRole.AGENT,))


def owns(user: User, record: dict[str, Any]) -> bool:
    owner = record.get("created_by")
    if isinstance(owner, dict):
        owner = owner.get("id")
    return owner is not None and owner == user.id


def can_read_listing(user: Optional[User], listing: dict[str, Any]) -> bool:
    """Reviewers see everything; agents see their own and published listings."""
    if user is None:
        return False
    if is_approver_or_admin(user):
        return True
    return owns(user, listing) or listing.get("status") == ListingStatus.PUBLISHED.value


def can_update_listing(user: Optional[User], listing: dict[str, Any]) -> bool:
    """Agents may only edit their own resale listings while in draft or needs_revision."""
    if user is None:
        return False
    if is_approver_or_admin(user):
        return True
    return (
        owns(user, listing)
        and listing.get("listing_type") == ListingType.RESALE.value
        and listing.get("status") in (ListingStatus.DRAFT.value, ListingStatus.NEEDS_REVISION.value)
    )


def can_delete_listing(user: Optional[User], listing: dict[str, Any]) -> bool:
    if user is None:
        return False
    if is_admin(user):
        return True
    if is_agent(user):
        return owns(user, listing) and listing.get("status") == ListingStatus.DRAFT.value
    return False


def can_manage_shared_link(user: Optional[User], link: dict[str, Any]) -> bool:
    if user is None:
        return False
    return is_admin(user) or owns(user, link)


def require(allowed: bool, message: Optional[str] = None) -> None:
    """Raise AuthorizationError unless allowed."""
    if not allowed:
        raise AuthorizationError(message) if message else AuthorizationError()
