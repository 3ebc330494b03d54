"""Listing status workflow: transition table plus role capability filter.

draft          -> submitted                            (agent submits for review)
submitted      -> published | needs_revision | rejected (approver decides)
needs_revision -> submitted                            (agent resubmits)
published      -> draft                                (unpublish for editing)
rejected       -> draft                                (allow re-editing)
"""

from typing import Optional, Union

from mls.models.listing import ListingStatus
from mls.models.user import UserRole
from mls.utils.errors import TransitionError

StatusLike = Union[ListingStatus, str]
RoleLike = Union[UserRole, str, None]

VALID_TRANSITIONS: dict[ListingStatus, frozenset[ListingStatus]] = {
    ListingStatus.DRAFT: frozenset({ListingStatus.SUBMITTED}),
    ListingStatus.SUBMITTED: frozenset({
        ListingStatus.PUBLISHED,
        ListingStatus.NEEDS_REVISION,
        ListingStatus.REJECTED,
    }),
    ListingStatus.NEEDS_REVISION: frozenset({ListingStatus.SUBMITTED}),
    ListingStatus.PUBLISHED: frozenset({ListingStatus.DRAFT}),
    ListingStatus.REJECTED: frozenset({ListingStatus.DRAFT}),
}

# Target states each restricted role may request; roles not listed are unrestricted
ROLE_ALLOWED_TARGETS: dict[UserRole, frozenset[ListingStatus]] = {
    UserRole.AGENT: frozenset({ListingStatus.SUBMITTED}),
}


def _coerce_status(value: StatusLike) -> ListingStatus:
    try:
        return ListingStatus(value)
    except ValueError:
        raise TransitionError(f"Unknown listing status: {value}", requested=str(value))


def _coerce_role(value: RoleLike) -> Optional[UserRole]:
    if value is None:
        return None
    try:
        return UserRole(value)
    except ValueError:
        return None


def is_table_transition(current: StatusLike, requested: StatusLike) -> bool:
    """Whether the state machine has an edge current -> requested."""
    return _coerce_status(requested) in VALID_TRANSITIONS.get(_coerce_status(current), frozenset())


def validate_status_transition(current: StatusLike, requested: StatusLike, actor_role: RoleLike) -> None:
    """
    Raise TransitionError unless the actor may move the listing from current to requested.

    Admins bypass the table. Everyone else must follow it, and agents are
    further limited to submitting.
    """
    current_status = _coerce_status(current)
    requested_status = _coerce_status(requested)

    if current_status == requested_status:
        return

    role = _coerce_role(actor_role)
    if role == UserRole.ADMIN:
        return

    if not is_table_transition(current_status, requested_status):
        raise TransitionError(
            f"Invalid status transition: {current_status.value} → {requested_status.value}",
            current=current_status.value,
            requested=requested_status.value,
        )

    restricted_to = ROLE_ALLOWED_TARGETS.get(role)
    if restricted_to is not None and requested_status not in restricted_to:
        raise TransitionError(
            "Agents can only submit listings for review",
            current=current_status.value,
            requested=requested_status.value,
        )
