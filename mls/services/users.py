"""User lookups backed by the users table."""

import logging

from pydantic import ValidationError
from mls.models.user import REVIEWER_ROLES, User
from mls.services import supabase_client as db

logger = logging.getLogger(__name__)


class SupabaseUserDirectory:
    """Finds the approvers/admins who review submitted listings."""

    async def list_active_reviewers(self) -> list[User]:
        rows = await db.list_active_users_by_roles([role.value for role in REVIEWER_ROLES])

        reviewers: list[User] = []
        for row in rows:
            try:
                reviewers.append(User.model_validate(row))
            except ValidationError as e:
                logger.warning(
                    "Skipping malformed user row",
                    extra={"user_id": row.get("id"), "error": str(e)}
                )
        logger.info(
            "Resolved active reviewers",
            extra={"reviewer_count": len(reviewers)}
        )
        return reviewers
