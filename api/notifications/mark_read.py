"""Mark notifications read (POST /api/notifications/mark_read?id=<id>|all)."""

import asyncio
import logging

from mls.services.notifications import NotificationService
from mls.utils.errors import ListingValidationError, MLSError
from mls.utils.http import correlation_id_from, error_response, json_response, request_user
from mls.utils.logging import correlation_context, setup_logging

setup_logging()
logger = logging.getLogger(__name__)


def handler(request):
    query_params = request.get("query", {}) or {}

    with correlation_context(correlation_id_from(request)):
        try:
            target = query_params.get("id")
            if not target:
                raise ListingValidationError("Notification id is required")

            user = request_user(request)
            service = NotificationService()

            if target == "all":
                updated = asyncio.run(service.mark_all_read(user))
                return json_response(200, {"ok": True, "updated": updated})

            notification = asyncio.run(service.mark_read(target, user))
            return json_response(200, {"ok": True, "notification": notification.model_dump(mode="json")})

        except MLSError as e:
            return error_response(e)
        except Exception as e:
            logger.error(f"Error marking notifications read: {e}", exc_info=True)
            return error_response(MLSError("Internal server error"))
