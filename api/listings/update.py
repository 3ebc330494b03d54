"""Listing update endpoint (PATCH /api/listings/update?id=<listing id>)."""

import asyncio
import logging

from mls.services.listing_service import ListingService
from mls.utils.errors import ListingValidationError, MLSError
from mls.utils.http import correlation_id_from, error_response, json_response, parse_body, request_user
from mls.utils.logging import correlation_context, mask_sensitive_data, setup_logging

setup_logging()
logger = logging.getLogger(__name__)


def handler(request):
    """
    Apply a partial update to a listing.

    Validation failures return 400 with the human-readable message,
    authorization failures 403 and unknown listings 404.
    """
    query_params = request.get("query", {}) or {}

    with correlation_context(correlation_id_from(request)):
        try:
            listing_id = query_params.get("id")
            if not listing_id:
                raise ListingValidationError("Listing id is required")

            user = request_user(request)
            data = parse_body(request)

            listing = asyncio.run(ListingService().update_listing(listing_id, data, user))
            return json_response(200, {"ok": True, "listing": listing.model_dump(mode="json")})

        except MLSError as e:
            logger.info(
                "Listing update rejected",
                extra={"code": e.code, "status_code": e.status_code, "error": e.message}
            )
            return error_response(e)
        except Exception as e:
            logger.error(f"Error updating listing: {mask_sensitive_data(str(e))}", exc_info=True)
            return error_response(MLSError("Internal server error"))
