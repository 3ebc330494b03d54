"""Create an external share link for a published listing (POST /api/share_links/create)."""

import asyncio
import logging

from mls.services.shared_links import ExternalShareLinkService
from mls.utils.errors import ListingValidationError, MLSError
from mls.utils.http import correlation_id_from, error_response, json_response, parse_body, request_user
from mls.utils.logging import correlation_context, setup_logging

setup_logging()
logger = logging.getLogger(__name__)


def handler(request):
    with correlation_context(correlation_id_from(request)):
        try:
            user = request_user(request)
            body = parse_body(request)

            listing_id = body.get("listing_id")
            if not listing_id:
                raise ListingValidationError("Listing ID is required")

            link = asyncio.run(
                ExternalShareLinkService().create_for_listing(listing_id, user, body.get("expires_at"))
            )
            return json_response(201, link.model_dump(mode="json"))

        except MLSError as e:
            return error_response(e)
        except Exception as e:
            logger.error(f"Error creating share link: {e}", exc_info=True)
            return error_response(MLSError("Failed to create share link"))
