"""Public view of a shared listing (GET /api/share_links/view?token=<token>)."""

import asyncio
import logging

from mls.services.shared_links import ExternalShareLinkService
from mls.utils.errors import MLSError, NotFoundError
from mls.utils.http import correlation_id_from, error_response, json_response
from mls.utils.logging import correlation_context, setup_logging

setup_logging()
logger = logging.getLogger(__name__)


def handler(request):
    """No authentication; the token is the credential."""
    query_params = request.get("query", {}) or {}

    with correlation_context(correlation_id_from(request)):
        try:
            token = query_params.get("token")
            if not token:
                raise NotFoundError("Share link")

            listing = asyncio.run(ExternalShareLinkService().resolve_token(token))
            return json_response(200, {"listing": listing.model_dump(mode="json")})

        except MLSError as e:
            return error_response(e)
        except Exception as e:
            logger.error(f"Error resolving share link: {e}", exc_info=True)
            return error_response(MLSError("Internal server error"))
