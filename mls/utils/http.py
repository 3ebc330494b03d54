"""Helpers shared by the serverless request handlers."""

import json
from typing import Any, Optional

from pydantic import ValidationError

from mls.models.user import User
from mls.utils.errors import AuthorizationError, ListingValidationError, MLSError
from mls.utils.logging_config import LoggingConfig

JSON_HEADERS = {"Content-Type": "application/json"}


def json_response(status_code: int, payload: Any) -> dict:
    return {
        "statusCode": status_code,
        "headers": dict(JSON_HEADERS),
        "body": json.dumps(payload),
    }


def error_response(error: MLSError) -> dict:
    return json_response(error.status_code, error.to_response())


def parse_body(request: dict) -> dict:
    """Decode the JSON body; a malformed body is a validation error."""
    raw = request.get("body")
    if raw is None or raw == "":
        return {}
    if isinstance(raw, dict):
        return raw
    try:
        body = json.loads(raw)
    except json.JSONDecodeError:
        raise ListingValidationError("Request body must be valid JSON")
    if not isinstance(body, dict):
        raise ListingValidationError("Request body must be a JSON object")
    return body


def request_user(request: dict) -> User:
    """The authenticated user the platform attached to the request."""
    raw: Optional[dict] = request.get("user")
    if not raw:
        raise AuthorizationError("Authentication required")
    try:
        return User.model_validate(raw)
    except ValidationError:
        raise AuthorizationError("Authentication required")


def correlation_id_from(request: dict) -> Optional[str]:
    """Caller-supplied correlation id, matched case-insensitively."""
    wanted = LoggingConfig.LOG_CORRELATION_ID_HEADER.lower()
    headers = request.get("headers", {}) or {}
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None
