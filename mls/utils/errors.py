"""Error handling utilities."""

from typing import Any, Optional


class MLSError(Exception):
    """Base exception for the MLS backend."""

    code = "SERVER_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_response(self) -> dict[str, Any]:
        """Format error for an API response body."""
        error: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            error["details"] = self.details
        return {"error": error}


class ListingValidationError(MLSError):
    """Listing write rejected before persistence."""

    code = "VALIDATION_ERROR"
    status_code = 400


class TransitionError(ListingValidationError):
    """Illegal listing status change."""

    def __init__(self, message: str, current: Optional[str] = None, requested: Optional[str] = None):
        super().__init__(message, details={"from": current, "to": requested})
        self.current = current
        self.requested = requested


class ClassificationError(ListingValidationError):
    """Property category/type/subtype mismatch or orphaned reference."""
    pass


class FieldError(ListingValidationError):
    """Missing, forbidden or out-of-range listing field(s)."""

    def __init__(self, message: str, fields: Optional[list[str]] = None):
        self.fields = list(fields or [])
        super().__init__(message, details={"fields": self.fields} if self.fields else None)


class LocationError(ListingValidationError):
    """Development/barangay mismatch or unresolvable location reference."""
    pass


class NotFoundError(MLSError):
    """Requested record does not exist."""

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, resource: str, identifier: Optional[Any] = None):
        if identifier is not None:
            message = f'{resource} with identifier "{identifier}" not found'
        else:
            message = f"{resource} not found"
        super().__init__(message)
        self.resource = resource
        self.identifier = identifier


class AuthorizationError(MLSError):
    """Actor lacks permission for the operation."""

    code = "AUTHORIZATION_FAILED"
    status_code = 403

    def __init__(self, message: str = "You do not have permission to perform this action"):
        super().__init__(message)


class LinkUnavailableError(MLSError):
    """Share link exists but was revoked or has expired."""

    code = "LINK_UNAVAILABLE"
    status_code = 410

    def __init__(self, message: str, reason: str):
        super().__init__(message, details={"reason": reason})
        self.reason = reason


class SupabaseError(MLSError):
    """Supabase operation error."""
    pass
