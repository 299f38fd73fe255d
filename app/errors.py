"""
Error taxonomy shared by services, storage backends and the HTTP layer.
Every error here is recoverable: main.py turns them into JSON responses and
the application stays up.
"""

from typing import Optional


class TrackerError(Exception):
    """Base for all user-facing tracker errors."""

    status_code = 500
    error = "tracker_error"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code


class ValidationError(TrackerError):
    status_code = 422
    error = "validation_error"

    MISSING_NAME = "missing_name"
    INVALID_TYPE = "invalid_type"


class DecodeError(TrackerError):
    """Scanned text is not a usable identity payload."""

    status_code = 400
    error = "decode_error"

    MALFORMED_JSON = "malformed_json"
    SCHEMA_INVALID = "schema_invalid"

    def __init__(self, reason: str, message: Optional[str] = None):
        super().__init__(message or f"Invalid identity payload ({reason})", code=reason)
        self.reason = reason


class NotFoundError(TrackerError):
    status_code = 404
    error = "not_found"


class ResourceUnavailable(TrackerError):
    """Camera or other frame source could not be acquired."""

    status_code = 503
    error = "resource_unavailable"


class PersistenceError(TrackerError):
    status_code = 503
    error = "persistence_error"
