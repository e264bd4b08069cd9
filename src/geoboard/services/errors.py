"""Domain errors raised by Geoboard services.

Each error carries the HTTP status the request layer reports for it, so the
API exception handler stays a single lookup.
"""

from __future__ import annotations


class GeoboardError(Exception):
    """Base class for errors reported back to the caller."""

    status_code: int = 400
    default_detail: str = "Request could not be processed"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(GeoboardError):
    """Malformed input such as empty text or missing coordinates."""

    default_detail = "Invalid input"


class InvalidUser(GeoboardError):
    """The display name and token do not identify an existing user."""

    default_detail = "user not valid"


class Forbidden(GeoboardError):
    """The user is known but does not own the target resource."""

    status_code = 403
    default_detail = "Not allowed"


class DuplicateName(GeoboardError):
    """A user with the requested display name already exists."""

    default_detail = "User displayName already taken"


class NotFound(GeoboardError):
    """The requested message, user or vote does not exist."""

    status_code = 404
    default_detail = "Not found"


class BadRequest(GeoboardError):
    """A query is missing a required selector."""

    default_detail = "Bad request"


class StorageError(GeoboardError):
    """The store kept failing for a transaction that is safe to retry."""

    status_code = 503
    default_detail = "Storage temporarily unavailable"
