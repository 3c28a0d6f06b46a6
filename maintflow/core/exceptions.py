"""
Platform-wide exception hierarchy.

The workflow core itself never raises: illegal transitions come back as
``False`` / ``{"valid": False, ...}`` and malformed descriptions degrade to
defaults. Exceptions are reserved for the boundary, where a snapshot handed
over by the persistence collaborator (or posted to the API) is decoded into
typed records.

Usage:
    from maintflow.core.exceptions import ValidationError

    raise ValidationError("Unknown intervention status", details={"status": "OPEN"})
"""


class ValidationError(Exception):
    """Raised when a snapshot or request fails structural validation at the boundary.

    Maps to HTTP 400 (``E.VALIDATION_INVALID``) in the workflow blueprint.

    Args:
        message: Human-readable explanation of what failed.
        details: Optional field-level breakdown for structured API responses.
                 Keys are field names; values are error descriptions.
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message)
