"""JSON error envelope shared by the workflow and health endpoints.

Every error response has the same body:

    {"error": "<message>", "code": "ERR_...", "details": {...}}

``details`` is omitted when empty. For a refused status change it carries
the full transition decision so the caller can show the reason and the
unchanged status without a second request.

Usage
-----
    from maintflow.utils.errors import api_error, E

    return api_error(E.VALIDATION_REQUIRED, "current_status and target_status are required")
    return api_error(E.CONFLICT_STATE, decision["reason"], details=decision)
"""

from __future__ import annotations

from flask import jsonify


class E:
    """Error codes. The HTTP status follows from the code unless overridden."""

    # 400: request or snapshot is unusable
    VALIDATION_REQUIRED = "ERR_VALIDATION_REQUIRED"
    VALIDATION_INVALID = "ERR_VALIDATION_INVALID"
    VALIDATION_CONSTRAINT = "ERR_VALIDATION_CONSTRAINT"

    # 404 / 405 / 413 / 415: routing and transport
    NOT_FOUND = "ERR_NOT_FOUND"
    METHOD_NOT_ALLOWED = "ERR_METHOD_NOT_ALLOWED"
    PAYLOAD_TOO_LARGE = "ERR_PAYLOAD_TOO_LARGE"
    UNSUPPORTED_MEDIA_TYPE = "ERR_UNSUPPORTED_MEDIA_TYPE"

    # 409: transition table forbids the status change
    CONFLICT_STATE = "ERR_CONFLICT_STATE"

    # 429
    RATE_LIMITED = "ERR_RATE_LIMITED"

    # 500
    INTERNAL = "ERR_INTERNAL"


HTTP_STATUS: dict[str, int] = {
    E.VALIDATION_REQUIRED: 400,
    E.VALIDATION_INVALID: 400,
    E.VALIDATION_CONSTRAINT: 400,
    E.NOT_FOUND: 404,
    E.METHOD_NOT_ALLOWED: 405,
    E.PAYLOAD_TOO_LARGE: 413,
    E.UNSUPPORTED_MEDIA_TYPE: 415,
    E.CONFLICT_STATE: 409,
    E.RATE_LIMITED: 429,
    E.INTERNAL: 500,
}


def api_error(code: str, message: str, *, status: int | None = None, details: dict | None = None):
    """``(response, status)`` tuple for a Flask view or error handler.

    Unknown codes default to 400.
    """
    body: dict = {"error": message, "code": code}
    if details:
        body["details"] = details
    return jsonify(body), status or HTTP_STATUS.get(code, 400)
