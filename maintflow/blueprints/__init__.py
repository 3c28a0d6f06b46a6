"""
Maintenance Workflow Service
Blueprint registry.
"""

from flask import request

from maintflow.core.exceptions import ValidationError


def json_object() -> dict:
    """Request body as a dict; an absent or non-object body raises ValidationError."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data
