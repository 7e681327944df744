import uuid
from flask import request

from stager.errors import ValidationError


def require_uuid(value, label="id"):
    """Return ``value`` if it is a UUID string, else raise ValidationError."""
    try:
        uuid.UUID(str(value))
    except ValueError:
        raise ValidationError(f"Invalid {label} ID format")
    return value


def json_body():
    """Request JSON object, or an empty dict when no body was sent."""
    if not request.get_data(cache=True):
        return {}
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("Invalid request body")
    return payload
