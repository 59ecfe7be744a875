# edugame/utils/request_data.py
from typing import Any, Dict, Optional

from flask import request

from ..errors import InvalidField, MissingField


def json_body() -> Dict[str, Any]:
    """Request JSON as a dict; anything else counts as an empty body."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def require_text(data: Dict[str, Any], name: str, label: Optional[str] = None,
                 strip: bool = True) -> str:
    """A non-empty string field, else MissingField.

    With ``strip`` a whitespace-only value counts as empty; passwords pass
    ``strip=False`` so every character is significant.
    """
    value = data.get(name)
    if value is None or value == "" or (strip and isinstance(value, str) and not value.strip()):
        raise MissingField(f"{label or name} is required")
    if not isinstance(value, str):
        raise InvalidField(f"{label or name} must be a string")
    return value


def coerce_int(data: Dict[str, Any], name: str, default: Optional[int] = None,
               required: bool = False) -> Optional[int]:
    """Integer field; numeric strings are accepted, booleans are not."""
    value = data.get(name)
    if value is None:
        if required:
            raise MissingField(f"{name} is required")
        return default
    if isinstance(value, bool):
        raise InvalidField(f"{name} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise InvalidField(f"{name} must be an integer")
