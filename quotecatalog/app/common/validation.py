from __future__ import annotations

from typing import Any, Dict, Iterable
from flask import request

from quotecatalog.app.common.errors import abort_json


def get_json() -> Dict[str, Any]:
    if not request.is_json:
        abort_json(400, "invalid_json", "Request must be application/json")
    data = request.get_json(silent=True)
    if data is None or not isinstance(data, dict):
        abort_json(400, "invalid_json", "Malformed JSON body")
    return data


def require_fields(data: Dict[str, Any], fields: Iterable[str]) -> None:
    missing = [f for f in fields if f not in data]
    if missing:
        abort_json(400, "validation_error", "Missing required fields", {"missing": missing})


def get_int(data: Dict[str, Any], field: str) -> int:
    value = data.get(field)
    # JSON true/false and 2.5 are not integers; "3" and 3.0 are accepted
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        abort_json(400, "validation_error", f"{field} must be an integer", {"field": field})
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        abort_json(400, "validation_error", f"{field} must be an integer", {"field": field})
