from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import httpx
from flask import jsonify

logger = logging.getLogger(__name__)


@dataclass
class ApiError(Exception):
    """Raise to return a consistent JSON error response."""

    status_code: int
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    def to_dict(self, request_id: str | None = None) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details or {},
                "request_id": request_id,
            }
        }
        return payload


def abort_json(status_code: int, code: str, message: str, details: Optional[Dict[str, Any]] = None) -> None:
    """Convenience wrapper."""
    raise ApiError(status_code=status_code, code=code, message=message, details=details)


def _request_url(err: httpx.HTTPError) -> Any:
    # .request raises when the error was created outside a client call
    try:
        return err.request.url
    except RuntimeError:
        return None


def _upstream_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or None


def upstream_failure(err: Exception, message: str, label: str) -> Tuple[Any, int]:
    """Map a failed upstream call onto the proxy envelope ``{error, details}``.

    The upstream status is relayed when there was a response, otherwise 500.
    """
    status = 500
    details = None

    if isinstance(err, httpx.HTTPStatusError):
        status = err.response.status_code
        details = _upstream_body(err.response)
        logger.error(
            "%s API Error: status=%s data=%r url=%s",
            label,
            status,
            details,
            _request_url(err),
        )
    elif isinstance(err, httpx.RequestError):
        logger.error("%s API Error: status=None data=None url=%s (%s)", label, _request_url(err), err)
    else:
        logger.error("Unexpected API Error: %s", err)

    return jsonify({"error": message, "details": details}), status
