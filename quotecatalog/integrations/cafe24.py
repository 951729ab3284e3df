"""Cafe24 Admin API client.

The only place that talks to the upstream e-commerce platform. It is wired
like the other Flask extensions: created once in ``extensions.py`` and bound
to an app in the factory via ``init_app``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
from flask import Flask

logger = logging.getLogger(__name__)


class UpstreamNotConfigured(RuntimeError):
    """Raised when a request is made before the base URL is known."""


class Cafe24Client:
    def __init__(self, app: Optional[Flask] = None, transport: Optional[httpx.BaseTransport] = None) -> None:
        self._client: Optional[httpx.Client] = None
        if app is not None:
            self.init_app(app, transport=transport)

    def init_app(self, app: Flask, transport: Optional[httpx.BaseTransport] = None) -> None:
        base_url = app.config.get("CAFE24_BASE_URL") or ""
        headers = {
            "Content-Type": "application/json",
            "X-Cafe24-Api-Version": app.config.get("CAFE24_API_VERSION", ""),
        }
        token = app.config.get("CAFE24_ACCESS_TOKEN")
        if token:
            headers["Authorization"] = f"Bearer {token}"

        if self._client is not None:
            self._client.close()
        self._client = httpx.Client(
            base_url=base_url,
            timeout=app.config.get("CAFE24_TIMEOUT_SECONDS", 10.0),
            headers=headers,
            transport=transport,
        )
        if not base_url:
            logger.warning("CAFE24_BASE_URL / CAFE24_MALL_ID not set; upstream calls will fail")
        app.extensions["cafe24"] = self

    @property
    def client(self) -> httpx.Client:
        if self._client is None or not str(self._client.base_url).strip("/"):
            raise UpstreamNotConfigured("Cafe24 client is not configured")
        return self._client

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET ``path`` and return the decoded JSON body.

        ``None`` values in ``params`` are dropped so optional filters are
        simply not sent. Raises ``httpx.HTTPStatusError`` for non-2xx
        responses and ``httpx.RequestError`` for transport failures.
        """
        clean = {k: v for k, v in (params or {}).items() if v is not None}
        response = self.client.get(path, params=clean)
        response.raise_for_status()
        return response.json() if response.content else {}

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
