"""Upstream queries shared by the proxy routes and the catalog page."""

from __future__ import annotations

from typing import Any, Dict, Optional

from flask import current_app

from quotecatalog.app.extensions import cafe24


def product_params(keyword: str = "", category: str = "", limit: Optional[int] = None) -> Dict[str, Any]:
    """Map page filters onto Cafe24 ``/products`` query params.

    Empty filters are sent as ``None`` so the client leaves them out.
    """
    if limit is None:
        limit = current_app.config["CATALOG_PRODUCT_LIMIT"]
    return {
        "product_name": keyword or None,
        "category": category or None,
        "display": "T",
        "selling": "T",
        "limit": limit,
    }


def fetch_categories() -> Any:
    return cafe24.get("/categories", params={"depth": 1})


def fetch_products(keyword: str = "", category: str = "") -> Any:
    return cafe24.get("/products", params=product_params(keyword, category))
