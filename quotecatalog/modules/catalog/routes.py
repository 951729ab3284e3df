from __future__ import annotations

from flask import Blueprint, request

from quotecatalog.app.common.errors import upstream_failure
from quotecatalog.modules.catalog.service import fetch_categories, fetch_products

bp = Blueprint("catalog", __name__)


@bp.get("/categories")
def list_categories():
    """GET /api/categories - Upstream top-level categories, relayed as-is."""
    try:
        return fetch_categories(), 200
    except Exception as err:
        return upstream_failure(err, "Failed to fetch categories", "Cafe24 Categories")


@bp.get("/products")
def list_products():
    """GET /api/products - Displayed, on-sale products from upstream.

    Query params:
      - keyword: product name search
      - category: category_no
    """
    keyword = request.args.get("keyword") or ""
    category = request.args.get("category") or ""

    try:
        return fetch_products(keyword, category), 200
    except Exception as err:
        return upstream_failure(err, "Failed to fetch products", "Cafe24 Products")
