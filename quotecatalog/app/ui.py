"""Server-rendered catalog page.

The page works on its own with ``?keyword=&category=`` links; the static
script then takes over filtering (debounced, sequenced fetches against the
proxy routes) and drives the quote API.
"""

import logging
from dataclasses import asdict

from flask import Blueprint, current_app, render_template, request, session

from quotecatalog.modules.catalog.service import fetch_categories, fetch_products
from quotecatalog.modules.quote.routes import SESSION_KEY
from quotecatalog.modules.quote.state import Product, QuoteState, reset_selectors, top_level_categories

logger = logging.getLogger(__name__)

ui_bp = Blueprint("ui", __name__)


def _products(payload) -> list:
    out = []
    for raw in (payload or {}).get("products") or []:
        try:
            out.append(Product.from_dict(raw))
        except (KeyError, TypeError, ValueError):
            logger.warning("Skipping malformed product: %r", raw)
    return out


@ui_bp.get("/")
def catalog_page():
    keyword = request.args.get("keyword") or ""
    category = request.args.get("category") or ""

    # Failed fetches leave the page usable, just empty.
    try:
        categories = top_level_categories((fetch_categories() or {}).get("categories"))
    except Exception as err:
        logger.error("Categories fetch error: %s", err)
        categories = []

    try:
        products = _products(fetch_products(keyword, category))
    except Exception as err:
        logger.error("Products fetch error: %s", err)
        products = []

    # A new result set starts every row selector at 1.
    quote = reset_selectors(QuoteState.from_session(session.get(SESSION_KEY)))
    session[SESSION_KEY] = quote.to_session()

    return render_template(
        "catalog.html",
        products=products,
        product_payloads={p.product_no: asdict(p) for p in products},
        categories=categories,
        keyword=keyword,
        category=category,
        quote=quote,
        debounce_ms=current_app.config["CATALOG_SEARCH_DEBOUNCE_MS"],
    )
