from __future__ import annotations

import click
import httpx
from flask import Blueprint

from quotecatalog.integrations.cafe24 import UpstreamNotConfigured
from quotecatalog.modules.catalog.service import fetch_categories, fetch_products
from quotecatalog.modules.quote.state import top_level_categories

cli_bp = Blueprint("cli", __name__, cli_group=None)


@cli_bp.cli.command("check-upstream")
@click.option("--keyword", default="", help="Product name to search for.")
def check_upstream(keyword: str) -> None:
    """Call the upstream API once and print what the catalog page would show."""
    try:
        categories = top_level_categories(fetch_categories().get("categories"))
        products = fetch_products(keyword=keyword).get("products") or []
    except (httpx.HTTPError, UpstreamNotConfigured) as err:
        raise click.ClickException(f"Upstream check failed: {err}")

    print(f"Top-level categories: {len(categories)}")
    for cat in categories:
        print(f"  [{cat.category_no}] {cat.category_name}")
    print(f"Products (display=T, selling=T): {len(products)}")
