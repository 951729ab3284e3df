from flask import Flask

from quotecatalog.modules.catalog.routes import bp as catalog_bp
from quotecatalog.modules.quote.routes import bp as quote_bp


def register_api_blueprints(app: Flask) -> None:
    app.register_blueprint(catalog_bp, url_prefix="/api")
    app.register_blueprint(quote_bp, url_prefix="/api")

    # Root API document
    @app.get("/api")
    def api_index():
        return {
            "name": "Quote Catalog API",
            "version": "0.1.0",
            "endpoints": {
                "catalog": ["/categories", "/products"],
                "quote": [
                    "/quote",
                    "/quote/selectors/<product_no>",
                    "/quote/items",
                    "/quote/items/<product_no>",
                    "/quote/dialog",
                    "/quote/submit",
                ],
            },
        }, 200
