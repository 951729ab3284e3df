from __future__ import annotations

import logging
from typing import Optional

import httpx
from flask import Flask, g, jsonify
from werkzeug.exceptions import HTTPException

from quotecatalog.app.config import Config
from quotecatalog.app.extensions import cafe24, cors
from quotecatalog.app.common.errors import ApiError
from quotecatalog.app.common.request_context import echo_request_id, init_request_id
from quotecatalog.app.api.register import register_api_blueprints
from quotecatalog.app.cli import cli_bp
from quotecatalog.app.ui import ui_bp
from quotecatalog.modules.quote.submission import QuoteIntake, SimulatedQuoteIntake, format_krw


def create_app(
    config_object: type[Config] = Config,
    upstream_transport: Optional[httpx.BaseTransport] = None,
    quote_intake: Optional[QuoteIntake] = None,
) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_object)

    logging.basicConfig(level=app.config["LOG_LEVEL"], format="%(asctime)s %(levelname)s [%(name)s] %(message)s")

    # Extensions
    cors.init_app(app, resources={r"/api/*": {"origins": app.config.get("CORS_ORIGINS") or "*"}})
    cafe24.init_app(app, transport=upstream_transport)

    # Quote submissions are only logged until a real intake is plugged in
    app.extensions["quote_intake"] = quote_intake or SimulatedQuoteIntake(
        delay_seconds=app.config["QUOTE_SUBMIT_DELAY_SECONDS"]
    )

    app.add_template_filter(format_krw, "krw")

    # Request id
    @app.before_request
    def _before_request():
        init_request_id()

    app.after_request(echo_request_id)

    @app.get("/health")
    def health():
        return {"status": "ok"}, 200

    register_api_blueprints(app)
    app.register_blueprint(ui_bp)

    # CLI (flask check-upstream)
    app.register_blueprint(cli_bp)

    # Error handlers
    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        return jsonify(err.to_dict(getattr(g, "request_id", None))), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        # Normalize Werkzeug errors into our JSON shape
        payload = {
            "error": {
                "code": "http_error",
                "message": err.description,
                "details": {"name": err.name},
                "request_id": getattr(g, "request_id", None),
            }
        }
        return jsonify(payload), err.code or 500

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        app.logger.exception("Unhandled exception")
        payload = {
            "error": {
                "code": "internal_error",
                "message": "Internal server error",
                "details": {},
                "request_id": getattr(g, "request_id", None),
            }
        }
        return jsonify(payload), 500

    return app
