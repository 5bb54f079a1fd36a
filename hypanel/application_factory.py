"""App factory: builds the Flask app from an explicit ``PanelConfig``."""

from flask import Flask, has_request_context, request
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from hypanel.core.config import apply_default_flask_config, load_panel_config
from hypanel.core.errors import PanelError
from hypanel.core.response_helpers import (
    error_response,
    internal_error_response,
    panel_error_response,
    upload_too_large_response,
)
from hypanel.routes.api_routes import register_api_routes
from hypanel.routes.backup_routes import register_backup_routes
from hypanel.routes.file_routes import register_file_routes
from hypanel.routes.spa_routes import register_spa_routes
from hypanel.state import PanelState

CORS_ALLOW_METHODS = "GET, POST, DELETE, OPTIONS"
CORS_ALLOW_HEADERS = "Content-Type, Authorization, X-Requested-With"


def create_app(config=None, runner=None):
    """Return a configured Flask app.

    ``config`` defaults to ``load_panel_config()``; ``runner`` replaces the
    subprocess-backed command runner (tests pass a mock).
    """
    if config is None:
        config = load_panel_config()
    state = PanelState.from_config(config, runner=runner)

    app = Flask(__name__, static_folder=None)
    apply_default_flask_config(app, config)
    app.extensions["panel_state"] = state

    @app.after_request
    def _apply_cors_headers(response):
        response.headers["Access-Control-Allow-Origin"] = config.cors_origin
        if config.cors_origin != "*":
            response.headers["Vary"] = "Origin"
        response.headers["Access-Control-Allow-Methods"] = CORS_ALLOW_METHODS
        response.headers["Access-Control-Allow-Headers"] = CORS_ALLOW_HEADERS
        return response

    @app.errorhandler(PanelError)
    def _panel_error_handler(exc):
        return panel_error_response(exc)

    @app.errorhandler(RequestEntityTooLarge)
    def _upload_too_large_handler(exc):
        state.log_action("upload", rejection_message="Upload exceeds size limit.")
        return upload_too_large_response(config.upload_max_bytes)

    @app.errorhandler(Exception)
    def _unhandled_exception_handler(exc):
        if isinstance(exc, HTTPException):
            return error_response(exc.name.lower().replace(" ", "_"), exc.description, exc.code)
        path = request.path if has_request_context() else "unknown-path"
        state.log_exception(f"unhandled_exception path={path}", exc)
        return internal_error_response()

    register_api_routes(app, state)
    register_file_routes(app, state)
    register_backup_routes(app, state)
    register_spa_routes(app, state)
    return app
