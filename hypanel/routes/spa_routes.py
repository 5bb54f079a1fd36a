"""Static frontend serving with single-page-app fallback."""
import os

from flask import send_from_directory
from werkzeug.security import safe_join

from hypanel.core.response_helpers import api_not_found_response, error_response


def register_spa_routes(app, state):
    """Serve the prebuilt frontend from ``DIST_DIR``; unknown paths get index.html."""
    dist_dir = str(state.config.dist_dir)

    def _index():
        if not os.path.isfile(os.path.join(dist_dir, "index.html")):
            return error_response("frontend_missing", "Frontend build not found.", 404)
        return send_from_directory(dist_dir, "index.html")

    # Route: /
    @app.route("/")
    def spa_index():
        return _index()

    # Route: /<path:asset>
    @app.route("/<path:asset>")
    def spa_asset(asset):
        if asset == "api" or asset.startswith("api/"):
            return api_not_found_response()
        candidate = safe_join(dist_dir, asset)
        if candidate is not None and os.path.isfile(candidate):
            return send_from_directory(dist_dir, asset)
        # Client-side routes such as /files or /backups.
        return _index()
