"""Dashboard, service control and console route registration."""
from datetime import datetime, timezone

from flask import jsonify, request

from hypanel.core.errors import PanelError
from hypanel.services import service_control
from hypanel.services.mods import list_mods
from hypanel.services.system_metrics import collect_server_stats


def register_api_routes(app, state):
    """Register health, stats, players, server control, logs and mods routes."""

    # Route: /api/health
    @app.route("/api/health")
    def health():
        return jsonify({"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()})

    # Route: /api/stats
    @app.route("/api/stats")
    def stats():
        return jsonify(collect_server_stats(state))

    # Route: /api/players
    @app.route("/api/players")
    def players():
        """Player list; the game server exposes no query protocol yet."""
        return jsonify({"online": 0, "max": state.config.max_players, "players": []})

    # Route: /api/server/<action>
    @app.route("/api/server/<action>", methods=["POST"])
    def server_action(action):
        """Start, stop or restart the systemd unit."""
        try:
            message = service_control.perform_service_action(state, action)
        except PanelError as exc:
            state.log_action("server-action", command=action, rejection_message=exc.log_message)
            raise
        state.log_action("server-action", command=f"{action} {state.config.service_name}")
        return jsonify({"success": True, "message": message})

    # Route: /api/logs
    @app.route("/api/logs")
    def logs():
        lines = service_control.clamp_log_lines(request.args.get("lines"), state.config.log_max_lines)
        return jsonify({"logs": service_control.read_journal(state, lines)})

    # Route: /api/plugins
    @app.route("/api/plugins")
    def plugins():
        return jsonify({"plugins": list_mods(state)})
