"""Backup route registration."""
from flask import jsonify

from hypanel.core.errors import PanelError
from hypanel.core.response_helpers import ok_response
from hypanel.services import backups


def register_backup_routes(app, state):
    """Register backup list/create/delete/restore routes."""

    # Route: /api/backups
    @app.route("/api/backups")
    def list_backups():
        return jsonify({"backups": backups.list_backups(state)})

    # Route: /api/backups (create)
    @app.route("/api/backups", methods=["POST"])
    def create_backup():
        try:
            name = backups.create_backup(state)
        except PanelError as exc:
            state.log_action("backup-create", rejection_message=exc.log_message)
            raise
        state.log_action("backup-create", command=name)
        return ok_response(name=name, message=f"Backup {name} created.")

    # Route: /api/backups/<filename>
    @app.route("/api/backups/<path:filename>", methods=["DELETE"])
    def delete_backup(filename):
        try:
            name = backups.delete_backup(state, filename)
        except PanelError as exc:
            state.log_action("backup-delete", command=filename, rejection_message=exc.log_message)
            raise
        state.log_action("backup-delete", command=name)
        return ok_response(name=name, message=f"Backup {name} deleted.")

    # Route: /api/backups/<filename>/restore
    @app.route("/api/backups/<path:filename>/restore", methods=["POST"])
    def restore_backup(filename):
        """Extract the archive over the server directory."""
        try:
            name = backups.restore_backup(state, filename)
        except PanelError as exc:
            state.log_action("backup-restore", command=filename, rejection_message=exc.log_message)
            raise
        state.log_action("backup-restore", command=name)
        return ok_response(name=name, message=f"Backup {name} restored.")
