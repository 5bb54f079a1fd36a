"""Web administration panel for a Hytale server run as a systemd unit.

Serves the dashboard frontend and a JSON API for:
- Host stats, player list and console (journal) logs
- Service controls (start/stop/restart)
- File browsing, upload and delete inside the server directory
- Backup create/list/delete/restore
"""

from hypanel.application_factory import create_app
from hypanel.main import run_server

__all__ = ["create_app", "run_server"]


if __name__ == "__main__":
    run_server()
