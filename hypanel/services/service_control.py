"""systemd control and journal access for the game server unit."""

from hypanel.core.errors import InvalidAction

SERVICE_ACTIONS = {
    "start": "Server started.",
    "stop": "Server stopped.",
    "restart": "Server restarted.",
}
DEFAULT_LOG_LINES = 100


def get_status(ctx):
    """Return the raw ``systemctl is-active`` state ("active", "inactive", ...)."""
    result = ctx.runner.run(["systemctl", "is-active", ctx.config.service_name], check=False)
    return (result.stdout or "").strip() or "unknown"


def is_online(status):
    return status == "active"


def perform_service_action(ctx, action):
    """Run start/stop/restart for the configured unit and return a message."""
    message = SERVICE_ACTIONS.get((action or "").strip().lower())
    if message is None:
        raise InvalidAction(f"Unsupported server action: {action}")
    ctx.runner.run(["systemctl", action.strip().lower(), ctx.config.service_name], privileged=True)
    return message


def clamp_log_lines(value, maximum, default_value=DEFAULT_LOG_LINES):
    """Parse a ``lines`` query value into ``[1, maximum]``."""
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return min(default_value, maximum)
    return max(1, min(parsed, maximum))


def read_journal(ctx, lines):
    """Return the last ``lines`` journal lines for the configured unit."""
    result = ctx.runner.run(
        ["journalctl", "-u", ctx.config.service_name, "-n", str(lines), "--no-pager"],
        privileged=True,
    )
    text = (result.stdout or "").rstrip("\n")
    return text.split("\n") if text else []
