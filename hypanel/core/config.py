"""Runtime configuration for the panel, assembled once at startup."""

from dataclasses import dataclass
from datetime import timezone, tzinfo
import os
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from hypanel.core.web_config import WebConfig

APP_DIR = Path(__file__).resolve().parent.parent.parent
DEFAULT_CONFIG_PATH = APP_DIR / "panel.env"


@dataclass(frozen=True)
class PanelConfig:
    """Immutable settings handed to the app factory and every service."""

    service_name: str
    server_dir: Path
    backup_subdir: str
    mods_subdir: str
    web_host: str
    web_port: int
    upload_max_bytes: int
    log_max_lines: int
    max_players: int
    use_sudo: bool
    resolve_symlinks: bool
    command_timeout_seconds: float
    backup_timeout_seconds: float
    display_tz: tzinfo
    log_dir: Path
    dist_dir: Path
    cors_origin: str

    @property
    def backup_dir(self):
        return self.server_dir / self.backup_subdir

    @property
    def mods_dir(self):
        return self.server_dir / self.mods_subdir

    @property
    def action_log_file(self):
        return self.log_dir / "panel-actions.log"


def _load_display_tz(name):
    if name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return timezone.utc


def _clean_subdir(name, default):
    """Keep only a single path segment for Root-relative subdirectories."""
    cleaned = Path(str(name or "").strip().strip("/")).name
    if cleaned in {"", ".", ".."}:
        return default
    return cleaned


def build_panel_config(cfg):
    """Translate typed ``WebConfig`` lookups into a ``PanelConfig``."""
    resolve_symlinks = cfg.get_bool("RESOLVE_SYMLINKS", True)
    server_dir = Path(os.path.abspath(cfg.get_path("SERVER_DIR", "/opt/hytale")))
    if resolve_symlinks:
        server_dir = Path(os.path.realpath(server_dir))
    return PanelConfig(
        service_name=cfg.get_str("SERVICE_NAME", "hytale.service"),
        server_dir=server_dir,
        backup_subdir=_clean_subdir(cfg.get_str("BACKUP_SUBDIR", "backups"), "backups"),
        mods_subdir=_clean_subdir(cfg.get_str("MODS_SUBDIR", "mods"), "mods"),
        web_host=cfg.get_str("WEB_HOST", "0.0.0.0"),
        web_port=cfg.get_int("PORT", 3007, minimum=1),
        upload_max_bytes=cfg.get_int("UPLOAD_MAX_BYTES", 512 * 1024 * 1024, minimum=1),
        log_max_lines=cfg.get_int("LOG_MAX_LINES", 5000, minimum=1),
        max_players=cfg.get_int("MAX_PLAYERS", 50, minimum=0),
        use_sudo=cfg.get_bool("USE_SUDO", True),
        resolve_symlinks=resolve_symlinks,
        command_timeout_seconds=cfg.get_float("COMMAND_TIMEOUT_SECONDS", 30.0, minimum=1.0),
        backup_timeout_seconds=cfg.get_float("BACKUP_TIMEOUT_SECONDS", 1800.0, minimum=1.0),
        display_tz=_load_display_tz(cfg.get_str("DISPLAY_TZ", "UTC")),
        log_dir=cfg.get_path("LOG_DIR", APP_DIR / "logs"),
        dist_dir=cfg.get_path("DIST_DIR", APP_DIR / "dist"),
        cors_origin=cfg.get_str("CORS_ORIGIN", "*"),
    )


def load_panel_config(config_path=None, environ=None):
    """Load ``panel.env`` (or ``$PANEL_CONFIG``) and return a ``PanelConfig``."""
    env = os.environ if environ is None else environ
    if config_path is None:
        config_path = env.get("PANEL_CONFIG") or DEFAULT_CONFIG_PATH
    return build_panel_config(WebConfig(config_path, APP_DIR, environ=env))


def apply_default_flask_config(app, config):
    """Apply baseline Flask runtime config values."""
    app.config["MAX_CONTENT_LENGTH"] = config.upload_max_bytes
    app.config["SEND_FILE_MAX_AGE_DEFAULT"] = 86400
    app.json.sort_keys = False
