"""Backup archive management for the server directory.

Archives are gzip'd tarballs kept in ``<server_dir>/<backup_subdir>``. Creating
and restoring shell out to ``tar``; the backups directory itself is excluded
from every archive so backups never nest.
"""

from datetime import datetime

from hypanel.core.errors import IOFailure, NotFound
from hypanel.core.filesystem_utils import list_archive_files, safe_filename_in_dir

BACKUP_SUFFIX = ".tar.gz"
BACKUP_PREFIX = "backup_"


def list_backups(ctx):
    """Return backup archive records, newest first."""
    backup_dir = ctx.config.backup_dir
    items = []
    for item in list_archive_files(backup_dir, BACKUP_SUFFIX, ctx.config.display_tz):
        items.append({
            "name": item["name"],
            "size": item["size"],
            "size_text": item["size_text"],
            "created_at": item["created_at"],
            "path": f"{ctx.config.backup_subdir}/{item['name']}",
        })
    return items


def _new_backup_name(ctx):
    stamp = datetime.now(tz=ctx.config.display_tz).strftime("%Y-%m-%d_%H-%M-%S")
    name = f"{BACKUP_PREFIX}{stamp}{BACKUP_SUFFIX}"
    suffix = 1
    while (ctx.config.backup_dir / name).exists():
        name = f"{BACKUP_PREFIX}{stamp}_{suffix}{BACKUP_SUFFIX}"
        suffix += 1
    return name


def create_backup(ctx):
    """Archive the whole server directory and return the new archive name."""
    backup_dir = ctx.config.backup_dir
    try:
        backup_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise IOFailure("Unable to create backups directory.") from exc

    name = _new_backup_name(ctx)
    archive = backup_dir / name
    try:
        ctx.runner.run(
            [
                "tar",
                "-czf",
                str(archive),
                f"--exclude=./{ctx.config.backup_subdir}",
                "-C",
                str(ctx.config.server_dir),
                ".",
            ],
            timeout=ctx.config.backup_timeout_seconds,
        )
    except IOFailure:
        archive.unlink(missing_ok=True)
        raise
    return name


def _require_backup(ctx, filename):
    """Return the validated archive path for ``filename`` or raise ``NotFound``."""
    safe_name = safe_filename_in_dir(ctx.config.backup_dir, filename)
    if safe_name is None or not safe_name.endswith(BACKUP_SUFFIX):
        raise NotFound("Backup file not found.")
    return safe_name, ctx.config.backup_dir / safe_name


def delete_backup(ctx, filename):
    safe_name, archive = _require_backup(ctx, filename)
    try:
        archive.unlink()
    except FileNotFoundError as exc:
        raise NotFound("Backup file not found.") from exc
    except OSError as exc:
        raise IOFailure("Unable to delete backup.") from exc
    return safe_name


def restore_backup(ctx, filename):
    """Extract an archive over the server directory."""
    safe_name, archive = _require_backup(ctx, filename)
    ctx.runner.run(
        ["tar", "-xzf", str(archive), "-C", str(ctx.config.server_dir)],
        timeout=ctx.config.backup_timeout_seconds,
    )
    return safe_name
