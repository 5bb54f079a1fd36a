"""Filesystem helpers for directory listings, uploads, deletes and safe names."""

from datetime import datetime
import os
from pathlib import Path
import shutil

from werkzeug.utils import secure_filename

from hypanel.core.errors import AccessDenied, IOFailure, NotFound


def format_file_size(num_bytes):
    """Format bytes into a human-readable string (B/KB/MB/GB/TB)."""
    value = float(max(0, num_bytes or 0))
    units = ["B", "KB", "MB", "GB", "TB"]
    idx = 0
    while value >= 1024 and idx < len(units) - 1:
        value /= 1024
        idx += 1
    if idx == 0:
        return f"{int(value)} {units[idx]}"
    return f"{value:.1f} {units[idx]}"


def _entry_sort_key(entry):
    return (entry["type"] != "directory", entry["name"].lower(), entry["name"])


def list_directory(resolver, requested):
    """Return the listing payload for a directory under the resolver root."""
    target = resolver.resolve_existing(requested)
    if not target.is_dir():
        raise NotFound("Directory not found.")

    entries = []
    try:
        children = list(os.scandir(target))
    except OSError as exc:
        raise IOFailure("Unable to read directory.") from exc

    for child in children:
        try:
            is_dir = child.is_dir()
            size = None if is_dir else child.stat().st_size
        except OSError:
            # Dangling links and entries removed mid-listing.
            is_dir, size = False, None
        entries.append({
            "name": child.name,
            "type": "directory" if is_dir else "file",
            "size": size,
            "path": resolver.relative(target / child.name),
        })

    entries.sort(key=_entry_sort_key)
    return {"path": resolver.relative(target) or "/", "files": entries}


def upload_safe_name(filename):
    """Reduce a client-supplied upload name to a safe base name or ``None``."""
    base = Path(str(filename or "").replace("\\", "/")).name
    name = secure_filename(base)
    if not name or name in {".", ".."}:
        return None
    return name


def upload_name_changes(uploads):
    """List uploads that will not be stored under the name the client sent.

    Returns ``(original, stored_name, note)`` tuples where ``note`` is
    ``"renamed"``, ``"unusable"`` (skipped, ``stored_name`` is ``None``) or
    ``"duplicate"`` (overwrites an earlier file from the same request).
    """
    seen = set()
    changes = []
    for upload in uploads:
        original = str(upload.filename or "")
        name = upload_safe_name(original)
        if name is None:
            changes.append((original, None, "unusable"))
            continue
        if name in seen:
            changes.append((original, name, "duplicate"))
        elif name != original:
            changes.append((original, name, "renamed"))
        seen.add(name)
    return changes


def save_uploads(resolver, requested, uploads):
    """Store uploaded files under the resolved destination directory.

    ``uploads`` is an iterable of werkzeug ``FileStorage`` objects. Returns the
    root-relative paths that were written.
    """
    destination = resolver.resolve(requested)
    if destination.exists() and not destination.is_dir():
        raise IOFailure("Upload destination is not a directory.")
    try:
        destination.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise IOFailure("Unable to create upload destination.") from exc

    saved = []
    for upload in uploads:
        name = upload_safe_name(upload.filename)
        if name is None:
            continue
        target = resolver.resolve(f"{resolver.relative(destination)}/{name}")
        if target.is_dir():
            raise IOFailure(f"Cannot overwrite directory with upload: {name}")
        try:
            upload.save(os.fspath(target))
        except OSError as exc:
            raise IOFailure(f"Unable to write uploaded file: {name}") from exc
        saved.append(resolver.relative(target))
    return saved


def remove_path(resolver, requested):
    """Delete a file, link or directory tree under the resolver root."""
    target = resolver.resolve_existing(requested, follow_symlinks=False)
    if resolver.is_root(target):
        raise AccessDenied("Refusing to delete the server directory.")
    try:
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        else:
            target.unlink()
    except FileNotFoundError as exc:
        raise NotFound() from exc
    except OSError as exc:
        raise IOFailure("Unable to delete path.") from exc
    return resolver.relative(target)


def list_archive_files(base_dir, suffix, display_tz):
    """Return archive metadata sorted newest-first for backup listings."""
    items = []
    if not base_dir.exists() or not base_dir.is_dir():
        return items

    for path in base_dir.iterdir():
        if not path.name.endswith(suffix) or not path.is_file():
            continue
        try:
            stat = path.stat()
        except OSError:
            continue
        items.append({
            "name": path.name,
            "mtime": stat.st_mtime,
            "size": stat.st_size,
            "size_text": format_file_size(stat.st_size),
            "created_at": datetime.fromtimestamp(stat.st_mtime, tz=display_tz).isoformat(),
        })

    items.sort(key=lambda item: item["mtime"], reverse=True)
    return items


def safe_filename_in_dir(base_dir, filename):
    """Validate and return a direct-child filename within ``base_dir``."""
    if not filename:
        return None
    name = Path(filename).name
    if name != filename or name in {".", ".."}:
        return None
    candidate = base_dir / name
    try:
        base_resolved = base_dir.resolve()
        candidate_resolved = candidate.resolve()
    except OSError:
        return None
    try:
        candidate_resolved.relative_to(base_resolved)
    except ValueError:
        return None
    if not candidate_resolved.exists() or not candidate_resolved.is_file():
        return None
    return name
