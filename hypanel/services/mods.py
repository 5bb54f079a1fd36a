"""Installed mod/plugin archive listing."""

import re

MOD_SUFFIXES = (".jar", ".zip")
DISABLED_SUFFIX = ".disabled"
_VERSION_RE = re.compile(r"[-_ ]v?(\d+(?:\.\d+)+(?:[-+.][0-9A-Za-z]+)*)$")


def parse_mod_filename(filename):
    """Split a mod archive file name into ``(name, version, enabled)``.

    Returns ``None`` for files that are not mod archives.
    """
    enabled = True
    stem = filename
    if stem.lower().endswith(DISABLED_SUFFIX):
        enabled = False
        stem = stem[: -len(DISABLED_SUFFIX)]
    for suffix in MOD_SUFFIXES:
        if stem.lower().endswith(suffix):
            stem = stem[: -len(suffix)]
            break
    else:
        return None

    version = ""
    match = _VERSION_RE.search(stem)
    if match:
        version = match.group(1)
        stem = stem[: match.start()]
    return stem or filename, version, enabled


def list_mods(ctx):
    mods_dir = ctx.config.mods_dir
    if not mods_dir.is_dir():
        return []
    items = []
    for path in mods_dir.iterdir():
        if not path.is_file():
            continue
        parsed = parse_mod_filename(path.name)
        if parsed is None:
            continue
        name, version, enabled = parsed
        try:
            size = path.stat().st_size
        except OSError:
            continue
        items.append({
            "name": name,
            "file": path.name,
            "version": version,
            "enabled": enabled,
            "description": "",
            "size": size,
        })
    items.sort(key=lambda item: item["name"].lower())
    return items
