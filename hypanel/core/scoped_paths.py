"""Resolution of client-supplied paths inside the server directory."""

import os
from pathlib import Path

from hypanel.core.errors import AccessDenied, NotFound


class ScopedPathResolver:
    """Map untrusted relative paths to absolute paths under ``root``.

    The candidate path is always normalized before the containment check,
    and containment is tested on whole path segments so that a sibling such
    as ``/opt/hytale-backup`` never passes for root ``/opt/hytale``.

    With ``resolve_symlinks`` enabled the candidate is canonicalized through
    the real filesystem first, so a link inside root that points elsewhere is
    rejected. Disabling it keeps a purely lexical check.
    """

    def __init__(self, root, resolve_symlinks=True):
        root_text = os.path.normpath(os.path.abspath(os.fspath(root)))
        if resolve_symlinks:
            root_text = os.path.realpath(root_text)
        self.root = Path(root_text)
        self.resolve_symlinks = resolve_symlinks
        self._root_text = root_text
        self._root_prefix = root_text if root_text.endswith(os.sep) else root_text + os.sep

    def _contains(self, candidate_text):
        return candidate_text == self._root_text or candidate_text.startswith(self._root_prefix)

    def resolve(self, requested=""):
        """Return the absolute path for ``requested`` or raise ``AccessDenied``."""
        text = "" if requested is None else str(requested)
        if "\x00" in text:
            raise AccessDenied()
        relative = text.lstrip("/" + (os.altsep or "") + os.sep)
        candidate = os.path.normpath(os.path.join(self._root_text, relative))
        if self.resolve_symlinks:
            candidate = os.path.realpath(candidate)
        if not self._contains(candidate):
            raise AccessDenied()
        return Path(candidate)

    def resolve_existing(self, requested="", follow_symlinks=True):
        """Resolve ``requested`` and require the target to exist on disk.

        With ``follow_symlinks=False`` the final component is returned as the
        link entry itself, so callers act on the link and not its target.
        """
        resolved = self.resolve(requested)
        if not follow_symlinks and self.resolve_symlinks:
            resolved = self._resolve_entry(requested)
        if not os.path.lexists(resolved):
            raise NotFound()
        return resolved

    def _resolve_entry(self, requested):
        relative = ("" if requested is None else str(requested)).lstrip("/" + (os.altsep or "") + os.sep)
        lexical = os.path.normpath(os.path.join(self._root_text, relative))
        if lexical == self._root_text:
            return Path(lexical)
        parent, name = os.path.split(lexical)
        candidate = os.path.join(os.path.realpath(parent), name)
        if not self._contains(candidate):
            raise AccessDenied()
        return Path(candidate)

    def relative(self, path):
        """Express a resolved path relative to root with ``/`` separators."""
        relative = os.path.relpath(os.fspath(path), self._root_text)
        if relative == os.curdir:
            return ""
        return relative.replace(os.sep, "/")

    def is_root(self, path):
        return os.fspath(path) == self._root_text
