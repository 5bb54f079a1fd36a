import os
import tempfile
import unittest
from pathlib import Path

from hypanel.core.errors import AccessDenied, NotFound
from hypanel.core.scoped_paths import ScopedPathResolver


class LexicalResolverTests(unittest.TestCase):
    def setUp(self):
        self.resolver = ScopedPathResolver("/opt/hytale", resolve_symlinks=False)

    def test_empty_request_resolves_to_root(self):
        self.assertEqual(self.resolver.resolve(""), Path("/opt/hytale"))
        self.assertEqual(self.resolver.resolve(None), Path("/opt/hytale"))

    def test_leading_separators_are_stripped(self):
        self.assertEqual(self.resolver.resolve("/etc/passwd"), Path("/opt/hytale/etc/passwd"))
        self.assertEqual(self.resolver.resolve("///etc/passwd"), self.resolver.resolve("etc/passwd"))

    def test_dot_segments_normalize_before_check(self):
        self.assertEqual(self.resolver.resolve("a/../b"), self.resolver.resolve("b"))
        self.assertEqual(self.resolver.resolve("./mods//x/."), Path("/opt/hytale/mods/x"))
        self.assertEqual(self.resolver.resolve("mods/.."), Path("/opt/hytale"))

    def test_escapes_are_denied(self):
        for requested in ("..", "../../etc/passwd", "mods/../../etc", "a/b/../../../x", "/../hytale-evil"):
            with self.subTest(requested=requested):
                with self.assertRaises(AccessDenied):
                    self.resolver.resolve(requested)

    def test_sibling_with_shared_prefix_is_denied(self):
        with self.assertRaises(AccessDenied):
            self.resolver.resolve("../hytale-backup")
        with self.assertRaises(AccessDenied):
            self.resolver.resolve("../hytale-backup/world")

    def test_nul_byte_is_denied(self):
        with self.assertRaises(AccessDenied):
            self.resolver.resolve("mods/\x00evil")

    def test_denial_message_does_not_leak_paths(self):
        with self.assertRaises(AccessDenied) as ctx:
            self.resolver.resolve("../../etc/shadow")
        self.assertNotIn("/opt", ctx.exception.message)
        self.assertNotIn("etc", ctx.exception.message)

    def test_relative_path_formatting(self):
        self.assertEqual(self.resolver.relative(Path("/opt/hytale")), "")
        self.assertEqual(self.resolver.relative(Path("/opt/hytale/mods/a.jar")), "mods/a.jar")


class FilesystemResolverTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        base = Path(os.path.realpath(self._tmp.name))
        self.root = base / "hytale"
        self.outside = base / "outside"
        (self.root / "mods").mkdir(parents=True)
        self.outside.mkdir()
        (self.outside / "secret.txt").write_text("s", encoding="utf-8")
        self.resolver = ScopedPathResolver(self.root)

    def test_existing_directory_resolves(self):
        self.assertEqual(self.resolver.resolve_existing("mods"), self.root / "mods")

    def test_missing_path_is_not_found_not_denied(self):
        self.assertEqual(self.resolver.resolve("nonexistent"), self.root / "nonexistent")
        with self.assertRaises(NotFound):
            self.resolver.resolve_existing("nonexistent")

    def test_escape_is_denied_before_existence_check(self):
        with self.assertRaises(AccessDenied):
            self.resolver.resolve_existing("../outside/secret.txt")

    def test_symlink_pointing_outside_is_denied(self):
        (self.root / "escape").symlink_to(self.outside, target_is_directory=True)
        with self.assertRaises(AccessDenied):
            self.resolver.resolve("escape")
        with self.assertRaises(AccessDenied):
            self.resolver.resolve("escape/secret.txt")

    def test_symlink_inside_root_is_allowed(self):
        (self.root / "modlink").symlink_to(self.root / "mods", target_is_directory=True)
        self.assertEqual(self.resolver.resolve("modlink"), self.root / "mods")

    def test_lexical_mode_keeps_symlink_path(self):
        (self.root / "escape").symlink_to(self.outside, target_is_directory=True)
        lexical = ScopedPathResolver(self.root, resolve_symlinks=False)
        self.assertEqual(lexical.resolve("escape/secret.txt"), self.root / "escape" / "secret.txt")

    def test_root_given_through_symlink_is_canonicalized(self):
        alias = self.outside / "alias"
        alias.symlink_to(self.root, target_is_directory=True)
        resolver = ScopedPathResolver(alias)
        self.assertEqual(resolver.root, self.root)
        self.assertEqual(resolver.resolve("mods"), self.root / "mods")


if __name__ == "__main__":
    unittest.main()
