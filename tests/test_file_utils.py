import io
import os
import tempfile
import unittest
from datetime import timezone
from pathlib import Path

from werkzeug.datastructures import FileStorage

from hypanel.core.errors import AccessDenied, IOFailure, NotFound
from hypanel.core.filesystem_utils import (
    format_file_size,
    list_archive_files,
    list_directory,
    remove_path,
    safe_filename_in_dir,
    save_uploads,
    upload_name_changes,
    upload_safe_name,
)
from hypanel.core.scoped_paths import ScopedPathResolver


class FileUtilsTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(os.path.realpath(self._tmp.name))
        self.resolver = ScopedPathResolver(self.root)

    def test_format_file_size(self):
        self.assertEqual(format_file_size(10), "10 B")
        self.assertEqual(format_file_size(1024), "1.0 KB")
        self.assertEqual(format_file_size(None), "0 B")

    def test_list_directory_orders_directories_first(self):
        (self.root / "mods").mkdir()
        (self.root / "b.txt").write_text("bb", encoding="utf-8")
        (self.root / "A.json").write_text("a", encoding="utf-8")

        listing = list_directory(self.resolver, "")

        self.assertEqual(listing["path"], "/")
        self.assertEqual([entry["name"] for entry in listing["files"]], ["mods", "A.json", "b.txt"])
        mods = listing["files"][0]
        self.assertEqual(mods, {"name": "mods", "type": "directory", "size": None, "path": "mods"})
        self.assertEqual(listing["files"][2]["size"], 2)

    def test_list_subdirectory_uses_relative_paths(self):
        (self.root / "mods").mkdir()
        (self.root / "mods" / "x.jar").write_bytes(b"123")
        listing = list_directory(self.resolver, "/mods")
        self.assertEqual(listing["path"], "mods")
        self.assertEqual(listing["files"][0]["path"], "mods/x.jar")

    def test_list_missing_or_file_is_not_found(self):
        (self.root / "file.txt").write_text("x", encoding="utf-8")
        with self.assertRaises(NotFound):
            list_directory(self.resolver, "nonexistent")
        with self.assertRaises(NotFound):
            list_directory(self.resolver, "file.txt")

    def test_upload_safe_name(self):
        self.assertEqual(upload_safe_name("../../etc/passwd"), "passwd")
        self.assertEqual(upload_safe_name("C:\\mods\\cool.jar"), "cool.jar")
        self.assertIsNone(upload_safe_name(".."))
        self.assertIsNone(upload_safe_name(""))

    def test_upload_name_changes_reports_renames_skips_and_collisions(self):
        uploads = [
            FileStorage(stream=io.BytesIO(b"a"), filename="cool.jar"),
            FileStorage(stream=io.BytesIO(b"b"), filename="日本.txt"),
            FileStorage(stream=io.BytesIO(b"c"), filename="txt"),
            FileStorage(stream=io.BytesIO(b"d"), filename="日本"),
        ]
        self.assertEqual(upload_name_changes(uploads), [
            ("日本.txt", "txt", "renamed"),
            ("txt", "txt", "duplicate"),
            ("日本", None, "unusable"),
        ])

    def test_save_uploads_creates_destination(self):
        uploads = [FileStorage(stream=io.BytesIO(b"jar"), filename="cool.jar")]
        saved = save_uploads(self.resolver, "mods/new", uploads)
        self.assertEqual(saved, ["mods/new/cool.jar"])
        self.assertEqual((self.root / "mods" / "new" / "cool.jar").read_bytes(), b"jar")

    def test_save_uploads_rejects_escaping_destination(self):
        uploads = [FileStorage(stream=io.BytesIO(b"x"), filename="x.txt")]
        with self.assertRaises(AccessDenied):
            save_uploads(self.resolver, "../elsewhere", uploads)
        self.assertFalse((self.root.parent / "elsewhere").exists())

    def test_save_uploads_into_file_fails(self):
        (self.root / "config.json").write_text("{}", encoding="utf-8")
        uploads = [FileStorage(stream=io.BytesIO(b"x"), filename="x.txt")]
        with self.assertRaises(IOFailure):
            save_uploads(self.resolver, "config.json", uploads)

    def test_remove_path_deletes_tree_and_files(self):
        (self.root / "world" / "region").mkdir(parents=True)
        (self.root / "world" / "region" / "r.0.0.mca").write_bytes(b"x")
        (self.root / "old.log").write_text("x", encoding="utf-8")

        self.assertEqual(remove_path(self.resolver, "world"), "world")
        self.assertEqual(remove_path(self.resolver, "/old.log"), "old.log")
        self.assertFalse((self.root / "world").exists())
        self.assertFalse((self.root / "old.log").exists())

    def test_remove_path_refuses_root_and_missing(self):
        with self.assertRaises(AccessDenied):
            remove_path(self.resolver, "")
        with self.assertRaises(AccessDenied):
            remove_path(self.resolver, "mods/..")
        with self.assertRaises(NotFound):
            remove_path(self.resolver, "missing.txt")

    def test_remove_path_refuses_parent_traversal(self):
        server = self.root / "server"
        server.mkdir()
        victim = self.root / "victim"
        victim.mkdir()
        (victim / "keep.txt").write_text("k", encoding="utf-8")
        resolver = ScopedPathResolver(server)

        for requested in ("../victim", "/../victim", "mods/../../victim", "../victim/keep.txt"):
            with self.subTest(requested=requested):
                with self.assertRaises(AccessDenied):
                    remove_path(resolver, requested)
        self.assertTrue((victim / "keep.txt").is_file())

    def test_list_archive_files_newest_first(self):
        base = self.root / "backups"
        base.mkdir()
        older = base / "backup_a.tar.gz"
        newer = base / "backup_b.tar.gz"
        older.write_bytes(b"a")
        newer.write_bytes(b"bb")
        (base / "notes.txt").write_text("x", encoding="utf-8")
        os.utime(older, (1_000_000, 1_000_000))
        os.utime(newer, (2_000_000, 2_000_000))

        items = list_archive_files(base, ".tar.gz", timezone.utc)

        self.assertEqual([item["name"] for item in items], ["backup_b.tar.gz", "backup_a.tar.gz"])
        self.assertEqual(items[0]["size"], 2)
        self.assertTrue(items[0]["created_at"].endswith("+00:00"))

    def test_safe_filename_in_dir(self):
        base = self.root / "backups"
        base.mkdir()
        (base / "backup_a.tar.gz").write_bytes(b"a")
        self.assertEqual(safe_filename_in_dir(base, "backup_a.tar.gz"), "backup_a.tar.gz")
        self.assertIsNone(safe_filename_in_dir(base, "../backup_a.tar.gz"))
        self.assertIsNone(safe_filename_in_dir(base, "missing.tar.gz"))
        self.assertIsNone(safe_filename_in_dir(base, ""))


if __name__ == "__main__":
    unittest.main()
