import tempfile
import unittest
from pathlib import Path

from hypanel.services.mods import parse_mod_filename
from hypanel.services.system_metrics import format_uptime, get_memory_usage, get_uptime_seconds


class SystemMetricsTests(unittest.TestCase):
    def test_format_uptime(self):
        self.assertEqual(format_uptime(0), "0h 0m")
        self.assertEqual(format_uptime(26 * 3600 + 61), "26h 1m")

    def test_memory_usage_from_meminfo(self):
        with tempfile.TemporaryDirectory() as tmp:
            meminfo = Path(tmp) / "meminfo"
            meminfo.write_text(
                "MemTotal:        8388608 kB\nMemFree:   100 kB\nMemAvailable:    2097152 kB\n",
                encoding="utf-8",
            )
            self.assertEqual(get_memory_usage(str(meminfo)), (75.0, 6.0, 8.0))
            self.assertEqual(get_memory_usage(str(Path(tmp) / "missing")), (0.0, 0.0, 0.0))

    def test_uptime_from_procfs_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            uptime = Path(tmp) / "uptime"
            uptime.write_text("12345.67 4567.89\n", encoding="utf-8")
            self.assertEqual(get_uptime_seconds(str(uptime)), 12345)


class ModFilenameTests(unittest.TestCase):
    def test_parse_versions_and_disabled(self):
        self.assertEqual(parse_mod_filename("worldedit-7.2.15.jar"), ("worldedit", "7.2.15", True))
        self.assertEqual(parse_mod_filename("cool-mod-1.0.0-beta.zip"), ("cool-mod", "1.0.0-beta", True))
        self.assertEqual(parse_mod_filename("Plain.jar.disabled"), ("Plain", "", False))
        self.assertIsNone(parse_mod_filename("notes.txt"))


if __name__ == "__main__":
    unittest.main()
