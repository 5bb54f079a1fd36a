"""System metric probes backed by Linux procfs and statvfs."""

import os

from hypanel.core.errors import IOFailure
from hypanel.services import service_control

_GB = 1024 * 1024 * 1024


def get_cpu_load_percent():
    """Return the 1-minute load average as a share of all CPUs."""
    try:
        load_1m = os.getloadavg()[0]
    except OSError:
        return 0.0
    cpus = os.cpu_count() or 1
    return round(load_1m / cpus * 100.0, 1)


def get_memory_usage(meminfo_path="/proc/meminfo"):
    """Return ``(percent, used_gb, total_gb)`` from ``/proc/meminfo``."""
    mem_total_kb = 0
    mem_available_kb = 0
    try:
        with open(meminfo_path, "r", encoding="utf-8") as f:
            for line in f:
                if line.startswith("MemTotal:"):
                    mem_total_kb = int(line.split()[1])
                elif line.startswith("MemAvailable:"):
                    mem_available_kb = int(line.split()[1])
    except (OSError, ValueError, IndexError):
        return 0.0, 0.0, 0.0

    if mem_total_kb <= 0:
        return 0.0, 0.0, 0.0
    used_kb = mem_total_kb - mem_available_kb
    percent = (used_kb / mem_total_kb) * 100.0
    return round(percent, 1), round(used_kb * 1024 / _GB, 1), round(mem_total_kb * 1024 / _GB, 1)


def get_disk_usage_percent(path):
    """Return used percentage of the filesystem holding ``path``."""
    try:
        stat = os.statvfs(path)
    except OSError:
        return 0.0
    total = stat.f_blocks * stat.f_frsize
    available = stat.f_bavail * stat.f_frsize
    if total <= 0:
        return 0.0
    return round((total - available) / total * 100.0, 1)


def get_uptime_seconds(uptime_path="/proc/uptime"):
    try:
        with open(uptime_path, "r", encoding="utf-8") as f:
            return int(float(f.read().split()[0]))
    except (OSError, ValueError, IndexError):
        return 0


def format_uptime(seconds):
    """Format seconds as ``"<h>h <m>m"``."""
    seconds = max(0, int(seconds or 0))
    return f"{seconds // 3600}h {(seconds % 3600) // 60}m"


def collect_server_stats(ctx):
    """Build the dashboard stats payload."""
    try:
        online = service_control.is_online(service_control.get_status(ctx))
    except IOFailure as exc:
        ctx.log_exception("stats/service_status", exc)
        online = False
    ram_percent, used_gb, total_gb = get_memory_usage()
    disk_path = ctx.config.server_dir if ctx.config.server_dir.exists() else "/"
    return {
        "cpu": get_cpu_load_percent(),
        "ram": ram_percent,
        "disk": get_disk_usage_percent(disk_path),
        "serverStatus": "online" if online else "offline",
        "uptime": format_uptime(get_uptime_seconds()),
        "totalRam": total_gb,
        "usedRam": used_gb,
    }
