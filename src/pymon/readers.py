"""
Counter readers for pymon.

Stateless functions that read current-moment host counters. The
``try_read_*`` variants return a ``ReadResult``; the ``read_*`` variants
never raise and fall back to zeros so a sampling cycle cannot crash on a
transient read error.
"""

import logging

import psutil

from pymon.models import CPUSnapshot, DiskSnapshot, MemorySnapshot, ReadResult

logger = logging.getLogger(__name__)

PROC_STAT = "/proc/stat"
PROC_MEMINFO = "/proc/meminfo"
DEFAULT_DISK_PATH = "/"

CPU_FIELDS = ("user", "nice", "system", "idle", "iowait", "irq", "softirq", "steal")

# /proc/meminfo label -> MemorySnapshot field
MEMINFO_FIELDS = {
    "MemTotal": "total",
    "MemFree": "free",
    "MemAvailable": "available",
    "Buffers": "buffers",
    "Cached": "cached",
}


def parse_cpu_line(line: str) -> CPUSnapshot:
    """
    Parse an aggregate ``cpu`` line of /proc/stat.

    Format: cpu user nice system idle iowait irq softirq steal [guest guest_nice]

    Raises:
        ValueError: If the line has no ``cpu`` label or a field is not an integer.
    """
    parts = line.split()
    if not parts or not parts[0].startswith("cpu"):
        raise ValueError(f"not a cpu line: {line.strip()!r}")

    # guest/guest_nice are already counted in user/nice
    ticks = [int(value) for value in parts[1 : len(CPU_FIELDS) + 1]]
    if not ticks:
        raise ValueError(f"cpu line has no counters: {line.strip()!r}")
    if any(value < 0 for value in ticks):
        raise ValueError(f"negative tick counter: {line.strip()!r}")

    return CPUSnapshot(**dict(zip(CPU_FIELDS, ticks)))


def try_read_cpu_snapshot(path: str = PROC_STAT) -> ReadResult[CPUSnapshot]:
    """Read the first (aggregate) line of the CPU counter source."""
    try:
        with open(path, encoding="utf-8") as f:
            first = f.readline()
        return ReadResult.success(parse_cpu_line(first))
    except (OSError, ValueError) as e:
        return ReadResult.failure(f"{path}: {e}")


def read_cpu_snapshot(path: str = PROC_STAT) -> CPUSnapshot:
    result = try_read_cpu_snapshot(path)
    if not result.ok:
        logger.debug("CPU counters unavailable, using zeros: %s", result.error)
    return result.unwrap_or(CPUSnapshot.zero())


def parse_meminfo(lines) -> MemorySnapshot:
    """
    Parse ``<label>: <value> <unit>`` lines.

    Only the labels in MEMINFO_FIELDS are used; anything else, including
    recognized labels with a non-integer or negative value, is skipped.
    Missing fields stay zero.
    """
    values: dict[str, int] = {}
    for line in lines:
        parts = line.split()
        if len(parts) < 2:
            continue
        field = MEMINFO_FIELDS.get(parts[0].rstrip(":"))
        if field is None:
            continue
        try:
            value = int(parts[1])
        except ValueError:
            continue
        if value < 0:
            continue
        values[field] = value
    return MemorySnapshot(**values)


def try_read_memory_snapshot(path: str = PROC_MEMINFO) -> ReadResult[MemorySnapshot]:
    try:
        with open(path, encoding="utf-8") as f:
            return ReadResult.success(parse_meminfo(f))
    except (OSError, ValueError) as e:
        return ReadResult.failure(f"{path}: {e}")


def read_memory_snapshot(path: str = PROC_MEMINFO) -> MemorySnapshot:
    result = try_read_memory_snapshot(path)
    if not result.ok:
        logger.debug("Memory counters unavailable, using zeros: %s", result.error)
    return result.unwrap_or(MemorySnapshot.zero())


def try_read_disk_snapshot(path: str = DEFAULT_DISK_PATH) -> ReadResult[DiskSnapshot]:
    """Query capacity and free bytes of the filesystem holding ``path``."""
    try:
        usage = psutil.disk_usage(path)
    except (OSError, ValueError) as e:
        return ReadResult.failure(f"{path}: {e}")
    return ReadResult.success(DiskSnapshot(capacity=usage.total, free=usage.free))


def read_disk_usage(path: str = DEFAULT_DISK_PATH) -> float:
    """
    Disk usage percentage for ``path``.

    Failures are reported as a warning (stderr, never the sample stream)
    and count as 0.0 for this cycle.
    """
    result = try_read_disk_snapshot(path)
    if not result.ok:
        logger.warning("Error getting disk space: %s", result.error)
        return 0.0
    return result.value.used_percent
