"""Data models for pymon."""

from dataclasses import dataclass
from datetime import datetime
from typing import Generic, TypeVar

T = TypeVar("T")

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(slots=True, frozen=True)
class CPUSnapshot:
    """Aggregate CPU tick counters read from one line of the counter source."""

    user: int = 0
    nice: int = 0
    system: int = 0
    idle: int = 0
    iowait: int = 0
    irq: int = 0
    softirq: int = 0
    steal: int = 0

    @classmethod
    def zero(cls) -> "CPUSnapshot":
        return cls()

    @property
    def total(self) -> int:
        """All ticks accumulated since boot."""
        return (
            self.user
            + self.nice
            + self.system
            + self.idle
            + self.iowait
            + self.irq
            + self.softirq
            + self.steal
        )

    @property
    def active(self) -> int:
        """Ticks spent doing work (everything except idle and iowait)."""
        return self.total - self.idle - self.iowait


@dataclass(slots=True, frozen=True)
class MemorySnapshot:
    """Memory counters in kilobytes."""

    total: int = 0
    free: int = 0
    available: int = 0
    buffers: int = 0
    cached: int = 0

    @classmethod
    def zero(cls) -> "MemorySnapshot":
        return cls()

    @property
    def used_percent(self) -> float:
        if self.total <= 0:
            return 0.0
        return 100.0 * (1.0 - self.available / self.total)


@dataclass(slots=True, frozen=True)
class DiskSnapshot:
    """Capacity and free space of a filesystem, in bytes."""

    capacity: int
    free: int

    @property
    def used_percent(self) -> float:
        if self.capacity <= 0:
            return 0.0
        return 100.0 * (1.0 - self.free / self.capacity)


@dataclass(slots=True, frozen=True)
class SampleRecord:
    """One row produced by a sampling cycle."""

    timestamp: datetime
    cpu_percent: float
    memory_percent: float
    disk_percent: float

    def format_timestamp(self) -> str:
        return self.timestamp.strftime(TIMESTAMP_FORMAT)

    def console_line(self) -> str:
        """Human readable line, one decimal per percentage."""
        return (
            f"{self.format_timestamp()} - "
            f"CPU: {self.cpu_percent:.1f}%, "
            f"Memory: {self.memory_percent:.1f}%, "
            f"Disk: {self.disk_percent:.1f}%"
        )

    def csv_row(self) -> list[str | float]:
        """Row for the CSV log; percentages keep full precision."""
        return [
            self.format_timestamp(),
            self.cpu_percent,
            self.memory_percent,
            self.disk_percent,
        ]


@dataclass(slots=True, frozen=True)
class ReadResult(Generic[T]):
    """
    Outcome of reading a counter source.

    Either ``value`` holds the parsed snapshot, or ``error`` describes why
    the source could not be read.
    """

    value: T | None = None
    error: str | None = None

    @classmethod
    def success(cls, value: T) -> "ReadResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: str) -> "ReadResult[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None and self.value is not None

    def unwrap_or(self, default: T) -> T:
        """Return the parsed value, or ``default`` if the read failed."""
        if self.ok:
            return self.value  # type: ignore[return-value]
        return default
