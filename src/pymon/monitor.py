"""Sampling engine for pymon."""

import logging
import sys
import time
from collections.abc import Callable
from datetime import datetime
from typing import TextIO

from pymon.models import CPUSnapshot, MemorySnapshot, SampleRecord
from pymon.readers import (
    DEFAULT_DISK_PATH,
    read_cpu_snapshot,
    read_disk_usage,
    read_memory_snapshot,
)
from pymon.recorder import CsvRecorder

logger = logging.getLogger(__name__)


class CPUUsageCalculator:
    """
    CPU utilization from two successive tick snapshots.

    The counter source only reports ticks accumulated since boot, so usage
    is the share of active ticks among all ticks elapsed between the stored
    baseline and a fresh snapshot. The first call has nothing to diff
    against and reports 0.0.
    """

    def __init__(self, reader: Callable[[], CPUSnapshot] = read_cpu_snapshot) -> None:
        self._reader = reader
        self._baseline: CPUSnapshot | None = None

    @property
    def baseline(self) -> CPUSnapshot | None:
        """Snapshot the next call diffs against, or None before the first call."""
        return self._baseline

    @property
    def is_primed(self) -> bool:
        return self._baseline is not None

    def reset(self) -> None:
        self._baseline = None

    def usage_from(self, current: CPUSnapshot) -> float:
        """
        Compute usage against the baseline, then make ``current`` the baseline.

        Returns 0.0 when there is no baseline yet, or when the total tick
        delta is not positive (stalled or reset counters).
        """
        previous = self._baseline
        self._baseline = current

        if previous is None:
            return 0.0

        total_delta = current.total - previous.total
        if total_delta <= 0:
            return 0.0

        active_delta = current.active - previous.active
        return 100.0 * active_delta / total_delta

    def sample(self) -> float:
        return self.usage_from(self._reader())


class Sampler:
    """
    Periodic sampler of CPU, memory and disk usage.

    Runs in the calling thread. Each cycle collects a SampleRecord, prints
    it to the console stream and, if a recorder is configured, appends it
    to the CSV log. The only state carried between cycles is the CPU
    baseline held by the calculator.
    """

    def __init__(
        self,
        recorder: CsvRecorder | None = None,
        disk_path: str = DEFAULT_DISK_PATH,
        *,
        cpu_reader: Callable[[], CPUSnapshot] = read_cpu_snapshot,
        memory_reader: Callable[[], MemorySnapshot] = read_memory_snapshot,
        disk_reader: Callable[[str], float] = read_disk_usage,
        clock: Callable[[], datetime] = datetime.now,
        sleep: Callable[[float], None] = time.sleep,
        stream: TextIO | None = None,
    ) -> None:
        """
        Initialize the Sampler.

        Args:
            recorder: CSV log to append records to. None disables logging.
            disk_path: Filesystem path whose usage is reported.
            cpu_reader: Returns the current CPU tick snapshot.
            memory_reader: Returns the current memory snapshot.
            disk_reader: Returns disk usage percent for a path.
            clock: Returns the current local time.
            sleep: Suspends between cycles.
            stream: Console output. Defaults to sys.stdout at emit time.
        """
        self._recorder = recorder
        self._disk_path = disk_path
        self._cpu = CPUUsageCalculator(cpu_reader)
        self._memory_reader = memory_reader
        self._disk_reader = disk_reader
        self._clock = clock
        self._sleep = sleep
        self._stream = stream

    @property
    def cpu(self) -> CPUUsageCalculator:
        return self._cpu

    @property
    def recorder(self) -> CsvRecorder | None:
        return self._recorder

    def collect(self) -> SampleRecord:
        """Take one measurement of every resource."""
        cpu_percent = self._cpu.sample()
        memory_percent = self._memory_reader().used_percent
        disk_percent = self._disk_reader(self._disk_path)
        timestamp = self._clock().replace(microsecond=0)

        return SampleRecord(
            timestamp=timestamp,
            cpu_percent=cpu_percent,
            memory_percent=memory_percent,
            disk_percent=disk_percent,
        )

    def emit(self, record: SampleRecord) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(record.console_line() + "\n")
        stream.flush()

        if self._recorder is not None:
            self._recorder.append(record)

    def run(self, interval_seconds: float = 1.0, max_iterations: int | None = None) -> int:
        """
        Sample until ``max_iterations`` cycles have completed.

        Args:
            interval_seconds: Pause between cycles. There is no pause after
                the last one.
            max_iterations: Number of cycles, or None to run until
                interrupted from outside.

        Returns:
            The number of completed cycles.
        """
        iterations = 0
        while max_iterations is None or iterations < max_iterations:
            record = self.collect()
            self.emit(record)
            iterations += 1
            logger.debug("Cycle %d: %s", iterations, record)

            if max_iterations is None or iterations < max_iterations:
                self._sleep(interval_seconds)

        return iterations
