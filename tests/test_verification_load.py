"""Verification Test: Live host sampling under CPU load.

Reads the real /proc counters while a busy child process runs, and checks
the derived percentages against psutil's own view of the host.
"""

import io
import multiprocessing
import os
import time

import psutil
import pytest

from pymon.monitor import CPUUsageCalculator, Sampler
from pymon.readers import read_cpu_snapshot, read_memory_snapshot, try_read_cpu_snapshot

pytestmark = pytest.mark.skipif(
    not os.path.exists("/proc/stat"), reason="requires Linux /proc counters"
)


def busy_worker(duration: float = 5.0) -> None:
    """Spin on the CPU for a given duration."""
    end = time.monotonic() + duration
    try:
        while time.monotonic() < end:
            pass
    except (KeyboardInterrupt, SystemExit):
        pass


@pytest.fixture
def busy_process():
    """Keep one core busy for the duration of the test."""
    p = multiprocessing.Process(target=busy_worker, args=(10.0,))
    p.start()
    try:
        yield p
    finally:
        if p.is_alive():
            p.terminate()
        p.join(timeout=1.0)


class TestLiveHost:
    """Sampling against the real counter sources."""

    def test_real_cpu_counters(self):
        """Test the aggregate line is readable and consistent."""
        result = try_read_cpu_snapshot()
        assert result.ok, result.error
        snapshot = result.value
        assert snapshot.total >= snapshot.active >= 0
        assert snapshot.total > 0

    def test_counters_do_not_decrease(self):
        """Test successive reads are monotonically non-decreasing."""
        first = read_cpu_snapshot()
        time.sleep(0.1)
        second = read_cpu_snapshot()
        assert second.total >= first.total
        assert second.active >= first.active

    def test_memory_matches_psutil(self):
        """Test the meminfo percentage agrees with psutil within a few points."""
        ours = read_memory_snapshot()
        assert ours.total > 0
        assert 0.0 <= ours.used_percent <= 100.0

        vm = psutil.virtual_memory()
        theirs = 100.0 * (1.0 - vm.available / vm.total)
        assert ours.used_percent == pytest.approx(theirs, abs=5.0)

    def test_busy_core_is_visible(self, busy_process):
        """Test a spinning child shows up as non-zero CPU usage."""
        calculator = CPUUsageCalculator()
        assert calculator.sample() == 0.0
        time.sleep(1.0)
        usage = calculator.sample()

        assert 0.0 < usage <= 100.0

    def test_real_loop(self):
        """Test a short real-time run emits one line per cycle."""
        stream = io.StringIO()
        sampler = Sampler(stream=stream)

        start = time.monotonic()
        assert sampler.run(interval_seconds=0.2, max_iterations=3) == 3
        elapsed = time.monotonic() - start

        assert len(stream.getvalue().splitlines()) == 3
        # Two sleeps, none after the last cycle
        assert 0.4 <= elapsed < 2.0
