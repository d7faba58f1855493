import time

from utils.memory import MemoryTracker
from utils.timer import Timer


def test_timer_measures_elapsed_time():
    with Timer() as timer:
        time.sleep(0.01)
    assert timer.elapsed >= 0.01


def test_memory_tracker_reports_samples():
    with MemoryTracker(settle=0) as mem:
        data = [list(range(100)) for _ in range(1000)]
        time.sleep(0.02)
    assert data
    assert 0.0 <= mem.min_usage <= mem.avg_usage <= mem.max_usage


def test_memory_tracker_defaults_before_use():
    mem = MemoryTracker()
    assert (mem.min_usage, mem.avg_usage, mem.max_usage) == (0.0, 0.0, 0.0)
