# utils/memory.py
import gc
import sys
import time
import threading
import ctypes
from statistics import mean

import psutil


def _trim_working_set():
    # only Windows lets a process drop its own cached pages
    if sys.platform == "win32":
        ctypes.windll.kernel32.SetProcessWorkingSetSize(-1, -1)


def _process_kb(process):
    try:
        return process.memory_full_info().uss / 1024
    except (AttributeError, psutil.AccessDenied):
        return process.memory_info().rss / 1024


class MemoryTracker:
    """Samples process memory in KB above the level seen on entry"""

    def __init__(self, sample_interval=0.001, settle=0.05):
        self.interval = sample_interval
        self.settle = settle
        self.min_usage = self.avg_usage = self.max_usage = 0.0

    def __enter__(self):
        gc.collect()
        _trim_working_set()
        time.sleep(self.settle)

        self._process = psutil.Process()
        self._baseline = _process_kb(self._process)
        self._samples = []
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._sample, daemon=True)
        self._thread.start()
        return self

    def _sample(self):
        while not self._stop.is_set():
            self._samples.append(max(0.0, _process_kb(self._process) - self._baseline))
            self._stop.wait(self.interval)

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._stop.set()
        self._thread.join()
        samples = self._samples or [0.0]
        self.min_usage = min(samples)
        self.avg_usage = mean(samples)
        self.max_usage = max(samples)
