"""
Opt-in wall-clock profiling of the simulation phases.

Timing is off by default. A simulation whose config sets ``profile``
turns it on only while its own phase cycles run, so simulations with
different settings can share the process.
"""

import time
from contextlib import contextmanager
from functools import wraps
from collections import defaultdict
from typing import Dict
import atexit


class Profiler:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._initialized = True
        self.stats: Dict[str, Dict] = defaultdict(lambda: {
            'calls': 0,
            'total_time': 0.0,
            'max_time': 0.0
        })
        self.enabled = False
        atexit.register(self._report_at_exit)

    def record(self, name: str, elapsed: float):
        if not self.enabled:
            return
        entry = self.stats[name]
        entry['calls'] += 1
        entry['total_time'] += elapsed
        entry['max_time'] = max(entry['max_time'], elapsed)

    def print_stats(self):
        if not self.stats:
            return

        print("\n" + "=" * 70)
        print("PHASE PROFILING RESULTS")
        print("=" * 70)

        sorted_stats = sorted(
            self.stats.items(),
            key=lambda x: x[1]['total_time'],
            reverse=True
        )

        print(f"{'Function':<35} {'Calls':>8} {'Total(s)':>8} {'Avg(ms)':>8} {'Max(ms)':>8}")
        print("-" * 70)

        for name, data in sorted_stats:
            calls = data['calls']
            total = data['total_time']
            avg_ms = (total / calls * 1000) if calls > 0 else 0
            print(f"{name:<35} {calls:>8} {total:>8.3f} {avg_ms:>8.3f} {data['max_time'] * 1000:>8.3f}")

        print("=" * 70)

    def _report_at_exit(self):
        self.print_stats()

    def reset(self):
        self.stats.clear()


profiler = Profiler()


def profile(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        if not profiler.enabled:
            return func(*args, **kwargs)
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            profiler.record(func.__qualname__, time.perf_counter() - start)
    return wrapper


class profile_block:
    def __init__(self, name: str):
        self.name = name
        self.start = None

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, *args):
        elapsed = time.perf_counter() - self.start
        profiler.record(self.name, elapsed)


@contextmanager
def profiling(enabled: bool = True):
    """Record timings inside the block when ``enabled``; never switches an outer session off."""
    previous = profiler.enabled
    profiler.enabled = previous or enabled
    try:
        yield profiler
    finally:
        profiler.enabled = previous
