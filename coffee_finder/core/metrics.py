"""Search pipeline metrics.

Collects latency and outcome counters for ranked searches.
"""
import time
from collections import Counter, deque
from contextlib import contextmanager

# rolling window of the most recent searches
MAX_TIMINGS = 1000

_search_timings_ms: deque = deque(maxlen=MAX_TIMINGS)
_outcomes: Counter = Counter()
_superseded_runs: int = 0


@contextmanager
def record_search_latency():
    start = time.perf_counter()
    try:
        yield
    finally:
        _search_timings_ms.append((time.perf_counter() - start) * 1000.0)


def record_outcome(kind: str) -> None:
    _outcomes[kind] += 1


def record_superseded() -> None:
    global _superseded_runs
    _superseded_runs += 1


def _percentiles(values) -> dict:
    if not values:
        return {"count": 0, "p95_ms": None, "p99_ms": None}
    vals = sorted(values)
    count = len(vals)

    def _p(p: float) -> float:
        idx = int(round(p * (count - 1)))
        return vals[idx]
    return {"count": count, "p95_ms": _p(0.95), "p99_ms": _p(0.99)}


def snapshot_metrics() -> dict:
    return {
        "search": _percentiles(_search_timings_ms),
        "outcomes": dict(_outcomes),
        "superseded_runs": _superseded_runs,
    }


def reset_metrics() -> None:
    global _superseded_runs
    _search_timings_ms.clear()
    _outcomes.clear()
    _superseded_runs = 0
