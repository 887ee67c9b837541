"""Nearby query & route lookup metrics.

Collects latency and cache hit stats for nearby venue queries and route lookups.
"""
import time
from collections import deque
from contextlib import contextmanager

_MAX_SAMPLES = 1000

_nearby_timings_ms: deque = deque(maxlen=_MAX_SAMPLES)
_route_timings_ms: deque = deque(maxlen=_MAX_SAMPLES)
_counters: dict[str, int] = {
    "nearby_cache_hits": 0,
    "nearby_cache_misses": 0,
    "route_cache_hits": 0,
    "route_cache_misses": 0,
    "route_inflight_joins": 0,
    "route_provider_calls": 0,
    "route_not_found": 0,
}


@contextmanager
def record_nearby_latency():
    start = time.perf_counter()
    try:
        yield
    finally:
        _nearby_timings_ms.append((time.perf_counter() - start) * 1000.0)


@contextmanager
def record_route_latency():
    start = time.perf_counter()
    try:
        yield
    finally:
        _route_timings_ms.append((time.perf_counter() - start) * 1000.0)


def increment(counter: str, amount: int = 1) -> None:
    _counters[counter] = _counters.get(counter, 0) + amount


def _percentiles(values) -> dict:
    if not values:
        return {"count": 0, "p50_ms": None, "p95_ms": None, "p99_ms": None}
    vals = sorted(values)
    count = len(vals)

    def _p(p: float) -> float:
        idx = int(round(p * (count - 1)))
        return round(vals[idx], 3)
    return {"count": count, "p50_ms": _p(0.50), "p95_ms": _p(0.95), "p99_ms": _p(0.99)}


def snapshot_metrics() -> dict:
    return {
        "nearby": _percentiles(_nearby_timings_ms),
        "route": _percentiles(_route_timings_ms),
        "counters": dict(_counters),
    }


def reset_metrics() -> None:
    _nearby_timings_ms.clear()
    _route_timings_ms.clear()
    for key in _counters:
        _counters[key] = 0
