"""Minimal in-process counters, gauges and histograms.

No external dependencies. Thread-safe enough for single-process ASGI usage.
``InProcessMetrics`` exposes the registry through the same
increment/gauge/timing surface a statsd client has, so the middleware can
report to either.
"""

from typing import Dict, Any, Optional, Tuple, List, Sequence, Protocol
import threading


class MetricsClient(Protocol):
    def increment(self, metric: str, value: float = 1, tags: Optional[Sequence[str]] = None) -> None: ...

    def gauge(self, metric: str, value: float, tags: Optional[Sequence[str]] = None) -> None: ...

    def timing(self, metric: str, value: float, tags: Optional[Sequence[str]] = None) -> None: ...


_COUNTERS_LOCK = threading.Lock()
_GAUGES_LOCK = threading.Lock()
_HISTOGRAMS_LOCK = threading.Lock()

LabelsKey = Tuple[Tuple[str, str], ...]

# Internal store: (name, sorted label pairs) -> value
_COUNTERS: Dict[Tuple[str, LabelsKey], float] = {}
_GAUGES: Dict[Tuple[str, LabelsKey], float] = {}

# Histograms: name -> { "bins": List[int], "series": {(labels_tuple)-> {"counts": List[int], "sum_ms": float}} }
_DEFAULT_BINS: List[int] = [5, 10, 25, 50, 100, 250, 500, 1000, 3000, 10000]
_HISTOGRAMS: Dict[str, Dict[str, Any]] = {}


def _labels_key(labels: Optional[Dict[str, str]]) -> LabelsKey:
    if not labels:
        return tuple()
    # Stable ordering
    return tuple(sorted((str(k), str(v)) for k, v in labels.items()))


def tags_to_labels(tags: Optional[Sequence[str]]) -> Dict[str, str]:
    """Turn statsd-style ``key:value`` tags into a labels dict."""
    labels: Dict[str, str] = {}
    for tag in tags or ():
        key, sep, value = str(tag).partition(":")
        labels[key] = value if sep else ""
    return labels


def inc_counter(metric: str, labels: Optional[Dict[str, str]] = None, value: float = 1) -> None:
    key = (metric, _labels_key(labels))
    with _COUNTERS_LOCK:
        _COUNTERS[key] = _COUNTERS.get(key, 0) + value


def set_gauge(metric: str, value: float, labels: Optional[Dict[str, str]] = None) -> None:
    key = (metric, _labels_key(labels))
    with _GAUGES_LOCK:
        _GAUGES[key] = float(value)


def record_timing(metric: str, value_ms: float, labels: Optional[Dict[str, str]] = None) -> None:
    if value_ms is None:
        return
    if metric not in _HISTOGRAMS:
        with _HISTOGRAMS_LOCK:
            if metric not in _HISTOGRAMS:
                _HISTOGRAMS[metric] = {"bins": list(_DEFAULT_BINS), "series": {}}
    series = _HISTOGRAMS[metric]
    bins: List[int] = series["bins"]
    lk = _labels_key(labels)
    with _HISTOGRAMS_LOCK:
        entry = series["series"].get(lk)
        if entry is None:
            entry = {"counts": [0] * (len(bins) + 1), "sum_ms": 0.0}
            series["series"][lk] = entry
        # Determine bin index
        idx = len(bins)
        for i, b in enumerate(bins):
            if value_ms <= b:
                idx = i
                break
        entry["counts"][idx] += 1
        entry["sum_ms"] += float(value_ms)


def get_metrics_snapshot() -> Dict[str, Any]:
    counters: List[Dict[str, Any]] = []
    with _COUNTERS_LOCK:
        for (name, labels_tuple), value in _COUNTERS.items():
            counters.append(
                {
                    "name": name,
                    "labels": {k: v for k, v in labels_tuple},
                    "value": value,
                }
            )

    gauges: List[Dict[str, Any]] = []
    with _GAUGES_LOCK:
        for (name, labels_tuple), value in _GAUGES.items():
            gauges.append(
                {
                    "name": name,
                    "labels": {k: v for k, v in labels_tuple},
                    "value": value,
                }
            )

    histograms: List[Dict[str, Any]] = []
    with _HISTOGRAMS_LOCK:
        for name, h in _HISTOGRAMS.items():
            bins = h["bins"]
            for labels_tuple, entry in h["series"].items():
                histograms.append(
                    {
                        "name": name,
                        "labels": {k: v for k, v in labels_tuple},
                        "bins_ms": list(bins),
                        "counts": list(entry["counts"]),
                        "sum_ms": entry["sum_ms"],
                    }
                )

    return {"counters": counters, "gauges": gauges, "histograms": histograms}


def reset_metrics() -> None:
    """Drop every recorded series."""
    with _COUNTERS_LOCK:
        _COUNTERS.clear()
    with _GAUGES_LOCK:
        _GAUGES.clear()
    with _HISTOGRAMS_LOCK:
        _HISTOGRAMS.clear()


class InProcessMetrics:
    """MetricsClient backed by the module-level registry."""

    def increment(self, metric: str, value: float = 1, tags: Optional[Sequence[str]] = None) -> None:
        inc_counter(metric, tags_to_labels(tags), value)

    def gauge(self, metric: str, value: float, tags: Optional[Sequence[str]] = None) -> None:
        set_gauge(metric, value, tags_to_labels(tags))

    def timing(self, metric: str, value: float, tags: Optional[Sequence[str]] = None) -> None:
        record_timing(metric, value, tags_to_labels(tags))
