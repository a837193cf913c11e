from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

WATCHES_LOAD_TOTAL = Counter(
    "ansible_watches_load_total",
    "Number of watches file loads",
    labelnames=("result",),
)

WATCHES_LOAD_DURATION = Histogram(
    "ansible_watches_load_duration_seconds",
    "Duration of watches file loads in seconds",
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1),
)

WATCHES_LOADED = Gauge(
    "ansible_watches_loaded",
    "Number of watches in the last successful load",
)

ENV_OVERRIDE_TOTAL = Counter(
    "ansible_watches_env_override_total",
    "Per-GVK environment override resolutions",
    labelnames=("setting", "result"),
)
