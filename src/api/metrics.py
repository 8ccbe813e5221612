"""Prometheus metrics for the REST API."""
from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Histogram

METRICS_NAMESPACE = "railfeed"
METRICS_SUBSYSTEM = "api"


class ApiMetrics:
    """
    Request duration and request count per route template.

    Owns its collectors so every app (and every test) can use an isolated
    CollectorRegistry. The collectors do their own locking.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry if registry is not None else CollectorRegistry()

        # ── Histograms ────────────────────────────────────────────────────────
        self.duration = Histogram(
            "duration_seconds",
            "Duration of HTTP API requests.",
            ["path"],
            namespace=METRICS_NAMESPACE,
            subsystem=METRICS_SUBSYSTEM,
            registry=self.registry,
        )

        # ── Counters ──────────────────────────────────────────────────────────
        self.requests = Counter(
            "requests",
            "HTTP API requests",
            ["path"],
            namespace=METRICS_NAMESPACE,
            subsystem=METRICS_SUBSYSTEM,
            registry=self.registry,
        )

    def observe(self, path_template: str, seconds: float) -> None:
        """Record one finished request: duration first, then the count."""
        self.duration.labels(path=path_template).observe(seconds)
        self.requests.labels(path=path_template).inc()
