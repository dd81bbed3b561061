"""
Prometheus metrics.

Each application instance owns its own registry, so creating several apps in
one process (as the tests do) never registers a metric twice.
"""

from collections.abc import Iterator
from contextlib import contextmanager

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)
from prometheus_client.gc_collector import GCCollector
from prometheus_client.platform_collector import PlatformCollector
from prometheus_client.process_collector import ProcessCollector

REQUEST_DURATION_BUCKETS = (0.1, 0.3, 0.5, 0.7, 1, 3, 5, 7, 10)
UNMATCHED_ROUTE = "unmatched"


class Metrics:
    """
    Application metrics.

    Usage:
        metrics = Metrics(prefix="taskmanager_")
        metrics.observe_request("GET", "/api/v1/tasks", 200, 0.012)
        with metrics.track_task_operation("create"):
            ...
        body = metrics.render()
    """

    def __init__(self, prefix: str = "taskmanager_"):
        self.prefix = prefix
        self.registry = CollectorRegistry()

        # Runtime metrics
        ProcessCollector(namespace=prefix.rstrip("_"), registry=self.registry)
        PlatformCollector(registry=self.registry)
        GCCollector(registry=self.registry)

        self.http_request_duration = Histogram(
            "http_request_duration_seconds",
            "Duration of HTTP requests in seconds",
            ["method", "route", "status"],
            buckets=REQUEST_DURATION_BUCKETS,
            registry=self.registry,
        )
        self.http_requests_total = Counter(
            "http_requests_total",
            "Total number of HTTP requests",
            ["method", "route", "status"],
            registry=self.registry,
        )
        self.db_connections_active = Gauge(
            "db_connections_active",
            "Number of active database connections",
            registry=self.registry,
        )
        self.tasks_total = Gauge(
            "tasks_total",
            "Total number of tasks",
            ["status"],
            registry=self.registry,
        )
        self.task_operations = Counter(
            f"{prefix}task_operations_total",
            "Total number of task operations",
            ["operation", "status"],
            registry=self.registry,
        )

    def observe_request(self, method: str, route: str, status: int, duration: float) -> None:
        """Record one finished HTTP request."""
        labels = (method, route, str(status))
        self.http_request_duration.labels(*labels).observe(duration)
        self.http_requests_total.labels(*labels).inc()

    @contextmanager
    def track_task_operation(self, operation: str) -> Iterator[None]:
        """Count a task operation as success or error depending on how the block exits."""
        try:
            yield
        except Exception:
            self.task_operations.labels(operation, "error").inc()
            raise
        self.task_operations.labels(operation, "success").inc()

    def update_db_connections(self, pool_status: dict[str, int]) -> None:
        """Set the active connection gauge from pool counters."""
        if "checkedout" in pool_status:
            self.db_connections_active.set(pool_status["checkedout"])

    def update_task_counts(self, counts: dict[str, int]) -> None:
        """Replace the per-status task gauges."""
        self.tasks_total.clear()
        for status, count in counts.items():
            self.tasks_total.labels(status).set(count)

    def render(self) -> tuple[bytes, str]:
        """Return the text exposition and its content type."""
        return generate_latest(self.registry), CONTENT_TYPE_LATEST

