"""
Tests for the Prometheus metrics registry.
"""

import pytest

from taskmanager.core.metrics import Metrics


def sample(metrics: Metrics, name: str, labels: dict[str, str] | None = None) -> float | None:
    return metrics.registry.get_sample_value(name, labels or {})


class TestMetrics:
    """Tests for Metrics."""

    def test_separate_registries(self) -> None:
        """Test two instances can coexist in one process."""
        first = Metrics()
        second = Metrics()
        assert first.registry is not second.registry

    def test_observe_request(self) -> None:
        """Test a request increments the counter and the histogram."""
        metrics = Metrics()
        metrics.observe_request("GET", "/api/v1/tasks", 200, 0.05)

        labels = {"method": "GET", "route": "/api/v1/tasks", "status": "200"}
        assert sample(metrics, "http_requests_total", labels) == 1.0
        assert sample(metrics, "http_request_duration_seconds_count", labels) == 1.0

    def test_track_task_operation(self) -> None:
        """Test operations are counted by outcome."""
        metrics = Metrics()

        with metrics.track_task_operation("create"):
            pass
        with pytest.raises(RuntimeError):
            with metrics.track_task_operation("create"):
                raise RuntimeError("boom")

        name = "taskmanager_task_operations_total"
        assert sample(metrics, name, {"operation": "create", "status": "success"}) == 1.0
        assert sample(metrics, name, {"operation": "create", "status": "error"}) == 1.0

    def test_gauges(self) -> None:
        """Test task counts replace previous values."""
        metrics = Metrics()
        metrics.update_task_counts({"todo": 3, "done": 1})
        metrics.update_task_counts({"todo": 2})
        metrics.update_db_connections({"checkedout": 4})

        assert sample(metrics, "tasks_total", {"status": "todo"}) == 2.0
        assert sample(metrics, "tasks_total", {"status": "done"}) is None
        assert sample(metrics, "db_connections_active") == 4.0

    def test_render(self) -> None:
        """Test the exposition is Prometheus text."""
        metrics = Metrics()
        body, content_type = metrics.render()
        assert content_type.startswith("text/plain")
        assert b"http_requests_total" in body
