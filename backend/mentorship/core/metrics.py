"""
Business metrics sinks.

Services receive a ``MetricsSink`` through their constructor instead of
touching process-wide counters. The application wires a
``PrometheusMetricsSink`` bound to the same registry that serves
``/metrics``; tests use ``NullMetricsSink`` or ``RecordingMetricsSink``.
"""

import logging
from typing import Any, Callable, List, Optional, Tuple

from prometheus_client import CollectorRegistry, Counter, Gauge

logger = logging.getLogger(__name__)


class MetricsSink:
    """Interface for business events worth counting. Default is a no-op."""

    def request_created(self, status: str) -> None:
        pass

    def request_status_changed(self, old_status: str, new_status: str) -> None:
        pass

    def learning_started(self) -> None:
        pass

    def learning_completed(self, rating: int) -> None:
        pass

    def mentor_workload(self, mentor_id: int, name: str, workload: int) -> None:
        pass


class NullMetricsSink(MetricsSink):
    """Discards every event."""


class RecordingMetricsSink(MetricsSink):
    """Keeps events in memory so tests can assert on them."""

    def __init__(self) -> None:
        self.events: List[Tuple[str, Tuple[Any, ...]]] = []

    def request_created(self, status: str) -> None:
        self.events.append(("request_created", (status,)))

    def request_status_changed(self, old_status: str, new_status: str) -> None:
        self.events.append(("request_status_changed", (old_status, new_status)))

    def learning_started(self) -> None:
        self.events.append(("learning_started", ()))

    def learning_completed(self, rating: int) -> None:
        self.events.append(("learning_completed", (rating,)))

    def mentor_workload(self, mentor_id: int, name: str, workload: int) -> None:
        self.events.append(("mentor_workload", (mentor_id, name, workload)))

    def names(self) -> List[str]:
        return [name for name, _ in self.events]


class PrometheusMetricsSink(MetricsSink):
    """Publishes business events as Prometheus series."""

    def __init__(self, registry: Optional[CollectorRegistry] = None) -> None:
        self.registry = registry or CollectorRegistry()
        self.training_requests = Counter(
            "training_requests_total",
            "Total number of training requests",
            ["status"],
            registry=self.registry,
        )
        self.request_transitions = Counter(
            "training_request_transitions_total",
            "Training request status transitions",
            ["from_status", "to_status"],
            registry=self.registry,
        )
        # Value comes from the stored rows at scrape time (track_active_learnings)
        self.learnings_active = Gauge(
            "learning_processes_active",
            "Number of active learning processes",
            registry=self.registry,
        )
        self.learnings_started = Counter(
            "learning_processes_started_total",
            "Total number of learning processes started",
            registry=self.registry,
        )
        self.learnings_completed = Counter(
            "learning_processes_completed_total",
            "Total number of completed learning processes",
            registry=self.registry,
        )
        self.feedback_rating_sum = Counter(
            "feedback_rating_sum",
            "Sum of all feedback ratings",
            registry=self.registry,
        )
        self.feedback_rating_count = Counter(
            "feedback_rating_count",
            "Total number of feedback ratings",
            registry=self.registry,
        )
        self.mentors_workload = Gauge(
            "mentors_workload",
            "Current workload of mentors (0-5 scale)",
            ["mentor_id", "mentor_name"],
            registry=self.registry,
        )

    def request_created(self, status: str) -> None:
        self.training_requests.labels(status=status).inc()

    def request_status_changed(self, old_status: str, new_status: str) -> None:
        self.request_transitions.labels(from_status=old_status, to_status=new_status).inc()

    def learning_started(self) -> None:
        self.learnings_started.inc()

    def track_active_learnings(self, count: Callable[[], int]) -> None:
        """Back the active-learnings gauge with ``count``, called on each scrape."""

        def read() -> float:
            try:
                return float(count())
            except Exception as e:
                logger.warning(
                    "Active learning count unavailable",
                    extra={"context": {"error": str(e)}},
                )
                return float("nan")

        self.learnings_active.set_function(read)

    def learning_completed(self, rating: int) -> None:
        self.learnings_completed.inc()
        self.feedback_rating_sum.inc(rating)
        self.feedback_rating_count.inc()

    def mentor_workload(self, mentor_id: int, name: str, workload: int) -> None:
        self.mentors_workload.labels(mentor_id=str(mentor_id), mentor_name=name).set(workload)
