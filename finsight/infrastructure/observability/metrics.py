"""Prometheus metrics for analytics volume, score distribution and degraded components"""

from typing import Iterable
from prometheus_client import Counter, Histogram

from finsight.domain.models import AnomalyReport

# Analytics metrics
analysis_counter = Counter(
    "finsight_analysis_total",
    "Analytics operations served",
    ["operation"],
)

health_score_histogram = Histogram(
    "finsight_health_score",
    "Distribution of computed overall health scores",
    buckets=[20, 40, 60, 80, 100],
)

anomaly_counter = Counter(
    "finsight_anomalies_total",
    "Anomalies flagged",
    ["kind", "severity"],
)

component_failure_counter = Counter(
    "finsight_component_failures_total",
    "Sub-computations that degraded instead of producing a result",
    ["operation", "component"],
)

# Record ingestion
records_ingested_counter = Counter(
    "finsight_records_ingested_total",
    "Records saved through the API",
    ["record_type"],  # transaction | budget | goal
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_analysis(operation: str, failed_components: Iterable[str] = ()) -> None:
    """Count an analytics call and any components it had to skip"""
    analysis_counter.labels(operation=operation).inc()
    for component in failed_components:
        component_failure_counter.labels(operation=operation, component=component).inc()


def record_anomalies(report: AnomalyReport) -> None:
    for anomaly in report.anomalies:
        anomaly_counter.labels(kind=anomaly.kind, severity=anomaly.severity).inc()
