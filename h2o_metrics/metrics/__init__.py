"""Metric extraction — server-status JSON to a flat metrics snapshot."""

from __future__ import annotations

from h2o_metrics.metrics.base import MetricsSnapshot, MetricValue
from h2o_metrics.metrics.extractor import (
    DURATION_METRICS,
    PASS_THROUGH_FIELDS,
    PERCENTILES,
    extract_stats,
    extractable_metric_names,
    parse_status_document,
)

__all__ = [
    "DURATION_METRICS",
    "PASS_THROUGH_FIELDS",
    "PERCENTILES",
    "MetricValue",
    "MetricsSnapshot",
    "extract_stats",
    "extractable_metric_names",
    "parse_status_document",
]
