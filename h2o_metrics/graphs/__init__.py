"""Graph definitions reported to the monitoring agent."""

from __future__ import annotations

from h2o_metrics.graphs.catalog import (
    GraphSpec,
    MetricSpec,
    build_graph_catalog,
    title_prefix,
    validate_catalog,
)

__all__ = [
    "GraphSpec",
    "MetricSpec",
    "build_graph_catalog",
    "title_prefix",
    "validate_catalog",
]
