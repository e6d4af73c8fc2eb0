"""Graph catalog — which metrics are drawn together, and how."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from h2o_metrics.errors import CatalogError
from h2o_metrics.metrics.extractor import (
    DURATION_METRICS,
    HTTP2_ERRORS,
    HTTP2_STREAM_STATES,
    PERCENTILES,
    STATUS_ERROR_CODES,
    extractable_metric_names,
    percentile_metric_name,
)

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "h2o"
DEFAULT_UNIT = "integer"


@dataclass(frozen=True)
class MetricSpec:
    name: str
    label: str
    diff: bool = False  # agent diffs successive values (cumulative counter)
    stacked: bool = False


@dataclass(frozen=True)
class GraphSpec:
    key: str
    label: str
    unit: str
    metrics: tuple[MetricSpec, ...]

    @property
    def metric_names(self) -> list[str]:
        return [m.name for m in self.metrics]


@dataclass(frozen=True)
class _GraphTemplate:
    key: str
    display_name: str
    metrics: tuple[MetricSpec, ...]


def _gauges(names: list[str], labels: list[str] | None = None) -> tuple[MetricSpec, ...]:
    labels = labels or names
    return tuple(MetricSpec(name=name, label=label) for name, label in zip(names, labels))


BASE_GRAPHS: tuple[_GraphTemplate, ...] = (
    _GraphTemplate(
        "status-errors", "Status Errors",
        _gauges([f"status-errors.{c}" for c in STATUS_ERROR_CODES],
                list(STATUS_ERROR_CODES)),
    ),
    _GraphTemplate(
        "http2-errors", "HTTP2 Errors",
        _gauges([f"http2-errors.{e}" for e in HTTP2_ERRORS], list(HTTP2_ERRORS)),
    ),
    _GraphTemplate(
        "http2", "HTTP2",
        _gauges([f"http2.{s}" for s in HTTP2_STREAM_STATES],
                list(HTTP2_STREAM_STATES)),
    ),
)

SERVER_GRAPHS: tuple[_GraphTemplate, ...] = (
    _GraphTemplate("connections", "Connections",
                   _gauges(["connections", "max-connections"])),
    _GraphTemplate("uptime", "Uptime", _gauges(["uptime", "generation"])),
    _GraphTemplate("listeners", "Listeners", _gauges(["listeners"])),
    _GraphTemplate("num-sessions", "Sessions", _gauges(["num-sessions"])),
)

# One graph per timing phase, one series per percentile rank.
DURATION_GRAPHS: tuple[_GraphTemplate, ...] = tuple(
    _GraphTemplate(
        base,
        base.replace("-", " ").title(),
        _gauges([percentile_metric_name(base, rank) for rank in PERCENTILES],
                list(PERCENTILES)),
    )
    for base in DURATION_METRICS
)

_WORD_START = re.compile(r"(?<!\w)(\w)")


def title_prefix(prefix: str) -> str:
    """Upper-case the first character of every word, leaving the rest alone.

    ``myh2o`` -> ``Myh2o``, ``my-h2o`` -> ``My-H2o``. Unlike ``str.title``
    a letter following a digit is not treated as a word start.
    """
    return _WORD_START.sub(lambda m: m.group(1).upper(), prefix)


def build_graph_catalog(
    prefix: str,
    with_durations: bool,
    *,
    with_server_stats: bool = False,
) -> dict[str, GraphSpec]:
    """Build the graph definitions for a metric key prefix.

    The base graphs (status errors, HTTP/2 errors, HTTP/2 stream states)
    are always present. Percentile graphs are added with
    ``with_durations``; connection/uptime/listener/session graphs with
    ``with_server_stats``.
    """
    label_prefix = title_prefix(prefix or DEFAULT_PREFIX)

    templates = list(BASE_GRAPHS)
    if with_server_stats:
        templates.extend(SERVER_GRAPHS)
    if with_durations:
        templates.extend(DURATION_GRAPHS)

    return {
        t.key: GraphSpec(
            key=t.key,
            label=f"{label_prefix} {t.display_name}",
            unit=DEFAULT_UNIT,
            metrics=t.metrics,
        )
        for t in templates
    }


def validate_catalog(catalog: dict[str, GraphSpec]) -> None:
    """Raise CatalogError if any graph names a metric the extractor can't emit."""
    known = extractable_metric_names()
    unknown = [
        name
        for graph in catalog.values()
        for name in graph.metric_names
        if name not in known
    ]
    if unknown:
        raise CatalogError(unknown)
    logger.debug("Graph catalog validated: %d graph(s)", len(catalog))
