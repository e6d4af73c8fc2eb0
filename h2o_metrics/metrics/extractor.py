"""Server-status extractor — JSON body to a flat metrics snapshot."""

from __future__ import annotations

import json
import logging
import math
from typing import Any

from h2o_metrics.errors import ParseError
from h2o_metrics.metrics.base import MetricsSnapshot, is_numeric

logger = logging.getLogger(__name__)

STATUS_ERROR_CODES = ("400", "403", "404", "405", "416", "417", "500", "502", "503")

HTTP2_ERRORS = (
    "protocol",
    "internal",
    "flow-control",
    "settings-timeout",
    "stream-closed",
    "frame-size",
    "refused-stream",
    "cancel",
    "compression",
    "connect",
    "enhance-your-calm",
    "inadequate-security",
)

HTTP2_STREAM_STATES = ("read-closed", "write-closed")

SERVER_FIELDS = (
    "connections",
    "max-connections",
    "uptime",
    "generation",
    "listeners",
    "num-sessions",
)

PASS_THROUGH_FIELDS: tuple[str, ...] = (
    *(f"status-errors.{code}" for code in STATUS_ERROR_CODES),
    *(f"http2-errors.{name}" for name in HTTP2_ERRORS),
    *(f"http2.{state}" for state in HTTP2_STREAM_STATES),
    *SERVER_FIELDS,
)

# Requires "duration-stats: ON" in h2o.conf.
DURATION_METRICS = (
    "connect-time",
    "header-time",
    "body-time",
    "request-total-time",
    "process-time",
    "response-time",
    "duration",
)

PERCENTILES = ("0", "25", "50", "75", "99")


def wire_percentile_key(base: str, rank: str) -> str:
    """Key used by the server, e.g. ``connect-time-99``."""
    return f"{base}-{rank}"


def percentile_metric_name(base: str, rank: str) -> str:
    """Key reported by the plugin, e.g. ``connect-time.99``."""
    return f"{base}.{rank}"


def extractable_metric_names() -> frozenset[str]:
    """Every metric name :func:`extract_stats` is able to emit."""
    names = set(PASS_THROUGH_FIELDS)
    for base in DURATION_METRICS:
        for rank in PERCENTILES:
            names.add(percentile_metric_name(base, rank))
    return frozenset(names)


def _parse_number(text: str) -> float:
    # every JSON number is a float64 on the wire; out-of-range values are invalid
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"Number out of range: {text[:32]}")
    return value


def _reject_constant(name: str) -> float:
    raise ValueError(f"Invalid JSON constant: {name}")


def parse_status_document(body: bytes | str) -> dict[str, Any]:
    """Decode a status body, requiring a JSON object at the top level.

    NaN, Infinity and numbers outside float range are rejected.
    """
    try:
        document = json.loads(
            body,
            parse_int=_parse_number,
            parse_float=_parse_number,
            parse_constant=_reject_constant,
        )
    except (ValueError, TypeError) as exc:
        raise ParseError(f"Status body is not valid JSON: {exc}") from exc
    if not isinstance(document, dict):
        raise ParseError(
            f"Status body must be a JSON object, got {type(document).__name__}"
        )
    return document


def extract_stats(body: bytes | str) -> MetricsSnapshot:
    """Parse a status body and keep the numeric fields the plugin reports.

    Fields that are missing, non-numeric or unknown are left out of the
    snapshot rather than treated as errors, so newer or older servers
    that omit some keys still report whatever they do expose.
    """
    document = parse_status_document(body)
    stats = extract_from_document(document)
    logger.debug("Extracted %d of %d status fields", len(stats), len(document))
    return stats


def extract_from_document(document: dict[str, Any]) -> MetricsSnapshot:
    stats: MetricsSnapshot = {}

    for name in PASS_THROUGH_FIELDS:
        value = document.get(name)
        if is_numeric(value):
            stats[name] = float(value)

    for base in DURATION_METRICS:
        for rank in PERCENTILES:
            value = document.get(wire_percentile_key(base, rank))
            if is_numeric(value):
                stats[percentile_metric_name(base, rank)] = float(value)

    return stats
