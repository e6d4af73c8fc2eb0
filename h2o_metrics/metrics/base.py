"""Shared types for metric extraction."""

from __future__ import annotations

from dataclasses import dataclass

# Metric name -> value, produced fresh on every poll.
MetricsSnapshot = dict[str, float]


@dataclass(frozen=True)
class MetricValue:
    """A single named measurement ready to be reported."""
    name: str
    value: float
    timestamp: int = 0


def is_numeric(value: object) -> bool:
    """True for JSON numbers. bool is excluded even though it subclasses int."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)
