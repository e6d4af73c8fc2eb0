"""Exception types raised during a poll cycle."""

from __future__ import annotations


class H2OMetricsError(Exception):
    """Base class for plugin errors."""


class FetchError(H2OMetricsError):
    """The status endpoint could not be fetched."""

    def __init__(self, uri: str, reason: str) -> None:
        super().__init__(f"Failed to fetch {uri}: {reason}")
        self.uri = uri
        self.reason = reason


class ParseError(H2OMetricsError):
    """The status body is not a well-formed JSON object."""


class CatalogError(H2OMetricsError):
    """A graph references metric names the extractor never produces."""

    def __init__(self, unknown: list[str]) -> None:
        super().__init__(
            "Graph catalog references unknown metrics: " + ", ".join(unknown)
        )
        self.unknown = unknown
