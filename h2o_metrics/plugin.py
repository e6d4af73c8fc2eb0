"""H2O plugin: fetches server-status and exposes metrics plus graph definitions."""

from __future__ import annotations

import logging

import httpx

from h2o_metrics.config.settings import PluginConfig
from h2o_metrics.errors import FetchError
from h2o_metrics.graphs.catalog import (
    DEFAULT_PREFIX,
    GraphSpec,
    build_graph_catalog,
    validate_catalog,
)
from h2o_metrics.metrics.base import MetricsSnapshot
from h2o_metrics.metrics.extractor import extract_stats

logger = logging.getLogger(__name__)


class H2OPlugin:
    """Polls one H2O status endpoint."""

    def __init__(self, config: PluginConfig, client: httpx.Client | None = None) -> None:
        self.config = config
        self._client = client
        self._graphs = build_graph_catalog(
            self.metric_key_prefix(),
            config.with_durations,
            with_server_stats=config.with_server_stats,
        )
        validate_catalog(self._graphs)

    @property
    def uri(self) -> str:
        return self.config.uri

    def fetch_metrics(self) -> MetricsSnapshot:
        """Fetch the status document and extract a metrics snapshot.

        Raises FetchError on transport or HTTP status failures and
        ParseError when the body is not a JSON object.
        """
        logger.info("Fetching %s", self.config.display_uri)
        try:
            if self._client is not None:
                body = self._get(self._client)
            else:
                with httpx.Client(timeout=self.config.timeout) as client:
                    body = self._get(client)
        except httpx.HTTPError as exc:
            raise FetchError(self.config.display_uri, str(exc) or type(exc).__name__) from exc

        stats = extract_stats(body)
        logger.info("Collected %d metric(s)", len(stats))
        return stats

    def _get(self, client: httpx.Client) -> bytes:
        resp = client.get(self.uri)
        resp.raise_for_status()
        return resp.content

    def graph_definition(self) -> dict[str, GraphSpec]:
        return self._graphs

    def metric_key_prefix(self) -> str:
        return self.config.metric_key_prefix or DEFAULT_PREFIX
