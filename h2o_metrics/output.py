"""Agent output: metric value lines, graph metadata and the tempfile cache."""

from __future__ import annotations

import json
import logging
import os
import time
from pathlib import Path
from typing import Any, TextIO

from h2o_metrics.graphs.catalog import GraphSpec
from h2o_metrics.metrics.base import MetricsSnapshot, MetricValue
from h2o_metrics.plugin import H2OPlugin

logger = logging.getLogger(__name__)

META_ENV = "MACKEREL_AGENT_PLUGIN_META"
META_HEADER = "# mackerel-agent-plugin"


def collect_values(
    prefix: str,
    graphs: dict[str, GraphSpec],
    stats: MetricsSnapshot,
    now: int,
) -> list[MetricValue]:
    """Pair each graph metric present in *stats* with its reported name.

    Metrics absent from the snapshot are skipped; catalog order is kept.
    """
    values: list[MetricValue] = []
    for key, graph in graphs.items():
        for metric in graph.metrics:
            if metric.name not in stats:
                continue
            values.append(MetricValue(
                name=f"{prefix}.{key}.{metric.name}",
                value=stats[metric.name],
                timestamp=now,
            ))
    return values


def _format_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


def format_value_line(value: MetricValue) -> str:
    return f"{value.name}\t{_format_number(value.value)}\t{value.timestamp}"


def graph_meta(prefix: str, graphs: dict[str, GraphSpec]) -> dict[str, Any]:
    """Graph definitions in the shape the agent expects on plugin meta runs."""
    return {
        "graphs": {
            f"{prefix}.{key}": {
                "label": graph.label,
                "unit": graph.unit,
                "metrics": [
                    {"name": m.name, "label": m.label, "stacked": m.stacked}
                    for m in graph.metrics
                ],
            }
            for key, graph in graphs.items()
        }
    }


class AgentOutput:
    """Runs one plugin invocation the way the monitoring agent calls it."""

    def __init__(self, plugin: H2OPlugin, stream: TextIO, tempfile: str | None = None) -> None:
        self.plugin = plugin
        self.stream = stream
        self.tempfile = Path(tempfile).expanduser() if tempfile else None

    def run(self) -> None:
        if os.environ.get(META_ENV):
            self.output_definitions()
        else:
            self.output_values()

    def output_definitions(self) -> None:
        meta = graph_meta(self.plugin.metric_key_prefix(), self.plugin.graph_definition())
        self.stream.write(META_HEADER + "\n")
        self.stream.write(json.dumps(meta) + "\n")

    def output_values(self, now: int | None = None) -> list[MetricValue]:
        stats = self.plugin.fetch_metrics()
        now = int(time.time()) if now is None else now
        values = collect_values(
            self.plugin.metric_key_prefix(), self.plugin.graph_definition(), stats, now,
        )
        for value in values:
            self.stream.write(format_value_line(value) + "\n")
        if self.tempfile is not None:
            self.save_snapshot(stats, now)
        return values

    def save_snapshot(self, stats: MetricsSnapshot, now: int) -> None:
        """Write the last snapshot to the tempfile; the agent owns its meaning."""
        if self.tempfile is None:
            return
        self.tempfile.parent.mkdir(parents=True, exist_ok=True)
        payload = {"_lastTime": now, **stats}
        self.tempfile.write_text(json.dumps(payload))
        logger.debug("Saved %d value(s) to %s", len(stats), self.tempfile)
