"""Tests for agent output: value lines, graph meta and tempfile."""

from __future__ import annotations

import io
import json

import httpx

from h2o_metrics.config.settings import PluginConfig
from h2o_metrics.graphs.catalog import build_graph_catalog
from h2o_metrics.metrics.base import MetricValue
from h2o_metrics.output import (
    META_ENV,
    AgentOutput,
    collect_values,
    format_value_line,
    graph_meta,
)
from h2o_metrics.plugin import H2OPlugin


def _plugin(config: PluginConfig, body: bytes) -> H2OPlugin:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, content=body))
    return H2OPlugin(config, client=httpx.Client(transport=transport))


def test_collect_values_uses_graph_keys():
    graphs = build_graph_catalog("h2o", True)
    stats = {"status-errors.404": 6.0, "connect-time.99": 10042828.0, "uptime": 5.0}

    values = collect_values("h2o", graphs, stats, now=1700000000)

    assert values == [
        MetricValue("h2o.status-errors.status-errors.404", 6.0, 1700000000),
        MetricValue("h2o.connect-time.connect-time.99", 10042828.0, 1700000000),
    ]


def test_format_value_line():
    assert format_value_line(MetricValue("h2o.http2.http2.read-closed", 9.0, 10)) == (
        "h2o.http2.http2.read-closed\t9\t10"
    )
    assert format_value_line(MetricValue("h2o.uptime.uptime", 1.5, 10)) == (
        "h2o.uptime.uptime\t1.5\t10"
    )


def test_graph_meta_shape():
    meta = graph_meta("edge", build_graph_catalog("edge", False))

    assert list(meta["graphs"]) == ["edge.status-errors", "edge.http2-errors", "edge.http2"]
    http2 = meta["graphs"]["edge.http2"]
    assert http2["label"] == "Edge HTTP2"
    assert http2["unit"] == "integer"
    assert http2["metrics"][0] == {
        "name": "http2.read-closed", "label": "read-closed", "stacked": False,
    }


def test_run_outputs_values(status_body, monkeypatch):
    monkeypatch.delenv(META_ENV, raising=False)
    stream = io.StringIO()

    AgentOutput(_plugin(PluginConfig(), status_body), stream).run()

    lines = stream.getvalue().splitlines()
    assert len(lines) == 9 + 12 + 2
    name, value, ts = lines[2].split("\t")
    assert name == "h2o.status-errors.status-errors.404"
    assert value == "6"
    assert int(ts) > 0


def test_run_outputs_meta(status_body, monkeypatch):
    monkeypatch.setenv(META_ENV, "1")
    stream = io.StringIO()

    AgentOutput(_plugin(PluginConfig(with_durations=True), status_body), stream).run()

    header, payload = stream.getvalue().splitlines()
    assert header == "# mackerel-agent-plugin"
    graphs = json.loads(payload)["graphs"]
    assert "h2o.duration" in graphs
    assert len(graphs) == 3 + 7


def test_output_values_saves_tempfile(tmp_path, status_body):
    tempfile = tmp_path / "state" / "mackerel-plugin-h2o"
    output = AgentOutput(
        _plugin(PluginConfig(), status_body), io.StringIO(), tempfile=str(tempfile),
    )

    output.output_values(now=1234)

    saved = json.loads(tempfile.read_text())
    assert saved["_lastTime"] == 1234
    assert saved["status-errors.404"] == 6
    assert saved["connect-time.99"] == 10042828


def test_run_outputs_meta_for_any_non_empty_flag(status_body, monkeypatch):
    monkeypatch.setenv(META_ENV, "true")
    stream = io.StringIO()

    AgentOutput(_plugin(PluginConfig(), status_body), stream).run()

    assert stream.getvalue().startswith("# mackerel-agent-plugin\n")


def test_run_outputs_values_for_empty_flag(status_body, monkeypatch):
    monkeypatch.setenv(META_ENV, "")
    stream = io.StringIO()

    AgentOutput(_plugin(PluginConfig(), status_body), stream).run()

    assert stream.getvalue().startswith("h2o.status-errors.status-errors.400\t0\t")
