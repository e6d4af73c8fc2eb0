"""Entry point — python -m h2o_metrics."""

from __future__ import annotations

import argparse
import logging
import sys

from h2o_metrics.errors import H2OMetricsError

logger = logging.getLogger("h2o_metrics")


def build_parser() -> argparse.ArgumentParser:
    # Defaults live on PluginConfig; None means "not given on the command line".
    parser = argparse.ArgumentParser(
        prog="mackerel-plugin-h2o",
        description="Report H2O server-status metrics to the monitoring agent",
    )
    parser.add_argument("-c", "--config", default=None,
                        help="Path to configuration YAML file")
    parser.add_argument("--host", default=None, help="Hostname (default 127.0.0.1)")
    parser.add_argument("--scheme", default=None, help="Scheme (default http)")
    parser.add_argument("--port", type=int, default=None, help="Port (default 80)")
    parser.add_argument("--path", default=None,
                        help="Path (default /server-status/json)")
    parser.add_argument("--basic-auth", default=None, help="BasicAuth as user:pass")
    parser.add_argument(
        "--with-durations", action="store_true", default=None,
        help="With durations (requires duration-stats: ON setting on h2o.conf)",
    )
    parser.add_argument("--with-server-stats", action="store_true", default=None,
                        help="Also graph connections, uptime, listeners and sessions")
    parser.add_argument("--tempfile", default=None, help="Temp file name")
    parser.add_argument("--metric-key-prefix", default=None,
                        help="Metric key prefix (default h2o)")
    parser.add_argument("--timeout", type=float, default=None,
                        help="HTTP timeout in seconds (default 10)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log progress to stderr")
    return parser


def _setup_logging(verbose: bool) -> None:
    # stdout carries metric lines; everything else goes to stderr
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _setup_logging(args.verbose)

    from h2o_metrics.config.settings import load_config
    from h2o_metrics.output import AgentOutput
    from h2o_metrics.plugin import H2OPlugin

    overrides = {
        "host": args.host,
        "scheme": args.scheme,
        "port": args.port,
        "path": args.path,
        "basic_auth": args.basic_auth,
        "with_durations": args.with_durations,
        "with_server_stats": args.with_server_stats,
        "tempfile": args.tempfile,
        "metric_key_prefix": args.metric_key_prefix,
        "timeout": args.timeout,
    }
    try:
        config = load_config(args.config, overrides)
        plugin = H2OPlugin(config)
        AgentOutput(plugin, sys.stdout, tempfile=config.tempfile).run()
    except (H2OMetricsError, ValueError) as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
