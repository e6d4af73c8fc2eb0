"""h2o-metrics: agent plugin reporting H2O server-status metrics."""

__version__ = "0.1.0"
