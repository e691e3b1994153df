"""metricbridge - live named metrics for embedded scripts."""

__version__ = "0.1.0"
