"""Unit-aware aggregation and display pipeline for daily health metrics."""

__version__ = "0.1.0"
