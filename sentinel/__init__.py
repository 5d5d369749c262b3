"""Sentinel: readiness/liveness aggregator."""

__version__ = "0.1.0"
