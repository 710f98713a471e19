"""Scan metrics collection."""

from .metrics import ErrorEntry, ScanMetrics

__all__ = ["ErrorEntry", "ScanMetrics"]
