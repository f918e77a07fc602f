"""Store package for scan history."""

from .writer import ScanHistoryWriter

__all__ = ["ScanHistoryWriter"]
