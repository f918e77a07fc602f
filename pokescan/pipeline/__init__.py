"""Scan pipeline package."""

from .factory import build_pipeline
from .scanner import STAGE_LABELS, STAGE_PROGRESS, ScanPipeline

__all__ = ["ScanPipeline", "STAGE_LABELS", "STAGE_PROGRESS", "build_pipeline"]
