"""Authenticity package."""

from .scorer import authenticity_label, build_checks, score_authenticity

__all__ = ["score_authenticity", "build_checks", "authenticity_label"]
