"""Capture package for loading card images."""

from .image import load_image

__all__ = ["load_image"]
