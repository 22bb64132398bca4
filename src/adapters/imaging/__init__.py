"""Imaging adapters - Profile photo thumbnailing."""

from .pillow import PillowImageProcessor

__all__ = ["PillowImageProcessor"]
