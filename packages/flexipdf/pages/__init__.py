"""Page geometry transforms."""

from __future__ import annotations

from .geometry import VALID_ANGLES, CropBox, crop, rotate

__all__ = ["CropBox", "VALID_ANGLES", "crop", "rotate"]
