"""Text marks drawn over existing page content."""

from __future__ import annotations

from .marks import CORNERS, add_stamp, add_watermark, approximate_text_width, sign

__all__ = ["CORNERS", "add_stamp", "add_watermark", "approximate_text_width", "sign"]
