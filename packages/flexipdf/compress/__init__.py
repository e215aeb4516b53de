"""Compression utilities exposed through the FlexiPDF namespace."""

from __future__ import annotations

from .compressor import (
    DEFAULT_PRODUCER,
    LEVELS,
    CompressionLevel,
    CompressionQuality,
    CompressionResult,
    compress,
    get_level,
)
from .images import iter_page_images, recompress_images
from .info import CompressionInfo, get_compression_info

__all__ = [
    "CompressionLevel",
    "CompressionQuality",
    "CompressionResult",
    "CompressionInfo",
    "DEFAULT_PRODUCER",
    "LEVELS",
    "compress",
    "get_level",
    "get_compression_info",
    "iter_page_images",
    "recompress_images",
]
