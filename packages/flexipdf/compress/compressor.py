"""Compression engine for :mod:`flexipdf.compress`."""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import Literal

from ..core.document import Document
from ..core.objects import PDFString

_LOGGER = logging.getLogger("flexipdf.compress")

CompressionQuality = Literal["low", "medium", "high"]

DEFAULT_PRODUCER = "FlexiPDF"
SCRUBBED_FIELDS = ("Title", "Author", "Subject")


@dataclasses.dataclass(slots=True)
class CompressionLevel:
    """Defines behavioural toggles for a compression quality."""

    name: CompressionQuality
    image_quality: int | None
    recompress_streams: bool


@dataclasses.dataclass(slots=True)
class CompressionResult:
    """Represents the outcome of a compression run."""

    input_path: Path
    output_path: Path
    quality: CompressionQuality
    original_size: int
    compressed_size: int
    images_recompressed: int = 0

    @property
    def bytes_saved(self) -> int:
        return max(self.original_size - self.compressed_size, 0)

    @property
    def compression_ratio(self) -> float:
        if self.original_size == 0:
            return 1.0
        return self.compressed_size / self.original_size


LEVELS: dict[CompressionQuality, CompressionLevel] = {
    "low": CompressionLevel("low", image_quality=60, recompress_streams=True),
    "medium": CompressionLevel("medium", image_quality=80, recompress_streams=True),
    "high": CompressionLevel("high", image_quality=None, recompress_streams=True),
}


def get_level(quality: str) -> CompressionLevel:
    try:
        return LEVELS[quality]  # type: ignore[index]
    except KeyError:
        raise ValueError(
            f"Unknown compression quality: {quality!r} (expected low, medium or high)"
        ) from None


def compress(
    document: Document,
    quality: str = "medium",
    *,
    producer: str = DEFAULT_PRODUCER,
) -> Document:
    """Scrub identifying metadata and mark ``document`` for compaction.

    ``Title``, ``Author`` and ``Subject`` are cleared and ``Creator`` and
    ``Producer`` become ``producer``.  The document is flagged so that
    serialization drops unreachable objects and Flate-encodes unfiltered
    streams.
    """

    level = get_level(quality)
    document.ensure_unencrypted("compress")
    info = document.ensure_info()
    for key in SCRUBBED_FIELDS:
        info[key] = PDFString(b"")
    info["Creator"] = PDFString.from_text(producer)
    info["Producer"] = PDFString.from_text(producer)
    document.compact = True
    document.compress_streams = level.recompress_streams
    _LOGGER.info("Prepared document for %s quality compression", level.name)
    return document


__all__ = [
    "CompressionLevel",
    "CompressionQuality",
    "CompressionResult",
    "DEFAULT_PRODUCER",
    "LEVELS",
    "compress",
    "get_level",
]
