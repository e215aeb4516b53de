"""Information utilities for the :mod:`flexipdf.compress` package."""

from __future__ import annotations

import dataclasses
import logging

from ..core.document import Document
from .images import iter_page_images

_LOGGER = logging.getLogger("flexipdf.compress")


@dataclasses.dataclass(slots=True)
class CompressionInfo:
    """Describes metrics about a PDF file relevant for compression."""

    file_size_bytes: int
    image_count: int
    average_image_dpi: float | None
    potential_savings_bytes: int


def _estimate_image_dpi(document: Document) -> tuple[int, float | None]:
    image_count = 0
    dpi_values: list[float] = []
    for image in iter_page_images(document):
        image_count += 1
        if not image.width or not image.height:
            continue
        page_width_inch = image.page.width / 72.0
        page_height_inch = image.page.height / 72.0
        dpi_x = image.width / max(page_width_inch, 1e-6)
        dpi_y = image.height / max(page_height_inch, 1e-6)
        dpi_values.append((dpi_x + dpi_y) / 2.0)
    average_dpi = sum(dpi_values) / len(dpi_values) if dpi_values else None
    return image_count, average_dpi


def _estimate_potential_savings(file_size_bytes: int, image_count: int) -> int:
    if image_count == 0:
        return int(file_size_bytes * 0.05)
    weight = min(0.35 + image_count * 0.02, 0.6)
    return int(file_size_bytes * weight)


def get_compression_info(document: Document, file_size_bytes: int) -> CompressionInfo:
    """Return :class:`CompressionInfo` for ``document`` read from ``file_size_bytes`` bytes."""

    image_count, average_dpi = _estimate_image_dpi(document)
    info = CompressionInfo(
        file_size_bytes=file_size_bytes,
        image_count=image_count,
        average_image_dpi=average_dpi,
        potential_savings_bytes=_estimate_potential_savings(file_size_bytes, image_count),
    )
    _LOGGER.debug("Compression info: %s", info)
    return info


__all__ = ["CompressionInfo", "get_compression_info"]
