"""Page rotation and cropping."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Mapping

from ..core.document import Document
from ..exceptions import InvalidGeometryError
from ..split.utils import PageSpec, normalize_pages

LOGGER = logging.getLogger("flexipdf.pages")

VALID_ANGLES = (90, 180, 270, 360)


@dataclass(frozen=True)
class CropBox:
    """A crop rectangle in default user-space points."""

    x: float
    y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        values = (self.x, self.y, self.width, self.height)
        if not all(_is_finite_number(value) for value in values):
            raise InvalidGeometryError(f"Crop box values must be finite numbers, got {values!r}")
        if self.width <= 0 or self.height <= 0:
            raise InvalidGeometryError(
                f"Crop box width and height must be positive, got {self.width}x{self.height}"
            )

    @classmethod
    def coerce(cls, box: "CropBox | Mapping[str, Any]") -> "CropBox":
        if isinstance(box, CropBox):
            return box
        try:
            return cls(box["x"], box["y"], box["width"], box["height"])
        except (KeyError, TypeError) as exc:
            raise InvalidGeometryError(f"Crop box needs x, y, width and height: {box!r}") from exc

    def as_array(self) -> list[float]:
        return [self.x, self.y, self.x + self.width, self.y + self.height]


def _is_finite_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def rotate(document: Document, angle: int, pages: PageSpec | None = None) -> Document:
    """Rotate the selected pages clockwise by ``angle`` degrees.

    The new rotation is written on each page, combining any inherited
    ``/Rotate``.  ``pages`` defaults to every page.
    """

    if isinstance(angle, bool) or angle not in VALID_ANGLES:
        raise InvalidGeometryError(
            f"Rotation angle must be one of {', '.join(map(str, VALID_ANGLES))}, got {angle!r}"
        )
    all_pages = document.pages
    selected = normalize_pages(pages, total_pages=len(all_pages))
    for number in selected:
        page = all_pages[number - 1]
        page.dictionary["Rotate"] = (page.rotate + int(angle)) % 360
    LOGGER.info("Rotated %d page(s) by %d degrees", len(selected), angle)
    return document


def crop(document: Document, box: "CropBox | Mapping[str, Any]") -> Document:
    """Set the ``/CropBox`` of every page to ``box``."""

    crop_box = CropBox.coerce(box)
    pages = document.pages
    for page in pages:
        page.dictionary["CropBox"] = crop_box.as_array()
    LOGGER.info("Cropped %d page(s) to %s", len(pages), crop_box.as_array())
    return document


__all__ = ["CropBox", "VALID_ANGLES", "crop", "rotate"]
