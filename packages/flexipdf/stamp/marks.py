"""Watermarks, stamps and visible signature marks.

Every mark is appended to the page as a new content stream holding one
``q ... Q`` block, so repeated calls stack marks and never remove content.
"""

from __future__ import annotations

import datetime as _dt
import logging
from typing import Sequence

from ..core.content import text_at
from ..core.document import Document, Page
from ..exceptions import InvalidGeometryError
from ..split.utils import PageSpec, normalize_pages

LOGGER = logging.getLogger("flexipdf.stamp")

Color = tuple[float, float, float]

CORNERS = ("bottom-right", "bottom-left", "top-right", "top-left")
SIGNATURE_COLOR: Color = (0.0, 0.0, 0.8)
SIGNATURE_DATE_COLOR: Color = (0.5, 0.5, 0.5)


def _check_text(text: str) -> None:
    if not text or not text.strip():
        raise ValueError("Mark text must not be empty")


def _check_color(color: Sequence[float]) -> Color:
    components = tuple(float(item) for item in color)
    if len(components) != 3 or not all(0.0 <= item <= 1.0 for item in components):
        raise ValueError(f"Color must be three components in [0, 1], got {color!r}")
    return components  # type: ignore[return-value]


def _check_font_size(font_size: float) -> None:
    if font_size <= 0:
        raise InvalidGeometryError(f"Font size must be positive, got {font_size}")


def approximate_text_width(text: str, font_size: float) -> float:
    """Rough Helvetica advance width: half an em per character."""

    return len(text) * font_size / 2


def add_watermark(
    document: Document,
    text: str,
    *,
    opacity: float = 0.3,
    font_size: float = 50,
    color: Sequence[float] = (0.5, 0.5, 0.5),
    rotation: float = 45,
) -> Document:
    """Draw ``text`` diagonally across the middle of every page."""

    _check_text(text)
    _check_font_size(font_size)
    if not 0.0 <= opacity <= 1.0:
        raise InvalidGeometryError(f"Opacity must be between 0 and 1, got {opacity}")
    fill = _check_color(color)
    document.ensure_unencrypted("watermark")

    pages = document.pages
    for page in pages:
        font = page.add_standard_font("Helvetica")
        state = page.add_opacity_state(opacity)
        box = page.media_box
        x = box[0] + page.width / 2 - len(text) * font_size / 4
        y = box[1] + page.height / 2
        page.append_content(
            text_at(font, font_size, text, x, y, color=fill, angle=rotation, state=state)
        )
    LOGGER.info("Watermarked %d page(s)", len(pages))
    return document


def _corner_position(page: Page, text: str, font_size: float, corner: str, margin: float) -> tuple[float, float]:
    box = page.media_box
    text_width = approximate_text_width(text, font_size)
    if corner.endswith("left"):
        x = box[0] + margin
    else:
        x = box[2] - margin - text_width
    if corner.startswith("bottom"):
        y = box[1] + margin
    else:
        y = box[3] - margin - font_size
    return x, y


def add_stamp(
    document: Document,
    text: str,
    *,
    pages: PageSpec | None = None,
    corner: str = "bottom-right",
    font_size: float = 12,
    color: Sequence[float] = (0.0, 0.0, 0.0),
    margin: float = 36,
    opacity: float = 1.0,
) -> Document:
    """Draw ``text`` near a corner of the selected pages (all by default)."""

    _check_text(text)
    _check_font_size(font_size)
    if corner not in CORNERS:
        raise InvalidGeometryError(f"Corner must be one of {', '.join(CORNERS)}, got {corner!r}")
    if margin < 0:
        raise InvalidGeometryError(f"Margin must not be negative, got {margin}")
    if not 0.0 <= opacity <= 1.0:
        raise InvalidGeometryError(f"Opacity must be between 0 and 1, got {opacity}")
    fill = _check_color(color)
    document.ensure_unencrypted("stamp")

    all_pages = document.pages
    selected = normalize_pages(pages, total_pages=len(all_pages))
    for number in selected:
        page = all_pages[number - 1]
        font = page.add_standard_font("Helvetica")
        state = page.add_opacity_state(opacity) if opacity < 1.0 else None
        x, y = _corner_position(page, text, font_size, corner, margin)
        page.append_content(text_at(font, font_size, text, x, y, color=fill, state=state))
    LOGGER.info("Stamped %d page(s)", len(selected))
    return document


def sign(
    document: Document,
    signer: str,
    *,
    date: str | _dt.date | None = None,
    date_format: str = "%Y-%m-%d",
) -> Document:
    """Add a visible signature block to the last page.

    This draws text only; it is not a cryptographic signature.
    """

    _check_text(signer)
    document.ensure_unencrypted("sign")
    pages = document.pages
    if not pages:
        raise InvalidGeometryError("Cannot sign a document without pages")
    if date is None:
        date = _dt.date.today()
    date_text = date if isinstance(date, str) else date.strftime(date_format)

    page = pages[-1]
    box = page.media_box
    x = box[0] + page.width - 300
    bold = page.add_standard_font("Helvetica-Bold")
    page.append_content(
        text_at(bold, 12, f"Digitally Signed: {signer}", x, box[1] + 50, color=SIGNATURE_COLOR)
        + text_at(bold, 10, f"Date: {date_text}", x, box[1] + 30, color=SIGNATURE_DATE_COLOR)
    )
    LOGGER.info("Signed page %d for %s", page.number, signer)
    return document


__all__ = ["CORNERS", "add_stamp", "add_watermark", "approximate_text_width", "sign"]
