"""Image discovery and JPEG re-encoding for :mod:`flexipdf.compress`."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Iterator

from PIL import Image, UnidentifiedImageError

from ..core.document import Document, Page
from ..core.filters import stream_filters
from ..core.objects import PDFReference, PDFStream, name_of

_LOGGER = logging.getLogger("flexipdf.compress")


@dataclass(slots=True)
class PageImage:
    page: Page
    name: str
    ref: PDFReference
    stream: PDFStream

    @property
    def width(self) -> int:
        value = self.stream.get("Width")
        return value if isinstance(value, int) else 0

    @property
    def height(self) -> int:
        value = self.stream.get("Height")
        return value if isinstance(value, int) else 0


def iter_page_images(document: Document) -> Iterator[PageImage]:
    """Yield every image XObject referenced from a page's resources.

    An image shared by several pages is reported once per page.
    """

    for page in document.pages:
        xobjects = document.resolve_dict(page.resources.get("XObject"))
        if not xobjects:
            continue
        for name, ref in xobjects.items():
            if not isinstance(ref, PDFReference):
                continue
            stream = document.resolve(ref)
            if isinstance(stream, PDFStream) and name_of(stream.get("Subtype")) == "Image":
                yield PageImage(page, name, ref, stream)


def _is_plain_jpeg(document: Document, stream: PDFStream) -> bool:
    filters = stream_filters(stream)
    if [name for name, _ in filters] != ["DCTDecode"]:
        return False
    if "Decode" in stream.dictionary:
        return False
    colorspace = name_of(document.resolve(stream.get("ColorSpace")))
    return colorspace in ("DeviceRGB", "DeviceGray")


def recompress_images(document: Document, quality: int) -> int:
    """Re-encode baseline JPEG images at ``quality``; return how many shrank.

    Images are only replaced when the new encoding is smaller.
    """

    document.ensure_unencrypted("re-encode images of")
    done: set[tuple[int, int]] = set()
    replaced = 0
    for image in iter_page_images(document):
        if image.ref.key in done:
            continue
        done.add(image.ref.key)
        if not _is_plain_jpeg(document, image.stream):
            _LOGGER.debug("Skipping image %s: not a plain RGB/gray JPEG", image.name)
            continue
        try:
            with Image.open(io.BytesIO(image.stream.data)) as img:
                img.load()
                mode = "L" if img.mode == "L" else "RGB"
                output = io.BytesIO()
                img.convert(mode).save(output, format="JPEG", quality=quality, optimize=True)
        except (OSError, UnidentifiedImageError) as exc:
            _LOGGER.debug("Skipping image %s: %s", image.name, exc)
            continue
        encoded = output.getvalue()
        if len(encoded) >= len(image.stream.data):
            continue
        image.stream.data = encoded
        replaced += 1
    _LOGGER.debug("Re-encoded %d image(s) at quality %d", replaced, quality)
    return replaced


__all__ = ["PageImage", "iter_page_images", "recompress_images"]
