"""Build PDF documents from raster images."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from PIL import Image, UnidentifiedImageError

from ..core.content import ContentBuilder
from ..core.document import Document
from ..core.filters import flate_encode
from ..core.objects import PDFName, PDFStream
from ..exceptions import EmptyInputError, MalformedDocumentError

LOGGER = logging.getLogger("flexipdf.convert")

_JPEG_COLORSPACES = {"L": "DeviceGray", "RGB": "DeviceRGB"}


def _image_stream(path: Path) -> tuple[PDFStream, int, int]:
    try:
        with Image.open(path) as img:
            img.load()
            width, height = img.size
            if img.format == "JPEG" and img.mode in _JPEG_COLORSPACES:
                data = path.read_bytes()
                dictionary = {
                    "ColorSpace": PDFName(_JPEG_COLORSPACES[img.mode]),
                    "Filter": PDFName("DCTDecode"),
                }
            else:
                converted = img.convert("RGB")
                data = flate_encode(converted.tobytes())
                dictionary = {
                    "ColorSpace": PDFName("DeviceRGB"),
                    "Filter": PDFName("FlateDecode"),
                }
    except (OSError, UnidentifiedImageError) as exc:
        raise MalformedDocumentError(f"Unreadable image: {path}") from exc
    dictionary.update(
        {
            "Type": PDFName("XObject"),
            "Subtype": PDFName("Image"),
            "Width": width,
            "Height": height,
            "BitsPerComponent": 8,
        }
    )
    return PDFStream(dictionary, data), width, height


def images_to_pdf(paths: Iterable[str | Path]) -> Document:
    """Return a document with one page per image, each page the image's size."""

    image_paths = [Path(path) for path in paths]
    if not image_paths:
        raise EmptyInputError("At least one image is required")

    document = Document.new()
    for index, path in enumerate(image_paths, start=1):
        stream, width, height = _image_stream(path)
        image_ref = document.add_object(stream)
        content = (
            ContentBuilder()
            .save_state()
            .transform(width, 0, 0, height, 0, 0)
            .draw_xobject("Im1")
            .restore_state()
            .build()
        )
        document.append_page(
            {
                "MediaBox": [0, 0, width, height],
                "Resources": {"XObject": {"Im1": image_ref}},
                "Contents": document.add_object(PDFStream({}, content)),
            }
        )
        LOGGER.debug("Added image %d (%s, %dx%d)", index, path.name, width, height)
    LOGGER.info("Built %d page(s) from images", len(image_paths))
    return document


__all__ = ["images_to_pdf"]
