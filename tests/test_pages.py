from __future__ import annotations

import math
from typing import Callable

import pytest

from flexipdf import CropBox, crop, parse, rotate, serialize
from flexipdf.core.objects import PDFName
from flexipdf.exceptions import InvalidGeometryError, InvalidPageSpecError


def test_rotate_every_page(text_pdf_bytes: Callable[..., bytes]) -> None:
    document = parse(text_pdf_bytes("A", "B"))

    rotate(document, 90)

    assert [page.rotate for page in document.pages] == [90, 90]


def test_rotate_selected_pages_accumulates(text_pdf_bytes: Callable[..., bytes]) -> None:
    document = parse(text_pdf_bytes("A", "B", "C"))

    rotate(document, 270, "2")
    rotate(document, 180, [2, 3])

    assert [page.rotate for page in document.pages] == [0, 90, 180]


def test_rotate_then_inverse_restores_rotation(text_pdf_bytes: Callable[..., bytes]) -> None:
    document = parse(text_pdf_bytes("A", "B"))
    document.pages[1].dictionary["Rotate"] = 180

    rotated = parse(serialize(rotate(document, 90)))
    restored = rotate(rotated, 270)

    assert [page.rotate for page in rotated.pages] == [90, 270]
    assert [page.rotate for page in restored.pages] == [0, 180]


def test_rotate_full_turn_is_identity(text_pdf_bytes: Callable[..., bytes]) -> None:
    document = parse(text_pdf_bytes("A"))

    rotate(document, 360)

    assert document.pages[0].rotate == 0


def test_rotate_combines_inherited_rotation(raw_pdf) -> None:
    document = parse(
        raw_pdf(
            [
                b"<< /Type /Catalog /Pages 2 0 R >>",
                b"<< /Type /Pages /Kids [3 0 R] /Count 1 /Rotate 90 >>",
                b"<< /Type /Page /Parent 2 0 R >>",
            ]
        )
    )

    rotate(document, 90)

    assert document.pages[0].dictionary["Rotate"] == 180


@pytest.mark.parametrize("angle", [0, 45, -90, 450, True])
def test_rotate_rejects_angles(text_pdf_bytes: Callable[..., bytes], angle) -> None:
    with pytest.raises(InvalidGeometryError):
        rotate(parse(text_pdf_bytes("A")), angle)


def test_rotate_rejects_bad_pages(text_pdf_bytes: Callable[..., bytes]) -> None:
    with pytest.raises(InvalidPageSpecError):
        rotate(parse(text_pdf_bytes("A")), 90, "2")


def test_rotate_allowed_on_encrypted_documents(text_pdf_bytes: Callable[..., bytes]) -> None:
    document = parse(text_pdf_bytes("A"))
    document.trailer["Encrypt"] = {"Filter": PDFName("Standard")}

    rotate(document, 90)

    assert document.pages[0].rotate == 90


def test_crop_sets_crop_box(text_pdf_bytes: Callable[..., bytes]) -> None:
    document = parse(text_pdf_bytes("A", "B"))

    crop(document, {"x": 10, "y": 20, "width": 100, "height": 50.5})

    for page in document.pages:
        assert page.crop_box == [10.0, 20.0, 110.0, 70.5]
        assert page.media_box == [0.0, 0.0, 612.0, 792.0]
    assert b"/CropBox [10 20 110 70.5]" in serialize(document)


@pytest.mark.parametrize(
    "box",
    [(0, 0, 0, 10), (0, 0, 10, -1), (math.nan, 0, 10, 10), (0, math.inf, 10, 10), (0, 0, "10", 10)],
)
def test_crop_box_validation(box) -> None:
    with pytest.raises(InvalidGeometryError):
        CropBox(*box)


def test_crop_box_coerce_requires_all_keys() -> None:
    with pytest.raises(InvalidGeometryError):
        CropBox.coerce({"x": 0, "y": 0, "width": 10})
