from __future__ import annotations

import datetime as dt
from typing import Callable

import pytest

from flexipdf import add_stamp, add_watermark, extract_text, parse, serialize, sign
from flexipdf.core.objects import PDFName
from flexipdf.exceptions import InvalidGeometryError, UnsupportedFeatureError


def test_watermark_every_page(text_pdf_bytes: Callable[..., bytes]) -> None:
    document = parse(text_pdf_bytes("A", "B"))

    add_watermark(document, "DRAFT", opacity=0.25)

    for page in document.pages:
        content = page.content_bytes()
        assert content.rindex(b"(DRAFT)") > content.index(b"Q")
        assert b"(DRAFT) Tj" in content
        assert b"/FxGS1 gs" in content
        assert b"/FxF1 50 Tf" in content
        state = document.resolve(page.resources["ExtGState"]["FxGS1"])
        assert state["ca"] == 0.25


def test_watermark_twice_draws_two_marks(text_pdf_bytes: Callable[..., bytes]) -> None:
    document = parse(text_pdf_bytes("A"))
    page = document.pages[0]
    lengths = [len(page.content_bytes())]

    add_watermark(document, "X")
    lengths.append(len(page.content_bytes()))
    add_watermark(document, "X")
    lengths.append(len(page.content_bytes()))

    assert lengths[0] < lengths[1] < lengths[2]
    assert page.content_bytes().count(b"(X) Tj") == 2


def test_watermark_is_centered_and_diagonal(text_pdf_bytes: Callable[..., bytes]) -> None:
    document = parse(text_pdf_bytes("A"))

    add_watermark(document, "ABCD", font_size=40)

    # x = 612 / 2 - 4 * 40 / 4, y = 792 / 2
    assert b"0.707107 0.707107 -0.707107 0.707107 266 396 Tm" in document.pages[0].content_bytes()


def test_watermark_keeps_existing_text(text_pdf_bytes: Callable[..., bytes]) -> None:
    document = parse(text_pdf_bytes("Body"))

    add_watermark(document, "DRAFT")
    text = extract_text(parse(serialize(document)))

    assert "Body" in text and "DRAFT" in text


@pytest.mark.parametrize(
    ("kwargs", "error"),
    [
        ({"text": ""}, ValueError),
        ({"text": "   "}, ValueError),
        ({"text": "x", "opacity": 1.5}, InvalidGeometryError),
        ({"text": "x", "font_size": 0}, InvalidGeometryError),
        ({"text": "x", "color": (2, 0, 0)}, ValueError),
    ],
)
def test_watermark_validation(text_pdf_bytes: Callable[..., bytes], kwargs, error) -> None:
    document = parse(text_pdf_bytes("A"))
    text = kwargs.pop("text")

    with pytest.raises(error):
        add_watermark(document, text, **kwargs)


def test_stamp_selected_pages_in_corner(text_pdf_bytes: Callable[..., bytes]) -> None:
    document = parse(text_pdf_bytes("A", "B"))

    add_stamp(document, "OK", pages="2", corner="top-left", font_size=10, margin=20)

    first, second = document.pages
    assert b"(OK)" not in first.content_bytes()
    assert b"1 0 0 1 20 762 Tm" in second.content_bytes()


def test_stamp_bottom_right_default(text_pdf_bytes: Callable[..., bytes]) -> None:
    document = parse(text_pdf_bytes("A"))

    add_stamp(document, "APPROVED")

    # x = 612 - 36 - 8 * 12 / 2
    assert b"1 0 0 1 528 36 Tm" in document.pages[0].content_bytes()
    assert b" gs" not in document.pages[0].content_bytes()


def test_stamp_rejects_unknown_corner(text_pdf_bytes: Callable[..., bytes]) -> None:
    with pytest.raises(InvalidGeometryError):
        add_stamp(parse(text_pdf_bytes("A")), "x", corner="middle")


def test_sign_marks_last_page(text_pdf_bytes: Callable[..., bytes]) -> None:
    document = parse(text_pdf_bytes("A", "B"))

    sign(document, "Jane Doe", date=dt.date(2024, 3, 1))

    first, last = document.pages
    content = last.content_bytes()
    assert b"(Digitally Signed: Jane Doe) Tj" in content
    assert b"(Date: 2024-03-01) Tj" in content
    assert b"1 0 0 1 312 50 Tm" in content
    assert b"0 0 0.8 rg" in content
    assert b"Signed" not in first.content_bytes()
    fonts = last.resources["Font"]
    assert "FxF2" not in fonts
    assert document.resolve(fonts["FxF1"])["BaseFont"] == PDFName("Helvetica-Bold")
    assert b"/FxF1 10 Tf" in content


def test_sign_accepts_date_text(text_pdf_bytes: Callable[..., bytes]) -> None:
    document = parse(text_pdf_bytes("A"))

    sign(document, "J", date="1 March 2024")

    assert b"(Date: 1 March 2024)" in document.pages[0].content_bytes()


def test_marks_refuse_encrypted_documents(text_pdf_bytes: Callable[..., bytes]) -> None:
    document = parse(text_pdf_bytes("A"))
    document.trailer["Encrypt"] = {"Filter": PDFName("Standard")}

    with pytest.raises(UnsupportedFeatureError):
        add_watermark(document, "x")
    with pytest.raises(UnsupportedFeatureError):
        add_stamp(document, "x")
    with pytest.raises(UnsupportedFeatureError):
        sign(document, "x")
