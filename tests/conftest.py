from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence
import sys

import pytest
from pypdf import PdfWriter

PROJECT_ROOT = Path(__file__).resolve().parents[1]
PACKAGES_DIR = PROJECT_ROOT / "packages"
if str(PACKAGES_DIR) not in sys.path:
    sys.path.insert(0, str(PACKAGES_DIR))

RawPdfBuilder = Callable[..., bytes]


def assemble_pdf(
    bodies: Sequence[bytes],
    *,
    trailer: bytes = b"/Root 1 0 R",
    version: bytes = b"1.4",
    with_xref: bool = True,
) -> bytes:
    """Build a classic PDF file whose object ``n`` is ``bodies[n - 1]``."""

    out = bytearray(b"%PDF-" + version + b"\n%\xe2\xe3\xcf\xd3\n")
    offsets = []
    for number, body in enumerate(bodies, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"
    size = len(bodies) + 1
    trailer_dict = b"<< /Size %d " % size + trailer + b" >>"
    if not with_xref:
        out += b"trailer\n" + trailer_dict + b"\n%%EOF\n"
        return bytes(out)
    xref_at = len(out)
    out += b"xref\n0 %d\n" % size
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n" + trailer_dict + b"\nstartxref\n%d\n%%%%EOF\n" % xref_at
    return bytes(out)


def content_stream(data: bytes, extra: bytes = b"") -> bytes:
    return b"<< /Length %d%s >>\nstream\n" % (len(data), extra) + data + b"\nendstream"


def text_page_bodies(*texts: str) -> list[bytes]:
    """Catalog, page tree, then a page, content stream and font per text."""

    kids = []
    bodies: list[bytes] = [b"<< /Type /Catalog /Pages 2 0 R >>", b""]
    for text in texts:
        page_number = len(bodies) + 1
        kids.append(b"%d 0 R" % page_number)
        content = b"BT /F1 12 Tf 72 720 Td (" + text.encode("latin-1") + b") Tj ET"
        bodies.append(
            b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
            b"/Resources << /Font << /F1 %d 0 R >> >> /Contents %d 0 R >>"
            % (page_number + 2, page_number + 1)
        )
        bodies.append(content_stream(content))
        bodies.append(b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>")
    bodies[1] = b"<< /Type /Pages /Kids [" + b" ".join(kids) + b"] /Count %d >>" % len(texts)
    return bodies


@pytest.fixture()
def raw_pdf() -> RawPdfBuilder:
    return assemble_pdf


@pytest.fixture()
def page_bodies() -> Callable[..., list[bytes]]:
    return text_page_bodies


@pytest.fixture()
def text_pdf_bytes() -> Callable[..., bytes]:
    def _create(*texts: str) -> bytes:
        return assemble_pdf(text_page_bodies(*texts))

    return _create


@pytest.fixture()
def text_pdf(tmp_path: Path, text_pdf_bytes: Callable[..., bytes]) -> Path:
    path = tmp_path / "text.pdf"
    path.write_bytes(text_pdf_bytes("Hello World", "Second page"))
    return path


@pytest.fixture()
def sample_pdf(tmp_path: Path) -> Path:
    pdf_path = tmp_path / "sample.pdf"
    writer = PdfWriter()
    for _ in range(5):
        writer.add_blank_page(width=200, height=200)
    writer.add_metadata({"/Producer": "flexipdf-tests", "/Title": "Sample"})
    with pdf_path.open("wb") as stream:
        writer.write(stream)
    return pdf_path


@pytest.fixture()
def pdf_factory(tmp_path: Path) -> Callable[..., Path]:
    def _create(filename: str, title: str | None = None, pages: int = 1) -> Path:
        path = tmp_path / filename
        writer = PdfWriter()
        for _ in range(pages):
            writer.add_blank_page(width=72, height=72)
        if title is not None:
            writer.add_metadata({"/Title": title})
        with path.open("wb") as handle:
            writer.write(handle)
        return path

    return _create


@pytest.fixture()
def sample_pdfs(pdf_factory: Callable[..., Path]) -> list[Path]:
    pdf1 = pdf_factory("one.pdf", title="Document One")
    pdf2 = pdf_factory("two.pdf", pages=2)
    return [pdf1, pdf2]
