from __future__ import annotations

from pathlib import Path
from typing import Callable

import docx
import pytest
from PIL import Image
from pypdf import PdfReader

from flexipdf import DocumentService, ServiceConfig
from flexipdf.compress import CompressionResult
from flexipdf.exceptions import (
    InvalidPageSpecError,
    MalformedDocumentError,
    OperationNotImplementedError,
    PayloadTooLargeError,
)


@pytest.fixture()
def service(tmp_path: Path) -> DocumentService:
    return DocumentService(ServiceConfig(staging_dir=tmp_path / "staging", producer="Tests"))


@pytest.fixture()
def three_pages(tmp_path: Path, text_pdf_bytes: Callable[..., bytes]) -> Path:
    path = tmp_path / "three.pdf"
    path.write_bytes(text_pdf_bytes("P1", "P2", "P3"))
    return path


def test_merge_files(service: DocumentService, sample_pdfs: list[Path], tmp_path: Path) -> None:
    output = tmp_path / "out" / "merged.pdf"

    result = service.merge(sample_pdfs, output, bookmarks=["One", "Two"])

    assert result == output.resolve()
    reader = PdfReader(str(output))
    assert len(reader.pages) == 3
    assert [item.title for item in reader.outline] == ["One", "Two"]


def test_split_pages_names(service: DocumentService, three_pages: Path, tmp_path: Path) -> None:
    results = service.split(three_pages, tmp_path / "parts")

    assert [path.name for path in results] == ["page-1.pdf", "page-2.pdf", "page-3.pdf"]
    assert all(len(PdfReader(str(path)).pages) == 1 for path in results)


def test_split_repeated_pages_get_distinct_names(
    service: DocumentService, three_pages: Path, tmp_path: Path
) -> None:
    results = service.split(three_pages, tmp_path / "parts", "2,2")

    assert [path.name for path in results] == ["page-2.pdf", "page-2-2.pdf"]


def test_split_ranges_names(service: DocumentService, three_pages: Path, tmp_path: Path) -> None:
    results = service.split(three_pages, tmp_path / "parts", "1-2,3", mode="range")

    assert [path.name for path in results] == ["pages-1-2.pdf", "pages-3.pdf"]
    assert len(PdfReader(str(results[0])).pages) == 2


def test_split_argument_errors(service: DocumentService, three_pages: Path, tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        service.split(three_pages, tmp_path / "parts", mode="chunks")
    with pytest.raises(ValueError):
        service.split(three_pages, tmp_path / "parts", mode="range")


def test_invalid_spec_writes_nothing(service: DocumentService, three_pages: Path, tmp_path: Path) -> None:
    out_dir = tmp_path / "parts"

    with pytest.raises(InvalidPageSpecError):
        service.split(three_pages, out_dir, "1,9")

    assert not out_dir.exists() or not any(out_dir.iterdir())


def test_partial_writes_are_removed(
    service: DocumentService, three_pages: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    original = Path.write_bytes
    calls = []

    def flaky_write(self: Path, data: bytes) -> int:
        calls.append(self)
        if len(calls) == 2:
            raise OSError("disk full")
        return original(self, data)

    monkeypatch.setattr(Path, "write_bytes", flaky_write)

    with pytest.raises(OSError):
        service.split(three_pages, tmp_path / "parts")

    assert not calls[0].exists()


def test_input_size_limit(tmp_path: Path, three_pages: Path) -> None:
    limited = DocumentService(ServiceConfig(staging_dir=tmp_path / "staging", max_input_bytes=100))
    output = tmp_path / "rotated.pdf"

    with pytest.raises(PayloadTooLargeError) as excinfo:
        limited.rotate(three_pages, output, 90)

    assert excinfo.value.status_code == 413
    assert not output.exists()


def test_missing_input(service: DocumentService, tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        service.metadata(tmp_path / "absent.pdf")


def test_malformed_input(service: DocumentService, tmp_path: Path) -> None:
    bogus = tmp_path / "bogus.pdf"
    bogus.write_bytes(b"this is not a pdf")

    with pytest.raises(MalformedDocumentError):
        service.metadata(bogus)
    with pytest.raises(MalformedDocumentError):
        service.pdf_to_jpg(bogus, tmp_path / "jpgs")


def test_page_operations(service: DocumentService, three_pages: Path, tmp_path: Path) -> None:
    rotated = service.rotate(three_pages, tmp_path / "rotated.pdf", 90, "1")
    cropped = service.crop(rotated, tmp_path / "cropped.pdf", {"x": 0, "y": 0, "width": 100, "height": 100})
    extracted = service.extract_pages(cropped, tmp_path / "extracted.pdf", "3,1")

    reader = PdfReader(str(extracted))
    assert len(reader.pages) == 2
    assert reader.pages[1].rotation == 90
    assert [float(value) for value in reader.pages[0].cropbox] == [0.0, 0.0, 100.0, 100.0]


def test_marks(service: DocumentService, three_pages: Path, tmp_path: Path) -> None:
    marked = service.add_watermark(three_pages, tmp_path / "w.pdf", "DRAFT", opacity=0.5)
    stamped = service.add_stamp(marked, tmp_path / "s.pdf", "OK", pages="1")
    signed = service.sign(stamped, tmp_path / "signed.pdf", "Ann", date="2024-01-01")

    text = service.extract_text(signed)
    assert text.count("DRAFT") == 3
    assert text.count("OK") == 1
    assert "Digitally Signed: Ann" in text


def test_compress_file(service: DocumentService, sample_pdf: Path, tmp_path: Path) -> None:
    result = service.compress(sample_pdf, tmp_path / "small.pdf", "low")

    assert isinstance(result, CompressionResult)
    assert result.quality == "low"
    assert result.compressed_size == result.output_path.stat().st_size
    assert PdfReader(str(result.output_path)).metadata.get("/Producer") == "Tests"


def test_protect_and_unprotect_files(service: DocumentService, three_pages: Path, tmp_path: Path) -> None:
    locked = service.protect(three_pages, tmp_path / "locked.pdf", "pw")
    opened = service.unprotect(locked, tmp_path / "opened.pdf", "pw")

    assert service.metadata(locked).encrypted is True
    assert service.metadata(opened).encrypted is False
    assert "P2" in service.extract_text(opened)


def test_inspection(service: DocumentService, sample_pdf: Path, three_pages: Path, tmp_path: Path) -> None:
    metadata = service.metadata(sample_pdf)
    info = service.compression_info(sample_pdf)
    text_file = tmp_path / "text" / "three.txt"
    text = service.extract_text(three_pages, text_file)
    comparison = service.compare(three_pages, three_pages)

    assert metadata.page_count == 5
    assert metadata.title == "Sample"
    assert info.file_size_bytes == sample_pdf.stat().st_size
    assert text_file.read_text(encoding="utf-8") == text == "P1\n\nP2\n\nP3"
    assert comparison.identical


def test_images_and_word_inputs(service: DocumentService, tmp_path: Path) -> None:
    image = tmp_path / "pic.png"
    Image.new("RGB", (10, 10)).save(image)
    word = tmp_path / "doc.docx"
    source = docx.Document()
    source.add_paragraph("Hello Word")
    source.save(str(word))

    from_images = service.images_to_pdf([image], tmp_path / "images.pdf")
    from_word = service.word_to_pdf(word, tmp_path / "word.pdf")

    assert len(PdfReader(str(from_images)).pages) == 1
    assert "Hello Word" in service.extract_text(from_word)
    with pytest.raises(ValueError):
        service.images_to_pdf([word], tmp_path / "bad.pdf")
    with pytest.raises(ValueError):
        service.word_to_pdf(image, tmp_path / "bad.pdf")


def test_office_exports_not_implemented(service: DocumentService, three_pages: Path, tmp_path: Path) -> None:
    for method in (service.pdf_to_word, service.pdf_to_powerpoint, service.pdf_to_excel):
        with pytest.raises(OperationNotImplementedError):
            method(three_pages, tmp_path / "out.bin")


def test_staged_output_is_released(service: DocumentService, three_pages: Path) -> None:
    staged = service.staged_output("rotate")
    result = service.rotate(three_pages, staged, 90)

    assert result.parent == service.config.staging_dir.resolve()
    assert result.name.startswith("rotate-")

    timer = service.release([result], delay=0)
    timer.join(5)

    assert not result.exists()
