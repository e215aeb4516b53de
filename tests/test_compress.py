from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest
from PIL import Image

from flexipdf import compress, parse, serialize
from flexipdf.compress import (
    LEVELS,
    CompressionResult,
    get_compression_info,
    get_level,
    iter_page_images,
    recompress_images,
)
from flexipdf.convert import images_to_pdf
from flexipdf.core.objects import PDFName, text_of
from flexipdf.exceptions import UnsupportedFeatureError


@pytest.fixture()
def noisy_jpeg(tmp_path: Path) -> Path:
    path = tmp_path / "noise.jpg"
    Image.effect_noise((64, 64), 60).save(path, format="JPEG", quality=95)
    return path


def test_levels() -> None:
    assert LEVELS["low"].image_quality == 60
    assert LEVELS["medium"].image_quality == 80
    assert LEVELS["high"].image_quality is None
    with pytest.raises(ValueError):
        get_level("extreme")


def test_compress_scrubs_metadata(sample_pdf: Path) -> None:
    document = parse(sample_pdf.read_bytes())

    compress(document, "medium", producer="Acme")

    info = document.info
    assert text_of(info["Title"]) == ""
    assert text_of(info["Author"]) == ""
    assert text_of(info["Subject"]) == ""
    assert text_of(info["Creator"]) == "Acme"
    assert text_of(info["Producer"]) == "Acme"
    assert document.compact and document.compress_streams


def test_compress_adds_info_when_missing(text_pdf_bytes: Callable[..., bytes]) -> None:
    document = parse(text_pdf_bytes("A"))

    compress(document)

    assert text_of(document.info["Producer"]) == "FlexiPDF"


def test_compressed_output_drops_orphans_and_deflates(text_pdf_bytes: Callable[..., bytes]) -> None:
    document = parse(text_pdf_bytes("Repeated text " * 30))
    document.add_object({"Orphan": True})

    output = serialize(compress(document))

    assert b"/Orphan" not in output
    assert b"/FlateDecode" in output
    assert len(output) < len(text_pdf_bytes("Repeated text " * 30)) + 200


def test_compress_refuses_encrypted(text_pdf_bytes: Callable[..., bytes]) -> None:
    document = parse(text_pdf_bytes("A"))
    document.trailer["Encrypt"] = {"Filter": PDFName("Standard")}

    with pytest.raises(UnsupportedFeatureError):
        compress(document)


def test_recompress_images_shrinks_jpeg(noisy_jpeg: Path) -> None:
    document = images_to_pdf([noisy_jpeg])
    original = noisy_jpeg.stat().st_size

    replaced = recompress_images(document, 60)

    (image,) = list(iter_page_images(document))
    assert replaced == 1
    assert len(image.stream.data) < original
    assert image.stream.data.startswith(b"\xff\xd8")


def test_recompress_images_skips_non_jpeg(tmp_path: Path) -> None:
    path = tmp_path / "flat.png"
    Image.new("RGB", (8, 8), "red").save(path)
    document = images_to_pdf([path])

    assert recompress_images(document, 60) == 0


def test_compression_info(noisy_jpeg: Path, text_pdf_bytes: Callable[..., bytes]) -> None:
    with_image = get_compression_info(images_to_pdf([noisy_jpeg]), 10_000)
    without_image = get_compression_info(parse(text_pdf_bytes("A")), 10_000)

    assert with_image.image_count == 1
    assert with_image.average_image_dpi == pytest.approx(72.0)
    assert with_image.potential_savings_bytes == 3700
    assert without_image.image_count == 0
    assert without_image.average_image_dpi is None
    assert without_image.potential_savings_bytes == 500


def test_compression_result_figures(tmp_path: Path) -> None:
    result = CompressionResult(tmp_path / "a.pdf", tmp_path / "b.pdf", "low", 1000, 400)

    assert result.bytes_saved == 600
    assert result.compression_ratio == pytest.approx(0.4)
    grown = CompressionResult(tmp_path / "a.pdf", tmp_path / "b.pdf", "high", 100, 120)
    assert grown.bytes_saved == 0
