from __future__ import annotations

from flexipdf.core.content import ContentBuilder, encode_text, iter_operations, text_at
from flexipdf.core.objects import PDFName, PDFString


def test_builder_writes_one_operator_per_line() -> None:
    data = (
        ContentBuilder()
        .save_state()
        .fill_color(1, 0, 0.5)
        .transform(2, 0, 0, 2, 10.5, 0)
        .restore_state()
        .build()
    )

    assert data == b"q\n1 0 0.5 rg\n2 0 0 2 10.5 0 cm\nQ\n"


def test_text_at_wraps_text_in_saved_state() -> None:
    data = text_at("FxF1", 12, "Hi", 10, 20, state="FxGS1")

    assert data.startswith(b"q\n/FxGS1 gs\n")
    assert b"/FxF1 12 Tf" in data
    assert b"1 0 0 1 10 20 Tm" in data
    assert b"(Hi) Tj" in data
    assert data.endswith(b"ET\nQ\n")


def test_text_at_rotation_matrix() -> None:
    data = text_at("F", 10, "x", 0, 0, angle=90)

    assert b"0 1 -1 0 0 0 Tm" in data


def test_encode_text_uses_win_ansi() -> None:
    assert encode_text("café €") == b"caf\xe9 \x80"
    assert encode_text("中") == b"?"


def test_iter_operations_groups_operands() -> None:
    operations = list(iter_operations(b"BT /F1 12 Tf [(A) -250 (B)] TJ ET"))

    assert operations == [
        ("BT", []),
        ("Tf", [PDFName("F1"), 12]),
        ("TJ", [[PDFString(b"A"), -250, PDFString(b"B")]]),
        ("ET", []),
    ]


def test_iter_operations_reads_dictionaries() -> None:
    operations = list(iter_operations(b"/OC << /MCID 3 >> BDC EMC"))

    assert operations[0] == ("BDC", [PDFName("OC"), {"MCID": 3}])


def test_iter_operations_skips_inline_image_data() -> None:
    operations = list(iter_operations(b"q BI /W 1 /H 1 /BPC 8 /CS /G ID \x00 EI Q"))

    assert [operator for operator, _ in operations] == ["q", "BI", "Q"]
    parameters, data = operations[1][1]
    assert parameters["W"] == 1
    assert parameters["CS"] == PDFName("G")
    assert data == b"\x00"
