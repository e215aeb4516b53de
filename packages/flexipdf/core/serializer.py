"""Write a :class:`~flexipdf.core.document.Document` back to PDF bytes."""

from __future__ import annotations

import io
import logging
import math
from typing import Any

from .document import Document
from .filters import flate_encode
from .objects import IndirectObject, PDFName, PDFReference, PDFStream, PDFString

_LOGGER = logging.getLogger("flexipdf.core.serializer")

BINARY_MARKER = b"%\xe2\xe3\xcf\xd3\n"
_NAME_SAFE = frozenset(
    byte for byte in range(0x21, 0x7F) if byte not in b"()<>[]{}/%#"
)


def format_number(value: float) -> str:
    """Format ``value`` the way PDF numbers are written (no exponent)."""

    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if not math.isfinite(value):
        raise ValueError(f"PDF numbers must be finite, got {value!r}")
    if float(value).is_integer():
        return str(int(value))
    text = ("%.6f" % value).rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def _escape_name(name: str) -> bytes:
    out = bytearray(b"/")
    for byte in name.encode("latin-1", "replace"):
        if byte in _NAME_SAFE:
            out.append(byte)
        else:
            out += b"#%02X" % byte
    return bytes(out)


def _escape_string(value: bytes) -> bytes:
    return (
        value.replace(b"\\", b"\\\\")
        .replace(b"(", b"\\(")
        .replace(b")", b"\\)")
        .replace(b"\r", b"\\r")
        .replace(b"\n", b"\\n")
    )


def serialize_value(value: Any) -> bytes:
    """Serialize a direct value (never a stream)."""

    if value is None:
        return b"null"
    if isinstance(value, bool):
        return b"true" if value else b"false"
    if isinstance(value, (int, float)):
        return format_number(value).encode("ascii")
    if isinstance(value, PDFName):
        return _escape_name(value.value)
    if isinstance(value, PDFReference):
        return f"{value.obj_id} {value.generation} R".encode("ascii")
    if isinstance(value, PDFString):
        if value.hex:
            return b"<" + value.value.hex().upper().encode("ascii") + b">"
        return b"(" + _escape_string(value.value) + b")"
    if isinstance(value, str):
        return serialize_value(PDFString.from_text(value))
    if isinstance(value, (bytes, bytearray)):
        return serialize_value(PDFString(bytes(value), hex=True))
    if isinstance(value, dict):
        parts = [b"<<"]
        for key, item in value.items():
            parts.append(_escape_name(key.value if isinstance(key, PDFName) else str(key)))
            parts.append(b" ")
            parts.append(serialize_value(item))
            parts.append(b"\n")
        parts.append(b">>")
        return b"".join(parts)
    if isinstance(value, (list, tuple)):
        return b"[" + b" ".join(serialize_value(item) for item in value) + b"]"
    if isinstance(value, PDFStream):
        raise TypeError("Streams can only be written as indirect objects")
    raise TypeError(f"Unsupported value type: {type(value)!r}")


def _stream_bytes(stream: PDFStream, compress: bool) -> bytes:
    dictionary = dict(stream.dictionary)
    data = stream.data
    if compress and "Filter" not in dictionary and data:
        encoded = flate_encode(data)
        if len(encoded) < len(data):
            data = encoded
            dictionary["Filter"] = PDFName("FlateDecode")
            dictionary.pop("DecodeParms", None)
    dictionary["Length"] = len(data)
    return serialize_value(dictionary) + b"\nstream\n" + data + b"\nendstream"


def _select_objects(document: Document, compact: bool) -> list[IndirectObject]:
    reachable = document.reachable_keys() if compact else None
    chosen: dict[int, IndirectObject] = {}
    for key, obj in document.objects.items():
        if reachable is not None and key not in reachable:
            continue
        current = chosen.get(key[0])
        # One xref slot per object number; the newest generation wins.
        if current is None or obj.generation > current.generation:
            chosen[key[0]] = obj
    if reachable is not None:
        dropped = len(document.objects) - len(chosen)
        if dropped:
            _LOGGER.debug("Dropping %d unreachable objects", dropped)
    return [chosen[number] for number in sorted(chosen)]


def serialize(
    document: Document,
    *,
    compact: bool | None = None,
    compress_streams: bool | None = None,
) -> bytes:
    """Return the complete PDF file for ``document``.

    ``compact`` and ``compress_streams`` default to the flags stored on the
    document.  Object numbers are kept as they are.
    """

    if compact is None:
        compact = document.compact
    if compress_streams is None:
        compress_streams = document.compress_streams
    if document.is_encrypted and compress_streams:
        _LOGGER.debug("Not compressing streams of an encrypted document")
        compress_streams = False

    objects = _select_objects(document, compact)
    buffer = io.BytesIO()
    buffer.write(f"%PDF-{document.version}\n".encode("ascii"))
    buffer.write(BINARY_MARKER)

    offsets: dict[int, tuple[int, int]] = {}
    for obj in objects:
        offsets[obj.obj_id] = (buffer.tell(), obj.generation)
        buffer.write(f"{obj.obj_id} {obj.generation} obj\n".encode("ascii"))
        if isinstance(obj.value, PDFStream):
            buffer.write(_stream_bytes(obj.value, compress_streams))
        else:
            buffer.write(serialize_value(obj.value))
        buffer.write(b"\nendobj\n")

    size = (objects[-1].obj_id if objects else 0) + 1
    free_numbers = [number for number in range(1, size) if number not in offsets]
    next_free = dict(zip([0, *free_numbers], [*free_numbers, 0]))

    xref_position = buffer.tell()
    buffer.write(f"xref\n0 {size}\n".encode("ascii"))
    for number in range(size):
        if number in offsets:
            offset, generation = offsets[number]
            buffer.write(f"{offset:010d} {generation:05d} n \n".encode("ascii"))
        else:
            generation = 65535 if number == 0 else 1
            buffer.write(f"{next_free[number]:010d} {generation:05d} f \n".encode("ascii"))

    trailer = {
        key: value
        for key, value in document.trailer.items()
        if key not in ("Size", "Prev", "XRefStm")
    }
    trailer["Size"] = size
    buffer.write(b"trailer\n")
    buffer.write(serialize_value(trailer))
    buffer.write(f"\nstartxref\n{xref_position}\n%%EOF\n".encode("ascii"))
    return buffer.getvalue()


__all__ = ["serialize", "serialize_value", "format_number", "BINARY_MARKER"]
