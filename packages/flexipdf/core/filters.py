"""Stream filter decoding and encoding."""

from __future__ import annotations

import base64
import logging
import zlib
from typing import Any

from ..exceptions import UnsupportedFeatureError
from .objects import PDFName, PDFStream

_LOGGER = logging.getLogger("flexipdf.core.filters")

# Image codecs are left encoded; content streams never use them.
IMAGE_FILTERS = frozenset({"DCTDecode", "JPXDecode", "JBIG2Decode", "CCITTFaxDecode"})


def stream_filters(stream: PDFStream) -> list[tuple[str, dict[str, Any]]]:
    """Return ``(filter name, decode parms)`` pairs in application order."""

    raw_filters = stream.get("Filter")
    raw_parms = stream.get("DecodeParms")
    if raw_filters is None:
        return []
    filters = raw_filters if isinstance(raw_filters, list) else [raw_filters]
    if isinstance(raw_parms, list):
        parms = list(raw_parms)
    else:
        parms = [raw_parms] * len(filters)
    result: list[tuple[str, dict[str, Any]]] = []
    for index, item in enumerate(filters):
        name = item.value if isinstance(item, PDFName) else str(item)
        parm = parms[index] if index < len(parms) else None
        result.append((name, parm if isinstance(parm, dict) else {}))
    return result


def _flate_decode(data: bytes) -> bytes:
    decompressor = zlib.decompressobj()
    try:
        return decompressor.decompress(data) + decompressor.flush()
    except zlib.error:
        # Truncated or padded streams are common; keep what inflated cleanly.
        _LOGGER.debug("Recovering partially corrupt Flate stream")
        decompressor = zlib.decompressobj()
        recovered = bytearray()
        for index in range(len(data)):
            try:
                recovered += decompressor.decompress(data[index : index + 1])
            except zlib.error:
                break
        return bytes(recovered)


def _png_unpredict(data: bytes, parms: dict[str, Any]) -> bytes:
    predictor = int(parms.get("Predictor", 1))
    if predictor < 10:
        if predictor == 2:
            raise UnsupportedFeatureError("TIFF predictor is not supported")
        return data
    colors = int(parms.get("Colors", 1))
    bits = int(parms.get("BitsPerComponent", 8))
    columns = int(parms.get("Columns", 1))
    bytes_per_pixel = max(1, colors * bits // 8)
    row_length = (colors * bits * columns + 7) // 8
    previous = bytearray(row_length)
    output = bytearray()
    for start in range(0, len(data), row_length + 1):
        filter_type = data[start]
        row = bytearray(data[start + 1 : start + 1 + row_length])
        row.extend(b"\x00" * (row_length - len(row)))
        for i in range(row_length):
            left = row[i - bytes_per_pixel] if i >= bytes_per_pixel else 0
            up = previous[i]
            up_left = previous[i - bytes_per_pixel] if i >= bytes_per_pixel else 0
            if filter_type == 1:
                row[i] = (row[i] + left) & 0xFF
            elif filter_type == 2:
                row[i] = (row[i] + up) & 0xFF
            elif filter_type == 3:
                row[i] = (row[i] + ((left + up) >> 1)) & 0xFF
            elif filter_type == 4:
                estimate = left + up - up_left
                distances = (abs(estimate - left), abs(estimate - up), abs(estimate - up_left))
                if distances[0] <= distances[1] and distances[0] <= distances[2]:
                    predicted = left
                elif distances[1] <= distances[2]:
                    predicted = up
                else:
                    predicted = up_left
                row[i] = (row[i] + predicted) & 0xFF
        output += row
        previous = row
    return bytes(output)


def _ascii_hex_decode(data: bytes) -> bytes:
    end = data.find(b">")
    if end != -1:
        data = data[:end]
    digits = bytes(byte for byte in data if not chr(byte).isspace())
    if len(digits) % 2:
        digits += b"0"
    return bytes.fromhex(digits.decode("ascii"))


def _ascii85_decode(data: bytes) -> bytes:
    data = data.strip()
    if data.startswith(b"<~"):
        data = data[2:]
    end = data.find(b"~>")
    if end != -1:
        data = data[:end]
    return base64.a85decode(data, ignorechars=b" \t\n\r\x0b\x0c\x00")


def decode_stream(stream: PDFStream) -> bytes:
    """Return the decoded payload of ``stream``.

    Raises :class:`~flexipdf.exceptions.UnsupportedFeatureError` for filters
    the engine cannot decode; image codecs stop the chain and return the
    still-encoded image bytes.
    """

    data = stream.data
    for name, parms in stream_filters(stream):
        if name in ("FlateDecode", "Fl"):
            data = _png_unpredict(_flate_decode(data), parms)
        elif name in ("ASCIIHexDecode", "AHx"):
            data = _ascii_hex_decode(data)
        elif name in ("ASCII85Decode", "A85"):
            data = _ascii85_decode(data)
        elif name in IMAGE_FILTERS:
            return data
        else:
            raise UnsupportedFeatureError(f"Stream filter /{name} is not supported")
    return data


def flate_encode(data: bytes, level: int = 9) -> bytes:
    return zlib.compress(data, level)


__all__ = ["IMAGE_FILTERS", "decode_stream", "flate_encode", "stream_filters"]
