"""Error taxonomy shared by every :mod:`flexipdf` component.

Each error carries the taxonomy ``kind`` and the HTTP status the upload layer
should answer with.  Caller-fixable problems (including malformed uploads)
map to 4xx codes; missing engine capabilities map to 5xx codes.
"""

from __future__ import annotations

from typing import Iterable


class FlexiPDFError(Exception):
    """Base exception for all errors raised by :mod:`flexipdf`."""

    kind = "Internal"
    status_code = 500

    def to_payload(self) -> dict[str, object]:
        """Return a JSON-serialisable description of the error."""

        return {"kind": self.kind, "status": self.status_code, "message": str(self)}


class MalformedDocumentError(FlexiPDFError):
    """Raised when input bytes cannot be parsed as a PDF document."""

    kind = "MalformedDocument"
    status_code = 400


class UnsupportedFeatureError(FlexiPDFError):
    """Raised for valid PDF features the engine deliberately does not handle."""

    kind = "UnsupportedFeature"
    status_code = 422


class InvalidPageSpecError(FlexiPDFError):
    """Raised when a page selection cannot be parsed or validated."""

    kind = "InvalidPageSpec"
    status_code = 400

    def __init__(self, spec: object, reason: str | None = None) -> None:
        if isinstance(spec, Iterable) and not isinstance(spec, (str, bytes)):
            spec = list(spec)
        self.spec = spec
        self.reason = reason
        message = f"Invalid page selection {spec!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class InvalidGeometryError(FlexiPDFError):
    """Raised for impossible rectangles, angles, sizes or opacities."""

    kind = "InvalidGeometry"
    status_code = 400


class EmptyInputError(FlexiPDFError):
    """Raised when an operation receives too few input documents."""

    kind = "EmptyInput"
    status_code = 400


class PayloadTooLargeError(FlexiPDFError):
    """Raised before parsing when an input exceeds the configured size."""

    kind = "PayloadTooLarge"
    status_code = 413

    def __init__(self, path: object, size: int, limit: int) -> None:
        self.path = path
        self.size = size
        self.limit = limit
        super().__init__(f"{path} is {size} bytes; the limit is {limit} bytes")


class OperationNotImplementedError(FlexiPDFError, NotImplementedError):
    """Raised instead of returning a silently degraded result."""

    kind = "NotImplemented"
    status_code = 501


class InvalidPasswordError(FlexiPDFError):
    """Raised when a password does not open an encrypted document."""

    kind = "InvalidPassword"
    status_code = 403


__all__ = [
    "FlexiPDFError",
    "MalformedDocumentError",
    "UnsupportedFeatureError",
    "InvalidPageSpecError",
    "InvalidGeometryError",
    "EmptyInputError",
    "PayloadTooLargeError",
    "OperationNotImplementedError",
    "InvalidPasswordError",
]
