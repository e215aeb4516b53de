"""Namespace for pluggable FlexiPDF tools."""

from __future__ import annotations

from .common.pipeline import registry


def load_builtin_plugins() -> None:
    from .splitter import split  # noqa: F401  # register split and extract tools
    from .merger import merge  # noqa: F401
    from .pages import geometry  # noqa: F401  # register rotate and crop tools
    from .stamp import marks  # noqa: F401  # register watermark, stamp and sign tools
    from .compressor import compress  # noqa: F401
    from .encryptor import encrypt  # noqa: F401
    from .inspector import info  # noqa: F401  # register info and text tools
    from .converter import convert  # noqa: F401


__all__ = ["registry", "load_builtin_plugins"]
