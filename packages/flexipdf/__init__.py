"""FlexiPDF: PDF parsing, editing and conversion toolkit."""

from __future__ import annotations

from .compress import CompressionInfo, CompressionResult, compress, get_compression_info
from .convert import (
    compare,
    extract_text,
    images_to_pdf,
    pdf_to_excel,
    pdf_to_jpg,
    pdf_to_powerpoint,
    pdf_to_word,
    text_to_document,
    word_to_pdf,
)
from .core import Document, Page, PDFParser, parse, serialize
from .core.model import ComparisonResult, DocumentMetadata
from .exceptions import (
    EmptyInputError,
    FlexiPDFError,
    InvalidGeometryError,
    InvalidPageSpecError,
    InvalidPasswordError,
    MalformedDocumentError,
    OperationNotImplementedError,
    PayloadTooLargeError,
    UnsupportedFeatureError,
)
from .merge import merge
from .pages import CropBox, crop, rotate
from .security import is_encrypted, protect, unprotect
from .service import DocumentService, ServiceConfig, StagingArea
from .split import extract_pages, split_pages, split_ranges
from .stamp import add_stamp, add_watermark, sign
from .tools import load_builtin_plugins
from .tools.common.interfaces import ConversionContext
from .tools.common.pipeline import ToolRegistry, register_tool, registry

__version__ = "0.1.0"

load_builtin_plugins()

__all__ = [
    "__version__",
    "Document",
    "Page",
    "PDFParser",
    "parse",
    "serialize",
    "merge",
    "extract_pages",
    "split_pages",
    "split_ranges",
    "CropBox",
    "rotate",
    "crop",
    "add_watermark",
    "add_stamp",
    "sign",
    "compress",
    "CompressionResult",
    "CompressionInfo",
    "get_compression_info",
    "is_encrypted",
    "protect",
    "unprotect",
    "extract_text",
    "compare",
    "text_to_document",
    "images_to_pdf",
    "word_to_pdf",
    "pdf_to_jpg",
    "pdf_to_word",
    "pdf_to_powerpoint",
    "pdf_to_excel",
    "DocumentMetadata",
    "ComparisonResult",
    "DocumentService",
    "ServiceConfig",
    "StagingArea",
    "ConversionContext",
    "ToolRegistry",
    "register_tool",
    "registry",
    "load_builtin_plugins",
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
