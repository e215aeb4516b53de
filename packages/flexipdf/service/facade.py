"""Document Service Facade: the only component that touches the filesystem.

Each operation checks its inputs (existence and size) before reading them,
parses, transforms and serializes in memory, and only then writes the
output, so a failing operation never leaves a partial result behind.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Mapping, NoReturn, Sequence

from ..compress import CompressionInfo, CompressionResult, get_compression_info, get_level, recompress_images
from ..compress import compress as compress_document
from ..convert import images as image_convert
from ..convert import office, raster
from ..convert import text as text_convert
from ..core.document import Document
from ..core.model import ComparisonResult, DocumentMetadata
from ..core.parser import parse
from ..core.serializer import serialize
from ..core.utils import get_logger, resolve_path
from ..core.validator import ensure_input_file, ensure_output_dir, ensure_output_parent
from ..merge import merge as merge_documents
from ..pages import CropBox, crop as crop_document, rotate as rotate_document
from ..security import protect as protect_document, unprotect as unprotect_document
from ..split import build_output_filename, extract_pages as extract_document_pages
from ..split import parse_page_spec, split_pages, split_ranges
from ..split.utils import PageSpec
from ..stamp import add_stamp as stamp_document, add_watermark as watermark_document, sign as sign_document
from .config import ServiceConfig
from .staging import StagingArea

LOGGER = get_logger("flexipdf.service")

PathLike = str | Path

IMAGE_SUFFIXES = (".jpg", ".jpeg", ".png", ".gif", ".bmp", ".tif", ".tiff", ".webp")
WORD_SUFFIXES = (".docx",)


class DocumentService:
    """File-level entry point for every document operation."""

    def __init__(self, config: ServiceConfig | None = None) -> None:
        self.config = config or ServiceConfig()
        self.staging = StagingArea(self.config.staging_dir)

    # -- I/O helpers ---------------------------------------------------------

    def _check_input(self, path: PathLike, suffixes: tuple[str, ...] | None = None) -> Path:
        return ensure_input_file(path, max_bytes=self.config.max_input_bytes, suffixes=suffixes)

    def load(self, path: PathLike) -> Document:
        """Size-check and parse the PDF at ``path``."""

        source = self._check_input(path)
        return parse(source.read_bytes())

    def _load_all(self, paths: Iterable[PathLike]) -> list[Document]:
        sources = [self._check_input(path) for path in paths]
        return [parse(source.read_bytes()) for source in sources]

    def _write_all(self, outputs: Sequence[tuple[Path, bytes]]) -> list[Path]:
        written: list[Path] = []
        try:
            for destination, payload in outputs:
                destination = ensure_output_parent(destination)
                destination.write_bytes(payload)
                written.append(destination)
        except OSError:
            self.staging.cleanup(written)
            raise
        return written

    def save(self, document: Document, output: PathLike) -> Path:
        """Serialize ``document`` and write it to ``output``."""

        payload = serialize(document)
        return self._write_all([(resolve_path(output), payload)])[0]

    def _transform(self, input_path: PathLike, output: PathLike, operation: str, transform) -> Path:
        document = self.load(input_path)
        result = transform(document)
        destination = self.save(result, output)
        LOGGER.info("%s: %s -> %s", operation, Path(input_path).name, destination)
        return destination

    def staged_output(self, prefix: str, extension: str = "pdf") -> Path:
        """Return a fresh, unique path inside the staging directory."""

        return self.staging.path_for(prefix, extension)

    def release(self, paths: Iterable[PathLike], delay: float | None = None):
        """Delete ``paths`` once ``delay`` (default ``cleanup_delay``) has passed."""

        wait = self.config.cleanup_delay if delay is None else delay
        return self.staging.schedule_cleanup(paths, wait)

    # -- Document operations ---------------------------------------------------

    def merge(
        self,
        inputs: Sequence[PathLike],
        output: PathLike,
        *,
        bookmarks: Sequence[str | None] | None = None,
        document_info: Mapping[str, object] | None = None,
    ) -> Path:
        documents = self._load_all(inputs)
        merged = merge_documents(documents, bookmarks=bookmarks, document_info=document_info)
        destination = self.save(merged, output)
        LOGGER.info("merge: %d input(s) -> %s", len(documents), destination)
        return destination

    def split(
        self,
        input_path: PathLike,
        output_dir: PathLike,
        spec: PageSpec | None = None,
        *,
        mode: str = "pages",
    ) -> list[Path]:
        """Write one file per page (``page-<n>.pdf``) or per range (``mode="range"``)."""

        document = self.load(input_path)
        directory = ensure_output_dir(output_dir)
        outputs: list[tuple[Path, bytes]] = []
        used: set[str] = set()

        def target(name: str) -> Path:
            stem, candidate, counter = name[:-4], name, 2
            while candidate in used:
                candidate = f"{stem}-{counter}.pdf"
                counter += 1
            used.add(candidate)
            return directory / candidate

        if mode == "pages":
            page_count = document.page_count
            if spec is None:
                numbers = list(range(1, page_count + 1))
            else:
                numbers = parse_page_spec(spec, page_count)
            parts = split_pages(document, spec)
            for number, part in zip(numbers, parts):
                outputs.append((target(build_output_filename("page", number)), serialize(part)))
        elif mode == "range":
            if spec is None:
                raise ValueError("Range mode needs a page specification")
            for page_range, part in split_ranges(document, spec):
                outputs.append((target(build_output_filename("pages", page_range)), serialize(part)))
        else:
            raise ValueError(f"Unsupported split mode: {mode}")

        results = self._write_all(outputs)
        LOGGER.info("split: %s -> %d file(s)", Path(input_path).name, len(results))
        return results

    def extract_pages(self, input_path: PathLike, output: PathLike, spec: PageSpec) -> Path:
        return self._transform(
            input_path, output, "extract", lambda document: extract_document_pages(document, spec)
        )

    def rotate(
        self,
        input_path: PathLike,
        output: PathLike,
        angle: int,
        pages: PageSpec | None = None,
    ) -> Path:
        return self._transform(
            input_path, output, "rotate", lambda document: rotate_document(document, angle, pages)
        )

    def crop(self, input_path: PathLike, output: PathLike, box: CropBox | Mapping[str, Any]) -> Path:
        crop_box = CropBox.coerce(box)
        return self._transform(
            input_path, output, "crop", lambda document: crop_document(document, crop_box)
        )

    def add_watermark(self, input_path: PathLike, output: PathLike, text: str, **options: Any) -> Path:
        return self._transform(
            input_path,
            output,
            "watermark",
            lambda document: watermark_document(document, text, **options),
        )

    def add_stamp(self, input_path: PathLike, output: PathLike, text: str, **options: Any) -> Path:
        return self._transform(
            input_path, output, "stamp", lambda document: stamp_document(document, text, **options)
        )

    def sign(self, input_path: PathLike, output: PathLike, signer: str, **options: Any) -> Path:
        return self._transform(
            input_path, output, "sign", lambda document: sign_document(document, signer, **options)
        )

    def compress(self, input_path: PathLike, output: PathLike, quality: str = "medium") -> CompressionResult:
        level = get_level(quality)
        source = self._check_input(input_path)
        original_size = source.stat().st_size
        document = parse(source.read_bytes())
        compress_document(document, quality, producer=self.config.producer)
        replaced = 0
        if level.image_quality is not None:
            replaced = recompress_images(document, level.image_quality)
        destination = self.save(document, output)
        result = CompressionResult(
            input_path=source,
            output_path=destination,
            quality=level.name,
            original_size=original_size,
            compressed_size=destination.stat().st_size,
            images_recompressed=replaced,
        )
        LOGGER.info(
            "compress: %s -> %s (%d bytes saved)", source.name, destination, result.bytes_saved
        )
        return result

    def protect(
        self,
        input_path: PathLike,
        output: PathLike,
        password: str,
        *,
        owner_password: str | None = None,
        algorithm: str = "RC4-128",
    ) -> Path:
        return self._transform(
            input_path,
            output,
            "protect",
            lambda document: protect_document(
                document, password, owner_password=owner_password, algorithm=algorithm
            ),
        )

    def unprotect(self, input_path: PathLike, output: PathLike, password: str) -> Path:
        return self._transform(
            input_path, output, "unprotect", lambda document: unprotect_document(document, password)
        )

    # -- Inspection --------------------------------------------------------------

    def metadata(self, input_path: PathLike) -> DocumentMetadata:
        return DocumentMetadata.from_document(self.load(input_path))

    def compression_info(self, input_path: PathLike) -> CompressionInfo:
        source = self._check_input(input_path)
        document = parse(source.read_bytes())
        return get_compression_info(document, source.stat().st_size)

    def extract_text(self, input_path: PathLike, output: PathLike | None = None) -> str:
        text = text_convert.extract_text(self.load(input_path))
        if output is not None:
            destination = ensure_output_parent(output)
            destination.write_text(text, encoding="utf-8")
        return text

    def compare(self, first: PathLike, second: PathLike) -> ComparisonResult:
        first_document, second_document = self._load_all([first, second])
        return text_convert.compare(first_document, second_document)

    # -- Conversions ---------------------------------------------------------------

    def pdf_to_jpg(self, input_path: PathLike, output_dir: PathLike, dpi: int | None = None) -> list[Path]:
        source = self._check_input(input_path)
        parse(source.read_bytes())
        return raster.pdf_to_jpg(source, output_dir, dpi or self.config.default_dpi)

    def images_to_pdf(self, inputs: Sequence[PathLike], output: PathLike) -> Path:
        sources = [self._check_input(path, IMAGE_SUFFIXES) for path in inputs]
        document = image_convert.images_to_pdf(sources)
        destination = self.save(document, output)
        LOGGER.info("images: %d image(s) -> %s", len(sources), destination)
        return destination

    def word_to_pdf(self, input_path: PathLike, output: PathLike) -> Path:
        source = self._check_input(input_path, WORD_SUFFIXES)
        destination = self.save(office.word_to_pdf(source), output)
        LOGGER.info("word: %s -> %s", source.name, destination)
        return destination

    def pdf_to_word(self, input_path: PathLike, output: PathLike) -> NoReturn:
        office.pdf_to_word(self.load(input_path))

    def pdf_to_powerpoint(self, input_path: PathLike, output: PathLike) -> NoReturn:
        office.pdf_to_powerpoint(self.load(input_path))

    def pdf_to_excel(self, input_path: PathLike, output: PathLike) -> NoReturn:
        office.pdf_to_excel(self.load(input_path))


__all__ = ["DocumentService", "IMAGE_SUFFIXES", "WORD_SUFFIXES"]
