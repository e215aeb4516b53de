"""In-memory PDF document model.

A :class:`Document` owns its numbered objects and the trailer; pages are
exposed as :class:`Page` views resolved through the page tree.  Every
transform in :mod:`flexipdf` works on these two classes only.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator

from ..exceptions import MalformedDocumentError, UnsupportedFeatureError
from .filters import decode_stream
from .objects import IndirectObject, PDFName, PDFReference, PDFStream, name_of

_LOGGER = logging.getLogger("flexipdf.core.document")

DEFAULT_MEDIA_BOX = [0, 0, 612, 792]
INHERITABLE_KEYS = ("Resources", "MediaBox", "CropBox", "Rotate")

# References to these page-tree entries are never followed when copying.
_PAGE_TREE_TYPES = {"Page", "Pages"}


class Document:
    """A parsed (or newly built) PDF document."""

    def __init__(
        self,
        objects: dict[tuple[int, int], IndirectObject] | None = None,
        trailer: dict[str, Any] | None = None,
        *,
        version: str = "1.7",
    ) -> None:
        self.objects: dict[tuple[int, int], IndirectObject] = dict(objects or {})
        self.trailer: dict[str, Any] = dict(trailer or {})
        self.version = version
        self.next_object_number = max((key[0] for key in self.objects), default=0) + 1
        # Serializer defaults, switched on by the compress transform.
        self.compact = False
        self.compress_streams = False

    @classmethod
    def new(cls, *, version: str = "1.7") -> "Document":
        """Return an empty document with a catalog and an empty page tree."""

        document = cls(version=version)
        pages_ref = document.add_object({"Type": PDFName("Pages"), "Kids": [], "Count": 0})
        catalog_ref = document.add_object({"Type": PDFName("Catalog"), "Pages": pages_ref})
        document.trailer["Root"] = catalog_ref
        return document

    # -- Object access ---------------------------------------------------

    def add_object(self, value: Any) -> PDFReference:
        obj = IndirectObject(self.next_object_number, 0, value)
        self.objects[obj.key] = obj
        self.next_object_number += 1
        return obj.reference()

    def get(self, reference: PDFReference) -> IndirectObject | None:
        return self.objects.get(reference.key)

    def resolve(self, value: Any) -> Any:
        """Dereference ``value``; a dangling reference resolves to ``None``."""

        seen: set[tuple[int, int]] = set()
        while isinstance(value, PDFReference):
            if value.key in seen:
                return None
            seen.add(value.key)
            obj = self.objects.get(value.key)
            if obj is None:
                return None
            value = obj.value
        return value

    def resolve_dict(self, value: Any) -> dict[str, Any] | None:
        resolved = self.resolve(value)
        if isinstance(resolved, PDFStream):
            return resolved.dictionary
        return resolved if isinstance(resolved, dict) else None

    # -- Document structure ----------------------------------------------

    @property
    def catalog(self) -> dict[str, Any]:
        catalog = self.resolve_dict(self.trailer.get("Root"))
        if catalog is None:
            raise MalformedDocumentError("Trailer does not point to a document catalog")
        return catalog

    @property
    def info(self) -> dict[str, Any] | None:
        return self.resolve_dict(self.trailer.get("Info"))

    def ensure_info(self) -> dict[str, Any]:
        info = self.info
        if info is None:
            info = {}
            self.trailer["Info"] = self.add_object(info)
        return info

    @property
    def is_encrypted(self) -> bool:
        return "Encrypt" in self.trailer

    def ensure_unencrypted(self, operation: str) -> None:
        if self.is_encrypted:
            raise UnsupportedFeatureError(
                f"Cannot {operation} an encrypted document; remove its password first"
            )

    @property
    def pages_root_ref(self) -> PDFReference:
        ref = self.catalog.get("Pages")
        if not isinstance(ref, PDFReference) or self.resolve_dict(ref) is None:
            raise MalformedDocumentError("Document catalog has no /Pages tree")
        return ref

    def iter_page_refs(self) -> Iterator[PDFReference]:
        """Yield page references in page-tree (in-order) traversal order."""

        visited: set[tuple[int, int]] = set()
        stack: list[Iterator[Any]] = [iter([self.pages_root_ref])]
        while stack:
            try:
                kid = next(stack[-1])
            except StopIteration:
                stack.pop()
                continue
            if not isinstance(kid, PDFReference):
                raise MalformedDocumentError("Page tree /Kids entries must be references")
            if kid.key in visited:
                raise MalformedDocumentError(f"Page tree cycle through object {kid.obj_id}")
            visited.add(kid.key)
            node = self.resolve_dict(kid)
            if node is None:
                _LOGGER.debug("Skipping dangling page tree entry %s", kid)
                continue
            node_type = name_of(node.get("Type"))
            if node_type == "Pages" or (node_type is None and "Kids" in node):
                kids = self.resolve(node.get("Kids"))
                stack.append(iter(kids if isinstance(kids, list) else []))
            elif node_type in ("Page", None):
                yield kid
            else:
                raise MalformedDocumentError(
                    f"Page tree leaf {kid.obj_id} has type /{node_type}, expected /Page"
                )

    @property
    def pages(self) -> list["Page"]:
        return [Page(self, ref, index + 1) for index, ref in enumerate(self.iter_page_refs())]

    @property
    def page_count(self) -> int:
        return sum(1 for _ in self.iter_page_refs())

    def append_page(self, page_dict: dict[str, Any]) -> PDFReference:
        """Add ``page_dict`` as a new last page of the root page tree."""

        root_ref = self.pages_root_ref
        root = self.resolve_dict(root_ref)
        assert root is not None
        page_dict["Type"] = PDFName("Page")
        page_dict["Parent"] = root_ref
        ref = self.add_object(page_dict)
        kids = self.resolve(root.get("Kids"))
        if not isinstance(kids, list):
            kids = []
            root["Kids"] = kids
        kids.append(ref)
        root["Count"] = self.page_count
        return ref

    # -- Reachability and copying ------------------------------------------

    def reachable_keys(self) -> set[tuple[int, int]]:
        """Return the keys of every object reachable from the trailer."""

        reachable: set[tuple[int, int]] = set()
        pending: list[Any] = list(self.trailer.values())
        while pending:
            value = pending.pop()
            if isinstance(value, PDFReference):
                obj = self.objects.get(value.key)
                if obj is None or value.key in reachable:
                    continue
                reachable.add(value.key)
                pending.append(obj.value)
            elif isinstance(value, PDFStream):
                pending.extend(value.dictionary.values())
            elif isinstance(value, dict):
                pending.extend(value.values())
            elif isinstance(value, list):
                pending.extend(value)
        return reachable

    def import_value(
        self,
        source: "Document",
        value: Any,
        mapping: dict[tuple[int, int], PDFReference],
    ) -> Any:
        """Deep-copy ``value`` from ``source`` into this document.

        Referenced objects are copied once per ``mapping`` and renumbered.
        References to page-tree nodes that were not imported already become
        ``null`` so a copy never drags in its source page tree.
        """

        pending: list[tuple[IndirectObject, PDFReference]] = []

        def remap(ref: PDFReference) -> Any:
            if ref.key in mapping:
                return mapping[ref.key]
            obj = source.objects.get(ref.key)
            if obj is None:
                return None
            node = obj.value.dictionary if isinstance(obj.value, PDFStream) else obj.value
            if isinstance(node, dict) and name_of(node.get("Type")) in _PAGE_TREE_TYPES:
                return None
            new_ref = PDFReference(self.next_object_number, 0)
            self.next_object_number += 1
            mapping[ref.key] = new_ref
            pending.append((obj, new_ref))
            return new_ref

        def copy(item: Any) -> Any:
            if isinstance(item, PDFReference):
                return remap(item)
            if isinstance(item, dict):
                return {key: copy(entry) for key, entry in item.items()}
            if isinstance(item, list):
                return [copy(entry) for entry in item]
            if isinstance(item, PDFStream):
                return PDFStream(copy(item.dictionary), item.data)
            return item

        result = copy(value)
        while pending:
            obj, new_ref = pending.pop()
            self.objects[new_ref.key] = IndirectObject(new_ref.obj_id, 0, copy(obj.value))
        return result

    def import_page(
        self,
        page: "Page",
        mapping: dict[tuple[int, int], PDFReference] | None = None,
    ) -> PDFReference:
        """Copy ``page`` (and everything it references) as a new last page."""

        if mapping is None:
            mapping = {}
        page_dict = page.materialized()
        page_dict.pop("Parent", None)
        new_ref = PDFReference(self.next_object_number, 0)
        self.next_object_number += 1
        previous = mapping.get(page.ref.key)
        mapping[page.ref.key] = new_ref
        try:
            copied = self.import_value(page.document, page_dict, mapping)
        finally:
            if previous is None:
                mapping.pop(page.ref.key, None)
            else:
                mapping[page.ref.key] = previous
        root_ref = self.pages_root_ref
        copied["Type"] = PDFName("Page")
        copied["Parent"] = root_ref
        self.objects[new_ref.key] = IndirectObject(new_ref.obj_id, 0, copied)
        root = self.resolve_dict(root_ref)
        assert root is not None
        kids = self.resolve(root.get("Kids"))
        if not isinstance(kids, list):
            kids = []
            root["Kids"] = kids
        kids.append(new_ref)
        root["Count"] = self.page_count
        return new_ref


class Page:
    """View of one ``/Page`` object within its document."""

    def __init__(self, document: Document, ref: PDFReference, number: int) -> None:
        self.document = document
        self.ref = ref
        self.number = number

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"Page(number={self.number}, ref={self.ref.obj_id} {self.ref.generation} R)"

    @property
    def dictionary(self) -> dict[str, Any]:
        page = self.document.resolve_dict(self.ref)
        if page is None:
            raise MalformedDocumentError(f"Page object {self.ref.obj_id} is missing")
        return page

    def inherited(self, key: str) -> Any:
        """Look ``key`` up on the page, then along its ``Parent`` chain."""

        node: dict[str, Any] | None = self.dictionary
        seen: set[int] = set()
        while node is not None and id(node) not in seen:
            seen.add(id(node))
            if key in node:
                return self.document.resolve(node[key])
            node = self.document.resolve_dict(node.get("Parent"))
        return None

    def _box(self, key: str) -> list[float] | None:
        box = self.inherited(key)
        if not isinstance(box, list) or len(box) != 4:
            return None
        values = [self.document.resolve(item) for item in box]
        if not all(isinstance(item, (int, float)) for item in values):
            return None
        llx, lly, urx, ury = (float(item) for item in values)
        return [min(llx, urx), min(lly, ury), max(llx, urx), max(lly, ury)]

    @property
    def media_box(self) -> list[float]:
        return self._box("MediaBox") or [float(item) for item in DEFAULT_MEDIA_BOX]

    @property
    def crop_box(self) -> list[float]:
        return self._box("CropBox") or self.media_box

    @property
    def width(self) -> float:
        box = self.media_box
        return box[2] - box[0]

    @property
    def height(self) -> float:
        box = self.media_box
        return box[3] - box[1]

    @property
    def rotate(self) -> int:
        value = self.inherited("Rotate")
        if isinstance(value, (int, float)):
            return int(value) % 360
        return 0

    @property
    def resources(self) -> dict[str, Any]:
        resources = self.inherited("Resources")
        if isinstance(resources, dict):
            return resources
        return {}

    def materialized(self) -> dict[str, Any]:
        """Return a shallow copy of the page with inherited entries filled in."""

        page_dict = dict(self.dictionary)
        for key in INHERITABLE_KEYS:
            if key not in page_dict:
                value = self.inherited(key)
                if value is not None:
                    page_dict[key] = value
        if "MediaBox" not in page_dict:
            page_dict["MediaBox"] = list(DEFAULT_MEDIA_BOX)
        if "Resources" not in page_dict:
            page_dict["Resources"] = {}
        return page_dict

    # -- Content streams ---------------------------------------------------

    def content_refs(self) -> list[Any]:
        contents = self.dictionary.get("Contents")
        if contents is None:
            return []
        resolved = self.document.resolve(contents)
        if isinstance(resolved, list):
            return list(resolved)
        return [contents]

    def content_streams(self) -> list[PDFStream]:
        streams = []
        for item in self.content_refs():
            stream = self.document.resolve(item)
            if isinstance(stream, PDFStream):
                streams.append(stream)
        return streams

    def content_bytes(self) -> bytes:
        """Return the page's decoded content, streams joined by newlines."""

        self.document.ensure_unencrypted("read the content of")
        return b"\n".join(decode_stream(stream) for stream in self.content_streams())

    def append_content(self, data: bytes) -> PDFReference:
        """Append ``data`` as a new content stream drawn over existing content.

        Existing streams are bracketed by ``q``/``Q`` once so the appended
        operators start from the default graphics state.
        """

        document = self.document
        page = self.dictionary
        existing = self.content_refs()
        new_ref = document.add_object(PDFStream({}, data))
        if not existing:
            page["Contents"] = new_ref
            return new_ref
        if not self._is_bracketed(existing):
            opening = document.add_object(PDFStream({}, b"q\n"))
            closing = document.add_object(PDFStream({}, b"\nQ\n"))
            existing = [opening, *existing, closing]
        page["Contents"] = [*existing, new_ref]
        return new_ref

    def _is_bracketed(self, refs: list[Any]) -> bool:
        first = self.document.resolve(refs[0])
        return (
            len(refs) >= 2
            and isinstance(first, PDFStream)
            and not first.dictionary
            and first.data == b"q\n"
        )

    # -- Resources -----------------------------------------------------------

    def _own_resource_category(self, category: str) -> dict[str, Any]:
        """Return a page-local, writable copy of a resource sub-dictionary."""

        page = self.dictionary
        resources = dict(self.resources)
        entries = self.document.resolve_dict(resources.get(category))
        entries = dict(entries) if entries else {}
        resources[category] = entries
        page["Resources"] = resources
        return entries

    def _unique_name(self, entries: dict[str, Any], prefix: str) -> str:
        index = 1
        while f"{prefix}{index}" in entries:
            index += 1
        return f"{prefix}{index}"

    def add_standard_font(self, base_font: str) -> str:
        """Register a standard-14 Type1 font and return its resource name."""

        fonts = self._own_resource_category("Font")
        for name, value in fonts.items():
            font = self.document.resolve_dict(value)
            if (
                font is not None
                and name.startswith("FxF")
                and name_of(font.get("BaseFont")) == base_font
            ):
                return name
        name = self._unique_name(fonts, "FxF")
        fonts[name] = self.document.add_object(
            {
                "Type": PDFName("Font"),
                "Subtype": PDFName("Type1"),
                "BaseFont": PDFName(base_font),
                "Encoding": PDFName("WinAnsiEncoding"),
            }
        )
        return name

    def add_opacity_state(self, opacity: float) -> str:
        """Register an ``ExtGState`` with fill/stroke alpha ``opacity``."""

        states = self._own_resource_category("ExtGState")
        name = self._unique_name(states, "FxGS")
        states[name] = self.document.add_object(
            {"Type": PDFName("ExtGState"), "ca": opacity, "CA": opacity}
        )
        return name

    def add_image(self, image_ref: PDFReference) -> str:
        xobjects = self._own_resource_category("XObject")
        name = self._unique_name(xobjects, "FxIm")
        xobjects[name] = image_ref
        return name


__all__ = ["Document", "Page", "DEFAULT_MEDIA_BOX", "INHERITABLE_KEYS"]
