"""Plugin exposing document merging through the registry."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Sequence

from ...core.utils import get_logger
from ...exceptions import EmptyInputError
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool

LOGGER = get_logger("flexipdf.tools.merge")


@register_tool("merge")
class MergeTool(BaseTool):
    name = "merge"

    def run(self) -> Path:
        context = self.context
        inputs = context.input_paths()
        if not inputs:
            raise EmptyInputError("No input PDFs provided")
        output = context.require_output(self.name)

        document_info: Mapping[str, object] | None = context.config.get("document_info")
        bookmarks: Sequence[str] | None = context.config.get("bookmarks")

        LOGGER.debug("Merging %d input(s) into %s", len(inputs), output)
        result = self.service.merge(
            inputs,
            output,
            bookmarks=bookmarks,
            document_info=document_info,
        )
        return self.finish(result)
