"""Plugins exposing format conversions."""

from __future__ import annotations

from pathlib import Path

from ...core.utils import get_logger
from ...exceptions import EmptyInputError
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool

LOGGER = get_logger("flexipdf.tools.convert")


@register_tool("to-jpg")
class PdfToJpgTool(BaseTool):
    name = "to-jpg"

    def run(self) -> list[Path]:
        context = self.context
        source = context.require_input(self.name)
        output_dir = context.require_output(self.name)
        dpi = context.config.get("dpi")
        LOGGER.debug("Rendering %s into %s", source, output_dir)
        return self.finish(self.service.pdf_to_jpg(source, output_dir, dpi))


@register_tool("from-images")
class ImagesToPdfTool(BaseTool):
    name = "from-images"

    def run(self) -> Path:
        context = self.context
        inputs = context.input_paths()
        if not inputs:
            raise EmptyInputError("No input images provided")
        output = context.require_output(self.name)
        LOGGER.debug("Building %s from %d image(s)", output, len(inputs))
        return self.finish(self.service.images_to_pdf(inputs, output))


@register_tool("from-word")
class WordToPdfTool(BaseTool):
    name = "from-word"

    def run(self) -> Path:
        context = self.context
        source = context.require_input(self.name)
        output = context.require_output(self.name)
        LOGGER.debug("Converting %s to %s", source, output)
        return self.finish(self.service.word_to_pdf(source, output))
