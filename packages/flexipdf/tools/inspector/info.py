"""Plugins reporting metadata and text."""

from __future__ import annotations

from ...core.model import DocumentMetadata
from ...core.utils import get_logger
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool

LOGGER = get_logger("flexipdf.tools.info")


@register_tool("info")
class InfoTool(BaseTool):
    name = "info"

    def run(self) -> DocumentMetadata:
        source = self.context.require_input(self.name)
        LOGGER.debug("Reading metadata of %s", source)
        return self.finish(self.service.metadata(source))


@register_tool("text")
class TextTool(BaseTool):
    name = "text"

    def run(self) -> str:
        source = self.context.require_input(self.name)
        LOGGER.debug("Extracting text from %s", source)
        return self.finish(self.service.extract_text(source, self.context.output_path))
