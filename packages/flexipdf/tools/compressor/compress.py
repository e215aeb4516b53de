"""Plugin exposing compression through the registry."""

from __future__ import annotations

from ...compress import CompressionResult
from ...core.utils import get_logger
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool

LOGGER = get_logger("flexipdf.tools.compress")


@register_tool("compress")
class CompressTool(BaseTool):
    name = "compress"

    def run(self) -> CompressionResult:
        context = self.context
        source = context.require_input(self.name)
        output = context.require_output(self.name)

        quality = context.config.get("quality")
        if quality is None:
            quality = context.config.get("level", "medium")
        LOGGER.debug("Compressing %s to %s with quality %s", source, output, quality)
        return self.finish(self.service.compress(source, output, quality))
