"""Plugin adapter exposing splitting and page extraction through the registry."""

from __future__ import annotations

from pathlib import Path

from ...core.utils import get_logger
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool

LOGGER = get_logger("flexipdf.tools.split")


@register_tool("split")
class SplitTool(BaseTool):
    name = "split"

    def run(self) -> list[Path]:
        context = self.context
        source = context.require_input(self.name)
        output_dir = context.output_path
        if output_dir is None:
            raise ValueError("Split tool requires an output directory")

        mode = context.config.get("mode", "pages")
        spec = context.config.get("pages") if mode == "pages" else context.config.get("ranges")
        LOGGER.debug("Splitting %s into %s (mode=%s, spec=%s)", source, output_dir, mode, spec)
        results = self.service.split(source, output_dir, spec, mode=mode)
        return self.finish(results)


@register_tool("extract")
class ExtractTool(BaseTool):
    name = "extract"

    def run(self) -> Path:
        context = self.context
        source = context.require_input(self.name)
        output = context.require_output(self.name)
        pages = context.config.get("pages")
        if pages is None:
            raise ValueError("pages configuration is required for extraction")

        LOGGER.debug("Extracting pages %s to %s", pages, output)
        return self.finish(self.service.extract_pages(source, output, pages))
