"""Plugins exposing rotation and cropping."""

from __future__ import annotations

from pathlib import Path

from ...core.utils import get_logger
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool

LOGGER = get_logger("flexipdf.tools.pages")


@register_tool("rotate")
class RotateTool(BaseTool):
    name = "rotate"

    def run(self) -> Path:
        context = self.context
        source = context.require_input(self.name)
        output = context.require_output(self.name)
        angle = context.config.get("angle", 90)
        pages = context.config.get("pages")
        LOGGER.debug("Rotating %s by %s (pages=%s)", source, angle, pages or "all")
        return self.finish(self.service.rotate(source, output, angle, pages))


@register_tool("crop")
class CropTool(BaseTool):
    name = "crop"

    def run(self) -> Path:
        context = self.context
        source = context.require_input(self.name)
        output = context.require_output(self.name)
        box = context.config.get("box")
        if box is None:
            raise ValueError("Crop tool requires a box with x, y, width and height")
        LOGGER.debug("Cropping %s to %s", source, box)
        return self.finish(self.service.crop(source, output, box))
