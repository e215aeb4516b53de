"""Plugins exposing watermarks, stamps and signature marks."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from ...core.utils import get_logger, update_dict
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool

LOGGER = get_logger("flexipdf.tools.stamp")


def _options(config: dict[str, Any], *keys: str) -> dict[str, Any]:
    return update_dict({}, **{key: config.get(key) for key in keys})


@register_tool("watermark")
class WatermarkTool(BaseTool):
    name = "watermark"

    def run(self) -> Path:
        context = self.context
        source = context.require_input(self.name)
        output = context.require_output(self.name)
        text = context.config.get("text")
        if not text:
            raise ValueError("Watermark text is required")
        options = _options(context.config, "opacity", "font_size", "color", "rotation")
        LOGGER.debug("Watermarking %s with %r %s", source, text, options)
        return self.finish(self.service.add_watermark(source, output, text, **options))


@register_tool("stamp")
class StampTool(BaseTool):
    name = "stamp"

    def run(self) -> Path:
        context = self.context
        source = context.require_input(self.name)
        output = context.require_output(self.name)
        text = context.config.get("text")
        if not text:
            raise ValueError("Stamp text is required")
        options = _options(context.config, "pages", "corner", "font_size", "color", "opacity", "margin")
        LOGGER.debug("Stamping %s with %r %s", source, text, options)
        return self.finish(self.service.add_stamp(source, output, text, **options))


@register_tool("sign")
class SignTool(BaseTool):
    name = "sign"

    def run(self) -> Path:
        context = self.context
        source = context.require_input(self.name)
        output = context.require_output(self.name)
        signer = context.config.get("signer")
        if not signer:
            raise ValueError("A signer name is required")
        options = _options(context.config, "date")
        LOGGER.debug("Signing %s for %s", source, signer)
        return self.finish(self.service.sign(source, output, signer, **options))
