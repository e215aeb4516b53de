"""Plugin exposing password protection."""

from __future__ import annotations

from pathlib import Path

from ...core.utils import get_logger
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool

LOGGER = get_logger("flexipdf.tools.encrypt")


@register_tool("encrypt")
class EncryptTool(BaseTool):
    name = "encrypt"

    def run(self) -> Path:
        context = self.context
        source = context.require_input(self.name)
        output = context.require_output(self.name)

        password = context.config.get("password")
        owner_password = context.config.get("owner_password")
        algorithm = context.config.get("algorithm") or "RC4-128"
        if not password:
            raise ValueError("A password is required for encryption")

        LOGGER.debug(
            "Encrypting %s to %s with owner password %s",
            source,
            output,
            "<provided>" if owner_password else "<default>",
        )
        result = self.service.protect(
            source,
            output,
            password,
            owner_password=owner_password,
            algorithm=algorithm,
        )
        return self.finish(result)


@register_tool("decrypt")
class DecryptTool(BaseTool):
    name = "decrypt"

    def run(self) -> Path:
        context = self.context
        source = context.require_input(self.name)
        output = context.require_output(self.name)

        password = context.config.get("password")
        if not password:
            raise ValueError("A password is required for decryption")

        LOGGER.debug("Decrypting %s to %s", source, output)
        return self.finish(self.service.unprotect(source, output, password))
