"""Core interfaces and context objects shared by FlexiPDF tools."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from ...core.utils import resolve_path
from ...service import DocumentService, ServiceConfig


@dataclass
class ConversionContext:
    """Holds shared execution state for a tool invocation."""

    input_path: Path | None = None
    output_path: Path | None = None
    service: DocumentService | None = None
    resources: dict[str, Any] = field(default_factory=dict)
    config: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if isinstance(self.input_path, (str, Path)):
            self.input_path = resolve_path(self.input_path)
        if isinstance(self.output_path, (str, Path)):
            self.output_path = resolve_path(self.output_path)

    def ensure_service(self) -> DocumentService:
        if self.service is None:
            self.service = DocumentService(ServiceConfig.from_env())
        return self.service

    def require_input(self, tool: str) -> Path:
        if self.input_path is None:
            raise ValueError(f"The {tool} tool requires an input path")
        return self.input_path

    def require_output(self, tool: str) -> Path:
        if self.output_path is None:
            raise ValueError(f"The {tool} tool requires an output path")
        return self.output_path

    def input_paths(self) -> list[Path]:
        """Return ``config["inputs"]`` when given, else the single input path."""

        inputs = self.config.get("inputs")
        if inputs is None:
            return [self.input_path] if self.input_path is not None else []
        return [resolve_path(path) for path in inputs]

    def with_updates(
        self,
        *,
        input_path: str | Path | None = None,
        output_path: str | Path | None = None,
        config: dict[str, Any] | None = None,
    ) -> "ConversionContext":
        data = ConversionContext(
            input_path=input_path or self.input_path,
            output_path=output_path or self.output_path,
            service=self.service,
            resources=dict(self.resources),
            config=dict(self.config),
        )
        if config:
            data.config.update(config)
        return data


class BaseTool:
    """Base class for all pluggable FlexiPDF tools."""

    name: str

    def __init__(self, context: ConversionContext) -> None:
        self.context = context

    @property
    def service(self) -> DocumentService:
        return self.context.ensure_service()

    def finish(self, result: Any) -> Any:
        self.context.resources["result"] = result
        return result

    def run(self) -> Any:  # pragma: no cover - to be implemented by subclasses
        raise NotImplementedError


ToolFactory = Callable[[ConversionContext], BaseTool]
