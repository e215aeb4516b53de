"""Command line interface for the FlexiPDF toolkit."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.table import Table

from ..compress import CompressionResult
from ..core.model import DocumentMetadata
from ..core.utils import sizeof_fmt
from ..exceptions import FlexiPDFError
from ..tools import load_builtin_plugins
from ..tools.common.interfaces import ConversionContext
from ..tools.common.pipeline import registry
from .commands import compress, convert, encrypt, info, merge, pages, split, stamp

COMMAND_MODULES = [split, merge, pages, stamp, compress, convert, encrypt, info]

console = Console()


def _create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="flexipdf", description="FlexiPDF CLI")
    subparsers = parser.add_subparsers(dest="command")
    subparsers.required = True
    for module in COMMAND_MODULES:
        module.configure_parser(subparsers)
    return parser


def _resolve_tool_name(args, context: ConversionContext) -> str:
    tool_name = getattr(args, "tool_name", None)
    if tool_name:
        return tool_name
    if "tool_name" in context.resources:
        return context.resources["tool_name"]
    resolver = getattr(args, "tool_name_resolver", None)
    if resolver is not None:
        key = getattr(args, "format", None)
        if key is None:
            key = getattr(args, "mode", None)
        if key is not None:
            return resolver(key)
    raise SystemExit("Unable to determine tool name from arguments")


def _metadata_table(metadata: DocumentMetadata) -> Table:
    table = Table(title="PDF Information")
    table.add_column("Property", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")
    for key, value in metadata.to_dict().items():
        table.add_row(key.replace("_", " ").title(), "" if value is None else str(value))
    return table


def _compression_table(result: CompressionResult) -> Table:
    table = Table(title="Compression Result")
    table.add_column("Property", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")
    table.add_row("Quality", result.quality)
    table.add_row("Original size", sizeof_fmt(result.original_size))
    table.add_row("Compressed size", sizeof_fmt(result.compressed_size))
    table.add_row("Saved", sizeof_fmt(result.bytes_saved))
    table.add_row("Ratio", f"{result.compression_ratio:.1%}")
    table.add_row("Images re-encoded", str(result.images_recompressed))
    return table


def render_result(result: object, target: Console | None = None) -> None:
    """Print a tool result in a human readable form."""

    out = target or console
    if isinstance(result, DocumentMetadata):
        out.print(_metadata_table(result))
    elif isinstance(result, CompressionResult):
        out.print(_compression_table(result))
        out.print(f"[bold green]✓ Created:[/bold green] {result.output_path}")
    elif isinstance(result, Path):
        out.print(f"[bold green]✓ Created:[/bold green] {result}")
    elif isinstance(result, list):
        out.print(f"[bold green]✓ Created {len(result)} file(s)[/bold green]")
        for path in result:
            out.print(f"  • {path}")
    elif isinstance(result, str):
        out.print(result, markup=False, highlight=False)


def main(argv: Sequence[str] | None = None) -> object:
    load_builtin_plugins()
    parser = _create_parser()
    args = parser.parse_args(argv)
    context: ConversionContext = args.build_context(args)
    tool_name = _resolve_tool_name(args, context)
    tool = registry.create(tool_name, context)
    result = tool.run()
    return result


def run(argv: Sequence[str] | None = None) -> int:
    """Console entry point: run a command, print its result, return an exit code."""

    try:
        result = main(argv)
    except NotImplementedError as exc:
        console.print(f"[bold red]✗ Not implemented:[/bold red] {exc}")
        return 2
    except (FlexiPDFError, FileNotFoundError, ValueError) as exc:
        console.print(f"[bold red]✗ Error:[/bold red] {exc}")
        return 1
    render_result(result)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(run())
