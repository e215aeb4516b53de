"""CLI helpers for the info and text commands."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...tools.common.interfaces import ConversionContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    info = subparsers.add_parser("info", help="Show page count and document information")
    info.add_argument("input", help="Input PDF file")
    info.set_defaults(tool_name="info", build_context=_build_context)

    text = subparsers.add_parser("text", help="Extract the text of a PDF")
    text.add_argument("input", help="Input PDF file")
    text.add_argument("output", nargs="?", help="Optional text file to write")
    text.set_defaults(tool_name="text", build_context=_build_context)


def _build_context(args) -> ConversionContext:
    return ConversionContext(
        input_path=args.input,
        output_path=getattr(args, "output", None),
    )
