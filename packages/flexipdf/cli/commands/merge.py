"""CLI helpers for merging PDFs."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...tools.common.interfaces import ConversionContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("merge", help="Merge multiple PDFs into one")
    parser.add_argument("inputs", nargs="+", help="Input PDF files")
    parser.add_argument("output", help="Output PDF path")
    parser.add_argument(
        "--bookmark",
        dest="bookmarks",
        action="append",
        help="Add bookmark titles matching each input",
    )
    parser.add_argument("--title", help="Title of the merged document")
    parser.add_argument("--author", help="Author of the merged document")
    parser.set_defaults(tool_name="merge", build_context=_build_context)


def _build_context(args) -> ConversionContext:
    document_info = {"title": args.title, "author": args.author}
    return ConversionContext(
        output_path=args.output,
        config={
            "inputs": args.inputs,
            "bookmarks": args.bookmarks,
            "document_info": {k: v for k, v in document_info.items() if v} or None,
        },
    )
