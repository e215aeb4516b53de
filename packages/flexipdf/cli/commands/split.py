"""CLI helpers for the split and extract commands."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...tools.common.interfaces import ConversionContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("split", help="Split a PDF into multiple files")
    parser.add_argument("input", help="Input PDF file")
    parser.add_argument("output", help="Output directory for split pages")
    parser.add_argument(
        "--mode",
        choices=["pages", "range"],
        default="pages",
        help="One file per page, or one file per range",
    )
    parser.add_argument("--ranges", help="Comma separated page ranges for --mode range", default=None)
    parser.add_argument(
        "--pages",
        help="Page selection such as '1-3,5' (default: every page)",
        default=None,
    )
    parser.set_defaults(tool_name="split", build_context=_build_split_context)

    extract = subparsers.add_parser("extract", help="Extract pages into a new PDF")
    extract.add_argument("input", help="Input PDF file")
    extract.add_argument("output", help="Output PDF path")
    extract.add_argument("--pages", required=True, help="Page selection such as '3,1' or '2-4'")
    extract.set_defaults(tool_name="extract", build_context=_build_extract_context)


def _build_split_context(args) -> ConversionContext:
    return ConversionContext(
        input_path=args.input,
        output_path=args.output,
        config={"mode": args.mode, "ranges": args.ranges, "pages": args.pages},
    )


def _build_extract_context(args) -> ConversionContext:
    return ConversionContext(
        input_path=args.input,
        output_path=args.output,
        config={"pages": args.pages},
    )
