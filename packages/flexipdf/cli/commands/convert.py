"""CLI helpers for document conversion commands."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...tools.common.interfaces import ConversionContext

SUPPORTED_FORMATS = {
    "jpg": "to-jpg",
}


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    parser = subparsers.add_parser("convert", help="Convert a PDF into a different format")
    parser.add_argument("input", help="Input PDF path")
    parser.add_argument("output", help="Destination directory")
    parser.add_argument(
        "--format",
        choices=sorted(SUPPORTED_FORMATS.keys()),
        default="jpg",
        help="Output format",
    )
    parser.add_argument("--dpi", type=int, default=None, help="Raster resolution")
    parser.set_defaults(build_context=_build_context, tool_name_resolver=_select_tool)

    images = subparsers.add_parser("from-images", help="Build a PDF with one page per image")
    images.add_argument("inputs", nargs="+", help="JPEG or PNG files")
    images.add_argument("output", help="Output PDF path")
    images.set_defaults(tool_name="from-images", build_context=_build_images_context)

    word = subparsers.add_parser("from-word", help="Lay out the text of a .docx file as a PDF")
    word.add_argument("input", help="Input .docx file")
    word.add_argument("output", help="Output PDF path")
    word.set_defaults(tool_name="from-word", build_context=_build_word_context)


def _select_tool(format_name: str) -> str:
    return SUPPORTED_FORMATS[format_name]


def _build_context(args) -> ConversionContext:
    context = ConversionContext(
        input_path=args.input,
        output_path=args.output,
        config={"dpi": args.dpi},
    )
    context.resources["tool_name"] = _select_tool(args.format)
    return context


def _build_images_context(args) -> ConversionContext:
    return ConversionContext(output_path=args.output, config={"inputs": args.inputs})


def _build_word_context(args) -> ConversionContext:
    return ConversionContext(input_path=args.input, output_path=args.output)
