"""CLI helpers for watermarks, stamps and signatures."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...stamp import CORNERS
from ...tools.common.interfaces import ConversionContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    watermark = subparsers.add_parser("watermark", help="Add a diagonal text watermark")
    watermark.add_argument("input", help="Input PDF file")
    watermark.add_argument("output", help="Output PDF path")
    watermark.add_argument("--text", required=True, help="Watermark text")
    watermark.add_argument("--opacity", type=float, default=None)
    watermark.add_argument("--font-size", type=float, default=None)
    watermark.add_argument("--rotation", type=float, default=None)
    watermark.set_defaults(tool_name="watermark", build_context=_build_watermark_context)

    stamp = subparsers.add_parser("stamp", help="Add a text stamp near a page corner")
    stamp.add_argument("input", help="Input PDF file")
    stamp.add_argument("output", help="Output PDF path")
    stamp.add_argument("--text", required=True, help="Stamp text")
    stamp.add_argument("--pages", default=None, help="Pages to stamp (default: every page)")
    stamp.add_argument("--corner", choices=CORNERS, default=None)
    stamp.add_argument("--font-size", type=float, default=None)
    stamp.set_defaults(tool_name="stamp", build_context=_build_stamp_context)

    sign = subparsers.add_parser("sign", help="Add a visible signature to the last page")
    sign.add_argument("input", help="Input PDF file")
    sign.add_argument("output", help="Output PDF path")
    sign.add_argument("--signer", required=True, help="Name shown in the signature")
    sign.add_argument("--date", default=None, help="Date text (default: today)")
    sign.set_defaults(tool_name="sign", build_context=_build_sign_context)


def _build_watermark_context(args) -> ConversionContext:
    return ConversionContext(
        input_path=args.input,
        output_path=args.output,
        config={
            "text": args.text,
            "opacity": args.opacity,
            "font_size": args.font_size,
            "rotation": args.rotation,
        },
    )


def _build_stamp_context(args) -> ConversionContext:
    return ConversionContext(
        input_path=args.input,
        output_path=args.output,
        config={
            "text": args.text,
            "pages": args.pages,
            "corner": args.corner,
            "font_size": args.font_size,
        },
    )


def _build_sign_context(args) -> ConversionContext:
    return ConversionContext(
        input_path=args.input,
        output_path=args.output,
        config={"signer": args.signer, "date": args.date},
    )
