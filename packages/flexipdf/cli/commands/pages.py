"""CLI helpers for rotating and cropping pages."""

from __future__ import annotations

from argparse import ArgumentParser, _SubParsersAction

from ...pages import VALID_ANGLES
from ...tools.common.interfaces import ConversionContext


def configure_parser(subparsers: _SubParsersAction[ArgumentParser]) -> None:
    rotate = subparsers.add_parser("rotate", help="Rotate pages clockwise")
    rotate.add_argument("input", help="Input PDF file")
    rotate.add_argument("output", help="Output PDF path")
    rotate.add_argument("--angle", type=int, choices=VALID_ANGLES, default=90)
    rotate.add_argument("--pages", default=None, help="Pages to rotate (default: every page)")
    rotate.set_defaults(tool_name="rotate", build_context=_build_rotate_context)

    crop = subparsers.add_parser("crop", help="Set the crop box of every page")
    crop.add_argument("input", help="Input PDF file")
    crop.add_argument("output", help="Output PDF path")
    crop.add_argument(
        "--box",
        nargs=4,
        type=float,
        required=True,
        metavar=("X", "Y", "WIDTH", "HEIGHT"),
        help="Crop rectangle in points",
    )
    crop.set_defaults(tool_name="crop", build_context=_build_crop_context)


def _build_rotate_context(args) -> ConversionContext:
    return ConversionContext(
        input_path=args.input,
        output_path=args.output,
        config={"angle": args.angle, "pages": args.pages},
    )


def _build_crop_context(args) -> ConversionContext:
    x, y, width, height = args.box
    return ConversionContext(
        input_path=args.input,
        output_path=args.output,
        config={"box": {"x": x, "y": y, "width": width, "height": height}},
    )
