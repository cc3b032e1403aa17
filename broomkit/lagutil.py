"""Packing bitmap images, with optional alpha masks, into LAG files.

An image ``name.bmp`` may be accompanied by a mask ``name_a.bmp`` whose
brightness becomes the image's alpha channel.
"""

from __future__ import annotations

import argparse
import struct
import sys
import warnings
from os import PathLike, fspath
from pathlib import Path
from typing import Union

from .graphic import Graphic, GraphicError
from .lag import (
    NAME_ENCODING,
    NAME_SIZE,
    LagError,
    PixelFormat,
    append_image,
    write_header,
)
from .naming import alpha_name, data_name, is_alpha_name

PathType = Union[str, "PathLike[str]"]

_BMP_FILE_HEADER = struct.Struct("<2sIHHI")
_BMP_INFO_HEADER = struct.Struct("<IiiHHIIiiII")
_BMP_HEADERS_SIZE = _BMP_FILE_HEADER.size + _BMP_INFO_HEADER.size

_FORMAT_NAMES = {
    "a4r4g4b4": PixelFormat.A4R4G4B4,
    "a8r8g8b8": PixelFormat.A8R8G8B8,
    "a16r16g16b16": PixelFormat.A16R16G16B16,
    "float": PixelFormat.FLOAT,
}


def _entry_name(path: PathType) -> str:
    """The entry name of an image, cut to what fits a LAG entry header."""
    name = data_name(path)
    while len(name.encode(NAME_ENCODING)) >= NAME_SIZE:
        name = name[:-1]
    return name


def load_with_alpha(path: PathType) -> Graphic:
    """Load an image and, when a matching ``*_a`` mask exists, apply it as alpha."""
    graphic = Graphic.load_bmp(path)
    mask_path = Path(alpha_name(fspath(path)))
    if not mask_path.is_file():
        return graphic
    try:
        mask = Graphic.load_bmp(mask_path)
    except GraphicError:
        return graphic
    try:
        graphic.apply_alpha_mask(mask)
    except GraphicError as exc:
        warnings.warn(f"{mask_path}: {exc}", stacklevel=2)
    return graphic


def save_bitmap32(path: PathType, graphic: Graphic) -> None:
    """Write an image as an uncompressed 32-bit BMP that keeps its alpha."""
    width, height = graphic.width, graphic.height
    file_header = _BMP_FILE_HEADER.pack(
        b"BM", width * height * 4 + _BMP_HEADERS_SIZE, 0, 0, _BMP_HEADERS_SIZE
    )
    info_header = _BMP_INFO_HEADER.pack(
        _BMP_INFO_HEADER.size, width, height, 1, 32, 0, 0, 0, 0, 0, 0
    )
    body = bytearray()
    for y in reversed(range(height)):
        for r, g, b, a in graphic.pixels[y * width:(y + 1) * width]:
            body += bytes((b, g, r, a))
    with open(path, "wb") as stream:
        stream.write(file_header)
        stream.write(info_header)
        stream.write(body)


def batch_process(
    directory: PathType, output: PathType, fmt: PixelFormat = PixelFormat.A8R8G8B8
) -> int:
    """Pack every non-mask ``*.bmp`` of a directory into a new LAG file.

    Returns the number of images found (mask images are not counted).
    """
    files = sorted(
        p for p in Path(directory).iterdir()
        if p.is_file() and p.suffix.lower() == ".bmp"
    )
    if not files:
        raise FileNotFoundError(f"no bitmap files in {fspath(directory)}")
    fmt = PixelFormat(fmt)
    write_header(output, 0)
    count = 0
    for file in files:
        if is_alpha_name(file.name):
            continue
        count += 1
        try:
            graphic = load_with_alpha(file)
        except GraphicError:
            continue
        append_image(
            output, _entry_name(file.name), graphic.pixels,
            graphic.width, graphic.height, fmt, 0,
        )
    return count


def _edit(graphic: Graphic, args: argparse.Namespace) -> None:
    if args.color_key is not None:
        graphic.set_color_key(*args.color_key)
    if args.flip_h:
        graphic.flip_horizontal()
    if args.flip_v:
        graphic.flip_vertical()
    if args.invert:
        graphic.invert()


def _add_edit_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--color-key", nargs=3, type=int, metavar=("R", "G", "B"),
        help="make pixels of this colour transparent",
    )
    parser.add_argument("--flip-h", action="store_true", help="mirror left to right")
    parser.add_argument("--flip-v", action="store_true", help="mirror top to bottom")
    parser.add_argument("--invert", action="store_true", help="invert colours")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Pack bitmap images into LAG files.")
    commands = parser.add_subparsers(dest="command", required=True)

    fmt_help = "pixel format of the stored data"

    pack = commands.add_parser("pack", help="pack all bitmaps of a directory")
    pack.add_argument("directory")
    pack.add_argument("output")
    pack.add_argument("--format", choices=_FORMAT_NAMES, default="a8r8g8b8", help=fmt_help)

    add = commands.add_parser("add", help="store one bitmap in a LAG file")
    add.add_argument("image")
    add.add_argument("output")
    add.add_argument("--name", help="entry name (default: from the file name)")
    add.add_argument("--append", action="store_true", help="append to an existing file")
    add.add_argument("--format", choices=_FORMAT_NAMES, default="a8r8g8b8", help=fmt_help)
    _add_edit_options(add)

    bmp = commands.add_parser("bmp32", help="save a bitmap with its alpha as 32-bit BMP")
    bmp.add_argument("image")
    bmp.add_argument("output")
    _add_edit_options(bmp)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point."""
    args = _build_parser().parse_args(argv)
    try:
        if args.command == "pack":
            count = batch_process(args.directory, args.output, _FORMAT_NAMES[args.format])
            print(f"Packed {count} images into {args.output}")
        elif args.command == "add":
            graphic = load_with_alpha(args.image)
            _edit(graphic, args)
            name = args.name if args.name is not None else _entry_name(args.image)
            if not args.append:
                write_header(args.output, 0)
            append_image(
                args.output, name, graphic.pixels, graphic.width, graphic.height,
                _FORMAT_NAMES[args.format], 0,
            )
        else:
            graphic = load_with_alpha(args.image)
            _edit(graphic, args)
            save_bitmap32(args.output, graphic)
    except (OSError, GraphicError, LagError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())