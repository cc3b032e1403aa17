"""Reading and writing LAG image packs.

A LAG file starts with an 8-byte header (``b"LAG\\0"`` and a 32-bit reserved
value) followed by any number of entries.  Each entry is a 32-byte header
(16-byte NUL padded name, width, height, pixel format, reserved) and the
pixel data in the entry's format.  All integers are little-endian.

Pixels are handled as ``(r, g, b, a)`` tuples in row-major order.
"""

from __future__ import annotations

import struct
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from enum import IntEnum
from os import PathLike
from typing import Union

PathType = Union[str, "PathLike[str]"]
Pixel = tuple

MAGIC = b"LAG"
NAME_SIZE = 16
NAME_ENCODING = "cp932"

_FILE_HEADER = struct.Struct("<4si")
_DATA_HEADER = struct.Struct("<16siiii")

# 8-value ordered dither matrix shared by both dither functions.
_DITHER_TABLE = (
    0, 4, 1, 5,
    6, 2, 7, 3,
    1, 5, 0, 4,
    7, 3, 6, 2,
)


class LagError(Exception):
    """Raised for malformed LAG data or invalid arguments."""


class PixelFormat(IntEnum):
    """Pixel layouts a LAG entry may be stored in."""

    A4R4G4B4 = 0
    A8R8G8B8 = 1
    A16R16G16B16 = 2
    FLOAT = 3

    @property
    def bytes_per_pixel(self) -> int:
        return _BYTES_PER_PIXEL[self]


_BYTES_PER_PIXEL = {
    PixelFormat.A4R4G4B4: 2,
    PixelFormat.A8R8G8B8: 4,
    PixelFormat.A16R16G16B16: 8,
    PixelFormat.FLOAT: 16,
}

_CHANNEL_MAX = {
    PixelFormat.A4R4G4B4: 0x0F,
    PixelFormat.A8R8G8B8: 0xFF,
    PixelFormat.A16R16G16B16: 0xFFFF,
}


def _f32(value: float) -> float:
    """Round a Python float to single precision."""
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _dither_offset(x: int, y: int) -> int:
    return _DITHER_TABLE[((y & 3) << 2) | (x & 3)]


def dither4(c: int, x: int, y: int) -> int:
    """Dithered channel value used when reducing to 4 bits per channel."""
    return (((c * 249) >> 8) >> 1) + (_dither_offset(x, y) << 1)


def dither5(c: int, x: int, y: int) -> int:
    """Dithered channel value used when reducing to 5 bits per channel."""
    return ((c * 249) >> 8) + _dither_offset(x, y)


def data_size(width: int, height: int, fmt: PixelFormat) -> int:
    """Number of bytes the pixel data of an entry occupies."""
    if width < 0 or height < 0:
        raise LagError(f"invalid image size {width}x{height}")
    return width * height * PixelFormat(fmt).bytes_per_pixel


def _check_count(pixels: Sequence, width: int, height: int) -> None:
    if width < 0 or height < 0:
        raise LagError(f"invalid image size {width}x{height}")
    if len(pixels) != width * height:
        raise LagError(
            f"expected {width * height} pixels for {width}x{height}, got {len(pixels)}"
        )


def encode_pixels(
    pixels: Sequence[Pixel], width: int, height: int, fmt: PixelFormat
) -> bytes:
    """Encode 8-bit ``(r, g, b, a)`` pixels into the stored form of ``fmt``."""
    fmt = PixelFormat(fmt)
    pixels = list(pixels)
    _check_count(pixels, width, height)
    out = bytearray()
    for index, pixel in enumerate(pixels):
        r, g, b, a = pixel
        if not all(isinstance(c, int) and 0 <= c <= 0xFF for c in (r, g, b, a)):
            raise LagError(f"pixel {index} has channels outside 0..255: {pixel!r}")
        y, x = divmod(index, width)
        if fmt is PixelFormat.A4R4G4B4:
            na, nr, ng, nb = (
                (dither4(c, x, y) >> 4) & 0x0F for c in (a, r, g, b)
            )
            out += struct.pack("<H", na | (nr << 4) | (ng << 8) | (nb << 12))
        elif fmt is PixelFormat.A8R8G8B8:
            out += struct.pack("<4B", b, g, r, a)
        elif fmt is PixelFormat.A16R16G16B16:
            out += struct.pack("<4H", *(c * 0xFFFF // 0xFF for c in (b, g, r, a)))
        else:
            out += struct.pack("<4f", *(c * (1.0 / 255.0) for c in (b, g, r, a)))
    return bytes(out)


def decode_pixels(
    data: bytes, width: int, height: int, fmt: PixelFormat
) -> list[Pixel]:
    """Decode stored pixel data into ``(r, g, b, a)`` tuples in ``fmt``'s units."""
    fmt = PixelFormat(fmt)
    expected = data_size(width, height, fmt)
    if len(data) != expected:
        raise LagError(f"expected {expected} bytes of pixel data, got {len(data)}")
    if fmt is PixelFormat.A4R4G4B4:
        return [
            ((v >> 4) & 0x0F, (v >> 8) & 0x0F, (v >> 12) & 0x0F, v & 0x0F)
            for (v,) in struct.iter_unpack("<H", data)
        ]
    layout = {
        PixelFormat.A8R8G8B8: "<4B",
        PixelFormat.A16R16G16B16: "<4H",
        PixelFormat.FLOAT: "<4f",
    }[fmt]
    return [(r, g, b, a) for b, g, r, a in struct.iter_unpack(layout, data)]


def _channel_converter(src: PixelFormat, dest: PixelFormat):
    if src is dest:
        return lambda c: c
    if dest is PixelFormat.FLOAT:
        scale = _f32(1.0 / _CHANNEL_MAX[src])
        return lambda c: _f32(c * scale)
    dest_max = _CHANNEL_MAX[dest]
    if src is PixelFormat.FLOAT:
        return lambda c: int(_f32(c * dest_max)) & dest_max
    src_max = _CHANNEL_MAX[src]
    return lambda c: (c * dest_max // src_max) & dest_max


def convert_pixels(
    pixels: Iterable[Pixel], src_fmt: PixelFormat, dest_fmt: PixelFormat
) -> list[Pixel]:
    """Convert decoded pixels from one format's channel units to another's."""
    convert = _channel_converter(PixelFormat(src_fmt), PixelFormat(dest_fmt))
    return [tuple(convert(c) for c in pixel) for pixel in pixels]


def _encode_name(name: str) -> bytes:
    raw = name.encode(NAME_ENCODING)
    if b"\0" in raw:
        raise LagError("entry name must not contain NUL")
    if len(raw) >= NAME_SIZE:
        raise LagError(f"entry name {name!r} is longer than {NAME_SIZE - 1} bytes")
    return raw


def _decode_name(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode(NAME_ENCODING, errors="replace")


def write_header(path: PathType, reserved: int = 0) -> None:
    """Create (or truncate) ``path`` and write the LAG file header."""
    with open(path, "wb") as stream:
        stream.write(_FILE_HEADER.pack(MAGIC, reserved))


def append_image(
    path: PathType,
    name: str,
    pixels: Sequence[Pixel],
    width: int,
    height: int,
    fmt: PixelFormat = PixelFormat.A8R8G8B8,
    reserved: int = 0,
) -> None:
    """Append one image of 8-bit ``(r, g, b, a)`` pixels to a LAG file."""
    fmt = PixelFormat(fmt)
    raw_name = _encode_name(name)
    body = encode_pixels(pixels, width, height, fmt)
    header = _DATA_HEADER.pack(raw_name, width, height, int(fmt), reserved)
    with open(path, "ab") as stream:
        stream.write(header)
        stream.write(body)


@dataclass(frozen=True)
class LagEntry:
    """One image stored in a LAG file."""

    name: str
    width: int
    height: int
    fmt: PixelFormat
    reserved: int
    data: bytes

    @property
    def pixels(self) -> list[Pixel]:
        """The entry's pixels in its own format's channel units."""
        return decode_pixels(self.data, self.width, self.height, self.fmt)


def iter_entries(path: PathType) -> Iterator[LagEntry]:
    """Yield every entry of a LAG file in file order."""
    with open(path, "rb") as stream:
        head = stream.read(_FILE_HEADER.size)
        if len(head) < _FILE_HEADER.size:
            raise LagError("file is too short to be a LAG file")
        chunk, _ = _FILE_HEADER.unpack(head)
        if chunk.split(b"\0", 1)[0] != MAGIC:
            raise LagError("not a LAG file")
        while True:
            raw = stream.read(_DATA_HEADER.size)
            if len(raw) < _DATA_HEADER.size:
                return
            raw_name, width, height, fmt_value, reserved = _DATA_HEADER.unpack(raw)
            try:
                fmt = PixelFormat(fmt_value)
            except ValueError:
                raise LagError(f"unknown pixel format {fmt_value}") from None
            size = data_size(width, height, fmt)
            data = stream.read(size)
            if len(data) < size:
                raise LagError(f"pixel data of entry {_decode_name(raw_name)!r} is truncated")
            yield LagEntry(_decode_name(raw_name), width, height, fmt, reserved, data)


def read_image(path: PathType, name: str) -> LagEntry:
    """Return the first entry called ``name``."""
    for entry in iter_entries(path):
        if entry.name == name:
            return entry
    raise LagError(f"no entry named {name!r}")