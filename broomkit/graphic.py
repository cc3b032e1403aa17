"""An editable 32-bit image with a separate alpha channel.

Pixels are ``(r, g, b, a)`` tuples of 8-bit channels in row-major order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from os import PathLike
from typing import Union

from PIL import Image, UnidentifiedImageError

PathType = Union[str, "PathLike[str]"]
Pixel = tuple

# Checkerboard shades shown behind transparent pixels in a preview.
_BACKGROUND = ((0xC0, 0x40), (0x40, 0xC0))


class GraphicError(Exception):
    """Raised when an image cannot be loaded or an operation is invalid."""


def _trunc_div(numerator: int, denominator: int) -> int:
    """Integer division that truncates toward zero."""
    quotient = abs(numerator) // denominator
    return -quotient if numerator < 0 else quotient


@dataclass
class Graphic:
    """An image held as ``(r, g, b, a)`` pixels."""

    width: int
    height: int
    pixels: list = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise GraphicError(f"invalid image size {self.width}x{self.height}")
        self.pixels = [tuple(p) for p in self.pixels]
        if len(self.pixels) != self.width * self.height:
            raise GraphicError(
                f"expected {self.width * self.height} pixels, got {len(self.pixels)}"
            )

    @classmethod
    def load_bmp(cls, path: PathType) -> "Graphic":
        """Load an image file; every pixel starts fully opaque."""
        try:
            with Image.open(path) as image:
                rgb = image.convert("RGB")
        except (OSError, UnidentifiedImageError) as exc:
            raise GraphicError(f"cannot load image {path!s}: {exc}") from exc
        raw = rgb.tobytes()
        pixels = [
            (raw[i], raw[i + 1], raw[i + 2], 0xFF) for i in range(0, len(raw), 3)
        ]
        return cls(rgb.width, rgb.height, pixels)

    def _index(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise GraphicError(f"point ({x}, {y}) lies outside the image")
        return y * self.width + x

    def apply_alpha_mask(self, mask: "Graphic") -> None:
        """Set each pixel's alpha to the mean brightness of the mask's pixel."""
        if (mask.width, mask.height) != (self.width, self.height):
            raise GraphicError(
                f"mask size {mask.width}x{mask.height} does not match "
                f"image size {self.width}x{self.height}"
            )
        self.pixels = [
            (r, g, b, (mr + mg + mb) // 3)
            for (r, g, b, _), (mr, mg, mb, _) in zip(self.pixels, mask.pixels)
        ]

    def get_color(self, x: int, y: int) -> tuple:
        """Return the ``(r, g, b)`` colour at a point."""
        r, g, b, _ = self.pixels[self._index(x, y)]
        return (r, g, b)

    def set_color_key(self, r: int, g: int, b: int) -> None:
        """Make every pixel of exactly this colour fully transparent."""
        key = (r, g, b)
        self.pixels = [
            (pr, pg, pb, 0x00) if (pr, pg, pb) == key else (pr, pg, pb, pa)
            for pr, pg, pb, pa in self.pixels
        ]

    def restore_color_key(self) -> None:
        """Make every pixel fully opaque again."""
        self.pixels = [(r, g, b, 0xFF) for r, g, b, _ in self.pixels]

    def _rows(self) -> list:
        w = self.width
        return [self.pixels[y * w:(y + 1) * w] for y in range(self.height)]

    def flip_horizontal(self) -> None:
        """Mirror the image left to right."""
        self.pixels = [p for row in self._rows() for p in reversed(row)]

    def flip_vertical(self) -> None:
        """Mirror the image top to bottom."""
        self.pixels = [p for row in reversed(self._rows()) for p in row]

    def invert(self) -> None:
        """Invert the colour channels, leaving alpha as it is."""
        self.pixels = [
            (~r & 0xFF, ~g & 0xFF, ~b & 0xFF, a) for r, g, b, a in self.pixels
        ]

    def preview(self) -> list:
        """Opaque pixels of the image blended over a checkerboard."""
        result = []
        for index, (r, g, b, a) in enumerate(self.pixels):
            y, x = divmod(index, self.width)
            c = _BACKGROUND[(x & 0x2F) >> 5][(y & 0x2F) >> 5]
            result.append(
                tuple(
                    (_trunc_div((v - c) * a, 255) + c) & 0xFF for v in (r, g, b)
                )
                + (0xFF,)
            )
        return result