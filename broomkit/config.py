"""The game's display configuration file.

The file holds three bytes, one flag each: windowed mode, full-colour
back buffer and full-colour textures.  A non-zero byte means the option is on.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from os import PathLike
from typing import Union

PathType = Union[str, "PathLike[str]"]

CONFIG_FILE = "config.dat"
CONFIG_SIZE = 3


@dataclass
class Config:
    """Display options; every option starts switched off."""

    is_window: bool = False
    is_full_color: bool = False
    is_full_color_texture: bool = False

    def to_bytes(self) -> bytes:
        """The three-byte stored form."""
        return bytes(
            (int(self.is_window), int(self.is_full_color), int(self.is_full_color_texture))
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "Config":
        """Read options from their three-byte stored form."""
        if len(data) != CONFIG_SIZE:
            raise ValueError(f"expected {CONFIG_SIZE} bytes of configuration, got {len(data)}")
        window, full_color, full_color_texture = data
        return cls(bool(window), bool(full_color), bool(full_color_texture))

    def save(self, path: PathType = CONFIG_FILE) -> None:
        """Write the options to ``path``."""
        with open(path, "wb") as stream:
            stream.write(self.to_bytes())

    @classmethod
    def load(cls, path: PathType = CONFIG_FILE) -> "Config":
        """Read the options from ``path``."""
        with open(path, "rb") as stream:
            return cls.from_bytes(stream.read())


def main(argv: list[str] | None = None) -> int:
    """Write a configuration file from command-line switches."""
    parser = argparse.ArgumentParser(description="Write the game's display configuration.")
    parser.add_argument("--window", action="store_true", help="run in a window")
    parser.add_argument("--full-color", action="store_true", help="use a full-colour back buffer")
    parser.add_argument(
        "--full-color-texture", action="store_true", help="use full-colour textures"
    )
    parser.add_argument("-o", "--output", default=CONFIG_FILE, help="file to write")
    args = parser.parse_args(argv)

    config = Config(args.window, args.full_color, args.full_color_texture)
    try:
        config.save(args.output)
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())