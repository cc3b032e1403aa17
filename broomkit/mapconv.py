"""Converting comma-separated map event lists into binary ``.map`` files.

A ``.map`` file is the 4-byte header ``b"MAP\\0"`` followed by 16-byte
records: six signed 16-bit values (time, type, x, y, two spare values) and a
signed 32-bit life value, little-endian.
"""

from __future__ import annotations

import argparse
import struct
import sys
from collections.abc import Iterable
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import BinaryIO, Union

PathType = Union[str, "PathLike[str]"]

MAP_HEADER = b"MAP\0"
FIELD_COUNT = 7

_RECORD = struct.Struct("<6hi")
_HEX_DIGITS = "0123456789abcdef"


def _to_short(value: int) -> int:
    return ((value + 0x8000) & 0xFFFF) - 0x8000


def _to_long(value: int) -> int:
    return ((value + 0x80000000) & 0xFFFFFFFF) - 0x80000000


@dataclass(frozen=True)
class EventData:
    """One map event record."""

    time: int
    type: int
    sx: int
    sy: int
    temp0: int
    temp1: int
    life: int

    def to_bytes(self) -> bytes:
        """The 16-byte stored form of the record."""
        return _RECORD.pack(
            self.time, self.type, self.sx, self.sy, self.temp0, self.temp1, self.life
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "EventData":
        """Read a record from its 16-byte stored form."""
        if len(data) != _RECORD.size:
            raise ValueError(f"expected {_RECORD.size} bytes, got {len(data)}")
        return cls(*_RECORD.unpack(data))

    def __str__(self) -> str:
        return ", ".join(
            str(v)
            for v in (
                self.time, self.type, self.sx, self.sy,
                self.temp0, self.temp1, self.life,
            )
        )


def parse_number(text: str) -> int:
    """Parse a leading hexadecimal (``0x``) or signed decimal number.

    Parsing stops at the first character that does not belong to the number;
    text without any digits gives 0.
    """
    if text[1:2] in ("x", "X"):
        result = 0
        for ch in text[2:]:
            digit = _HEX_DIGITS.find(ch.lower()) if ch.isascii() else -1
            if digit < 0:
                break
            result = result * 16 + digit
        return result
    sign = 1
    rest = text
    if rest.startswith("-"):
        sign = -1
        rest = rest[1:]
    result = 0
    for ch in rest:
        if not ("0" <= ch <= "9"):
            break
        result = result * 10 + (ord(ch) - ord("0"))
    return sign * result


def parse_line(line: str) -> EventData | None:
    """Parse one line of an event list; comment and blank lines give None.

    Only commas, ``x``, ``-`` and decimal digits of the line are kept before
    it is split into fields.
    """
    if line[:1] == "/" or line[1:2] == "/":
        return None
    if not line.strip():
        return None
    kept = "".join(ch for ch in line if ch in ",x-" or "0" <= ch <= "9")
    fields = [f for f in kept.split(",") if f]
    if len(fields) < FIELD_COUNT:
        raise ValueError(
            f"expected {FIELD_COUNT} fields, found {len(fields)} in {line.rstrip()!r}"
        )
    values = [parse_number(f) for f in fields[:FIELD_COUNT]]
    shorts = [_to_short(v) for v in values[:6]]
    return EventData(*shorts, _to_long(values[6]))


def convert(source: Iterable[str], out: BinaryIO) -> list[EventData]:
    """Write a record for every event line of ``source``; return the events."""
    events = []
    for line in source:
        event = parse_line(line)
        if event is None:
            continue
        out.write(event.to_bytes())
        events.append(event)
    return events


def convert_file(path: PathType, out_dir: PathType) -> tuple[Path, list[EventData]]:
    """Convert one event list into ``<out_dir>/<name>.map``.

    Returns the output path and the events written.
    """
    source_path = Path(path)
    name = source_path.name.rsplit(".", 1)[0] if "." in source_path.name else source_path.name
    output = Path(out_dir) / f"{name}.map"
    with open(source_path, "rt") as source, open(output, "wb") as out:
        out.write(MAP_HEADER)
        events = convert(source, out)
    return output, events


def main(argv: list[str] | None = None) -> int:
    """Convert the event lists named on the command line."""
    parser = argparse.ArgumentParser(description="Convert map event lists to .map files.")
    parser.add_argument("files", nargs="+", help="event list files")
    parser.add_argument(
        "-o", "--output-dir", default=".", help="directory for the .map files"
    )
    args = parser.parse_args(argv)

    out_dir = Path(args.output_dir)
    print(f"Directory = {out_dir}")
    for file in args.files:
        source = Path(file)
        print(f"FileName = {source.stem}")
        try:
            output, events = convert_file(source, out_dir)
        except (OSError, ValueError) as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1
        for event in events:
            print(event)
        print(f"Output = {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())