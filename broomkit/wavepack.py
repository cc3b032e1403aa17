"""Packing PCM wave files into an LSD sound pack.

A pack is the 4-byte header ``b"LSD\\0"`` followed by one entry per sound:
a 32-byte NUL padded name, the 32-bit sample data size, an 18-byte wave
format block and the raw sample data.  All integers are little-endian.
"""

from __future__ import annotations

import argparse
import struct
import sys
from dataclasses import dataclass
from os import PathLike, fspath
from pathlib import Path
from typing import BinaryIO, Union

PathType = Union[str, "PathLike[str]"]

PACK_HEADER = b"LSD\0"
NAME_SIZE = 32
NAME_ENCODING = "cp932"
PCM = 1

_FMT = struct.Struct("<HHIIHH")
_WAVEFORMATEX = struct.Struct("<HHIIHHH")
_INT32 = struct.Struct("<i")
_UINT32 = struct.Struct("<I")

_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)


class WaveError(Exception):
    """Raised when a file is not an uncompressed wave file or a name does not fit."""


@dataclass(frozen=True)
class WaveFormat:
    """The format block of a wave file."""

    format_tag: int
    channels: int
    samples_per_sec: int
    avg_bytes_per_sec: int
    block_align: int
    bits_per_sample: int

    def to_bytes(self) -> bytes:
        """The 18-byte stored form, with no extra format data."""
        return _WAVEFORMATEX.pack(
            self.format_tag, self.channels, self.samples_per_sec,
            self.avg_bytes_per_sec, self.block_align, self.bits_per_sample, 0,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "WaveFormat":
        """Read a format from its 18-byte stored form."""
        if len(data) != _WAVEFORMATEX.size:
            raise WaveError(f"expected {_WAVEFORMATEX.size} bytes, got {len(data)}")
        return cls(*_WAVEFORMATEX.unpack(data)[:6])


def _read_exact(stream: BinaryIO, size: int, what: str) -> bytes:
    data = stream.read(size)
    if len(data) < size:
        raise WaveError(f"file ends inside the {what}")
    return data


def read_wave(path: PathType) -> tuple[WaveFormat, bytes]:
    """Read the format and sample data of an uncompressed wave file."""
    with open(path, "rb") as stream:
        if stream.read(4) != b"RIFF":
            raise WaveError("This file isn't wavefile")
        _read_exact(stream, 4, "RIFF size")
        if stream.read(4) != b"WAVE":
            raise WaveError("This file isn't wavefile")
        if stream.read(4) != b"fmt ":
            raise WaveError("This file isn't wavefile")
        (fmt_size,) = _INT32.unpack(_read_exact(stream, 4, "format chunk"))
        fmt = WaveFormat(*_FMT.unpack(_read_exact(stream, _FMT.size, "format chunk")))
        if fmt.format_tag != PCM:
            raise WaveError("Not support compressed file")
        stream.seek(fmt_size - _FMT.size, 1)
        while True:
            chunk = stream.read(4)
            if len(chunk) < 4:
                raise WaveError("Can't find Wave Data")
            if chunk == b"data":
                break
            (size,) = _UINT32.unpack(_read_exact(stream, 4, f"{chunk!r} chunk"))
            stream.seek(size, 1)
        (size,) = _INT32.unpack(_read_exact(stream, 4, "data chunk"))
        if size < 0:
            raise WaveError(f"invalid data size {size}")
        data = _read_exact(stream, size, "sample data")
    return fmt, data


def data_name(filename: str) -> str:
    """The pack name of a wave file: its name up to the first dot, lower-cased."""
    return filename.split(".", 1)[0].translate(_ASCII_LOWER)


def write_entry(stream: BinaryIO, name: str, fmt: WaveFormat, data: bytes) -> None:
    """Write one sound entry to a pack stream."""
    raw = name.encode(NAME_ENCODING)
    if len(raw) > NAME_SIZE:
        raise WaveError(f"sound name {name!r} is longer than {NAME_SIZE} bytes")
    stream.write(raw.ljust(NAME_SIZE, b"\0"))
    stream.write(_INT32.pack(len(data)))
    stream.write(fmt.to_bytes())
    stream.write(data)


def pack_directory(
    directory: PathType, output: PathType
) -> list[tuple[str, "tuple[WaveFormat, int] | WaveError"]]:
    """Pack every ``*.wav`` file of a directory into ``output``.

    Files that are not usable wave files are left out.  Returns, per file in
    the order written, its name and either ``(format, data size)`` or the
    error that kept it out.
    """
    files = sorted(
        p for p in Path(directory).iterdir()
        if p.is_file() and p.suffix.lower() == ".wav"
    )
    if not files:
        raise FileNotFoundError(f"Can't find WaveFile in {fspath(directory)}")
    results: list = []
    with open(output, "wb") as stream:
        stream.write(PACK_HEADER)
        for file in files:
            name = data_name(file.name)
            try:
                fmt, data = read_wave(file)
                write_entry(stream, name, fmt, data)
            except WaveError as exc:
                results.append((name, exc))
                continue
            results.append((name, (fmt, len(data))))
    return results


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(description="Pack wave files into a sound pack.")
    parser.add_argument("output", help="pack file to write")
    parser.add_argument("directory", nargs="?", default=".", help="folder of .wav files")
    args = parser.parse_args(argv)
    try:
        results = pack_directory(args.directory, args.output)
    except FileNotFoundError:
        print("Can't find WaveFile in this folder...", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"Can't Open WriteFile: {exc}", file=sys.stderr)
        return 1
    for name, result in results:
        print(name)
        if isinstance(result, WaveError):
            print(f"  {result}")
            continue
        fmt, size = result
        print(f"  Channel  => {fmt.channels}")
        print(f"  Sample   => {fmt.samples_per_sec}")
        print(f"  Byte     => {fmt.avg_bytes_per_sec}")
        print(f"  Block    => {fmt.block_align}")
        print(f"  Bit      => {fmt.bits_per_sample}")
        print(f"  DataSize => {size / 1024.0:.3f} Kbyte")
    return 0


if __name__ == "__main__":
    sys.exit(main())