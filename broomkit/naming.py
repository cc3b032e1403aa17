"""Deriving entry names and alpha-mask file names from image paths."""

from __future__ import annotations

from os import PathLike, fspath
from typing import Union

PathType = Union[str, "PathLike[str]"]

ALPHA_SUFFIX = "_a"

_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)


def _split_dir(path: str) -> tuple[str, str]:
    """Split a path into its directory part (with separator) and file name."""
    cut = max(path.rfind("\\"), path.rfind("/")) + 1
    return path[:cut], path[cut:]


def _split_ext(filename: str) -> tuple[str, str]:
    """Split a file name at its last dot; the extension keeps the dot."""
    dot = filename.rfind(".")
    if dot < 0:
        return filename, ""
    return filename[:dot], filename[dot:]


def data_name(path: PathType) -> str:
    """The entry name of an image: its file name, lower-cased, without extension."""
    _, filename = _split_dir(fspath(path))
    stem, _ = _split_ext(filename.translate(_ASCII_LOWER))
    return stem


def is_alpha_name(path: PathType) -> bool:
    """Whether a path names an alpha-mask image (``*_a.ext`` or ``*_A.ext``)."""
    _, filename = _split_dir(fspath(path))
    stem, _ = _split_ext(filename)
    return len(stem) >= 2 and stem[-2] == "_" and stem[-1] in "aA"


def alpha_name(path: PathType) -> str:
    """The path of the alpha-mask image that belongs to an image."""
    directory, filename = _split_dir(fspath(path))
    stem, ext = _split_ext(filename)
    return f"{directory}{stem}{ALPHA_SUFFIX}{ext}"