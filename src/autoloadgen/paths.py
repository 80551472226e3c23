"""Relative path computation for generated includes."""

import os
from pathlib import Path
from typing import Union

from .errors import PathError

SEPARATOR = "/"


def _resolve(path: Union[str, Path]) -> Path:
    try:
        return Path(path).resolve(strict=True)
    except OSError as e:
        raise PathError(str(path)) from e


def require_utf8(path: Union[str, Path]) -> str:
    """Return ``path`` as a string, or raise PathError if its name is not UTF-8.

    Names the filesystem could not decode arrive surrogate-escaped and cannot
    be printed or written into the generated PHP file.
    """
    path = str(path)
    try:
        path.encode("utf-8")
    except UnicodeEncodeError as e:
        printable = os.fsencode(path).decode("utf-8", errors="backslashreplace")
        raise PathError(printable, "File name is not valid UTF-8") from e
    return path


def relativize(path: Union[str, Path], base: Union[str, Path]) -> str:
    """Return ``path`` relative to the directory ``base``, "/"-separated.

    Both paths must exist; symlinks are followed first. Identical paths give
    an empty string.
    """
    path_parts = _resolve(path).parts
    base_parts = _resolve(base).parts

    common = 0
    for a, b in zip(path_parts, base_parts):
        if a != b:
            break
        common += 1

    parts = [".."] * (len(base_parts) - common) + list(path_parts[common:])
    return SEPARATOR.join(part.replace(os.sep, SEPARATOR) for part in parts)
