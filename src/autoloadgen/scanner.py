"""Per-file scanning: read, prepare and extract declarations."""

import logging
from pathlib import Path
from typing import Optional, Protocol, Union

from .dialect import MissingTranspiler, Transpiler, is_hack
from .errors import ParseError
from .models import ParsedFile

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class Extractor(Protocol):
    def extract(self, source: bytes) -> ParsedFile:
        ...


class FileScanner(Protocol):
    def scan(self, path: PathLike) -> ParsedFile:
        ...


def strip_hashbang(source: bytes) -> bytes:
    """Drop a leading ``#!`` line, which the parser does not understand."""
    if not source.startswith(b"#!"):
        return source
    newline = source.find(b"\n")
    if newline == -1:
        return b""
    return source[newline + 1:]


class PhpFileScanner:
    """Scans files directly, with no caching."""

    def __init__(self, extractor: Extractor, transpiler: Optional[Transpiler] = None):
        self.extractor = extractor
        self.transpiler = transpiler or MissingTranspiler()

    def scan(self, path: PathLike) -> ParsedFile:
        source = strip_hashbang(Path(path).read_bytes())

        if is_hack(source):
            logger.debug(f"Transpiling Hack file {path}")
            source = self.transpiler.transpile(source)

        try:
            return self.extractor.extract(source)
        except ParseError as e:
            raise e.with_path(str(path)) from e
