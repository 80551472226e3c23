"""Incremental scan cache keyed on file size and modification time."""

import json
import logging
import os
from pathlib import Path
from typing import Dict, List

from pydantic import BaseModel, Field, ValidationError

from .models import ParsedFile
from .scanner import FileScanner, PathLike

logger = logging.getLogger(__name__)

CACHE_FORMAT_VERSION = 1


class CacheEntry(BaseModel):
    """Fingerprint and declarations of one scanned file."""

    path: str
    size: int
    modified: float
    classes: List[str] = Field(default_factory=list)
    functions: List[str] = Field(default_factory=list)
    constants: List[str] = Field(default_factory=list)

    @classmethod
    def from_parsed(cls, path: str, stat: os.stat_result, parsed: ParsedFile) -> "CacheEntry":
        return cls(
            path=path,
            size=stat.st_size,
            modified=stat.st_mtime,
            classes=list(parsed.classes),
            functions=list(parsed.functions),
            constants=list(parsed.constants),
        )

    def is_valid_for(self, stat: os.stat_result) -> bool:
        # A newer-or-equal stored time is accepted to tolerate coarse
        # timestamp resolution on some filesystems.
        return self.size == stat.st_size and self.modified >= stat.st_mtime

    def to_parsed(self) -> ParsedFile:
        return ParsedFile(
            classes=tuple(self.classes),
            functions=tuple(self.functions),
            constants=tuple(self.constants),
        )


class CacheDocument(BaseModel):
    """On-disk layout of the cache file."""

    version: int = CACHE_FORMAT_VERSION
    files: List[CacheEntry] = Field(default_factory=list)


class ScanCache:
    """Wraps a scanner and skips files that have not changed since last run."""

    def __init__(self, scanner: FileScanner, cache_path: PathLike):
        self.scanner = scanner
        self.cache_path = Path(cache_path)
        self.entries: Dict[str, CacheEntry] = self._load()
        self.hits = 0
        self.misses = 0
        self._finished = False

    def _load(self) -> Dict[str, CacheEntry]:
        """Load a previous cache; anything unusable means starting cold."""
        if not self.cache_path.exists():
            logger.debug(f"No cache at {self.cache_path}")
            return {}

        try:
            document = CacheDocument.model_validate_json(self.cache_path.read_bytes())
        except (OSError, ValueError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable cache {self.cache_path}: {e}")
            return {}

        if document.version != CACHE_FORMAT_VERSION:
            logger.info(f"Ignoring cache {self.cache_path} with format version {document.version}")
            return {}

        logger.debug(f"Loaded {len(document.files)} cache entries from {self.cache_path}")
        return {entry.path: entry for entry in document.files}

    def scan(self, path: PathLike) -> ParsedFile:
        key = str(path)
        stat = os.stat(key)

        cached = self.entries.get(key)
        if cached is not None and cached.is_valid_for(stat):
            logger.debug(f"Cache hit: {key}")
            self.hits += 1
            return cached.to_parsed()

        logger.debug(f"Cache miss: {key}")
        self.misses += 1
        parsed = self.scanner.scan(path)
        self.entries[key] = CacheEntry.from_parsed(key, stat, parsed)
        return parsed

    def prune(self) -> int:
        """Forget entries for files that no longer exist."""
        stale = [key for key in self.entries if not os.path.exists(key)]
        for key in stale:
            del self.entries[key]
        if stale:
            logger.debug(f"Pruned {len(stale)} cache entries for deleted files")
        return len(stale)

    def finish(self) -> None:
        """Write the cache table to disk. Only the first call has an effect."""
        if self._finished:
            return
        self._finished = True

        self.prune()
        document = CacheDocument(files=[self.entries[key] for key in sorted(self.entries)])
        with open(self.cache_path, "w", encoding="utf-8") as f:
            json.dump(document.model_dump(), f, indent=2)
            f.write("\n")
        logger.debug(f"Wrote {len(document.files)} cache entries to {self.cache_path}")
