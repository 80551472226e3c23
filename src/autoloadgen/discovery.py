"""Expansion of input paths into the list of files to scan."""

from pathlib import Path
from typing import Iterable, Iterator, List, Sequence, Union

from .paths import require_utf8

DEFAULT_EXTENSIONS = (".php", ".hh")


def iter_files(
    path: Union[str, Path],
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    follow_symlinks: bool = False,
) -> Iterator[Path]:
    """Yield source files under ``path``, depth first in name order.

    A path naming a file is yielded as is, whatever its extension.
    """
    path = Path(path)
    if not path.is_dir():
        yield path
        return

    pending = [path]
    while pending:
        current = pending.pop()
        if current.is_dir() and (current == path or follow_symlinks or not current.is_symlink()):
            pending.extend(sorted(current.iterdir(), reverse=True))
        elif current.suffix in extensions and current.is_file():
            yield current


def expand_paths(
    paths: Iterable[Union[str, Path]],
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    follow_symlinks: bool = False,
) -> List[str]:
    """Resolve and flatten ``paths``, dropping duplicates but keeping order."""
    seen = set()
    result = []
    for path in paths:
        for file_path in iter_files(path, extensions, follow_symlinks):
            resolved = str(file_path.resolve())
            if resolved not in seen:
                seen.add(resolved)
                result.append(resolved)
    return result


def resolve_inputs(
    files: Iterable[Union[str, Path]],
    excludes: Iterable[Union[str, Path]] = (),
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    follow_symlinks: bool = False,
) -> List[str]:
    """Files to scan: everything under ``files`` minus everything under ``excludes``.

    Raises PathError for a file to scan whose name is not valid UTF-8.
    """
    excluded = set(expand_paths(excludes, extensions, follow_symlinks))
    return [require_utf8(f) for f in expand_paths(files, extensions, follow_symlinks) if f not in excluded]
