"""Aggregation of per-file declarations into one model."""

import logging
from typing import Callable, Dict, Iterable, Optional, Tuple

from .generator import php_lower
from .models import AggregatedModel, ClassConflict, ParsedFile
from .scanner import FileScanner

logger = logging.getLogger(__name__)


class DeclarationCollector:
    """Folds scanned files into an AggregatedModel in presentation order.

    With ``case_insensitive`` set, class names that differ only in ASCII
    case are treated as the same class.
    """

    def __init__(self, case_insensitive: bool = False):
        self.model = AggregatedModel()
        self.case_insensitive = case_insensitive
        # folded name -> (name as declared, path)
        self._owners: Dict[str, Tuple[str, str]] = {}

    def add(self, path: str, parsed: ParsedFile) -> None:
        for name in parsed.classes:
            key = php_lower(name) if self.case_insensitive else name
            owner = self._owners.get(key)
            if owner is not None:
                previous_name, previous = owner
                if previous != path:
                    # Last file wins, so the result depends on scan order.
                    logger.debug(f"Class {name} in {path} shadows {previous_name} in {previous}")
                    self.model.conflicts.append(ClassConflict(name, previous, path))
                del self.model.class_map[previous_name]
            self._owners[key] = (name, path)
            self.model.class_map[name] = path

        if parsed.loads_eagerly:
            self.model.eager_files.add(path)


def collect_declarations(
    paths: Iterable[str],
    scanner: FileScanner,
    on_scan: Optional[Callable[[str], None]] = None,
    case_insensitive: bool = False,
) -> AggregatedModel:
    """Scan every path in order and return the aggregated model."""
    collector = DeclarationCollector(case_insensitive)
    for path in paths:
        if on_scan is not None:
            on_scan(path)
        collector.add(path, scanner.scan(path))
    return collector.model
