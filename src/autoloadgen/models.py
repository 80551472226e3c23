"""Data models for autoloadgen."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Set, Tuple


class RequireMethod(str, Enum):
    """PHP statement used to pull a file in."""

    INCLUDE = "include"
    INCLUDE_ONCE = "include_once"
    REQUIRE = "require"
    REQUIRE_ONCE = "require_once"


@dataclass(frozen=True)
class ParsedFile:
    """Declarations found in a single source file."""

    classes: Tuple[str, ...] = ()
    functions: Tuple[str, ...] = ()
    constants: Tuple[str, ...] = ()

    @property
    def loads_eagerly(self) -> bool:
        # Only classes can be found through the autoloader.
        return bool(self.functions or self.constants)


@dataclass(frozen=True)
class ClassConflict:
    """A class name declared by more than one file."""

    name: str
    previous: str
    current: str


@dataclass
class AggregatedModel:
    """Everything collected from one run, ready for generation."""

    class_map: Dict[str, str] = field(default_factory=dict)
    eager_files: Set[str] = field(default_factory=set)
    conflicts: List[ClassConflict] = field(default_factory=list)


@dataclass
class GeneratorOptions:
    """Options controlling the generated autoload file."""

    require_method: RequireMethod = RequireMethod.REQUIRE_ONCE
    prepend_autoload: bool = False
    case_insensitive: bool = False
    generated_by: str = ""
