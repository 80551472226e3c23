"""
autoloadgen - A PHP class autoload generator.

Writes an autoload file that loads classes on demand and always includes
files declaring functions or constants.
"""

__version__ = "0.1.0"

from .cache import ScanCache
from .collector import DeclarationCollector, collect_declarations
from .generator import generate
from .models import AggregatedModel, GeneratorOptions, ParsedFile, RequireMethod
from .scanner import PhpFileScanner

__all__ = [
    "AggregatedModel",
    "DeclarationCollector",
    "GeneratorOptions",
    "ParsedFile",
    "PhpFileScanner",
    "RequireMethod",
    "ScanCache",
    "collect_declarations",
    "generate",
    "__version__",
]
