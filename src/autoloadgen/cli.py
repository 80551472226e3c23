"""Command-line interface for autoloadgen."""

import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich import print
from rich.console import Console
from rich.markup import escape

from . import __version__
from .analyzer import DeclarationExtractor
from .cache import ScanCache
from .collector import collect_declarations
from .config import GeneratorSettings
from .dialect import make_transpiler
from .discovery import resolve_inputs
from .errors import AutoloadError
from .generator import generate
from .models import GeneratorOptions, RequireMethod
from .paths import require_utf8
from .scanner import PhpFileScanner

app = typer.Typer(
    name="generate-autoload",
    help="A PHP class autoload generator with support for functions and constants.",
    rich_markup_mode="rich",
    add_completion=False,
)
console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)

logger = logging.getLogger(__name__)


def version_callback(value: bool):
    """Show version and exit."""
    if value:
        print(f"[cyan]generate-autoload[/cyan] version [green]{__version__}[/green]")
        raise typer.Exit()


def _invocation() -> str:
    return " ".join([Path(sys.argv[0]).name] + sys.argv[1:])


@app.command(
    help=(
        "Write an autoloader for FILES (default: the directory of OUTFILE) to OUTFILE.\n\n"
        "Classes are loaded on demand; files declaring functions or constants "
        "are loaded unconditionally."
    )
)
def main(
    outfile: Path = typer.Argument(..., help="The autoload file to write"),
    files: Optional[List[Path]] = typer.Argument(None, help="Files and directories to scan"),
    exclude: Optional[List[Path]] = typer.Option(
        None,
        "--exclude",
        help="Exclude a file/directory (repeatable)",
    ),
    require_method: Optional[RequireMethod] = typer.Option(
        None,
        "--require-method",
        help="Statement used to load files (default: require_once)",
    ),
    case_insensitive: bool = typer.Option(
        False,
        "--case-insensitive",
        help="Autoload classes case insensitively (one strtolower() per class load)",
    ),
    prepend: bool = typer.Option(
        False,
        "--prepend",
        help="Third parameter to spl_autoload_register()",
    ),
    no_cache: bool = typer.Option(
        False,
        "--no-cache",
        help="Scan every file and do not read or write the cache",
    ),
    cache_path: Optional[Path] = typer.Option(
        None,
        "--cache-path",
        help="Cache file location (default: a dotfile next to OUTFILE)",
    ),
    hack_compiler: Optional[str] = typer.Option(
        None,
        "--hack-compiler",
        help="Command translating Hack source on stdin to PHP on stdout",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Enable debug logging",
    ),
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
):
    """Generate the autoload file."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    settings = GeneratorSettings()
    options = GeneratorOptions(
        require_method=require_method or settings.require_method,
        prepend_autoload=prepend or settings.prepend_autoload,
        case_insensitive=case_insensitive or settings.case_insensitive,
        generated_by=settings.generated_by or _invocation(),
    )

    base = outfile.parent

    try:
        require_utf8(outfile)
        inputs = resolve_inputs(
            files or [base],
            [outfile] + (exclude or []),
            extensions=settings.extensions,
            follow_symlinks=settings.follow_symlinks,
        )
        scanner = PhpFileScanner(
            DeclarationExtractor(),
            make_transpiler(hack_compiler or settings.hack_compiler),
        )
        cache = None
        if settings.use_cache and not no_cache:
            cache = ScanCache(scanner, cache_path or settings.cache_path_for(outfile))
            scanner = cache

        model = collect_declarations(
            inputs,
            scanner,
            on_scan=lambda path: console.print(f"Scanning {escape(path)}"),
            case_insensitive=options.case_insensitive,
        )
        console.print()

        if cache is not None:
            cache.finish()
            console.print(f"[cyan]Cache:[/cyan] {cache.hits} unchanged, {cache.misses} scanned")

        for conflict in model.conflicts:
            logger.warning(f"Class {conflict.name} is declared in both {conflict.previous} and {conflict.current}")
            err_console.print(
                f"[yellow]Warning:[/yellow] class {escape(conflict.name)} in "
                f"{escape(conflict.current)} replaces {escape(conflict.previous)}"
            )

        content = generate(model, base, options)
        with open(outfile, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)
    except (AutoloadError, OSError) as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    console.print(f"Output written to {escape(str(outfile))}")


if __name__ == "__main__":
    app()
