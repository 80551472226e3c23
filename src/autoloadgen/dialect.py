"""Translation of Hack source to PHP before extraction."""

import logging
import shlex
import subprocess
from typing import List, Optional, Protocol

from .errors import CompileError

logger = logging.getLogger(__name__)

HACK_MARKER = b"<?hh"


class Transpiler(Protocol):
    def transpile(self, source: bytes) -> bytes:
        ...


def is_hack(source: bytes) -> bool:
    return source.startswith(HACK_MARKER)


class SubprocessTranspiler:
    """Runs an external compiler: Hack source on stdin, PHP on stdout."""

    def __init__(self, command: str):
        try:
            self.command: List[str] = shlex.split(command)
        except ValueError as e:
            raise CompileError(f"Invalid compiler command {command!r}: {e}") from e
        if not self.command:
            raise CompileError("Empty compiler command")

    def transpile(self, source: bytes) -> bytes:
        logger.debug(f"Running {self.command[0]} on {len(source)} bytes of Hack source")
        try:
            result = subprocess.run(
                self.command,
                input=source,
                capture_output=True,
                check=False,
            )
        except OSError as e:
            raise CompileError(f"Could not run {self.command[0]}: {e}") from e

        if result.returncode != 0:
            raise CompileError(
                f"{self.command[0]} exited with status {result.returncode}",
                result.stderr.decode("utf-8", errors="replace"),
            )
        return result.stdout


class MissingTranspiler:
    """Stand-in used when no Hack compiler is configured."""

    def transpile(self, source: bytes) -> bytes:
        raise CompileError("Found Hack source but no compiler is configured (use --hack-compiler)")


def make_transpiler(command: Optional[str]) -> Transpiler:
    if command:
        return SubprocessTranspiler(command)
    return MissingTranspiler()
