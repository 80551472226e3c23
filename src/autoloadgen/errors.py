"""Exceptions raised by autoloadgen."""

from typing import Optional


class AutoloadError(Exception):
    """Base class for every failure that aborts a run."""


class ParseError(AutoloadError):
    """Source text the extractor could not parse."""

    def __init__(self, message: str, path: Optional[str] = None, line: int = 0, column: int = 0):
        self.message = message
        self.path = path
        self.line = line
        self.column = column
        super().__init__(str(self))

    def with_path(self, path: str) -> "ParseError":
        return ParseError(self.message, path, self.line, self.column)

    def __str__(self) -> str:
        location = f"line {self.line}, column {self.column}"
        if self.path:
            return f"Parse error in {self.path} ({location}): {self.message}"
        return f"Parse error ({location}): {self.message}"


class CompileError(AutoloadError):
    """The dialect compiler failed; ``stderr`` holds its diagnostics."""

    def __init__(self, message: str, stderr: str = ""):
        self.stderr = stderr
        if stderr.strip():
            message = f"{message}\n{stderr.rstrip()}"
        super().__init__(message)


class PathError(AutoloadError):
    """A path that does not exist or cannot be written into the output."""

    def __init__(self, path: str, reason: str = "No such file or directory"):
        self.path = path
        super().__init__(f"{reason}: {path}")
