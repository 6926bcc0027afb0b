"""Errors raised while reading and parsing source files."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class CleanCodeError(Exception):
    """Base class for failures that abort a checking run."""

    def __init__(self, path: str | Path, message: str):
        self.path = str(path)
        self.message = message
        super().__init__(f"{self.path}: {message}")


class FileAccessError(CleanCodeError):
    """The source file could not be opened or read."""


class ParseError(CleanCodeError):
    """The source file is not valid for the parser."""

    def __init__(
        self,
        path: str | Path,
        line: int,
        column: int,
        detail: Optional[str] = None,
    ):
        self.line = line
        self.column = column
        message = f"syntax error at line {line}, column {column}"
        if detail:
            message = f"{message} near {detail!r}"
        super().__init__(path, message)
