"""Exception types raised while parsing, validating and converting documents."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

PathLike = Union[str, Path]


class AcsyncError(ValueError):
    """Base class for every error raised by the conversion engine."""


class ParseError(AcsyncError):
    """Raised when a file cannot be read or its metadata block is malformed."""

    def __init__(self, message: str, path: Optional[PathLike] = None, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None
        self.cause = cause

    def __str__(self) -> str:
        message = super().__str__()
        if self.path is not None:
            return f"{message} ({self.path})"
        return message


class ValidationError(AcsyncError):
    """A parseable document that is semantically invalid.

    ``field`` names the offending field using dotted notation
    (e.g. ``frontmatter.description``).
    """

    def __init__(self, message: str, field: str, value: Any = None):
        super().__init__(message)
        self.field = field
        self.value = value


class ConversionError(AcsyncError):
    """Raised when a document cannot be translated into the target dialect."""

    def __init__(
        self,
        message: str,
        source_path: Optional[PathLike] = None,
        target_path: Optional[PathLike] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.source_path = Path(source_path) if source_path is not None else None
        self.target_path = Path(target_path) if target_path is not None else None
        self.cause = cause

    def __str__(self) -> str:
        message = super().__str__()
        if self.source_path is not None:
            return f"{message} ({self.source_path})"
        return message
