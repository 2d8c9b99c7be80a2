"""Typed segments of a tokenized command/skill body.

Literal text is represented by plain ``str``; every placeholder is a small
frozen dataclass carrying a ``type`` tag used to look up its serializer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, FrozenSet, Union


@dataclass(frozen=True)
class Arguments:
    """All arguments at once ($ARGUMENTS / {{args}})."""

    type: ClassVar[str] = "arguments"


@dataclass(frozen=True)
class IndividualArgument:
    """A single positional argument ($1 - $9)."""

    index: int
    type: ClassVar[str] = "individual-argument"

    def __post_init__(self) -> None:
        if not isinstance(self.index, int) or not 1 <= self.index <= 9:
            raise ValueError(f"Argument index must be between 1 and 9, got {self.index!r}")


@dataclass(frozen=True)
class ShellCommand:
    command: str
    type: ClassVar[str] = "shell-command"


@dataclass(frozen=True)
class FileReference:
    path: str
    type: ClassVar[str] = "file-reference"


Placeholder = Union[Arguments, IndividualArgument, ShellCommand, FileReference]
Segment = Union[str, Placeholder]

PLACEHOLDER_TYPES: FrozenSet[str] = frozenset(
    cls.type for cls in (Arguments, IndividualArgument, ShellCommand, FileReference)
)
