"""Shared body parsing and serialization engine.

Agent-specific pattern tables live in :mod:`acsync.body.syntax`. A
:class:`BodyDialect` bundles one pattern table with its serializers and is
validated once, at construction, so malformed tables fail at import time.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, List, Mapping, Optional, Pattern, Sequence, Tuple

from acsync.body.segments import PLACEHOLDER_TYPES, Placeholder, Segment

logger = logging.getLogger(__name__)

Handler = Callable[["re.Match[str]"], Placeholder]
Serializer = Callable[[Placeholder], str]


@dataclass(frozen=True)
class PatternDef:
    """One placeholder pattern: a regex and the handler building its segment."""

    regex: Pattern[str]
    handler: Handler

    def __post_init__(self) -> None:
        if isinstance(self.regex, str):
            try:
                object.__setattr__(self, "regex", re.compile(self.regex))
            except re.error as e:
                raise ValueError(f"Invalid pattern /{self.regex}/: {e}") from e
        if not isinstance(self.regex, re.Pattern):
            raise TypeError(f"Pattern regex must be a string or compiled pattern, got {self.regex!r}")
        if not callable(self.handler):
            raise TypeError(f"Handler for /{self.regex.pattern}/ is not callable")
        if self.regex.fullmatch("") is not None:
            raise ValueError(f"Pattern /{self.regex.pattern}/ matches the empty string")


def _find_all_matches(body: str, patterns: Sequence[PatternDef]) -> List[Tuple[int, int, int, Placeholder]]:
    matches = []
    for order, pattern in enumerate(patterns):
        for match in pattern.regex.finditer(body):
            matches.append((match.start(), order, match.end(), pattern.handler(match)))
    # Earliest start wins; ties go to the pattern declared first.
    matches.sort(key=lambda m: (m[0], m[1]))
    return matches


def _remove_overlaps(matches: List[Tuple[int, int, int, Placeholder]]) -> List[Tuple[int, int, Placeholder]]:
    resolved = []
    last_end = -1
    for start, _order, end, placeholder in matches:
        if start >= last_end:
            resolved.append((start, end, placeholder))
            last_end = end
    return resolved


def parse_body(body: str, patterns: Sequence[PatternDef]) -> List[Segment]:
    """Split ``body`` into literal text and placeholder segments."""
    if not body:
        return []

    segments: List[Segment] = []
    last_index = 0
    for start, end, placeholder in _remove_overlaps(_find_all_matches(body, patterns)):
        if start > last_index:
            segments.append(body[last_index:start])
        segments.append(placeholder)
        last_index = end

    if last_index < len(body):
        segments.append(body[last_index:])

    return segments


def serialize_body(
    segments: Sequence[Segment],
    serializers: Mapping[str, Serializer],
    unsupported: Optional[FrozenSet[str]] = None,
) -> str:
    """Render segments back to text.

    Placeholder types listed in ``unsupported`` are still rendered with the
    dialect's best-effort serializer rather than dropped.
    """
    parts = []
    for segment in segments:
        if isinstance(segment, str):
            parts.append(segment)
            continue
        if unsupported and segment.type in unsupported:
            logger.debug(
                "Placeholder '%s' is not natively supported by target format (serialized as best-effort)",
                segment.type,
            )
        parts.append(serializers[segment.type](segment))
    return "".join(parts)


@dataclass(frozen=True)
class BodyDialect:
    """Placeholder notation of one agent.

    Attributes:
        name: Agent the dialect belongs to (for logging).
        syntax: Notation family; dialects sharing a syntax render identically.
        patterns: Ordered pattern table. Order is load-bearing.
        serializers: One serializer per placeholder type.
        unsupported: Placeholder types the agent does not natively understand.
    """

    name: str
    syntax: str
    patterns: Tuple[PatternDef, ...]
    serializers: Mapping[str, Serializer]
    unsupported: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        patterns = tuple(self.patterns)
        if not patterns:
            raise ValueError(f"Dialect '{self.name}' has an empty pattern table")
        for pattern in patterns:
            if not isinstance(pattern, PatternDef):
                raise TypeError(f"Dialect '{self.name}' pattern table contains {pattern!r}")
        object.__setattr__(self, "patterns", patterns)

        missing = PLACEHOLDER_TYPES - set(self.serializers)
        if missing:
            raise ValueError(f"Dialect '{self.name}' has no serializer for: {sorted(missing)}")
        unknown = (set(self.serializers) | set(self.unsupported)) - PLACEHOLDER_TYPES
        if unknown:
            raise ValueError(f"Dialect '{self.name}' references unknown placeholder types: {sorted(unknown)}")
        object.__setattr__(self, "unsupported", frozenset(self.unsupported))

    def parse(self, body: str) -> List[Segment]:
        return parse_body(body, self.patterns)

    def serialize(self, segments: Sequence[Segment]) -> str:
        return serialize_body(segments, self.serializers, self.unsupported)

    def unsupported_in(self, segments: Sequence[Segment]) -> List[str]:
        """Placeholder types in ``segments`` this dialect cannot express natively."""
        found: Dict[str, None] = {}
        for segment in segments:
            if not isinstance(segment, str) and segment.type in self.unsupported:
                found[segment.type] = None
        return list(found)

