"""Body placeholder tokenizer and per-agent dialects."""

from acsync.body.segments import Arguments, FileReference, IndividualArgument, Segment, ShellCommand
from acsync.body.tokenizer import BodyDialect, PatternDef, parse_body, serialize_body

__all__ = [
    "Arguments",
    "IndividualArgument",
    "ShellCommand",
    "FileReference",
    "Segment",
    "BodyDialect",
    "PatternDef",
    "parse_body",
    "serialize_body",
]
