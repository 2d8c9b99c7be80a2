"""On-disk document formats: markdown frontmatter, TOML and skill directories."""

from acsync.documents.models import Command, Skill, SupportFile
from acsync.documents.validation import format_validation_errors

__all__ = [
    "Command",
    "Skill",
    "SupportFile",
    "format_validation_errors",
]
