"""Semantic intermediate representation shared by every agent adapter.

Only properties understood by two or more agents are *semantic*; everything
else travels through ``extras`` untouched so unknown future fields survive a
conversion.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from acsync.body.segments import Segment
from acsync.documents.models import SupportFile

# Reserved metadata key holding per-agent sections on a hub document.
HUB_KEY = "_chimera"

# Metadata key recording where a document was imported from.
PROVENANCE_KEY = "_from"


class AgentType(str, Enum):
    """Closed set of supported agent identities."""

    CLAUDE = "claude"
    GEMINI = "gemini"
    CODEX = "codex"
    OPENCODE = "opencode"
    COPILOT = "copilot"
    CURSOR = "cursor"
    CHIMERA = "chimera"


class ContentType(str, Enum):
    COMMAND = "command"
    SKILL = "skill"


@dataclass
class SemanticProperties:
    description: Optional[str] = None
    name: Optional[str] = None
    # Claude: not disable-model-invocation; Codex: allow_implicit_invocation
    model_invocation_enabled: Optional[bool] = None
    provenance: Optional[str] = None


@dataclass
class SemanticMeta:
    """Conversion context, not content."""

    source_path: Optional[Path] = None
    source_type: Optional[AgentType] = None
    target_type: Optional[AgentType] = None
    skill_name: Optional[str] = None
    support_files: Optional[List[SupportFile]] = None


@dataclass
class SemanticIR:
    content_type: ContentType
    body: List[Segment]
    semantic: SemanticProperties = field(default_factory=SemanticProperties)
    extras: Dict[str, Any] = field(default_factory=dict)
    meta: SemanticMeta = field(default_factory=SemanticMeta)

    def __post_init__(self) -> None:
        # The hub key must never leak into extras, whatever the input looked like.
        self.extras.pop(HUB_KEY, None)


@dataclass
class ConverterOptions:
    """Options threaded through ``to_ir`` / ``from_ir``.

    Attributes:
        destination_type: Agent whose hub section should be resolved when the
            source is a hub document.
        remove_unsupported: Drop destination-incompatible fields instead of
            carrying them over.
        existing_target: Previously parsed destination document whose hub
            sections must be preserved on merge.
    """

    destination_type: Optional[AgentType] = None
    remove_unsupported: bool = False
    existing_target: Any = None


def normalize_provenance(value: Any) -> Optional[str]:
    """Read a provenance value, accepting the legacy list form.

    A list yields its first element; an empty list is treated as absent.
    """
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        if not value:
            return None
        value = value[0]
        if value is None:
            return None
    return str(value)
