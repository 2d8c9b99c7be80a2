"""In-memory documents: commands, skills and their support files."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class SupportFile:
    """A file shipped alongside SKILL.md.

    ``content`` is only populated for text and config files; binary files are
    copied byte for byte from the source directory instead.
    """

    relative_path: str
    type: str  # "text" | "binary" | "config"
    content: Optional[str] = None


@dataclass
class Command:
    """A single command / prompt file.

    ``metadata`` is ``None`` when the file has no metadata block at all,
    which is not the same thing as an empty block.
    """

    content: str
    file_path: Optional[Path] = None
    metadata: Optional[Dict[str, Any]] = None

    @property
    def description(self) -> Optional[str]:
        if not self.metadata:
            return None
        return self.metadata.get("description")


@dataclass
class Skill:
    """A skill directory: SKILL.md plus its support files."""

    name: str
    content: str
    dir_path: Optional[Path] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    support_files: List[SupportFile] = field(default_factory=list)
    # Codex only: agents/openai.yaml
    openai_config: Optional[Dict[str, Any]] = None

    @property
    def description(self) -> Optional[str]:
        return self.metadata.get("description")
