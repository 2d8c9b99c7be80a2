"""Table-driven agent adapter.

Every supported agent is an :class:`AgentAdapter` configured by an immutable
:class:`AgentProfile`. The profile lists which metadata fields are semantic,
which are dropped under ``remove_unsupported``, which are escaped with the
``_claude_`` prefix and how the model-invocation toggle is spelled. Agents with
a genuinely different on-disk shape (Gemini TOML, Cursor plain markdown, Codex
``openai.yaml``, the Chimera hub) override the relevant hooks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Sequence, Tuple, Union

from acsync.body.segments import Segment
from acsync.body.tokenizer import BodyDialect
from acsync.documents.markdown import dump_markdown, load_markdown
from acsync.documents.models import Command, Skill
from acsync.documents.skill_files import (
    SKILL_FILE_NAME,
    collect_support_files,
    is_skill_directory,
    load_support_file_contents,
    write_skill_directory,
)
from acsync.documents.validation import validate_plain_command, validate_skill
from acsync.errors import ParseError, ValidationError
from acsync.ir import (
    PROVENANCE_KEY,
    AgentType,
    ContentType,
    ConverterOptions,
    SemanticIR,
    SemanticMeta,
    SemanticProperties,
    normalize_provenance,
)

logger = logging.getLogger(__name__)

Document = Union[Command, Skill]

CLAUDE_PREFIX = "_claude_"
DISABLE_MODEL_INVOCATION = "disable-model-invocation"
PROMPT_EXTENSION = ".prompt.md"


def escape_claude_key(key: str) -> str:
    """``allowed-tools`` -> ``_claude_allowed_tools``"""
    return CLAUDE_PREFIX + key.replace("-", "_")


def unescape_claude_key(key: str) -> str:
    """``_claude_allowed_tools`` -> ``allowed-tools``"""
    return key[len(CLAUDE_PREFIX):].replace("_", "-")


@dataclass(frozen=True)
class AgentProfile:
    """Immutable per-agent configuration tables.

    Attributes:
        agent: Agent identity.
        display_name: Human readable name used in messages.
        file_extension: Extension of command files.
        dialect: Body placeholder notation.
        semantic_command_fields: Command metadata keys mapped to semantic
            properties (native spelling).
        command_exclusions: Command extras dropped under ``remove_unsupported``.
        skill_exclusions: Skill extras dropped under ``remove_unsupported``.
        escaped_skill_fields: Skill extras stored under the ``_claude_``
            prefix; dropped under ``remove_unsupported``.
        model_invocation_key: Native key of the "disable model invocation"
            toggle in skill metadata.
        model_invocation_removable: Whether the toggle is dropped under
            ``remove_unsupported``.
        skill_field_renames: Skill extras spelled differently by this agent,
            as IR spelling -> native spelling.
        ignored_command_extras: Extras never written into command metadata.
    """

    agent: AgentType
    display_name: str
    file_extension: str
    dialect: BodyDialect
    semantic_command_fields: Tuple[str, ...] = ("description", PROVENANCE_KEY)
    command_exclusions: FrozenSet[str] = frozenset()
    skill_exclusions: FrozenSet[str] = frozenset()
    escaped_skill_fields: FrozenSet[str] = frozenset()
    model_invocation_key: str = DISABLE_MODEL_INVOCATION
    model_invocation_removable: bool = False
    skill_field_renames: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    ignored_command_extras: FrozenSet[str] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "skill_field_renames", MappingProxyType(dict(self.skill_field_renames)))

    @property
    def semantic_skill_fields(self) -> Tuple[str, ...]:
        return ("name", "description", self.model_invocation_key, PROVENANCE_KEY)


class AgentAdapter:
    """Parse, validate, stringify and convert one agent's documents."""

    def __init__(self, profile: AgentProfile):
        self.profile = profile

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.profile.agent.value!r})"

    @property
    def agent(self) -> AgentType:
        return self.profile.agent

    @property
    def display_name(self) -> str:
        return self.profile.display_name

    @property
    def file_extension(self) -> str:
        return self.profile.file_extension

    @property
    def dialect(self) -> BodyDialect:
        return self.profile.dialect

    # -- body ---------------------------------------------------------------

    def parse_body(self, body: str) -> List[Segment]:
        return self.profile.dialect.parse(body)

    def serialize_body(self, segments: Sequence[Segment]) -> str:
        return self.profile.dialect.serialize(segments)

    # -- content-type dispatch ---------------------------------------------

    def parse(self, location: Path, content_type: ContentType = ContentType.COMMAND) -> Document:
        if content_type is ContentType.SKILL:
            return self.parse_skill(location)
        return self.parse_command(location)

    def validation_errors(self, document: Document) -> List[ValidationError]:
        if isinstance(document, Skill):
            return self.skill_validation_errors(document)
        return self.command_validation_errors(document)

    def validate(self, document: Document) -> bool:
        return not self.validation_errors(document)

    def stringify(self, document: Document) -> str:
        if isinstance(document, Skill):
            return self.stringify_skill(document)
        return self.stringify_command(document)

    def to_ir(self, document: Document, options: Optional[ConverterOptions] = None) -> SemanticIR:
        if isinstance(document, Skill):
            return self.skill_to_ir(document, options)
        return self.command_to_ir(document, options)

    def from_ir(self, ir: SemanticIR, options: Optional[ConverterOptions] = None) -> Document:
        if ir.content_type is ContentType.SKILL:
            return self.skill_from_ir(ir, options)
        return self.command_from_ir(ir, options)

    # -- commands -----------------------------------------------------------

    def parse_command(self, path: Path) -> Command:
        """Read a markdown command file.

        Raises:
            ParseError: Wrapping the underlying read/YAML failure.
        """
        path = Path(path)
        try:
            metadata, content = load_markdown(path)
        except ParseError as e:
            raise ParseError(f"Failed to parse {self.display_name} command file: {e.args[0]}", path, e) from e
        return Command(content=content, file_path=path, metadata=metadata)

    def command_validation_errors(self, command: Command) -> List[ValidationError]:
        return validate_plain_command(command)

    def stringify_command(self, command: Command) -> str:
        return dump_markdown(command.content, command.metadata)

    def command_to_ir(self, command: Command, options: Optional[ConverterOptions] = None) -> SemanticIR:
        metadata = command.metadata or {}
        semantic, extras = self._split_metadata(metadata, self.profile.semantic_command_fields, options)
        return SemanticIR(
            content_type=ContentType.COMMAND,
            body=self.parse_body(command.content),
            semantic=semantic,
            extras=extras,
            meta=SemanticMeta(source_path=command.file_path, source_type=self.agent),
        )

    def command_from_ir(self, ir: SemanticIR, options: Optional[ConverterOptions] = None) -> Command:
        options = options or ConverterOptions()
        metadata: Dict[str, Any] = {}
        if ir.semantic.description is not None:
            metadata["description"] = ir.semantic.description
        self._extras_to_metadata(metadata, ir, options)
        self._append_provenance(metadata, ir)

        return Command(
            content=self.serialize_body(ir.body),
            file_path=self.target_path(ir.meta.source_path),
            metadata=metadata or None,
        )

    # -- skills -------------------------------------------------------------

    def parse_skill(self, dir_path: Path) -> Skill:
        """Read a skill directory (SKILL.md plus support files).

        Support files are loaded best effort: an unreadable file keeps no
        content instead of failing the whole skill.
        """
        dir_path = Path(dir_path)
        try:
            if not is_skill_directory(dir_path):
                raise ParseError(f"Not a valid skill directory: missing {SKILL_FILE_NAME}", dir_path)

            metadata, content = load_markdown(dir_path / SKILL_FILE_NAME)
            support_files = collect_support_files(dir_path, self.support_file_excludes())
            load_support_file_contents(dir_path, support_files)
        except (ParseError, OSError, UnicodeDecodeError) as e:
            message = e.args[0] if isinstance(e, ParseError) else str(e)
            raise ParseError(f"Failed to parse {self.display_name} skill: {message}", dir_path, e) from e

        metadata = metadata or {}
        name = metadata.get("name") or dir_path.name
        skill = Skill(
            name=str(name),
            content=content,
            dir_path=dir_path,
            metadata=metadata,
            support_files=support_files,
        )
        self.load_skill_sidecars(skill)
        return skill

    def support_file_excludes(self) -> List[str]:
        """Relative paths that are part of the agent format, not support files."""
        return []

    def load_skill_sidecars(self, skill: Skill) -> None:
        """Hook for agent-specific files next to SKILL.md."""

    def skill_sidecar_files(self, skill: Skill) -> Dict[str, str]:
        """Hook returning agent-specific files to write next to SKILL.md."""
        return {}

    def skill_validation_errors(self, skill: Skill) -> List[ValidationError]:
        return validate_skill(skill)

    def stringify_skill(self, skill: Skill) -> str:
        return dump_markdown(skill.content, skill.metadata)

    def write_skill_to_directory(self, skill: Skill, source_dir: Optional[Path], target_dir: Path) -> None:
        """Write SKILL.md, sidecar files and support files into ``target_dir``."""
        write_skill_directory(
            self.stringify_skill(skill),
            skill.support_files,
            source_dir if source_dir is not None else skill.dir_path,
            target_dir,
            self.skill_sidecar_files(skill),
        )

    def skill_to_ir(self, skill: Skill, options: Optional[ConverterOptions] = None) -> SemanticIR:
        semantic, extras = self._split_metadata(skill.metadata, self.profile.semantic_skill_fields, options)
        return SemanticIR(
            content_type=ContentType.SKILL,
            body=self.parse_body(skill.content),
            semantic=semantic,
            extras=extras,
            meta=SemanticMeta(
                source_path=skill.dir_path,
                source_type=self.agent,
                support_files=skill.support_files,
                skill_name=skill.name,
            ),
        )

    def skill_from_ir(self, ir: SemanticIR, options: Optional[ConverterOptions] = None) -> Skill:
        options = options or ConverterOptions()
        profile = self.profile
        metadata: Dict[str, Any] = {}

        if ir.semantic.name is not None:
            metadata["name"] = ir.semantic.name
        if ir.semantic.description is not None:
            metadata["description"] = ir.semantic.description
        enabled = ir.semantic.model_invocation_enabled
        if enabled is not None and not (options.remove_unsupported and profile.model_invocation_removable):
            metadata[profile.model_invocation_key] = not enabled

        self._extras_to_metadata(metadata, ir, options)
        self._append_provenance(metadata, ir)

        return Skill(
            name=ir.meta.skill_name or "unnamed-skill",
            content=self.serialize_body(ir.body),
            dir_path=ir.meta.source_path,
            metadata=metadata,
            support_files=list(ir.meta.support_files or []),
        )

    # -- helpers ------------------------------------------------------------

    def target_path(self, source_path: Optional[Path]) -> Optional[Path]:
        """Swap the source extension for this agent's command extension."""
        if source_path is None:
            return None
        source_path = Path(source_path)
        name = source_path.name
        # .prompt.md also ends with .md, so it is checked first.
        if name.endswith(PROMPT_EXTENSION):
            if self.file_extension == PROMPT_EXTENSION:
                return source_path
            stem = name[: -len(PROMPT_EXTENSION)]
        elif name.endswith(self.file_extension):
            return source_path
        else:
            stem = source_path.stem if source_path.suffix else name
        return source_path.with_name(stem + self.file_extension)

    def _read_semantic_field(self, semantic: SemanticProperties, key: str, value: Any) -> None:
        if key == "description":
            semantic.description = None if value is None else str(value)
        elif key == "name":
            semantic.name = None if value is None else str(value)
        elif key == PROVENANCE_KEY:
            semantic.provenance = normalize_provenance(value)
        elif key == self.profile.model_invocation_key:
            # Inverted polarity: the stored flag disables invocation.
            semantic.model_invocation_enabled = (not value) if isinstance(value, bool) else None

    def _split_metadata(
        self,
        metadata: Mapping[str, Any],
        semantic_fields: Sequence[str],
        options: Optional[ConverterOptions],
    ) -> Tuple[SemanticProperties, Dict[str, Any]]:
        semantic = SemanticProperties()
        extras: Dict[str, Any] = {}
        renames = {native: ir_key for ir_key, native in self.profile.skill_field_renames.items()}

        for key, value in metadata.items():
            if key in semantic_fields:
                self._read_semantic_field(semantic, key, value)
            elif self.profile.escaped_skill_fields and key.startswith(CLAUDE_PREFIX):
                extras[unescape_claude_key(key)] = value
            else:
                extras[renames.get(key, key)] = value

        return semantic, extras

    def _extras_to_metadata(self, metadata: Dict[str, Any], ir: SemanticIR, options: ConverterOptions) -> None:
        profile = self.profile
        is_skill = ir.content_type is ContentType.SKILL
        exclusions = profile.skill_exclusions if is_skill else profile.command_exclusions

        for key, value in ir.extras.items():
            if not is_skill and key in profile.ignored_command_extras:
                continue
            if options.remove_unsupported and key in exclusions:
                logger.debug("Dropping field '%s' unsupported by %s", key, profile.display_name)
                continue
            if is_skill and key in profile.escaped_skill_fields:
                if options.remove_unsupported:
                    logger.debug("Dropping field '%s' unsupported by %s", key, profile.display_name)
                    continue
                metadata[escape_claude_key(key)] = value
                continue
            native_key = profile.skill_field_renames.get(key, key) if is_skill else key
            if native_key not in metadata:
                metadata[native_key] = value

    @staticmethod
    def _append_provenance(metadata: Dict[str, Any], ir: SemanticIR) -> None:
        if ir.semantic.provenance:
            metadata[PROVENANCE_KEY] = ir.semantic.provenance
