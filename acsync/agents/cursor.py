"""Cursor: plain markdown commands without metadata, markdown skills."""

from pathlib import Path
from typing import Optional

from acsync.agents.base import AgentAdapter, AgentProfile
from acsync.body.syntax import CURSOR_DIALECT
from acsync.documents.markdown import read_text
from acsync.documents.models import Command
from acsync.errors import ParseError
from acsync.ir import AgentType, ContentType, ConverterOptions, SemanticIR, SemanticMeta

CURSOR_PROFILE = AgentProfile(
    agent=AgentType.CURSOR,
    display_name="Cursor",
    file_extension=".md",
    dialect=CURSOR_DIALECT,
    semantic_command_fields=(),
    skill_exclusions=frozenset({"context", "hooks", "model", "agent", "argument-hint"}),
)


class CursorAdapter(AgentAdapter):
    def __init__(self):
        super().__init__(CURSOR_PROFILE)

    def parse_command(self, path: Path) -> Command:
        path = Path(path)
        try:
            content = read_text(path)
        except (OSError, UnicodeDecodeError) as e:
            raise ParseError(f"Failed to parse {self.display_name} command file: {e}", path, e) from e
        return Command(content=content.strip(), file_path=path)

    def stringify_command(self, command: Command) -> str:
        return command.content

    def command_to_ir(self, command: Command, options: Optional[ConverterOptions] = None) -> SemanticIR:
        return SemanticIR(
            content_type=ContentType.COMMAND,
            body=self.parse_body(command.content),
            meta=SemanticMeta(source_path=command.file_path, source_type=self.agent),
        )

    def command_from_ir(self, ir: SemanticIR, options: Optional[ConverterOptions] = None) -> Command:
        # Cursor commands carry no metadata: description and extras are dropped.
        return Command(content=self.serialize_body(ir.body), file_path=self.target_path(ir.meta.source_path))
