"""Gemini CLI: TOML commands (``prompt`` holds the body), markdown skills."""

from pathlib import Path
from typing import List

from acsync.agents.base import AgentAdapter, AgentProfile
from acsync.body.syntax import GEMINI_DIALECT
from acsync.documents.models import Command
from acsync.documents.toml_document import dump_toml_command, load_toml_command
from acsync.documents.validation import validate_gemini_command
from acsync.errors import ParseError, ValidationError
from acsync.ir import AgentType

GEMINI_PROFILE = AgentProfile(
    agent=AgentType.GEMINI,
    display_name="Gemini CLI",
    file_extension=".toml",
    dialect=GEMINI_DIALECT,
    command_exclusions=frozenset({"allowed-tools", "argument-hint", "model"}),
    skill_exclusions=frozenset({
        "disable-model-invocation",
        "user-invocable",
        "allowed-tools",
        "argument-hint",
        "model",
        "context",
        "agent",
        "hooks",
    }),
    model_invocation_removable=True,
)


class GeminiAdapter(AgentAdapter):
    def __init__(self):
        super().__init__(GEMINI_PROFILE)

    def parse_command(self, path: Path) -> Command:
        path = Path(path)
        try:
            fields, prompt = load_toml_command(path)
        except ParseError as e:
            raise ParseError(f"Failed to parse {self.display_name} command file: {e.args[0]}", path, e) from e
        return Command(content=prompt, file_path=path, metadata=fields)

    def command_validation_errors(self, command: Command) -> List[ValidationError]:
        return validate_gemini_command(command)

    def stringify_command(self, command: Command) -> str:
        return dump_toml_command(command.metadata or {}, command.content, command.file_path)
