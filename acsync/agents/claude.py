"""Claude Code: markdown commands and skills, the reference dialect."""

from typing import List

from acsync.agents.base import AgentAdapter, AgentProfile
from acsync.body.syntax import CLAUDE_DIALECT
from acsync.documents.models import Command
from acsync.documents.validation import validate_claude_command
from acsync.errors import ValidationError
from acsync.ir import AgentType

CLAUDE_PROFILE = AgentProfile(
    agent=AgentType.CLAUDE,
    display_name="Claude Code",
    file_extension=".md",
    dialect=CLAUDE_DIALECT,
    ignored_command_extras=frozenset({"prompt"}),
)


class ClaudeAdapter(AgentAdapter):
    def __init__(self):
        super().__init__(CLAUDE_PROFILE)

    def command_validation_errors(self, command: Command) -> List[ValidationError]:
        return validate_claude_command(command)
