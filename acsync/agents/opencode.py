"""OpenCode: markdown commands and skills.

Claude-only skill fields are kept under ``_claude_``-prefixed keys.
"""

from acsync.agents.base import CLAUDE_PREFIX, AgentAdapter, AgentProfile
from acsync.body.syntax import OPENCODE_DIALECT
from acsync.ir import AgentType

OPENCODE_PROFILE = AgentProfile(
    agent=AgentType.OPENCODE,
    display_name="OpenCode",
    file_extension=".md",
    dialect=OPENCODE_DIALECT,
    command_exclusions=frozenset({"allowed-tools", "argument-hint"}),
    escaped_skill_fields=frozenset({"user-invocable", "allowed-tools", "argument-hint", "context", "hooks"}),
    model_invocation_key=CLAUDE_PREFIX + "disable_model_invocation",
    model_invocation_removable=True,
)


class OpenCodeAdapter(AgentAdapter):
    def __init__(self):
        super().__init__(OPENCODE_PROFILE)
