"""GitHub Copilot: ``.prompt.md`` prompt files and markdown skills.

Copilot bodies have no placeholder syntax; placeholders pass through as text.
"""

from types import MappingProxyType

from acsync.agents.base import AgentAdapter, AgentProfile
from acsync.body.syntax import COPILOT_DIALECT
from acsync.ir import AgentType

COPILOT_PROFILE = AgentProfile(
    agent=AgentType.COPILOT,
    display_name="GitHub Copilot",
    file_extension=".prompt.md",
    dialect=COPILOT_DIALECT,
    command_exclusions=frozenset({"allowed-tools"}),
    skill_exclusions=frozenset({"context", "hooks", "allowed-tools", "user-invocable"}),
    skill_field_renames=MappingProxyType({"user-invocable": "user-invokable"}),
    ignored_command_extras=frozenset({"prompt"}),
)


class CopilotAdapter(AgentAdapter):
    def __init__(self):
        super().__init__(COPILOT_PROFILE)
