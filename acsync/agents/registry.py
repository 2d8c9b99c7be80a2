"""Mapping from every :class:`AgentType` to its adapter."""

from types import MappingProxyType
from typing import Mapping, Union

from acsync.agents.base import AgentAdapter
from acsync.agents.chimera import ChimeraAdapter
from acsync.agents.claude import ClaudeAdapter
from acsync.agents.codex import CodexAdapter
from acsync.agents.copilot import CopilotAdapter
from acsync.agents.cursor import CursorAdapter
from acsync.agents.gemini import GeminiAdapter
from acsync.agents.opencode import OpenCodeAdapter
from acsync.ir import AgentType

AGENT_REGISTRY: Mapping[AgentType, AgentAdapter] = MappingProxyType({
    AgentType.CLAUDE: ClaudeAdapter(),
    AgentType.GEMINI: GeminiAdapter(),
    AgentType.CODEX: CodexAdapter(),
    AgentType.OPENCODE: OpenCodeAdapter(),
    AgentType.COPILOT: CopilotAdapter(),
    AgentType.CURSOR: CursorAdapter(),
    AgentType.CHIMERA: ChimeraAdapter(),
})

_missing = [agent.value for agent in AgentType if agent not in AGENT_REGISTRY]
if _missing:
    raise RuntimeError(f"No adapter registered for: {', '.join(_missing)}")


def get_adapter(agent: Union[AgentType, str]) -> AgentAdapter:
    """Look up an adapter by identity or by its string value.

    Raises:
        ValueError: If ``agent`` names no supported agent.
    """
    try:
        return AGENT_REGISTRY[AgentType(agent)]
    except ValueError as e:
        supported = ", ".join(a.value for a in AgentType)
        raise ValueError(f"Unknown agent '{agent}'. Supported agents: {supported}") from e
