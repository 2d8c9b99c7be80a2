"""Per-agent adapters and the agent registry."""

from acsync.agents.base import AgentAdapter, AgentProfile
from acsync.agents.registry import AGENT_REGISTRY, get_adapter

__all__ = [
    "AGENT_REGISTRY",
    "AgentAdapter",
    "AgentProfile",
    "get_adapter",
]
