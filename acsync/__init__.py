"""acsync: convert commands and skills between AI coding-assistant formats.

Every agent format is parsed into a shared semantic representation and
written back out in the destination agent's own spelling:

1. Body placeholders ($ARGUMENTS, !`cmd`, @file, $1) are tokenized into typed
   segments and re-rendered in the destination dialect.
2. Metadata is split into semantic fields and opaque extras.
3. The Chimera hub keeps every agent's extras side by side under ``_chimera``.
"""

from acsync.agents.registry import AGENT_REGISTRY, get_adapter
from acsync.config import SyncOptions
from acsync.errors import AcsyncError, ConversionError, ParseError, ValidationError
from acsync.ir import AgentType, ContentType, ConverterOptions, SemanticIR
from acsync.sync import Converter, FileOperation, SyncResult, sync, sync_commands, sync_skills

__version__ = "0.1.0"
__all__ = [
    "AGENT_REGISTRY",
    "get_adapter",
    "AgentType",
    "ContentType",
    "ConverterOptions",
    "SemanticIR",
    # Errors
    "AcsyncError",
    "ParseError",
    "ValidationError",
    "ConversionError",
    # Sync
    "Converter",
    "FileOperation",
    "SyncOptions",
    "SyncResult",
    "sync",
    "sync_commands",
    "sync_skills",
]
