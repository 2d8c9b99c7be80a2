"""Chimera hub: one markdown document carrying every agent's extras.

Semantic fields live at the top level. Each agent's non-semantic fields are
kept in its own section under ``_chimera``::

    ---
    description: Review a pull request
    _chimera:
      claude:
        allowed-tools: Bash(git:*)
      gemini:
        sandbox: true
    ---

Importing from agent X replaces ``_chimera[X]`` wholesale and leaves the other
sections alone. Applying to agent Y hands ``_chimera[Y]`` back as extras.
"""

import copy
import logging
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from acsync.agents.base import AgentAdapter, AgentProfile
from acsync.body.syntax import CHIMERA_DIALECT
from acsync.documents.markdown import clean_metadata
from acsync.ir import HUB_KEY, AgentType, ConverterOptions, SemanticIR, SemanticProperties

logger = logging.getLogger(__name__)

CHIMERA_PROFILE = AgentProfile(
    agent=AgentType.CHIMERA,
    display_name="Chimera",
    file_extension=".md",
    dialect=CHIMERA_DIALECT,
)


def hub_sections(metadata: Optional[Mapping[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """Return a deep copy of the per-agent sections of a hub document."""
    if not metadata:
        return {}
    sections = metadata.get(HUB_KEY)
    if not isinstance(sections, dict):
        return {}
    return {str(agent): copy.deepcopy(section) for agent, section in sections.items() if isinstance(section, dict)}


class ChimeraAdapter(AgentAdapter):
    def __init__(self):
        super().__init__(CHIMERA_PROFILE)

    def _split_metadata(
        self,
        metadata: Mapping[str, Any],
        semantic_fields: Sequence[str],
        options: Optional[ConverterOptions],
    ) -> Tuple[SemanticProperties, Dict[str, Any]]:
        semantic, top_level_extras = super()._split_metadata(metadata, semantic_fields, options)
        top_level_extras.pop(HUB_KEY, None)

        destination = options.destination_type if options else None
        if destination is None or destination is AgentType.CHIMERA:
            return semantic, top_level_extras

        section = hub_sections(metadata).get(destination.value, {})
        logger.debug("Applying hub section %r (%d field(s))", destination.value, len(section))
        return semantic, section

    def _extras_to_metadata(self, metadata: Dict[str, Any], ir: SemanticIR, options: ConverterOptions) -> None:
        existing = getattr(options.existing_target, "metadata", None)
        sections = hub_sections(existing)
        source = ir.meta.source_type

        if source is None or source is AgentType.CHIMERA:
            # Hub to hub: top-level extras stay top-level.
            for key, value in ir.extras.items():
                if key not in metadata:
                    metadata[key] = value
        else:
            extras = clean_metadata(ir.extras)
            if extras:
                sections[source.value] = copy.deepcopy(extras)
            else:
                sections.pop(source.value, None)

        if sections:
            metadata[HUB_KEY] = sections
