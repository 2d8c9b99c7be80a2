"""OpenAI Codex: markdown prompts and skills with an ``agents/openai.yaml`` sidecar.

The sidecar's ``policy.allow_implicit_invocation`` is the native model
invocation toggle and wins over the ``_claude_disable_model_invocation``
frontmatter key. ``interface`` and ``dependencies`` travel as extras.
"""

import copy
import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional

import yaml

from acsync.agents.base import CLAUDE_PREFIX, AgentAdapter, AgentProfile
from acsync.body.syntax import CODEX_DIALECT
from acsync.documents.models import Skill
from acsync.ir import AgentType, ConverterOptions, SemanticIR

logger = logging.getLogger(__name__)

OPENAI_CONFIG_PATH = "agents/openai.yaml"
OPENAI_CONFIG_KEYS = ("interface", "policy", "dependencies")
IMPLICIT_INVOCATION_KEY = "allow_implicit_invocation"

CODEX_PROFILE = AgentProfile(
    agent=AgentType.CODEX,
    display_name="Codex CLI",
    file_extension=".md",
    dialect=CODEX_DIALECT,
    command_exclusions=frozenset({"allowed-tools", "argument-hint", "model"}),
    escaped_skill_fields=frozenset({
        "user-invocable",
        "allowed-tools",
        "argument-hint",
        "model",
        "context",
        "agent",
        "hooks",
    }),
    model_invocation_key=CLAUDE_PREFIX + "disable_model_invocation",
    model_invocation_removable=True,
)


class CodexAdapter(AgentAdapter):
    def __init__(self):
        super().__init__(CODEX_PROFILE)

    def support_file_excludes(self) -> List[str]:
        return [OPENAI_CONFIG_PATH]

    def load_skill_sidecars(self, skill: Skill) -> None:
        skill.openai_config = self._read_openai_config(skill)

    def _read_openai_config(self, skill: Skill) -> Optional[Dict[str, Any]]:
        if skill.dir_path is None:
            return None
        config_path = skill.dir_path / OPENAI_CONFIG_PATH
        if not config_path.is_file():
            return None

        try:
            data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            logger.warning("Ignoring unreadable %s: %s", config_path, e)
            return None

        if data is None:
            return None
        if not isinstance(data, dict):
            logger.warning("Ignoring %s: expected a mapping, got %s", config_path, type(data).__name__)
            return None
        return data

    def skill_sidecar_files(self, skill: Skill) -> Dict[str, str]:
        if not skill.openai_config:
            return {}
        text = yaml.safe_dump(skill.openai_config, sort_keys=False, default_flow_style=False, allow_unicode=True)
        return {OPENAI_CONFIG_PATH: text}

    def skill_to_ir(self, skill: Skill, options: Optional[ConverterOptions] = None) -> SemanticIR:
        ir = super().skill_to_ir(skill, options)
        config = copy.deepcopy(skill.openai_config) or {}

        policy = config.pop("policy", None)
        if isinstance(policy, dict):
            allow = policy.pop(IMPLICIT_INVOCATION_KEY, None)
            if isinstance(allow, bool):
                ir.semantic.model_invocation_enabled = allow
            if policy:
                config["policy"] = policy
        elif policy is not None:
            config["policy"] = policy

        for key, value in config.items():
            ir.extras[key] = value
        return ir

    def skill_from_ir(self, ir: SemanticIR, options: Optional[ConverterOptions] = None) -> Skill:
        sidecar = {key: ir.extras[key] for key in OPENAI_CONFIG_KEYS if key in ir.extras}
        frontmatter_extras = {key: value for key, value in ir.extras.items() if key not in OPENAI_CONFIG_KEYS}
        skill = super().skill_from_ir(replace(ir, extras=frontmatter_extras), options)

        config: Dict[str, Any] = copy.deepcopy(sidecar)
        enabled = ir.semantic.model_invocation_enabled
        if enabled is not None:
            policy = config.get("policy")
            if not isinstance(policy, dict):
                policy = {}
            policy[IMPLICIT_INVOCATION_KEY] = enabled
            config["policy"] = policy

        skill.openai_config = config or None
        return skill
