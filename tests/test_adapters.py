from __future__ import annotations

import tomllib
from pathlib import Path

import pytest

from acsync.agents.registry import AGENT_REGISTRY, get_adapter
from acsync.body.segments import Arguments, ShellCommand
from acsync.documents.markdown import split_markdown
from acsync.documents.models import Command
from acsync.errors import ParseError
from acsync.ir import AgentType, ContentType, ConverterOptions

claude = AGENT_REGISTRY[AgentType.CLAUDE]
gemini = AGENT_REGISTRY[AgentType.GEMINI]
codex = AGENT_REGISTRY[AgentType.CODEX]
opencode = AGENT_REGISTRY[AgentType.OPENCODE]
copilot = AGENT_REGISTRY[AgentType.COPILOT]
cursor = AGENT_REGISTRY[AgentType.CURSOR]


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def _write_skill(skill_dir: Path, *, frontmatter: str, body: str) -> Path:
    _write(skill_dir / "SKILL.md", frontmatter + "\n\n" + body + "\n")
    return skill_dir


CLAUDE_SKILL_FRONTMATTER = (
    "---\n"
    "name: review\n"
    "description: Review things\n"
    "disable-model-invocation: true\n"
    "allowed-tools: Bash\n"
    "context: fork\n"
    "license: MIT\n"
    "---"
)


def test_registry_covers_every_agent() -> None:
    assert set(AGENT_REGISTRY) == set(AgentType)
    for agent, adapter in AGENT_REGISTRY.items():
        assert adapter.agent is agent


def test_get_adapter_accepts_strings() -> None:
    assert get_adapter("gemini") is gemini

    with pytest.raises(ValueError, match="Unknown agent"):
        get_adapter("emacs")


def test_claude_parse_command(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "review.md",
        "---\ndescription: Review code\nallowed-tools: Bash\n---\n\nReview $ARGUMENTS\n",
    )

    command = claude.parse(path, ContentType.COMMAND)

    assert command.file_path == path
    assert command.metadata == {"description": "Review code", "allowed-tools": "Bash"}
    assert command.content == "Review $ARGUMENTS"
    assert claude.validate(command)


def test_claude_parse_failure_is_wrapped(tmp_path: Path) -> None:
    path = _write(tmp_path / "bad.md", "---\ndescription: [unclosed\n---\n\nBody\n")

    with pytest.raises(ParseError, match="Claude Code command file") as exc_info:
        claude.parse_command(path)

    assert exc_info.value.path == path


def test_command_without_frontmatter_has_no_metadata(tmp_path: Path) -> None:
    command = claude.parse_command(_write(tmp_path / "plain.md", "Just do it\n"))

    assert command.metadata is None
    assert claude.stringify(command) == "Just do it\n"


def test_claude_command_to_ir_splits_semantic_and_extras() -> None:
    command = Command(
        "Run !`ls` on $ARGUMENTS",
        Path("ls.md"),
        {"description": "List", "model": "haiku", "_from": "owner/repo"},
    )

    ir = claude.to_ir(command)

    assert ir.semantic.description == "List"
    assert ir.semantic.provenance == "owner/repo"
    assert ir.extras == {"model": "haiku"}
    assert ir.body == ["Run ", ShellCommand("ls"), " on ", Arguments()]
    assert ir.meta.source_type is AgentType.CLAUDE


def test_legacy_provenance_list_is_read_as_first_element() -> None:
    command = Command("Body", Path("a.md"), {"_from": ["owner/repo", "other/repo"]})

    ir = claude.to_ir(command)
    out = claude.from_ir(ir)

    assert ir.semantic.provenance == "owner/repo"
    assert out.metadata == {"_from": "owner/repo"}


def test_empty_provenance_list_is_absent() -> None:
    ir = claude.to_ir(Command("Body", Path("a.md"), {"_from": []}))

    assert ir.semantic.provenance is None
    assert claude.from_ir(ir).metadata is None


def test_gemini_command_to_claude(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "review.toml",
        'description = "Review code"\nprompt = "Review {{args}} using !{git diff}"\n',
    )

    command = claude.from_ir(gemini.to_ir(gemini.parse_command(path)))

    assert command.file_path == tmp_path / "review.md"
    assert claude.stringify(command) == (
        "---\ndescription: Review code\n---\n\nReview $ARGUMENTS using !`git diff`\n"
    )


def test_claude_command_to_gemini_keeps_extras_by_default() -> None:
    source = Command("Check $ARGUMENTS", Path("check.md"), {"description": "Check", "allowed-tools": "Bash"})
    ir = claude.to_ir(source)

    kept = gemini.from_ir(ir)
    dropped = gemini.from_ir(ir, ConverterOptions(remove_unsupported=True))

    assert kept.file_path == Path("check.toml")
    assert tomllib.loads(gemini.stringify(kept)) == {
        "description": "Check",
        "allowed-tools": "Bash",
        "prompt": "Check {{args}}",
    }
    assert tomllib.loads(gemini.stringify(dropped)) == {"description": "Check", "prompt": "Check {{args}}"}


@pytest.mark.parametrize(
    "adapter,source,expected",
    [
        (copilot, "cmds/review.md", "cmds/review.prompt.md"),
        (claude, "cmds/review.prompt.md", "cmds/review.md"),
        (codex, "cmds/review.prompt.md", "cmds/review.md"),
        (copilot, "cmds/review.prompt.md", "cmds/review.prompt.md"),
        (gemini, "cmds/review.md", "cmds/review.toml"),
        (claude, "cmds/review.md", "cmds/review.md"),
        (cursor, "cmds/review.toml", "cmds/review.md"),
    ],
)
def test_target_path_swaps_extension(adapter, source: str, expected: str) -> None:
    assert adapter.target_path(Path(source)) == Path(expected)


def test_cursor_commands_have_no_metadata(tmp_path: Path) -> None:
    path = _write(tmp_path / "fix.md", "Fix $ARGUMENTS\n")

    command = cursor.parse_command(path)
    ir = cursor.to_ir(command)
    as_claude = claude.from_ir(ir)

    assert command.metadata is None
    assert ir.extras == {}
    assert claude.stringify(as_claude) == "Fix $ARGUMENTS\n"

    back = cursor.from_ir(claude.to_ir(Command("Fix it", Path("fix.md"), {"description": "dropped"})))
    assert back.metadata is None
    assert cursor.stringify(back) == "Fix it"


def test_claude_skill_parse(tmp_path: Path) -> None:
    skill_dir = _write_skill(tmp_path / "review", frontmatter=CLAUDE_SKILL_FRONTMATTER, body="Review @notes.md")
    _write(skill_dir / "notes.md", "Notes")
    (skill_dir / "logo.png").write_bytes(b"\x89PNG")

    skill = claude.parse(skill_dir, ContentType.SKILL)

    assert skill.name == "review"
    assert skill.description == "Review things"
    assert [(f.relative_path, f.type, f.content) for f in skill.support_files] == [
        ("logo.png", "binary", None),
        ("notes.md", "text", "Notes"),
    ]


def test_skill_name_defaults_to_directory(tmp_path: Path) -> None:
    skill_dir = _write_skill(tmp_path / "fallback", frontmatter="---\ndescription: d\n---", body="Body")

    assert claude.parse_skill(skill_dir).name == "fallback"


def test_parse_skill_requires_skill_file(tmp_path: Path) -> None:
    (tmp_path / "empty").mkdir()

    with pytest.raises(ParseError, match="missing SKILL.md"):
        claude.parse_skill(tmp_path / "empty")


def test_claude_skill_to_codex_escapes_claude_fields(tmp_path: Path) -> None:
    skill_dir = _write_skill(tmp_path / "review", frontmatter=CLAUDE_SKILL_FRONTMATTER, body="Body")
    ir = claude.to_ir(claude.parse_skill(skill_dir))

    kept = codex.from_ir(ir)
    removed = codex.from_ir(ir, ConverterOptions(remove_unsupported=True))

    assert kept.metadata == {
        "name": "review",
        "description": "Review things",
        "_claude_disable_model_invocation": True,
        "_claude_allowed_tools": "Bash",
        "_claude_context": "fork",
        "license": "MIT",
    }
    assert kept.openai_config == {"policy": {"allow_implicit_invocation": False}}
    assert removed.metadata == {"name": "review", "description": "Review things", "license": "MIT"}
    assert removed.openai_config == {"policy": {"allow_implicit_invocation": False}}


def test_model_invocation_survives_two_round_trips(tmp_path: Path) -> None:
    skill_dir = _write_skill(tmp_path / "review", frontmatter=CLAUDE_SKILL_FRONTMATTER, body="Body")
    original = claude.parse_skill(skill_dir)

    as_codex = codex.from_ir(claude.to_ir(original))
    back = claude.from_ir(codex.to_ir(as_codex))
    again = claude.from_ir(codex.to_ir(codex.from_ir(claude.to_ir(back))))

    assert back.metadata == original.metadata
    assert again.metadata == original.metadata


def test_codex_openai_yaml_overrides_frontmatter(tmp_path: Path) -> None:
    skill_dir = _write_skill(
        tmp_path / "deploy",
        frontmatter="---\nname: deploy\ndescription: Deploy\n_claude_disable_model_invocation: true\n---",
        body="Deploy $ARGUMENTS",
    )
    _write(
        skill_dir / "agents" / "openai.yaml",
        "interface:\n  display_name: Deploy\npolicy:\n  allow_implicit_invocation: true\n",
    )

    skill = codex.parse_skill(skill_dir)
    ir = codex.to_ir(skill)

    assert [f.relative_path for f in skill.support_files] == []
    assert ir.semantic.model_invocation_enabled is True
    assert ir.extras == {"interface": {"display_name": "Deploy"}}

    as_claude = claude.from_ir(ir)
    assert as_claude.metadata["disable-model-invocation"] is False
    assert as_claude.metadata["interface"] == {"display_name": "Deploy"}


def test_codex_malformed_openai_yaml_is_ignored(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    skill_dir = _write_skill(tmp_path / "deploy", frontmatter="---\nname: deploy\n---", body="Body")
    _write(skill_dir / "agents" / "openai.yaml", "policy: [unclosed\n")

    skill = codex.parse_skill(skill_dir)

    assert skill.openai_config is None
    assert "openai.yaml" in caplog.text


def test_codex_skill_writes_openai_yaml(tmp_path: Path) -> None:
    skill_dir = _write_skill(tmp_path / "src" / "review", frontmatter=CLAUDE_SKILL_FRONTMATTER, body="Body")
    skill = codex.from_ir(claude.to_ir(claude.parse_skill(skill_dir)))

    codex.write_skill_to_directory(skill, skill_dir, tmp_path / "out" / "review")

    written = codex.parse_skill(tmp_path / "out" / "review")
    assert written.openai_config == {"policy": {"allow_implicit_invocation": False}}
    assert written.metadata["_claude_allowed_tools"] == "Bash"


def test_opencode_escapes_fewer_fields(tmp_path: Path) -> None:
    frontmatter = "---\nname: review\nmodel: opus\nagent: plan\nuser-invocable: false\n---"
    skill_dir = _write_skill(tmp_path / "review", frontmatter=frontmatter, body="Body")

    skill = opencode.from_ir(claude.to_ir(claude.parse_skill(skill_dir)))

    assert skill.metadata == {
        "name": "review",
        "model": "opus",
        "agent": "plan",
        "_claude_user_invocable": False,
    }
    assert claude.from_ir(opencode.to_ir(skill)).metadata == {
        "name": "review",
        "model": "opus",
        "agent": "plan",
        "user-invocable": False,
    }


def test_copilot_renames_user_invocable(tmp_path: Path) -> None:
    skill_dir = _write_skill(
        tmp_path / "review",
        frontmatter="---\nname: review\nuser-invocable: false\n---",
        body="Body",
    )
    ir = claude.to_ir(claude.parse_skill(skill_dir))

    as_copilot = copilot.from_ir(ir)
    removed = copilot.from_ir(ir, ConverterOptions(remove_unsupported=True))

    assert as_copilot.metadata == {"name": "review", "user-invokable": False}
    assert removed.metadata == {"name": "review"}
    assert claude.from_ir(copilot.to_ir(as_copilot)).metadata == {"name": "review", "user-invocable": False}


def test_gemini_skill_drops_model_invocation_when_removing(tmp_path: Path) -> None:
    skill_dir = _write_skill(tmp_path / "review", frontmatter=CLAUDE_SKILL_FRONTMATTER, body="Body")
    ir = claude.to_ir(claude.parse_skill(skill_dir))

    removed = gemini.from_ir(ir, ConverterOptions(remove_unsupported=True))
    kept = gemini.from_ir(ir)

    assert removed.metadata == {"name": "review", "description": "Review things", "license": "MIT"}
    assert kept.metadata["disable-model-invocation"] is True
    assert kept.metadata["allowed-tools"] == "Bash"


def test_skill_stringify_round_trips_through_markdown(tmp_path: Path) -> None:
    skill_dir = _write_skill(tmp_path / "review", frontmatter=CLAUDE_SKILL_FRONTMATTER, body="Review $ARGUMENTS")
    skill = claude.parse_skill(skill_dir)

    metadata, body = split_markdown(claude.stringify(skill))

    assert metadata == skill.metadata
    assert body == "Review $ARGUMENTS"


def test_opencode_command_drops_claude_only_fields_when_removing() -> None:
    source = Command(
        "Check $ARGUMENTS",
        Path("check.md"),
        {"description": "Check", "allowed-tools": "Bash", "argument-hint": "[file]", "model": "opus"},
    )
    ir = claude.to_ir(source)

    kept = opencode.from_ir(ir)
    removed = opencode.from_ir(ir, ConverterOptions(remove_unsupported=True))

    assert kept.metadata["allowed-tools"] == "Bash"
    assert kept.metadata["argument-hint"] == "[file]"
    assert "allowed-tools" not in removed.metadata
    assert "argument-hint" not in removed.metadata
    assert removed.metadata["model"] == "opus"
    assert removed.metadata["description"] == "Check"


def test_cursor_skill_drops_unsupported_fields_when_removing(tmp_path: Path) -> None:
    frontmatter = (
        "---\n"
        "name: review\n"
        "context: fork\n"
        "hooks:\n"
        "  pre: lint\n"
        "model: opus\n"
        "agent: plan\n"
        "argument-hint: '[file]'\n"
        "license: MIT\n"
        "---"
    )
    skill_dir = _write_skill(tmp_path / "review", frontmatter=frontmatter, body="Body")
    ir = claude.to_ir(claude.parse_skill(skill_dir))

    kept = cursor.from_ir(ir)
    removed = cursor.from_ir(ir, ConverterOptions(remove_unsupported=True))

    for key in ("context", "hooks", "model", "agent", "argument-hint"):
        assert key in kept.metadata
    assert kept.metadata["hooks"] == {"pre": "lint"}
    assert removed.metadata == {"name": "review", "license": "MIT"}
