"""Placeholder pattern tables and serializers for each agent dialect.

Claude-syntax agents (Claude, Codex, OpenCode, Copilot, Cursor and the hub)
share ``$ARGUMENTS``, ``!`cmd```, ``@path`` and ``$1``-``$9``. Gemini uses
``{{args}}``, ``!{cmd}`` and ``@{path}``.
"""

from __future__ import annotations

import re

from acsync.body.segments import (
    Arguments,
    FileReference,
    IndividualArgument,
    PLACEHOLDER_TYPES,
    ShellCommand,
)
from acsync.body.tokenizer import BodyDialect, PatternDef

CLAUDE_SYNTAX = "claude"
GEMINI_SYNTAX = "gemini"

CLAUDE_SYNTAX_PATTERNS = (
    # $ARGUMENTS must precede $1-$9
    PatternDef(re.compile(r"\$ARGUMENTS"), lambda m: Arguments()),
    PatternDef(re.compile(r"!`([^`]+)`"), lambda m: ShellCommand(m.group(1))),
    # line-start form, after the delimited one
    PatternDef(re.compile(r"^!\s*([^\s{][^\n]*)", re.MULTILINE), lambda m: ShellCommand(m.group(1))),
    PatternDef(re.compile(r"@([^\s{}\[\]()<>]+(?:\.[a-zA-Z0-9]+)?)"), lambda m: FileReference(m.group(1))),
    PatternDef(re.compile(r"\$([1-9])(?!\d)"), lambda m: IndividualArgument(int(m.group(1)))),
)

CLAUDE_SYNTAX_SERIALIZERS = {
    Arguments.type: lambda p: "$ARGUMENTS",
    IndividualArgument.type: lambda p: f"${p.index}",
    ShellCommand.type: lambda p: f"!`{p.command}`",
    FileReference.type: lambda p: f"@{p.path}",
}

GEMINI_PATTERNS = (
    PatternDef(re.compile(r"\{\{args\}\}"), lambda m: Arguments()),
    PatternDef(re.compile(r"!\{([^}]+)\}"), lambda m: ShellCommand(m.group(1))),
    PatternDef(re.compile(r"@\{([^}]+)\}"), lambda m: FileReference(m.group(1))),
    PatternDef(re.compile(r"\$([1-9])(?!\d)"), lambda m: IndividualArgument(int(m.group(1)))),
)

GEMINI_SERIALIZERS = {
    Arguments.type: lambda p: "{{args}}",
    # No native equivalent; keeps its literal spelling.
    IndividualArgument.type: lambda p: f"${p.index}",
    ShellCommand.type: lambda p: f"!{{{p.command}}}",
    FileReference.type: lambda p: f"@{{{p.path}}}",
}

CLAUDE_DIALECT = BodyDialect("claude", CLAUDE_SYNTAX, CLAUDE_SYNTAX_PATTERNS, CLAUDE_SYNTAX_SERIALIZERS)
CODEX_DIALECT = BodyDialect("codex", CLAUDE_SYNTAX, CLAUDE_SYNTAX_PATTERNS, CLAUDE_SYNTAX_SERIALIZERS)
OPENCODE_DIALECT = BodyDialect("opencode", CLAUDE_SYNTAX, CLAUDE_SYNTAX_PATTERNS, CLAUDE_SYNTAX_SERIALIZERS)
CHIMERA_DIALECT = BodyDialect("chimera", CLAUDE_SYNTAX, CLAUDE_SYNTAX_PATTERNS, CLAUDE_SYNTAX_SERIALIZERS)
COPILOT_DIALECT = BodyDialect(
    "copilot", CLAUDE_SYNTAX, CLAUDE_SYNTAX_PATTERNS, CLAUDE_SYNTAX_SERIALIZERS, unsupported=PLACEHOLDER_TYPES
)
CURSOR_DIALECT = BodyDialect(
    "cursor", CLAUDE_SYNTAX, CLAUDE_SYNTAX_PATTERNS, CLAUDE_SYNTAX_SERIALIZERS, unsupported=PLACEHOLDER_TYPES
)
GEMINI_DIALECT = BodyDialect(
    "gemini",
    GEMINI_SYNTAX,
    GEMINI_PATTERNS,
    GEMINI_SERIALIZERS,
    unsupported=frozenset({IndividualArgument.type}),
)
