"""Markdown documents with a YAML frontmatter block.

Parsing is done via `python-frontmatter` (import name: `frontmatter`), with a
PyYAML handler that keeps key order stable on output.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import frontmatter
import yaml
from frontmatter import Post
from frontmatter.default_handlers import YAMLHandler

from acsync.errors import ParseError


class StableYAMLHandler(YAMLHandler):
    """Frontmatter YAML handler with stable ordering and wide line width."""

    def export(self, metadata: Dict[str, object], **kwargs: object) -> str:
        return yaml.safe_dump(
            metadata,
            sort_keys=False,
            width=1000,
            default_flow_style=False,
            allow_unicode=True,
        ).rstrip()


_FRONTMATTER_HANDLER = StableYAMLHandler()


def read_text(path: Path) -> str:
    return Path(path).read_text(encoding="utf-8")


def split_markdown(text: str, source: Optional[Path] = None) -> Tuple[Optional[Dict[str, Any]], str]:
    """Split markdown text into (metadata, body).

    Returns ``None`` metadata when the text has no frontmatter block. An
    empty block yields an empty dict.

    Raises:
        ParseError: If the block exists but is not a YAML mapping.
    """
    if not frontmatter.checks(text):
        return None, text.strip()

    try:
        post = frontmatter.loads(text, handler=_FRONTMATTER_HANDLER)
    except Exception as e:
        raise ParseError(f"Failed to parse frontmatter: {e}", source, e) from e

    metadata = post.metadata
    if not isinstance(metadata, dict):
        raise ParseError("Frontmatter is not a mapping", source)

    return dict(metadata), (post.content or "").strip()


def load_markdown(path: Path) -> Tuple[Optional[Dict[str, Any]], str]:
    """Read a markdown file and split its frontmatter from the body."""
    try:
        text = read_text(path)
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(f"Failed to read file: {e}", path, e) from e
    return split_markdown(text, path)


def clean_metadata(metadata: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Drop ``None`` values; YAML output has no notion of "unset"."""
    if not metadata:
        return {}
    return {key: value for key, value in metadata.items() if value is not None}


def dump_markdown(content: str, metadata: Optional[Mapping[str, Any]]) -> str:
    """Serialize a body with its frontmatter.

    Without any non-null metadata the body is returned on its own.
    """
    cleaned = clean_metadata(metadata)
    if not cleaned:
        return content if content.endswith("\n") or not content else content + "\n"

    post = Post(content)
    post.metadata.update(cleaned)
    return frontmatter.dumps(post, handler=_FRONTMATTER_HANDLER) + "\n"
