"""Skill directory helpers: detection, support-file collection and writing."""

import logging
import shutil
from pathlib import Path
from typing import Iterable, List, Mapping, Optional

from acsync.documents.models import SupportFile

logger = logging.getLogger(__name__)

SKILL_FILE_NAME = "SKILL.md"

BINARY_EXTENSIONS = frozenset({
    ".png", ".jpg", ".jpeg", ".gif", ".webp", ".bmp", ".ico", ".tiff",
    ".pdf", ".zip", ".tar", ".gz", ".tgz", ".bz2", ".xz", ".7z",
    ".woff", ".woff2", ".ttf", ".otf", ".eot",
    ".mp3", ".mp4", ".wav", ".ogg", ".mov", ".webm",
    ".exe", ".dll", ".so", ".dylib", ".bin", ".class", ".jar", ".pyc",
    ".xlsx", ".docx", ".pptx",
})

CONFIG_EXTENSIONS = frozenset({".json", ".yaml", ".yml", ".toml", ".ini", ".cfg", ".conf"})

CONFIG_FILE_NAMES = frozenset({
    ".env.example",
    ".gitignore",
    ".editorconfig",
    "Makefile",
    "Dockerfile",
    "requirements.txt",
})


def classify_support_file(relative_path: str) -> str:
    """Classify a file as ``binary``, ``config`` or ``text`` by extension/filename."""
    path = Path(relative_path)
    suffix = path.suffix.lower()

    if suffix in BINARY_EXTENSIONS:
        return "binary"
    if suffix in CONFIG_EXTENSIONS or path.name in CONFIG_FILE_NAMES:
        return "config"
    return "text"


def is_skill_directory(dir_path: Path) -> bool:
    return (Path(dir_path) / SKILL_FILE_NAME).is_file()


def collect_support_files(skill_dir: Path, exclude: Optional[Iterable[str]] = None) -> List[SupportFile]:
    """List every file in a skill directory except SKILL.md and ``exclude``.

    Args:
        skill_dir: Path to skill directory
        exclude: Relative paths (POSIX form) to leave out

    Returns:
        Support files sorted by relative path, contents not yet loaded
    """
    skill_dir = Path(skill_dir)
    excluded = {SKILL_FILE_NAME}
    if exclude:
        excluded.update(exclude)

    support_files = []
    for file_path in sorted(skill_dir.rglob("*")):
        if not file_path.is_file():
            continue
        relative = file_path.relative_to(skill_dir).as_posix()
        if relative in excluded:
            continue
        support_files.append(SupportFile(relative_path=relative, type=classify_support_file(relative)))

    return support_files


def load_support_file_contents(skill_dir: Path, support_files: Iterable[SupportFile]) -> None:
    """Load text/config contents in place.

    A file that cannot be read keeps ``content=None``; the skill still parses.
    """
    for support_file in support_files:
        if support_file.type == "binary":
            continue
        file_path = Path(skill_dir) / support_file.relative_path
        try:
            support_file.content = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Skipping unreadable support file %s: %s", file_path, e)


def _resolve_inside(root: Path, relative_path: str) -> Path:
    root = root.resolve()
    candidate = (root / relative_path).resolve()
    try:
        candidate.relative_to(root)
    except ValueError as e:
        raise ValueError(f"Support file '{relative_path}' is outside skill directory {root}") from e
    return candidate


def write_skill_directory(
    skill_text: str,
    support_files: Iterable[SupportFile],
    source_dir: Optional[Path],
    target_dir: Path,
    extra_files: Optional[Mapping[str, str]] = None,
) -> None:
    """Write SKILL.md, agent-specific extra files and support files.

    Binary support files are byte-copied from ``source_dir``; text and config
    files are written from their loaded content.
    """
    target_dir = Path(target_dir)
    target_dir.mkdir(parents=True, exist_ok=True)
    (target_dir / SKILL_FILE_NAME).write_text(skill_text, encoding="utf-8")

    for relative_path, text in (extra_files or {}).items():
        extra_path = _resolve_inside(target_dir, relative_path)
        extra_path.parent.mkdir(parents=True, exist_ok=True)
        extra_path.write_text(text, encoding="utf-8")

    for support_file in support_files:
        target_path = _resolve_inside(target_dir, support_file.relative_path)
        target_path.parent.mkdir(parents=True, exist_ok=True)

        if support_file.type == "binary":
            if source_dir is None:
                continue
            source_path = Path(source_dir) / support_file.relative_path
            if source_path.is_file() and source_path.resolve() != target_path:
                shutil.copyfile(source_path, target_path)
        elif support_file.content is not None:
            target_path.write_text(support_file.content, encoding="utf-8")
