"""Conversion pipeline and batch synchronisation.

A :class:`Converter` turns one document of the source agent into the
destination agent's text::

    parse -> to_ir -> (placeholder check) -> from_ir -> stringify

``sync_commands`` and ``sync_skills`` run it over many documents in a
sequential loop, recording a :class:`FileOperation` or an error per document.
"""

import logging
import shutil
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Set, Union

from acsync.agents.base import AgentAdapter, Document
from acsync.agents.registry import get_adapter
from acsync.config import SyncOptions
from acsync.documents.models import Command, Skill
from acsync.documents.skill_files import SKILL_FILE_NAME, is_skill_directory
from acsync.documents.validation import format_validation_errors
from acsync.errors import AcsyncError, ConversionError, ParseError
from acsync.ir import AgentType, ContentType, ConverterOptions

logger = logging.getLogger(__name__)

CREATED = "A"
MODIFIED = "M"
SKIPPED = "-"
DELETED = "D"


@dataclass
class FileOperation:
    type: str  # "A" created | "M" modified | "-" skipped | "D" deleted
    path: Path
    description: str


@dataclass
class SyncResult:
    operations: List[FileOperation] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    def summary(self) -> Dict[str, int]:
        """Number of operations per type."""
        return dict(Counter(op.type for op in self.operations))


@dataclass
class Conversion:
    """Outcome of converting a single document."""

    document: Document
    text: str
    warnings: List[str] = field(default_factory=list)


class Converter:
    """Single-document pipeline between two agents."""

    def __init__(
        self,
        source: Union[AgentType, str],
        destination: Union[AgentType, str],
        remove_unsupported: bool = False,
    ):
        self.source: AgentAdapter = get_adapter(source)
        self.destination: AgentAdapter = get_adapter(destination)
        self.remove_unsupported = remove_unsupported

    def __repr__(self) -> str:
        return f"Converter({self.source.agent.value!r} -> {self.destination.agent.value!r})"

    def convert_command(self, path: Path, existing_target: Optional[Command] = None) -> Conversion:
        return self.convert(self.source.parse_command(path), existing_target)

    def convert_skill(self, dir_path: Path, existing_target: Optional[Skill] = None) -> Conversion:
        return self.convert(self.source.parse_skill(dir_path), existing_target)

    def convert(self, document: Document, existing_target: Optional[Document] = None) -> Conversion:
        """Convert an already parsed document.

        Raises:
            ConversionError: If the source document is invalid or cannot be
                rendered by the destination agent.
        """
        source_path = document.dir_path if isinstance(document, Skill) else document.file_path

        errors = self.source.validation_errors(document)
        if errors:
            raise ConversionError(
                f"Invalid {self.source.display_name} document: {format_validation_errors(errors)}",
                source_path,
            )

        destination = self.destination.agent
        ir = self.source.to_ir(document, ConverterOptions(destination_type=destination))
        ir.meta.target_type = destination

        warnings = []
        source_syntax = self.source.dialect.syntax
        target_syntax = self.destination.dialect.syntax
        if source_syntax != target_syntax:
            logger.debug("Remapping placeholders %s -> %s for %s", source_syntax, target_syntax, source_path)
            for segment_type in self.destination.dialect.unsupported_in(ir.body):
                warnings.append(
                    f"{self.destination.display_name} has no native '{segment_type}' placeholder; "
                    f"kept as literal text"
                )

        options = ConverterOptions(
            destination_type=destination,
            remove_unsupported=self.remove_unsupported,
            existing_target=existing_target,
        )
        target = self.destination.from_ir(ir, options)
        try:
            text = self.destination.stringify(target)
        except ParseError as e:
            raise ConversionError(
                f"Failed to render {self.destination.display_name} document: {e.args[0]}",
                source_path,
                getattr(target, "file_path", None),
                e,
            ) from e

        return Conversion(document=target, text=text, warnings=warnings)


def find_command_files(root: Path, agent: Union[AgentType, str]) -> List[Path]:
    """List command files of ``agent`` below ``root``, sorted."""
    root = Path(root)
    if not root.is_dir():
        return []
    extension = get_adapter(agent).file_extension
    return sorted(p for p in root.rglob(f"*{extension}") if p.is_file())


def find_skill_dirs(root: Path) -> List[Path]:
    """List skill directories (folders holding SKILL.md) below ``root``, sorted."""
    root = Path(root)
    if not root.is_dir():
        return []
    return sorted(p.parent for p in root.rglob(SKILL_FILE_NAME) if p.is_file())


def _command_target(destination: AgentAdapter, source: Path, source_root: Path, target_root: Path) -> Path:
    try:
        relative = Path(source).relative_to(source_root)
    except ValueError:
        relative = Path(Path(source).name)
    return destination.target_path(Path(target_root) / relative)


def _delete_orphans(
    result: SyncResult, orphans: List[Path], dry_run: bool, remove: Callable[[Path], None]
) -> None:
    """Remove targets no source maps to; under ``dry_run`` only report them."""
    for orphan in orphans:
        if dry_run:
            result.operations.append(FileOperation(DELETED, orphan, "Would delete (orphaned)"))
            logger.info("%s %s (dry run)", DELETED, orphan)
            continue
        try:
            remove(orphan)
        except OSError as e:
            logger.error("Failed to delete %s: %s", orphan, e)
            result.errors.append(f"{orphan}: {e}")
            continue
        result.operations.append(FileOperation(DELETED, orphan, "Deleted (orphaned)"))
        logger.info("%s %s", DELETED, orphan)


def sync_commands(
    sources: Iterable[Path],
    source_root: Path,
    target_root: Path,
    options: SyncOptions,
) -> SyncResult:
    """Convert command files from ``source_root`` into ``target_root``.

    Directory structure below the roots is preserved; only the extension
    changes. One failing file does not stop the batch. With
    ``options.sync_delete``, destination files no source maps to are removed.
    """
    converter = Converter(options.source, options.destination, options.remove_unsupported)
    destination = converter.destination
    result = SyncResult()
    expected: Set[Path] = set()

    for source in sources:
        source = Path(source)
        target = _command_target(destination, source, Path(source_root), Path(target_root))
        expected.add(target.resolve())
        exists = target.exists()

        if exists and options.no_overwrite:
            result.operations.append(FileOperation(SKIPPED, target, "exists, not overwritten"))
            logger.info("Skipping %s: target exists", target)
            continue

        try:
            existing_target = None
            if exists and destination.agent is AgentType.CHIMERA:
                existing_target = destination.parse_command(target)

            conversion = converter.convert_command(source, existing_target)
            if not options.dry_run:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(conversion.text, encoding="utf-8")
        except (AcsyncError, OSError) as e:
            logger.error("Failed to convert %s: %s", source, e)
            result.errors.append(f"{source}: {e}")
            continue

        result.warnings.extend(f"{source}: {warning}" for warning in conversion.warnings)
        op_type = MODIFIED if exists else CREATED
        result.operations.append(
            FileOperation(op_type, target, f"{converter.source.display_name} -> {destination.display_name}")
        )
        logger.info("%s %s%s", op_type, target, " (dry run)" if options.dry_run else "")

    if options.sync_delete:
        orphans = [p for p in find_command_files(target_root, destination.agent) if p.resolve() not in expected]
        _delete_orphans(result, orphans, options.dry_run, Path.unlink)

    return result


def sync_skills(skill_dirs: Iterable[Path], target_root: Path, options: SyncOptions) -> SyncResult:
    """Convert skill directories into ``target_root/<skill dir name>``."""
    converter = Converter(options.source, options.destination, options.remove_unsupported)
    destination = converter.destination
    result = SyncResult()
    expected: Set[Path] = set()

    for skill_dir in skill_dirs:
        skill_dir = Path(skill_dir)
        target = Path(target_root) / skill_dir.name
        expected.add(target.resolve())
        exists = is_skill_directory(target)

        if exists and options.no_overwrite:
            result.operations.append(FileOperation(SKIPPED, target, "exists, not overwritten"))
            logger.info("Skipping %s: target exists", target)
            continue

        try:
            existing_target = None
            if exists and destination.agent is AgentType.CHIMERA:
                existing_target = destination.parse_skill(target)

            conversion = converter.convert_skill(skill_dir, existing_target)
            if not options.dry_run:
                destination.write_skill_to_directory(conversion.document, skill_dir, target)
        except (AcsyncError, OSError) as e:
            logger.error("Failed to convert skill %s: %s", skill_dir, e)
            result.errors.append(f"{skill_dir}: {e}")
            continue

        result.warnings.extend(f"{skill_dir}: {warning}" for warning in conversion.warnings)
        op_type = MODIFIED if exists else CREATED
        result.operations.append(
            FileOperation(op_type, target, f"skill {converter.source.display_name} -> {destination.display_name}")
        )
        logger.info("%s %s%s", op_type, target, " (dry run)" if options.dry_run else "")

    root = Path(target_root)
    if options.sync_delete and root.is_dir():
        orphans = sorted(p for p in root.iterdir() if is_skill_directory(p) and p.resolve() not in expected)
        _delete_orphans(result, orphans, options.dry_run, shutil.rmtree)

    return result


def sync(source_root: Path, target_root: Path, options: SyncOptions) -> SyncResult:
    """Discover documents of ``options.content_type`` and sync them."""
    if options.content_type is ContentType.SKILL:
        return sync_skills(find_skill_dirs(source_root), target_root, options)
    return sync_commands(find_command_files(source_root, options.source), source_root, target_root, options)
