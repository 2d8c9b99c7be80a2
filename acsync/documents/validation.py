"""Field-level validation for parsed documents.

Each function returns a list of :class:`~acsync.errors.ValidationError`;
an empty list means the document is valid.
"""

from typing import List, Sequence

from acsync.documents.models import Command, Skill
from acsync.errors import ValidationError

KNOWN_MODEL_ALIASES = ("opus", "sonnet", "haiku")


def _check_optional_string(errors: List[ValidationError], metadata: dict, key: str, prefix: str) -> None:
    if key in metadata and metadata[key] is not None and not isinstance(metadata[key], str):
        errors.append(ValidationError(f"{key} must be a string", f"{prefix}.{key}", metadata[key]))


def validate_claude_command(command: Command) -> List[ValidationError]:
    """Validate a Claude-style command (markdown + frontmatter)."""
    errors: List[ValidationError] = []

    if command.file_path is None:
        errors.append(ValidationError("File path is required", "filePath", command.file_path))

    if not isinstance(command.content, str):
        errors.append(ValidationError("Content must be a string", "content", command.content))

    metadata = command.metadata or {}
    _check_optional_string(errors, metadata, "allowed-tools", "frontmatter")
    _check_optional_string(errors, metadata, "argument-hint", "frontmatter")

    description = metadata.get("description")
    if description is not None:
        if not isinstance(description, str):
            errors.append(ValidationError("description must be a string", "frontmatter.description", description))
        elif not description.strip():
            errors.append(ValidationError("description cannot be empty", "frontmatter.description", description))

    model = metadata.get("model")
    if model is not None:
        if not isinstance(model, str):
            errors.append(ValidationError("model must be a string", "frontmatter.model", model))
        elif model not in KNOWN_MODEL_ALIASES and "-" not in model:
            # Specific model ids (claude-sonnet-4-5, ...) always contain a hyphen.
            errors.append(
                ValidationError(
                    f"model must be one of: {', '.join(KNOWN_MODEL_ALIASES)} or a specific model string",
                    "frontmatter.model",
                    model,
                )
            )

    return errors


def validate_gemini_command(command: Command) -> List[ValidationError]:
    """Validate a Gemini TOML command; ``prompt`` is required."""
    errors: List[ValidationError] = []

    if command.file_path is None:
        errors.append(ValidationError("File path is required", "filePath", command.file_path))

    if not isinstance(command.content, str):
        errors.append(ValidationError("prompt must be a string", "prompt", command.content))
    elif not command.content.strip():
        errors.append(ValidationError("prompt cannot be empty", "prompt", command.content))

    description = (command.metadata or {}).get("description")
    if description is not None:
        if not isinstance(description, str):
            errors.append(ValidationError("description must be a string", "description", description))
        elif not description.strip():
            errors.append(ValidationError("description cannot be empty", "description", description))

    return errors


def validate_plain_command(command: Command) -> List[ValidationError]:
    """Commands whose only requirement is a string body."""
    if not isinstance(command.content, str):
        return [ValidationError("Content must be a string", "content", command.content)]
    return []


def validate_skill(skill: Skill) -> List[ValidationError]:
    """Skills need a non-empty name and body."""
    errors: List[ValidationError] = []
    if not skill.content or not isinstance(skill.content, str):
        errors.append(ValidationError("Skill content is required", "content", skill.content))
    if not skill.name or not isinstance(skill.name, str):
        errors.append(ValidationError("Skill name is required", "name", skill.name))
    return errors


def format_validation_errors(errors: Sequence[ValidationError]) -> str:
    """Render validation errors in a human readable block."""
    if not errors:
        return "No validation errors"

    lines = []
    for index, error in enumerate(errors, start=1):
        line = f"{index}. {error.field}: {error}"
        if error.value is not None:
            line += f" (got: {error.value!r})"
        lines.append(line)

    return f"Validation failed with {len(errors)} error(s):\n" + "\n".join(lines)
