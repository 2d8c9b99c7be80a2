"""Sync options, with boolean defaults that can come from the environment."""

import os
from dataclasses import dataclass
from typing import Optional, Union

from acsync.ir import AgentType, ContentType

_TRUTHY = {"1", "true", "yes", "y", "on"}


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if not value:
        return default
    return value.strip().lower() in _TRUTHY


@dataclass
class SyncOptions:
    """What to convert and how.

    ``dry_run`` still runs the full pipeline; only the writes are skipped.
    """

    source: AgentType
    destination: AgentType
    remove_unsupported: bool = False
    no_overwrite: bool = False
    dry_run: bool = False
    sync_delete: bool = False
    content_type: ContentType = ContentType.COMMAND

    def __post_init__(self) -> None:
        self.source = AgentType(self.source)
        self.destination = AgentType(self.destination)
        self.content_type = ContentType(self.content_type)

    @classmethod
    def from_env(
        cls,
        source: Union[AgentType, str],
        destination: Union[AgentType, str],
        content_type: Union[ContentType, str] = ContentType.COMMAND,
        remove_unsupported: Optional[bool] = None,
        no_overwrite: Optional[bool] = None,
        dry_run: Optional[bool] = None,
        sync_delete: Optional[bool] = None,
    ) -> "SyncOptions":
        """Build options, reading unset flags from ``ACSYNC_*`` variables.

        Explicit arguments win over ``ACSYNC_REMOVE_UNSUPPORTED``,
        ``ACSYNC_NO_OVERWRITE``, ``ACSYNC_DRY_RUN`` and ``ACSYNC_SYNC_DELETE``.
        """
        return cls(
            source=source,
            destination=destination,
            content_type=content_type,
            remove_unsupported=(
                _env_flag("ACSYNC_REMOVE_UNSUPPORTED") if remove_unsupported is None else remove_unsupported
            ),
            no_overwrite=_env_flag("ACSYNC_NO_OVERWRITE") if no_overwrite is None else no_overwrite,
            dry_run=_env_flag("ACSYNC_DRY_RUN") if dry_run is None else dry_run,
            sync_delete=_env_flag("ACSYNC_SYNC_DELETE") if sync_delete is None else sync_delete,
        )
