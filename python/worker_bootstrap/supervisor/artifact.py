"""
Worker artifact files: the live artifact and its rollback copy.

The backup lives next to the artifact as ``old.<name>`` and only exists
between an update request and either the next clean startup or a rollback
by the crash-loop breaker.
"""

import os
from pathlib import Path
from typing import Union

from ..logging_config import get_logger

logger = get_logger(__name__)

BACKUP_PREFIX = "old."


def backup_path_for(jar_path: Union[str, Path]) -> Path:
    """Return the backup location for an artifact path."""
    jar_path = Path(jar_path)
    return jar_path.with_name(BACKUP_PREFIX + jar_path.name)


class ArtifactStore:
    """File operations on the worker artifact and its backup."""

    def __init__(self, jar_path: Union[str, Path]):
        self.jar_path = Path(jar_path)
        self.backup_path = backup_path_for(self.jar_path)

    def artifact_exists(self) -> bool:
        return self.jar_path.is_file()

    def backup_exists(self) -> bool:
        return self.backup_path.is_file()

    def discard_backup(self) -> bool:
        """Delete a leftover backup. Returns True if one was deleted."""
        if not self.backup_exists():
            return False
        self.backup_path.unlink()
        logger.info(f"Deleted stale backup '{self.backup_path}'")
        return True

    def create_backup(self) -> bool:
        """Move the live artifact to the backup path.

        Returns:
            True if an artifact was moved, False if there was nothing to back up
        """
        if not self.artifact_exists():
            logger.debug(f"No artifact at '{self.jar_path}', skipping backup")
            return False
        os.replace(self.jar_path, self.backup_path)
        logger.info(f"Backed up '{self.jar_path}' to '{self.backup_path}'")
        return True

    def restore_backup(self) -> None:
        """Replace the live artifact with the backup.

        Raises:
            FileNotFoundError: If there is no backup to restore
        """
        if not self.backup_exists():
            raise FileNotFoundError(f"No backup found at '{self.backup_path}'")
        self.jar_path.unlink(missing_ok=True)
        os.replace(self.backup_path, self.jar_path)
        logger.info(f"Restored '{self.jar_path}' from '{self.backup_path}'")
