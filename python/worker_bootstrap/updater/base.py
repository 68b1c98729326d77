"""Base interface for artifact updaters."""

from abc import ABC, abstractmethod
from pathlib import Path


class ArtifactUpdateError(Exception):
    """Raised when the latest artifact could not be fetched or written."""

    pass


class ArtifactUpdater(ABC):
    """Fetches the latest worker artifact and writes it to a path."""

    @abstractmethod
    def update(self, destination: Path) -> None:
        """Write the latest artifact to destination.

        Args:
            destination: Path the artifact is written to. Any existing file
                at this path is replaced only once the download completed.

        Raises:
            ArtifactUpdateError: On any network, decoding or disk failure.
        """
        pass
