"""
Artifact updater for the worker bootstrap supervisor.

Fetches the latest successful build artifact from a build server and
writes it to the worker's artifact path.
"""

from .base import ArtifactUpdateError, ArtifactUpdater
from .jenkins import JenkinsUpdater
from .models import JenkinsArtifact, JenkinsBuild
from .progress import LoggingProgress, ProgressCallback, human_bytes

__all__ = [
    "ArtifactUpdater",
    "ArtifactUpdateError",
    "JenkinsUpdater",
    "JenkinsBuild",
    "JenkinsArtifact",
    "LoggingProgress",
    "ProgressCallback",
    "human_bytes",
]
