"""
Jenkins artifact updater.

Queries a Jenkins job for its last successful build, picks the archived
artifact matching a file name suffix and streams it to disk.
"""

import os
import time
from pathlib import Path
from typing import Callable, Optional

import httpx

from ..logging_config import get_logger
from ..supervisor.models import (
    DEFAULT_ARTIFACT_SUFFIX,
    DEFAULT_JENKINS_PROJECT,
    DEFAULT_JENKINS_URL,
)
from .base import ArtifactUpdateError, ArtifactUpdater
from .models import JenkinsArtifact, JenkinsBuild
from .progress import LoggingProgress, ProgressCallback

logger = get_logger(__name__)

LAST_SUCCESSFUL_BUILD = "lastSuccessfulBuild"
JSON_API = "api/json"
ARTIFACT = "artifact"


def _content_length(response: httpx.Response) -> int:
    """Declared body size, or 0 when the header is missing or malformed."""
    try:
        return max(int(response.headers.get("Content-Length") or 0), 0)
    except ValueError:
        logger.debug(
            f"Ignoring invalid Content-Length '{response.headers.get('Content-Length')}'"
        )
        return 0


class JenkinsUpdater(ArtifactUpdater):
    """Downloads the newest matching artifact of a Jenkins job.

    Args:
        jenkins_url: Base URL of the Jenkins server
        project_path: Job path relative to the server, e.g. "job/team/job/app"
        artifact_suffix: The artifact whose file name ends with this is downloaded
        progress: Called with (bytes_read, total_bytes) while downloading
        progress_interval: Minimum seconds between two progress reports
        client: Optional pre-built httpx client (mainly for tests)
        timeout: Connect/read timeout in seconds for each request
    """

    def __init__(
        self,
        jenkins_url: str = DEFAULT_JENKINS_URL,
        project_path: str = DEFAULT_JENKINS_PROJECT,
        artifact_suffix: str = DEFAULT_ARTIFACT_SUFFIX,
        progress: Optional[ProgressCallback] = None,
        progress_interval: float = 0.1,
        client: Optional[httpx.Client] = None,
        timeout: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.base_url = f"{jenkins_url.rstrip('/')}/{project_path.strip('/')}"
        self.artifact_suffix = artifact_suffix
        self.progress = progress or LoggingProgress()
        self.progress_interval = progress_interval
        self.timeout = timeout
        self._client = client
        self._clock = clock

    @property
    def build_url(self) -> str:
        return f"{self.base_url}/{LAST_SUCCESSFUL_BUILD}"

    def update(self, destination: Path) -> None:
        destination = Path(destination)
        logger.info("Downloading the latest artifact from Jenkins.")

        try:
            if self._client is not None:
                self._update(self._client, destination)
            else:
                with httpx.Client(
                    timeout=self.timeout, follow_redirects=True
                ) as client:
                    self._update(client, destination)
        except httpx.HTTPError as e:
            raise ArtifactUpdateError(
                f"Failed to download the latest artifact from {self.base_url}: {e}"
            ) from e
        except OSError as e:
            raise ArtifactUpdateError(
                f"Failed to write the latest artifact to '{destination}': {e}"
            ) from e

    def _update(self, client: httpx.Client, destination: Path) -> None:
        build = self.fetch_latest_build(client)
        artifact = self.select_artifact(build)
        logger.debug(
            f"Latest successful build artifact found: {artifact.file_name}, {artifact.relative_path}"
        )

        url = f"{self.build_url}/{ARTIFACT}/{artifact.relative_path}"
        self.download(client, url, destination)
        logger.debug("Downloaded the latest artifact.")

    def fetch_latest_build(self, client: httpx.Client) -> JenkinsBuild:
        """Query Jenkins for the last successful build of the job."""
        url = f"{self.build_url}/{JSON_API}"
        logger.debug(f"Querying Jenkins at url {url} for the latest successful build.")

        response = client.get(url)
        response.raise_for_status()
        try:
            # json.JSONDecodeError and pydantic's ValidationError are both ValueErrors
            return JenkinsBuild.model_validate(response.json())
        except ValueError as e:
            raise ArtifactUpdateError(
                f"Jenkins returned an unreadable build description from {url}: {e}"
            ) from e

    def select_artifact(self, build: JenkinsBuild) -> JenkinsArtifact:
        artifact = build.find_artifact(self.artifact_suffix)
        if artifact is None:
            raise ArtifactUpdateError(
                f"Could not find an artifact ending in {self.artifact_suffix} "
                f"in build {build.id}."
            )
        return artifact

    def download(self, client: httpx.Client, url: str, destination: Path) -> None:
        """Stream url into destination.

        The body is written to a sibling ``.part`` file which replaces
        destination only once the whole body has been received.
        """
        destination.parent.mkdir(parents=True, exist_ok=True)
        partial = destination.with_name(destination.name + ".part")

        try:
            with client.stream("GET", url) as response:
                response.raise_for_status()
                total = _content_length(response)
                bytes_read = 0
                last_report: Optional[float] = None

                with open(partial, "wb") as f:
                    for chunk in response.iter_bytes(chunk_size=64 * 1024):
                        f.write(chunk)
                        bytes_read += len(chunk)

                        now = self._clock()
                        if (
                            last_report is None
                            or now - last_report >= self.progress_interval
                        ):
                            last_report = now
                            self.progress(bytes_read, total)

            self.progress(bytes_read, total)
            os.replace(partial, destination)
        except Exception:
            partial.unlink(missing_ok=True)
            raise
