"""Jenkins build metadata models."""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class JenkinsArtifact(BaseModel):
    """A single file archived by a Jenkins build."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    display_path: Optional[str] = Field(default=None, alias="displayPath")
    file_name: str = Field(alias="fileName")
    relative_path: str = Field(alias="relativePath")


class JenkinsBuild(BaseModel):
    """Subset of Jenkins' ``/api/json`` build description."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: Union[int, str]
    full_display_name: Optional[str] = Field(default=None, alias="fullDisplayName")
    timestamp: Optional[datetime] = None
    url: Optional[str] = None
    artifacts: List[JenkinsArtifact] = Field(default_factory=list)

    def find_artifact(self, suffix: str) -> Optional[JenkinsArtifact]:
        """Return the first artifact whose file name ends with suffix."""
        return next(
            (artifact for artifact in self.artifacts if artifact.file_name.endswith(suffix)),
            None,
        )
