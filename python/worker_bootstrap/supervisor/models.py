"""Configuration and state models for the worker supervisor."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from ..logging_config import get_logger

logger = get_logger(__name__)


DEFAULT_JAR_PATH = "PolyBot.jar"
DEFAULT_JENKINS_URL = "https://ci.solo-studios.ca"
DEFAULT_JENKINS_PROJECT = "job/solo-studios/job/PolyBot"
DEFAULT_ARTIFACT_SUFFIX = "-all.jar"
DEFAULT_RUNTIME_FLAGS: Tuple[str, ...] = ("-Dfile.encoding=UTF-8",)

LOG_LEVELS = ["debug", "info", "warn", "warning", "error", "critical"]


class ConfigurationError(Exception):
    """Exception raised for configuration validation errors."""

    pass


@dataclass
class SupervisorConfig:
    """Configuration for the boot loop and the build server.

    Environment variables (all optional):
    - BOOTSTRAP_MAX_BOOTS: spawn attempts allowed inside one tracking window
    - BOOTSTRAP_BOOT_WINDOW_SECONDS: length of the tracking window
    - BOOTSTRAP_JAR_PATH: location of the worker artifact
    - BOOTSTRAP_JENKINS_URL / BOOTSTRAP_JENKINS_PROJECT: build server location
    - BOOTSTRAP_ARTIFACT_SUFFIX: suffix identifying the artifact to download
    - BOOTSTRAP_LOG_LEVEL: log level for the supervisor's own output
    """

    max_boots: int = 3
    boot_window_seconds: int = 30
    jar_path: str = DEFAULT_JAR_PATH
    jenkins_url: str = DEFAULT_JENKINS_URL
    jenkins_project: str = DEFAULT_JENKINS_PROJECT
    artifact_suffix: str = DEFAULT_ARTIFACT_SUFFIX
    log_level: str = "info"


@dataclass(frozen=True)
class LaunchConfig:
    """Everything needed to build the worker command line.

    Captured once at startup and reused unchanged for every spawn.
    """

    jar_path: Path
    executable: str = "java"
    runtime_flags: Tuple[str, ...] = DEFAULT_RUNTIME_FLAGS
    max_heap: Optional[str] = None
    initial_heap: Optional[str] = None
    runtime_args: Tuple[str, ...] = ()
    worker_args: Tuple[str, ...] = ()


@dataclass
class SupervisorState:
    """Mutable boot-loop state owned by a single supervisor."""

    recent_boot_count: int = 0
    last_attempt_time: Optional[float] = None
    has_backup: bool = False
    spawn_count: int = 0


def _get_env_int(name: str, default: int, min_val: int = 0, max_val: int = 100) -> int:
    """Get integer from environment with validation."""
    value = os.getenv(name)
    if not value:
        return default

    try:
        parsed = int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got '{value}'")

    if not (min_val <= parsed <= max_val):
        raise ConfigurationError(
            f"{name} must be between {min_val} and {max_val}, got {parsed}"
        )
    return parsed


def _get_env_str(name: str, default: str, allowed: Optional[list] = None) -> str:
    """Get string from environment with validation."""
    value = (os.getenv(name) or default).strip()
    if not value:
        raise ConfigurationError(f"{name} cannot be empty")
    if allowed and value.lower() not in allowed:
        raise ConfigurationError(f"{name} must be one of {allowed}, got '{value}'")
    return value


def parse_environment_variables() -> SupervisorConfig:
    """Parse environment variables and return SupervisorConfig instance."""
    try:
        return SupervisorConfig(
            max_boots=_get_env_int("BOOTSTRAP_MAX_BOOTS", 3, min_val=1),
            boot_window_seconds=_get_env_int(
                "BOOTSTRAP_BOOT_WINDOW_SECONDS", 30, min_val=1, max_val=3600
            ),
            jar_path=_get_env_str("BOOTSTRAP_JAR_PATH", DEFAULT_JAR_PATH),
            jenkins_url=_get_env_str(
                "BOOTSTRAP_JENKINS_URL", DEFAULT_JENKINS_URL
            ).rstrip("/"),
            jenkins_project=_get_env_str(
                "BOOTSTRAP_JENKINS_PROJECT", DEFAULT_JENKINS_PROJECT
            ).strip("/"),
            artifact_suffix=_get_env_str(
                "BOOTSTRAP_ARTIFACT_SUFFIX", DEFAULT_ARTIFACT_SUFFIX
            ),
            log_level=_get_env_str("BOOTSTRAP_LOG_LEVEL", "info", LOG_LEVELS).lower(),
        )
    except ConfigurationError as e:
        logger.error(f"Configuration validation failed: {e}")
        raise
