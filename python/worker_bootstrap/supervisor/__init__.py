"""
Worker supervision for the bootstrap process.

This module provides the boot loop that launches the worker artifact,
interprets its exit codes, guards against crash loops and rolls back
failed artifact updates.
"""

from .artifact import ArtifactStore, backup_path_for
from .boot_loop import EXIT_FAILURE, EXIT_SUCCESS, BootSupervisor
from .exit_codes import (
    ExitDecision,
    ExitReason,
    SupervisorAction,
    WorkerExitCode,
    classify_exit_code,
    resolve_action,
)
from .launcher import ProcessManager, WorkerSpawnError, build_command
from .models import (
    ConfigurationError,
    LaunchConfig,
    SupervisorConfig,
    SupervisorState,
    parse_environment_variables,
)

__all__ = [
    "ArtifactStore",
    "BootSupervisor",
    "ConfigurationError",
    "EXIT_FAILURE",
    "EXIT_SUCCESS",
    "ExitDecision",
    "ExitReason",
    "LaunchConfig",
    "ProcessManager",
    "SupervisorAction",
    "SupervisorConfig",
    "SupervisorState",
    "WorkerExitCode",
    "WorkerSpawnError",
    "backup_path_for",
    "build_command",
    "classify_exit_code",
    "parse_environment_variables",
    "resolve_action",
]
