"""Worker process spawning."""

import logging
import subprocess
from typing import List, Optional, Sequence

from ..logging_config import get_logger
from .models import LaunchConfig

logger = get_logger(__name__)


class WorkerSpawnError(Exception):
    """Raised when the worker process cannot be started."""

    pass


def build_command(launch: LaunchConfig) -> List[str]:
    """Build the worker command line.

    Order: executable, default runtime flags, heap flags (if configured),
    extra runtime arguments, the artifact, then the worker arguments.
    """
    command = [launch.executable]
    command.extend(launch.runtime_flags)

    if launch.max_heap:
        command.append(f"-Xmx{launch.max_heap}")
    if launch.initial_heap:
        command.append(f"-Xms{launch.initial_heap}")

    command.extend(launch.runtime_args)
    command.extend(["-jar", str(launch.jar_path)])
    command.extend(launch.worker_args)
    return command


class ProcessManager:
    """Starts the worker and waits for it to exit.

    The worker inherits the supervisor's stdin, stdout and stderr, so its
    console output shows up unchanged.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or get_logger(__name__)
        self.process: Optional[subprocess.Popen] = None

    def start(self, command: Sequence[str]) -> subprocess.Popen:
        """Start the worker process.

        Raises:
            WorkerSpawnError: If a worker is already running or the OS refuses
                to start the process.
        """
        if self.process is not None and self.process.poll() is None:
            raise WorkerSpawnError(
                f"Worker process {self.process.pid} is still running"
            )

        self.logger.debug(f"Launching process [{', '.join(command)}]")
        try:
            self.process = subprocess.Popen(list(command))
        except OSError as e:
            self.process = None
            raise WorkerSpawnError(f"Failed to start worker process: {e}") from e

        self.logger.info(f"Started worker process (PID: {self.process.pid})")
        return self.process

    def wait(self) -> int:
        """Block until the worker exits and return its exit code."""
        if self.process is None:
            raise RuntimeError("No worker process has been started")

        exit_code = self.process.wait()
        self.logger.debug(f"Worker process exited with code {exit_code}")
        self.process = None
        return exit_code
