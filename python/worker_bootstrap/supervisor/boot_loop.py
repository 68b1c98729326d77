"""
Boot loop for the supervised worker.

Each iteration spawns the worker once, blocks until it exits and reacts to
its exit code. A crash-loop breaker bounds how often the worker may be
started inside a sliding tracking window: when the limit is hit the
supervisor rolls back to the previous artifact if an update left one behind,
and gives up otherwise.
"""

import time
from typing import Callable, Optional

from ..logging_config import get_logger
from ..updater.base import ArtifactUpdateError, ArtifactUpdater
from .artifact import ArtifactStore
from .exit_codes import SupervisorAction, resolve_action
from .launcher import ProcessManager, WorkerSpawnError, build_command
from .models import LaunchConfig, SupervisorConfig, SupervisorState

logger = get_logger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


class BootSupervisor:
    """Runs the worker until it asks to stop or keeps crashing.

    Args:
        launch: Command line settings reused for every spawn
        updater: Fetches new artifacts on update requests
        config: Breaker tuning; defaults to 3 boots per 30 second window
        process_manager: Spawns and waits for the worker
        clock: Monotonic time source in seconds
    """

    def __init__(
        self,
        launch: LaunchConfig,
        updater: ArtifactUpdater,
        config: Optional[SupervisorConfig] = None,
        process_manager: Optional[ProcessManager] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.launch = launch
        self.updater = updater
        self.config = config or SupervisorConfig()
        self.process_manager = process_manager or ProcessManager(logger)
        self.clock = clock
        self.store = ArtifactStore(launch.jar_path)
        self.state = SupervisorState()

    def run(self) -> int:
        """Run the boot loop.

        Returns:
            EXIT_SUCCESS when the worker asked to stop, EXIT_FAILURE on any
            fatal condition
        """
        logger.info("Starting worker process...")

        try:
            self.prepare_artifact()
        except (ArtifactUpdateError, OSError) as e:
            logger.error(f"Failed to download the worker artifact: {e}")
            return EXIT_FAILURE

        while True:
            status = self.run_once()
            if status is not None:
                return status
            logger.info("Restarting worker process...")

    def prepare_artifact(self) -> None:
        """Make sure an artifact exists before the first spawn.

        A missing artifact is fetched once. If the artifact is present, a
        backup left behind by an earlier run is stale and gets deleted.
        """
        if not self.store.artifact_exists():
            logger.info(
                f"No worker artifact found at '{self.store.jar_path}', downloading it."
            )
            self.update_artifact()
        else:
            self.store.discard_backup()

    def run_once(self) -> Optional[int]:
        """Perform a single spawn-wait-react cycle.

        Returns:
            The supervisor exit status if the cycle ended the loop, else None
        """
        if not self.register_boot_attempt():
            return EXIT_FAILURE

        try:
            exit_code = self.spawn_and_wait()
        except WorkerSpawnError as e:
            logger.error(f"Could not start the worker, exiting: {e}")
            return EXIT_FAILURE

        return self.handle_exit(exit_code)

    def register_boot_attempt(self) -> bool:
        """Apply the crash-loop breaker and count a new spawn attempt.

        Returns:
            False if the supervisor must give up without spawning
        """
        state = self.state
        now = self.clock()

        if (
            state.last_attempt_time is not None
            and now - state.last_attempt_time > self.config.boot_window_seconds
        ):
            if state.recent_boot_count:
                logger.debug("Reset boots")
            state.recent_boot_count = 0

        if state.recent_boot_count >= self.config.max_boots:
            if not state.has_backup:
                logger.error(
                    f"Failed to start {self.config.max_boots} times within "
                    f"{self.config.boot_window_seconds} seconds of each boot. "
                    "This is probably due to an error. Exiting."
                )
                return False

            logger.warning(
                f"Failed to start {self.config.max_boots} times within "
                f"{self.config.boot_window_seconds} seconds of each boot after an update. "
                "Reverting to the previous artifact. This is a temporary mitigation, "
                "the new build still needs fixing."
            )
            try:
                self.store.restore_backup()
            except OSError as e:
                logger.error(f"Failed to restore the previous artifact: {e}")
                return False
            state.has_backup = False
            state.recent_boot_count = 0

        state.last_attempt_time = now
        state.recent_boot_count += 1
        return True

    def spawn_and_wait(self) -> int:
        """Start the worker and block until it exits.

        Raises:
            WorkerSpawnError: If the artifact is missing or the process
                could not be started
        """
        if not self.store.artifact_exists():
            raise WorkerSpawnError(
                f"Worker artifact '{self.store.jar_path}' does not exist"
            )

        self.state.spawn_count += 1
        logger.debug(
            f"Boot attempt {self.state.recent_boot_count}/{self.config.max_boots} "
            f"(spawn #{self.state.spawn_count})"
        )
        self.process_manager.start(build_command(self.launch))
        exit_code = self.process_manager.wait()
        logger.debug(f"Worker process exited with code {exit_code}")
        return exit_code

    def handle_exit(self, exit_code: int) -> Optional[int]:
        """React to the worker's exit code.

        Returns:
            The supervisor exit status if the loop must stop, else None
        """
        decision = resolve_action(exit_code)
        logger.log(decision.log_level, decision.message)

        if decision.is_terminal:
            return EXIT_SUCCESS

        if decision.action is SupervisorAction.UPDATE:
            try:
                self.update_artifact()
            except (ArtifactUpdateError, OSError) as e:
                logger.error(f"Failed to update the worker artifact, exiting: {e}")
                if self.store.backup_exists():
                    logger.error(
                        f"The previous artifact was kept at '{self.store.backup_path}'"
                    )
                return EXIT_FAILURE

        return None

    def update_artifact(self) -> None:
        """Swap in the latest artifact, keeping the current one as a backup.

        Raises:
            ArtifactUpdateError: If the updater fails
            OSError: If the backup cannot be created
        """
        if self.store.discard_backup():
            self.state.has_backup = False

        if self.store.create_backup():
            self.state.has_backup = True

        self.updater.update(self.store.jar_path)

        if not self.store.artifact_exists():
            raise ArtifactUpdateError(
                f"Updater finished but no artifact was written to '{self.store.jar_path}'"
            )
        logger.info(f"Updated worker artifact '{self.store.jar_path}'")
