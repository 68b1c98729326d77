"""
Worker exit codes and the actions the supervisor takes for each of them.

The worker talks to the supervisor only through its exit code. Every integer
resolves to exactly one action; codes outside the known set are treated as
an unknown failure and the worker is restarted.
"""

import logging
from dataclasses import dataclass
from enum import Enum, IntEnum


class WorkerExitCode(IntEnum):
    """Exit codes the worker uses to signal its intent."""

    NORMAL = 0
    ERROR = 1
    SHUTDOWN = 10
    RESTART = 11
    UPDATE = 12


class ExitReason(Enum):
    """Why the worker exited, as understood by the supervisor."""

    NORMAL = "normal"
    SHUTDOWN = "shutdown"
    ERROR = "error"
    RESTART = "restart"
    UPDATE = "update"
    UNKNOWN = "unknown"


class SupervisorAction(Enum):
    """What the boot loop does after the worker has exited."""

    TERMINATE = "terminate"
    CONTINUE = "continue"
    UPDATE = "update"


@dataclass(frozen=True)
class ExitDecision:
    """Result of mapping a worker exit code onto a supervisor action."""

    exit_code: int
    reason: ExitReason
    action: SupervisorAction
    log_level: int
    message: str

    @property
    def is_terminal(self) -> bool:
        return self.action is SupervisorAction.TERMINATE


_REASONS = {
    WorkerExitCode.NORMAL: ExitReason.NORMAL,
    WorkerExitCode.SHUTDOWN: ExitReason.SHUTDOWN,
    WorkerExitCode.ERROR: ExitReason.ERROR,
    WorkerExitCode.RESTART: ExitReason.RESTART,
    WorkerExitCode.UPDATE: ExitReason.UPDATE,
}

# reason -> (action, log level, message)
_ACTIONS = {
    ExitReason.NORMAL: (
        SupervisorAction.TERMINATE,
        logging.INFO,
        "Worker exited successfully. Shutting down bootstrap process.",
    ),
    ExitReason.SHUTDOWN: (
        SupervisorAction.TERMINATE,
        logging.INFO,
        "Worker exited successfully, requesting a shutdown. Shutting down bootstrap process.",
    ),
    ExitReason.ERROR: (
        SupervisorAction.CONTINUE,
        logging.ERROR,
        "Worker exited with an error.",
    ),
    ExitReason.RESTART: (
        SupervisorAction.CONTINUE,
        logging.INFO,
        "Worker exited successfully, requesting a restart.",
    ),
    ExitReason.UPDATE: (
        SupervisorAction.UPDATE,
        logging.INFO,
        "Worker exited successfully, requesting an update. Updating worker artifact.",
    ),
    ExitReason.UNKNOWN: (
        SupervisorAction.CONTINUE,
        logging.WARNING,
        "Worker exited with unknown exit code {exit_code}.",
    ),
}


def classify_exit_code(exit_code: int) -> ExitReason:
    """Map any integer exit code onto an ExitReason.

    Negative codes (the worker was killed by a signal) and any other
    unrecognised value map to ExitReason.UNKNOWN.
    """
    try:
        return _REASONS[WorkerExitCode(exit_code)]
    except ValueError:
        return ExitReason.UNKNOWN


def resolve_action(exit_code: int) -> ExitDecision:
    """Decide what the supervisor does after the worker exited with exit_code.

    Args:
        exit_code: Return code of the worker process

    Returns:
        ExitDecision describing the action, log level and message
    """
    reason = classify_exit_code(exit_code)
    action, log_level, message = _ACTIONS[reason]
    return ExitDecision(
        exit_code=exit_code,
        reason=reason,
        action=action,
        log_level=log_level,
        message=message.format(exit_code=exit_code),
    )
