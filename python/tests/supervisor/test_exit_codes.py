"""Unit tests for the worker exit code mapping."""

import logging

import pytest

from worker_bootstrap.supervisor.exit_codes import (
    ExitReason,
    SupervisorAction,
    WorkerExitCode,
    classify_exit_code,
    resolve_action,
)


class TestClassifyExitCode:
    """Test classify_exit_code."""

    @pytest.mark.parametrize(
        "exit_code, reason",
        [
            (0, ExitReason.NORMAL),
            (1, ExitReason.ERROR),
            (10, ExitReason.SHUTDOWN),
            (11, ExitReason.RESTART),
            (12, ExitReason.UPDATE),
        ],
    )
    def test_known_codes(self, exit_code, reason):
        """Test that each worker exit code maps to its reason."""
        assert classify_exit_code(exit_code) is reason

    @pytest.mark.parametrize("exit_code", [2, 9, 13, 127, 137, 255, -9, -15, 10_000])
    def test_unmapped_codes_are_unknown(self, exit_code):
        """Test that any other integer, including signal deaths, is unknown."""
        assert classify_exit_code(exit_code) is ExitReason.UNKNOWN

    def test_accepts_enum_members(self):
        """Test that WorkerExitCode members classify like their values."""
        assert classify_exit_code(WorkerExitCode.UPDATE) is ExitReason.UPDATE


class TestResolveAction:
    """Test resolve_action."""

    @pytest.mark.parametrize("exit_code", [0, 10])
    def test_normal_and_shutdown_terminate(self, exit_code):
        """Test that normal completion and shutdown requests stop the supervisor."""
        decision = resolve_action(exit_code)

        assert decision.action is SupervisorAction.TERMINATE
        assert decision.is_terminal
        assert decision.log_level == logging.INFO

    def test_error_continues(self):
        """Test that a generic error is logged as an error and the loop continues."""
        decision = resolve_action(1)

        assert decision.action is SupervisorAction.CONTINUE
        assert not decision.is_terminal
        assert decision.log_level == logging.ERROR

    def test_restart_continues(self):
        """Test that a restart request continues the loop."""
        decision = resolve_action(11)

        assert decision.action is SupervisorAction.CONTINUE
        assert decision.log_level == logging.INFO

    def test_update_requests_update(self):
        """Test that an update request selects the update action."""
        decision = resolve_action(12)

        assert decision.action is SupervisorAction.UPDATE
        assert not decision.is_terminal

    def test_unknown_continues_with_code_in_message(self):
        """Test that unknown codes continue and name the code."""
        decision = resolve_action(42)

        assert decision.reason is ExitReason.UNKNOWN
        assert decision.action is SupervisorAction.CONTINUE
        assert "42" in decision.message

    def test_mapping_is_total_and_deterministic(self):
        """Test that every integer in a wide range resolves, and always the same way."""
        for exit_code in range(-64, 300):
            first = resolve_action(exit_code)
            assert first == resolve_action(exit_code)
            assert first.exit_code == exit_code
            assert isinstance(first.action, SupervisorAction)
