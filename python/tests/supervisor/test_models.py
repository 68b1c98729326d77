"""
Unit tests for supervisor models module.

Tests configuration parsing, validation functions, and error handling.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from worker_bootstrap.supervisor.models import (
    ConfigurationError,
    LaunchConfig,
    SupervisorConfig,
    SupervisorState,
    _get_env_int,
    _get_env_str,
    parse_environment_variables,
)


class TestSupervisorConfig:
    """Test the SupervisorConfig dataclass."""

    def test_default_values(self):
        """Test SupervisorConfig with default values."""
        config = SupervisorConfig()

        assert config.max_boots == 3
        assert config.boot_window_seconds == 30
        assert config.jar_path == "PolyBot.jar"
        assert config.jenkins_url == "https://ci.solo-studios.ca"
        assert config.jenkins_project == "job/solo-studios/job/PolyBot"
        assert config.artifact_suffix == "-all.jar"
        assert config.log_level == "info"

    def test_custom_values(self):
        """Test SupervisorConfig with custom values."""
        config = SupervisorConfig(max_boots=5, boot_window_seconds=60, jar_path="app.jar")

        assert config.max_boots == 5
        assert config.boot_window_seconds == 60
        assert config.jar_path == "app.jar"


class TestLaunchConfig:
    """Test the LaunchConfig dataclass."""

    def test_defaults(self):
        """Test the default runtime settings."""
        launch = LaunchConfig(jar_path=Path("PolyBot.jar"))

        assert launch.executable == "java"
        assert launch.runtime_flags == ("-Dfile.encoding=UTF-8",)
        assert launch.max_heap is None
        assert launch.initial_heap is None
        assert launch.runtime_args == ()
        assert launch.worker_args == ()

    def test_is_immutable(self):
        """Test that the launch settings cannot change after startup."""
        launch = LaunchConfig(jar_path=Path("PolyBot.jar"))

        with pytest.raises(AttributeError):
            launch.max_heap = "1G"


class TestSupervisorState:
    """Test the SupervisorState dataclass."""

    def test_initial_state(self):
        """Test that a fresh state has no history."""
        state = SupervisorState()

        assert state.recent_boot_count == 0
        assert state.last_attempt_time is None
        assert state.has_backup is False
        assert state.spawn_count == 0


class TestGetEnvInt:
    """Test the _get_env_int helper function."""

    def test_default_value(self):
        """Test returning default when env var not set."""
        assert _get_env_int("NONEXISTENT_VAR", 42) == 42

    def test_valid_integer(self):
        """Test parsing valid integer from environment."""
        with patch.dict(os.environ, {"TEST_INT": "25"}):
            assert _get_env_int("TEST_INT", 10) == 25

    def test_invalid_integer(self):
        """Test error on invalid integer."""
        with patch.dict(os.environ, {"TEST_INT": "not_a_number"}):
            with pytest.raises(ConfigurationError, match="must be an integer"):
                _get_env_int("TEST_INT", 10)

    def test_below_minimum(self):
        """Test error when value below minimum."""
        with patch.dict(os.environ, {"TEST_INT": "0"}):
            with pytest.raises(ConfigurationError, match="must be between 1 and 100"):
                _get_env_int("TEST_INT", 10, min_val=1, max_val=100)

    def test_above_maximum(self):
        """Test error when value above maximum."""
        with patch.dict(os.environ, {"TEST_INT": "150"}):
            with pytest.raises(ConfigurationError, match="must be between 0 and 100"):
                _get_env_int("TEST_INT", 10, min_val=0, max_val=100)

    def test_empty_string(self):
        """Test empty string returns default."""
        with patch.dict(os.environ, {"TEST_INT": ""}):
            assert _get_env_int("TEST_INT", 42) == 42


class TestGetEnvStr:
    """Test the _get_env_str helper function."""

    def test_default_value(self):
        """Test returning default when env var not set."""
        assert _get_env_str("NONEXISTENT_VAR", "default") == "default"

    def test_whitespace_trimming(self):
        """Test that whitespace is trimmed."""
        with patch.dict(os.environ, {"TEST_STR": "  test_value  "}):
            assert _get_env_str("TEST_STR", "default") == "test_value"

    def test_whitespace_only(self):
        """Test whitespace-only string raises error."""
        with patch.dict(os.environ, {"TEST_STR": "   "}):
            with pytest.raises(ConfigurationError, match="cannot be empty"):
                _get_env_str("TEST_STR", "default")

    def test_allowed_values_case_insensitive(self):
        """Test validation with allowed values is case insensitive."""
        with patch.dict(os.environ, {"TEST_STR": "DEBUG"}):
            result = _get_env_str("TEST_STR", "info", allowed=["debug", "info"])
            assert result == "DEBUG"

    def test_allowed_values_invalid(self):
        """Test error when value not in allowed list."""
        with patch.dict(os.environ, {"TEST_STR": "invalid"}):
            with pytest.raises(ConfigurationError, match="must be one of"):
                _get_env_str("TEST_STR", "info", allowed=["debug", "info"])


class TestParseEnvironmentVariables:
    """Test parse_environment_variables."""

    def test_defaults(self):
        """Test parsing with no BOOTSTRAP_ variables set."""
        with patch.dict(os.environ, {}, clear=True):
            config = parse_environment_variables()

        assert config == SupervisorConfig()

    def test_custom(self):
        """Test that every BOOTSTRAP_ variable is honoured."""
        test_env = {
            "BOOTSTRAP_MAX_BOOTS": "5",
            "BOOTSTRAP_BOOT_WINDOW_SECONDS": "120",
            "BOOTSTRAP_JAR_PATH": "/opt/bot/bot.jar",
            "BOOTSTRAP_JENKINS_URL": "https://ci.example.com/",
            "BOOTSTRAP_JENKINS_PROJECT": "/job/bot/",
            "BOOTSTRAP_ARTIFACT_SUFFIX": "-shaded.jar",
            "BOOTSTRAP_LOG_LEVEL": "DEBUG",
        }
        with patch.dict(os.environ, test_env, clear=True):
            config = parse_environment_variables()

        assert config.max_boots == 5
        assert config.boot_window_seconds == 120
        assert config.jar_path == "/opt/bot/bot.jar"
        assert config.jenkins_url == "https://ci.example.com"
        assert config.jenkins_project == "job/bot"
        assert config.artifact_suffix == "-shaded.jar"
        assert config.log_level == "debug"

    def test_invalid_max_boots(self):
        """Test that zero boots is rejected."""
        with patch.dict(os.environ, {"BOOTSTRAP_MAX_BOOTS": "0"}, clear=True):
            with pytest.raises(ConfigurationError, match="BOOTSTRAP_MAX_BOOTS"):
                parse_environment_variables()

    def test_invalid_log_level(self):
        """Test that unknown log levels are rejected."""
        with patch.dict(os.environ, {"BOOTSTRAP_LOG_LEVEL": "loud"}, clear=True):
            with pytest.raises(ConfigurationError, match="BOOTSTRAP_LOG_LEVEL"):
                parse_environment_variables()
