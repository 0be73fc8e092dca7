"""Tests for settings loading."""

import dataclasses

import pytest

from fastapi_echo_server.config import Settings
from fastapi_echo_server.exceptions import ConfigurationError


class TestSettingsDefaults:
    """Defaults match the reference deployment."""

    def test_defaults(self) -> None:
        settings = Settings()
        assert settings.host == "0.0.0.0"
        assert settings.port == 3000
        assert settings.concurrency_limit == 200
        assert settings.buffer_depth == 4096
        assert settings.strict_status is True
        assert settings.log_level == "INFO"

    def test_is_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            Settings().port = 8080  # type: ignore[misc]


class TestSettingsFromEnv:
    """ECHO_* environment variables."""

    def test_empty_environment_gives_defaults(self) -> None:
        assert Settings.from_env({}) == Settings()

    def test_all_variables(self) -> None:
        settings = Settings.from_env(
            {
                "ECHO_HOST": "127.0.0.1",
                "ECHO_PORT": "8080",
                "ECHO_CONCURRENCY_LIMIT": "10",
                "ECHO_BUFFER_DEPTH": "0",
                "ECHO_STRICT_STATUS": "false",
                "ECHO_LOG_LEVEL": "debug",
            }
        )
        assert settings == Settings(
            host="127.0.0.1",
            port=8080,
            concurrency_limit=10,
            buffer_depth=0,
            strict_status=False,
            log_level="DEBUG",
        )

    def test_reads_os_environ_by_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ECHO_PORT", "4000")
        assert Settings.from_env().port == 4000

    @pytest.mark.parametrize("raw", ["1", "TRUE", "yes", "On"])
    def test_truthy_booleans(self, raw: str) -> None:
        assert Settings.from_env({"ECHO_STRICT_STATUS": raw}).strict_status is True

    def test_malformed_integer_names_variable(self) -> None:
        with pytest.raises(ConfigurationError, match="ECHO_PORT must be an integer"):
            Settings.from_env({"ECHO_PORT": "three thousand"})

    def test_malformed_boolean_names_variable(self) -> None:
        with pytest.raises(ConfigurationError, match="ECHO_STRICT_STATUS"):
            Settings.from_env({"ECHO_STRICT_STATUS": "maybe"})

    def test_unknown_log_level(self) -> None:
        with pytest.raises(ConfigurationError, match="ECHO_LOG_LEVEL"):
            Settings.from_env({"ECHO_LOG_LEVEL": "chatty"})
