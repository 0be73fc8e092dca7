"""Service settings and process-wide logging setup.

Settings are read once at startup from ``ECHO_*`` environment variables
and are immutable afterwards.
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from fastapi_echo_server.exceptions import ConfigurationError

ENV_PREFIX = "ECHO_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    """Echo service settings.

    Attributes:
        host: Bind address for the server.
        port: Bind port for the server.
        concurrency_limit: Maximum number of requests processed at once.
        buffer_depth: Maximum number of requests waiting for a slot.
        strict_status: Answer statuses outside [200, 600] with 500.
        log_level: Root log level name.
    """

    host: str = "0.0.0.0"
    port: int = 3000
    concurrency_limit: int = 200
    buffer_depth: int = 4096
    strict_status: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from ECHO_* environment variables.

        Unset variables keep their defaults.

        Args:
            environ: Mapping to read from (defaults to os.environ).

        Raises:
            ConfigurationError: If a variable holds a malformed value.
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        log_level = env.get(f"{ENV_PREFIX}LOG_LEVEL", defaults.log_level).upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigurationError(f"{ENV_PREFIX}LOG_LEVEL is not a log level: {log_level!r}")

        return cls(
            host=env.get(f"{ENV_PREFIX}HOST", defaults.host),
            port=_int_var(env, "PORT", defaults.port),
            concurrency_limit=_int_var(env, "CONCURRENCY_LIMIT", defaults.concurrency_limit),
            buffer_depth=_int_var(env, "BUFFER_DEPTH", defaults.buffer_depth),
            strict_status=_bool_var(env, "STRICT_STATUS", defaults.strict_status),
            log_level=log_level,
        )


def _int_var(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(f"{ENV_PREFIX}{name}")
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"{ENV_PREFIX}{name} must be an integer, got {raw!r}"
        ) from exc


def _bool_var(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(f"{ENV_PREFIX}{name}")
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{ENV_PREFIX}{name} must be a boolean, got {raw!r}")


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
