"""Configuration values for reachability observations.

`ProbeConfig` is what a single observation runs with and is validated as soon
as it is built. `ObservingSettings` holds the defaults used by the
`netreach.core.connectivity` helpers and can be loaded from the environment.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os
from typing import Final

from netreach.core.error_handler import ErrorHandler
from netreach.core.errors import InvalidArgumentError

DEFAULT_INITIAL_INTERVAL_MS: Final[int] = 0
DEFAULT_INTERVAL_MS: Final[int] = 2000
DEFAULT_PORT: Final[int] = 80
MAX_PORT: Final[int] = 65535
DEFAULT_TIMEOUT_MS: Final[int] = 2000
DEFAULT_STRATEGY: Final[str] = "socket"

ENV_PREFIX: Final[str] = "NETREACH_"


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_non_negative(value: int, name: str) -> None:
    if not _is_int(value) or value < 0:
        raise InvalidArgumentError(f"{name} is negative")


def _check_positive(value: int, name: str) -> None:
    if not _is_int(value) or value <= 0:
        raise InvalidArgumentError(f"{name} is not a positive number")


def validate_target(host: str, port: int, timeout_ms: int, error_handler: ErrorHandler) -> None:
    if not isinstance(host, str) or not host:
        raise InvalidArgumentError("host is null or empty")
    _check_positive(port, "port")
    if port > MAX_PORT:
        raise InvalidArgumentError(f"port is greater than {MAX_PORT}")
    _check_positive(timeout_ms, "timeout_ms")
    if error_handler is None:
        raise InvalidArgumentError("error_handler is null")
    if not callable(error_handler):
        raise InvalidArgumentError("error_handler is not callable")


@dataclass(frozen=True, slots=True)
class ProbeConfig:
    initial_interval_ms: int
    interval_ms: int
    host: str
    port: int
    timeout_ms: int
    error_handler: ErrorHandler

    def __post_init__(self) -> None:
        _check_non_negative(self.initial_interval_ms, "initial_interval_ms")
        _check_positive(self.interval_ms, "interval_ms")
        validate_target(self.host, self.port, self.timeout_ms, self.error_handler)


@dataclass(frozen=True, slots=True)
class ObservingSettings:
    initial_interval_ms: int = DEFAULT_INITIAL_INTERVAL_MS
    interval_ms: int = DEFAULT_INTERVAL_MS
    host: str | None = None
    port: int = DEFAULT_PORT
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    strategy: str = DEFAULT_STRATEGY

    @classmethod
    def from_env(cls) -> ObservingSettings:
        host = (os.getenv(f"{ENV_PREFIX}HOST") or "").strip() or None
        strategy = (os.getenv(f"{ENV_PREFIX}STRATEGY") or "").strip().lower() or DEFAULT_STRATEGY

        return cls(
            initial_interval_ms=_env_int("INITIAL_INTERVAL_MS", DEFAULT_INITIAL_INTERVAL_MS),
            interval_ms=_env_int("INTERVAL_MS", DEFAULT_INTERVAL_MS),
            host=host,
            port=_env_int("PORT", DEFAULT_PORT),
            timeout_ms=_env_int("TIMEOUT_MS", DEFAULT_TIMEOUT_MS),
            strategy=strategy,
        )


def _env_int(name: str, default: int) -> int:
    key = f"{ENV_PREFIX}{name}"
    raw = (os.getenv(key) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise InvalidArgumentError(
            f"{key} must be an integer, got {raw!r}",
            user_message=f"Environment variable {key} must be a whole number.",
        ) from exc


@lru_cache(maxsize=1)
def get_settings() -> ObservingSettings:
    return ObservingSettings.from_env()
