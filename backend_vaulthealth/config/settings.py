"""
Application settings and environment configuration.

Responsibilities:
- Load configuration from environment variables and the optional .env file.
- Validate values and provide defaults for every optional setting.
- Expose a typed, immutable Settings object for the reporter and scheduler.
"""

from __future__ import annotations

from dataclasses import dataclass

from backend_vaulthealth.config.env import (
    DEFAULT_API_BASE_URL,
    DEFAULT_REPORT_DELAY_SEC,
    DEFAULT_REPORT_PATH,
    DEFAULT_REQUEST_TIMEOUT_SEC,
    DEFAULT_USER_SWITCH_POLICY,
    ENV_API_BASE_URL,
    ENV_API_TOKEN,
    ENV_REPORT_DELAY_SEC,
    ENV_REPORT_PATH,
    ENV_REQUEST_TIMEOUT_SEC,
    ENV_USER_SWITCH_POLICY,
    env_str,
    load_vaulthealth_env,
)
from backend_vaulthealth.core.exceptions import ConfigError

USER_SWITCH_POLICIES = ("discard", "complete")


@dataclass(frozen=True)
class Settings:
    """Resolved service settings."""

    report_delay_sec: float = DEFAULT_REPORT_DELAY_SEC
    api_base_url: str = DEFAULT_API_BASE_URL
    report_path: str = DEFAULT_REPORT_PATH
    api_token: str | None = None
    request_timeout_sec: float = DEFAULT_REQUEST_TIMEOUT_SEC
    user_switch_policy: str = DEFAULT_USER_SWITCH_POLICY


def _env_float(name: str, default: float) -> float:
    raw = env_str(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"expected a number, got {raw!r}", setting=name) from None


def get_settings() -> Settings:
    """
    Return the current application settings.

    Reads the environment (after loading .env) on every call so tests and
    long-running processes see changes. Raises ConfigError on invalid values.
    """
    load_vaulthealth_env()

    delay = _env_float(ENV_REPORT_DELAY_SEC, DEFAULT_REPORT_DELAY_SEC)
    if delay < 0:
        raise ConfigError("report delay must be >= 0", setting=ENV_REPORT_DELAY_SEC)

    timeout = _env_float(ENV_REQUEST_TIMEOUT_SEC, DEFAULT_REQUEST_TIMEOUT_SEC)
    if timeout <= 0:
        raise ConfigError("request timeout must be positive", setting=ENV_REQUEST_TIMEOUT_SEC)

    report_path = env_str(ENV_REPORT_PATH, DEFAULT_REPORT_PATH)
    if not report_path.startswith("/"):
        report_path = "/" + report_path

    policy = env_str(ENV_USER_SWITCH_POLICY, DEFAULT_USER_SWITCH_POLICY).lower()
    if policy not in USER_SWITCH_POLICIES:
        raise ConfigError(
            f"user switch policy must be one of {USER_SWITCH_POLICIES}, got {policy!r}",
            setting=ENV_USER_SWITCH_POLICY,
        )

    return Settings(
        report_delay_sec=delay,
        api_base_url=env_str(ENV_API_BASE_URL, DEFAULT_API_BASE_URL).rstrip("/"),
        report_path=report_path,
        api_token=env_str(ENV_API_TOKEN),
        request_timeout_sec=timeout,
        user_switch_policy=policy,
    )
