"""
Tests for environment-driven settings.
"""

from __future__ import annotations

import pytest

from backend_vaulthealth.config import get_settings
from backend_vaulthealth.core.exceptions import ConfigError

ENV_VARS = (
    "VAULTHEALTH_REPORT_DELAY_SEC",
    "VAULTHEALTH_API_BASE_URL",
    "VAULTHEALTH_REPORT_PATH",
    "VAULTHEALTH_API_TOKEN",
    "VAULTHEALTH_REQUEST_TIMEOUT_SEC",
    "VAULTHEALTH_USER_SWITCH_POLICY",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    s = get_settings()
    assert s.report_delay_sec == 3.0
    assert s.api_base_url == "http://localhost:4000"
    assert s.report_path == "/custom/report"
    assert s.api_token is None
    assert s.request_timeout_sec == 10.0
    assert s.user_switch_policy == "discard"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("VAULTHEALTH_REPORT_DELAY_SEC", "0.25")
    monkeypatch.setenv("VAULTHEALTH_API_BASE_URL", "https://vault.example.org/")
    monkeypatch.setenv("VAULTHEALTH_REPORT_PATH", "reports/weak")
    monkeypatch.setenv("VAULTHEALTH_API_TOKEN", " secret ")
    monkeypatch.setenv("VAULTHEALTH_REQUEST_TIMEOUT_SEC", "2")
    monkeypatch.setenv("VAULTHEALTH_USER_SWITCH_POLICY", "COMPLETE")
    s = get_settings()
    assert s.report_delay_sec == 0.25
    assert s.api_base_url == "https://vault.example.org"
    assert s.report_path == "/reports/weak"
    assert s.api_token == "secret"
    assert s.request_timeout_sec == 2.0
    assert s.user_switch_policy == "complete"


def test_blank_values_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("VAULTHEALTH_REPORT_DELAY_SEC", "  ")
    monkeypatch.setenv("VAULTHEALTH_API_TOKEN", "")
    s = get_settings()
    assert s.report_delay_sec == 3.0
    assert s.api_token is None


@pytest.mark.parametrize(
    "name,value",
    [
        ("VAULTHEALTH_REPORT_DELAY_SEC", "soon"),
        ("VAULTHEALTH_REPORT_DELAY_SEC", "-1"),
        ("VAULTHEALTH_REQUEST_TIMEOUT_SEC", "0"),
        ("VAULTHEALTH_USER_SWITCH_POLICY", "relabel"),
    ],
)
def test_invalid_values_raise(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigError) as exc_info:
        get_settings()
    assert exc_info.value.setting == name
    assert name in str(exc_info.value)
