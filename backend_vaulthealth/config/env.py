"""
Environment variable loading for VaultHealth.

- VAULTHEALTH_REPORT_DELAY_SEC: debounce delay before a report cycle runs (default 3.0)
- VAULTHEALTH_API_BASE_URL: backend base URL the report is POSTed to
- VAULTHEALTH_REPORT_PATH: endpoint path for the weak-password report
- VAULTHEALTH_API_TOKEN: bearer token for the authenticated request (optional)
- VAULTHEALTH_REQUEST_TIMEOUT_SEC: HTTP timeout for the delivery call
- VAULTHEALTH_USER_SWITCH_POLICY: discard | complete
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is backend_vaulthealth/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

ENV_REPORT_DELAY_SEC = "VAULTHEALTH_REPORT_DELAY_SEC"
ENV_API_BASE_URL = "VAULTHEALTH_API_BASE_URL"
ENV_REPORT_PATH = "VAULTHEALTH_REPORT_PATH"
ENV_API_TOKEN = "VAULTHEALTH_API_TOKEN"
ENV_REQUEST_TIMEOUT_SEC = "VAULTHEALTH_REQUEST_TIMEOUT_SEC"
ENV_USER_SWITCH_POLICY = "VAULTHEALTH_USER_SWITCH_POLICY"

DEFAULT_REPORT_DELAY_SEC = 3.0
DEFAULT_API_BASE_URL = "http://localhost:4000"
DEFAULT_REPORT_PATH = "/custom/report"
DEFAULT_REQUEST_TIMEOUT_SEC = 10.0
DEFAULT_USER_SWITCH_POLICY = "discard"


def load_vaulthealth_env() -> None:
    """Load .env from project root. Safe to call multiple times; never overrides set vars."""
    if _ENV_PATH.is_file():
        load_dotenv(_ENV_PATH, override=False)


def env_str(name: str, default: str | None = None) -> str | None:
    """Return a stripped env value, or default when unset or blank."""
    raw = (os.getenv(name) or "").strip()
    return raw or default
