"""
Configuration management for Backend VaultHealth.

Loads and validates settings from environment variables and an optional .env
file. Exposes a single source of truth for the reporter and scheduler.
"""

from backend_vaulthealth.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings"]
