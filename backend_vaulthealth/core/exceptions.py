"""
Application-level exceptions.

Report cycles catch these at the cycle boundary and surface them in
CycleOutcome.error; report_now() lets them propagate to its caller.
"""

from __future__ import annotations


class VaultHealthError(Exception):
    """Base class for all backend_vaulthealth errors."""


class ConfigError(VaultHealthError):
    """Raised when an environment setting is missing or invalid."""

    def __init__(self, message: str, setting: str | None = None) -> None:
        self.setting = setting
        super().__init__(message)

    def __str__(self) -> str:
        msg = super().__str__()
        if self.setting:
            msg += f" (setting: {self.setting})"
        return msg


class CredentialSourceError(VaultHealthError):
    """Raised when the credential or organization snapshot cannot be obtained."""


class ReportDeliveryError(VaultHealthError):
    """Raised when the report could not be delivered to the backend."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class ReportInFlightError(VaultHealthError):
    """Raised by report_now() when a scheduled cycle already holds the guard."""


class ServiceClosedError(VaultHealthError):
    """Raised when a closed scheduler or torn-down service is asked to do work."""
