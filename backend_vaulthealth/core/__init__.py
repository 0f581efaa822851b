"""
Core utilities: exception hierarchy shared by scheduler, reporter and config.
"""

from backend_vaulthealth.core.exceptions import (
    ConfigError,
    CredentialSourceError,
    ReportDeliveryError,
    ReportInFlightError,
    ServiceClosedError,
    VaultHealthError,
)

__all__ = [
    "ConfigError",
    "CredentialSourceError",
    "ReportDeliveryError",
    "ReportInFlightError",
    "ServiceClosedError",
    "VaultHealthError",
]
