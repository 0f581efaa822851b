"""
Vault-side models and collaborator interfaces.
"""

from backend_vaulthealth.vault.models import CipherType, CredentialRecord
from backend_vaulthealth.vault.sources import (
    ActiveUserSource,
    CredentialFeed,
    CredentialSource,
    OrganizationSource,
    PasswordStrength,
    PasswordStrengthScorer,
)

__all__ = [
    "ActiveUserSource",
    "CipherType",
    "CredentialFeed",
    "CredentialRecord",
    "CredentialSource",
    "OrganizationSource",
    "PasswordStrength",
    "PasswordStrengthScorer",
]
