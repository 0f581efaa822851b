"""
Backend VaultHealth: background weak-password telemetry for a credential vault.

Watches the active user's decrypted credential set, classifies each login as
weak or not through an external password-strength scorer, and sends one
aggregate report per burst of changes. Modular: vault models and collaborator
interfaces, analysis engine, debounced scheduler, HTTP reporter, lifecycle.
"""

__version__ = "0.1.0"
