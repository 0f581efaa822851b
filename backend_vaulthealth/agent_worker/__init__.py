"""
Background vault services: explicit start/stop around the report scheduler.
"""

from backend_vaulthealth.agent_worker.initializer import (
    VaultBackgroundServices,
    build_background_services,
)

__all__ = ["VaultBackgroundServices", "build_background_services"]
