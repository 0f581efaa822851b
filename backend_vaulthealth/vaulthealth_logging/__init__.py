"""
Structured logging for Backend VaultHealth.

JSON logs with timestamp, event_type, user_id and report counts.
Use get_logger() in every module.
"""

from backend_vaulthealth.vaulthealth_logging.logger import bind_user, configure_structlog, get_logger

__all__ = ["bind_user", "configure_structlog", "get_logger"]
