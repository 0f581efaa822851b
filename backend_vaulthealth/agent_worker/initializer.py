"""
Background vault services lifecycle.

Constructed once per process and started with an explicit initialize() call;
teardown() releases the feed subscription and waits for any in-flight report.
The feed callback forwards only non-empty credential sets to the scheduler and
never lets an exception escape back into the feed.
"""

from __future__ import annotations

import threading
from typing import Callable, Sequence

from backend_vaulthealth.api_client.reporter import HttpReportSender, ReportSender
from backend_vaulthealth.config.settings import Settings, get_settings
from backend_vaulthealth.core.exceptions import ServiceClosedError
from backend_vaulthealth.scheduler.engine import (
    CycleOutcome,
    SchedulerConfig,
    UserSwitchPolicy,
    WeakPasswordReportScheduler,
)
from backend_vaulthealth.vault.models import CredentialRecord
from backend_vaulthealth.vault.sources import (
    ActiveUserSource,
    CredentialFeed,
    CredentialSource,
    OrganizationSource,
    PasswordStrengthScorer,
)
from backend_vaulthealth.vaulthealth_logging import bind_user, get_logger

logger = get_logger(__name__)

SHUTDOWN_JOIN_TIMEOUT_SEC = 15.0


class VaultBackgroundServices:
    """Owns the feed subscription that drives the weak-password report scheduler."""

    def __init__(
        self,
        feed: CredentialFeed,
        scheduler: WeakPasswordReportScheduler,
        *,
        sender: ReportSender | None = None,
    ) -> None:
        self._feed = feed
        self._scheduler = scheduler
        self._sender = sender
        self._unsubscribe: Callable[[], None] | None = None
        self._torn_down = False
        self._lock = threading.Lock()

    @property
    def scheduler(self) -> WeakPasswordReportScheduler:
        return self._scheduler

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._unsubscribe is not None

    def initialize(self) -> "VaultBackgroundServices":
        """
        Subscribe to the credential feed. Calling it again is a no-op.
        A torn-down instance cannot be restarted: its scheduler is closed and
        an owned sender is released, so ServiceClosedError is raised instead.
        """
        with self._lock:
            if self._torn_down:
                raise ServiceClosedError("background services were torn down; build a new instance")
            if self._unsubscribe is not None:
                return self
            self._unsubscribe = self._feed.subscribe(self._on_credentials_changed)
        logger.info("vault_background_services_started")
        return self

    def teardown(self, timeout: float | None = SHUTDOWN_JOIN_TIMEOUT_SEC) -> None:
        """Unsubscribe, wait for an in-flight cycle, and close an owned sender."""
        with self._lock:
            if self._torn_down:
                return
            self._torn_down = True
            unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()
        self._scheduler.close(timeout)
        close = getattr(self._sender, "close", None)
        if close is not None:
            close()
        logger.info("vault_background_services_stopped")

    def _on_credentials_changed(self, user_id: str, records: Sequence[CredentialRecord] | None) -> None:
        if not records:
            return
        try:
            self._scheduler.notify_changed(user_id)
        except Exception as e:
            bind_user(user_id, __name__).warning("vault_background_notify_failed", error=str(e))


def build_background_services(
    feed: CredentialFeed,
    credentials: CredentialSource,
    organizations: OrganizationSource,
    scorer: PasswordStrengthScorer,
    *,
    settings: Settings | None = None,
    sender: ReportSender | None = None,
    active_user: ActiveUserSource | None = None,
    on_outcome: Callable[[CycleOutcome], None] | None = None,
) -> VaultBackgroundServices:
    """
    Wire scheduler and reporter from settings. Pass sender= to use a custom
    transport; otherwise an HttpReportSender is created and closed on teardown.
    Call initialize() on the result to start listening.
    """
    cfg = settings or get_settings()
    owned_sender = sender is None
    report_sender = sender or HttpReportSender.from_settings(cfg)
    scheduler = WeakPasswordReportScheduler(
        credentials,
        organizations,
        scorer,
        report_sender,
        config=SchedulerConfig(
            delay_sec=cfg.report_delay_sec,
            user_switch_policy=UserSwitchPolicy(cfg.user_switch_policy),
        ),
        active_user=active_user,
        on_outcome=on_outcome,
    )
    return VaultBackgroundServices(
        feed,
        scheduler,
        sender=report_sender if owned_sender else None,
    )
