"""
Debounced, single-flight weak-password report scheduler.

A change signal starts a delay timer; when it fires, one cycle runs: pull the
credential snapshot and organization ids, aggregate, deliver once. Signals
that arrive while a cycle is pending or running are ignored, so a burst of N
signals inside one window yields exactly one report. The guard is released
only after the delivery attempt finishes, success or failure.

Every cycle produces a CycleOutcome that is logged and handed to the optional
on_outcome sink. Nothing raised inside a cycle reaches the signal source.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable

from backend_vaulthealth.analysis_engine.report import WeakPasswordReport, generate_report
from backend_vaulthealth.api_client.reporter import ReportSender
from backend_vaulthealth.config.env import DEFAULT_REPORT_DELAY_SEC
from backend_vaulthealth.core.exceptions import (
    CredentialSourceError,
    ReportInFlightError,
    ServiceClosedError,
)
from backend_vaulthealth.vault.sources import (
    ActiveUserSource,
    CredentialSource,
    OrganizationSource,
    PasswordStrengthScorer,
)
from backend_vaulthealth.vaulthealth_logging import bind_user, get_logger

logger = get_logger(__name__)

CYCLE_SENT = "sent"
CYCLE_FAILED = "failed"
CYCLE_DISCARDED = "discarded"

TimerFactory = Callable[..., Any]


class UserSwitchPolicy(str, Enum):
    """What a cycle does when the active user changed since it was triggered."""

    DISCARD = "discard"
    """Drop the cycle; nothing is sent."""
    COMPLETE = "complete"
    """Finish under the identity that triggered the cycle."""


@dataclass
class SchedulerConfig:
    """Config for the report scheduler."""

    delay_sec: float = DEFAULT_REPORT_DELAY_SEC
    """Quiet period between the first signal and the report cycle."""
    user_switch_policy: UserSwitchPolicy = UserSwitchPolicy.DISCARD


@dataclass(frozen=True)
class CycleOutcome:
    """Result of one report cycle."""

    status: str
    user_id: str
    report: WeakPasswordReport | None = None
    error: Exception | None = None
    reason: str | None = None
    duration_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status == CYCLE_SENT


class WeakPasswordReportScheduler:
    """
    Single-flight scheduler for one active-user context.

    notify_changed() is safe to call from any thread. The guard flag is
    checked and set under a lock, set before the timer starts, and cleared
    only when the cycle (generation + delivery attempt) is over.
    """

    def __init__(
        self,
        credentials: CredentialSource,
        organizations: OrganizationSource,
        scorer: PasswordStrengthScorer,
        sender: ReportSender,
        *,
        config: SchedulerConfig | None = None,
        active_user: ActiveUserSource | None = None,
        on_outcome: Callable[[CycleOutcome], None] | None = None,
        timer_factory: TimerFactory = threading.Timer,
    ) -> None:
        self._config = config or SchedulerConfig()
        if self._config.delay_sec < 0:
            raise ValueError("delay_sec must be >= 0")
        self._credentials = credentials
        self._organizations = organizations
        self._scorer = scorer
        self._sender = sender
        self._active_user = active_user
        self._on_outcome = on_outcome
        self._timer_factory = timer_factory

        self._lock = threading.Lock()
        self._in_flight = False
        self._closed = False
        self._timer: Any = None

    @property
    def in_flight(self) -> bool:
        with self._lock:
            return self._in_flight

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    @property
    def config(self) -> SchedulerConfig:
        return self._config

    def notify_changed(self, user_id: str) -> bool:
        """
        Signal that user_id's credential set is available/changed and non-empty.
        Returns True if a cycle was scheduled, False if the signal was ignored.
        """
        if not user_id:
            logger.debug("report_signal_ignored", reason="no_user_id")
            return False
        log = bind_user(user_id, __name__)
        with self._lock:
            if self._closed:
                log.debug("report_signal_ignored", reason="closed")
                return False
            if self._in_flight:
                log.debug("report_signal_ignored", reason="in_flight")
                return False
            timer = self._timer_factory(self._config.delay_sec, self._run_cycle, args=(user_id,))
            timer.daemon = True
            self._in_flight = True
            self._timer = timer
            try:
                timer.start()
            except Exception:
                self._in_flight = False
                self._timer = None
                log.exception("report_timer_start_failed")
                return False
        log.info("report_cycle_scheduled", delay_sec=self._config.delay_sec)
        return True

    def report_now(self, user_id: str) -> WeakPasswordReport:
        """
        Generate and send a report immediately, raising any failure to the
        caller. Skips the delay but still honours single-flight. Raises
        ServiceClosedError once close() has been called.
        """
        with self._lock:
            if self._closed:
                raise ServiceClosedError("report scheduler is closed")
            if self._in_flight:
                raise ReportInFlightError(f"a report cycle is already in flight for {user_id}")
            self._in_flight = True
        try:
            report = self._build_report(user_id)
            self._sender.send(report)
        finally:
            with self._lock:
                self._in_flight = False
        bind_user(user_id, __name__).info(
            "report_sent",
            weak_password_count=report.weak_password_count,
            total_password_count=report.total_password_count,
            trigger="manual",
        )
        return report

    def close(self, timeout: float | None = None) -> None:
        """Stop accepting signals and wait for a pending or running cycle to finish."""
        with self._lock:
            self._closed = True
            timer = self._timer
        join = getattr(timer, "join", None)
        if join is not None and timer is not threading.current_thread():
            join(timeout)
        logger.debug("report_scheduler_closed")

    def _build_report(self, user_id: str) -> WeakPasswordReport:
        try:
            credentials = self._credentials.get_all_decrypted(user_id)
            organization_ids = self._organizations.organization_ids(user_id)
        except Exception as e:
            raise CredentialSourceError(f"could not load vault snapshot: {e}") from e
        return generate_report(user_id, credentials, organization_ids, self._scorer)

    def _user_switched(self, user_id: str, stage: str) -> bool:
        """True when the cycle must be dropped because the active user changed."""
        if self._active_user is None:
            return False
        try:
            current = self._active_user.active_user_id()
        except Exception as e:
            raise CredentialSourceError(f"could not resolve active user: {e}") from e
        if current == user_id:
            return False
        if self._config.user_switch_policy == UserSwitchPolicy.COMPLETE:
            bind_user(user_id, __name__).info("report_cycle_stale_identity", stage=stage)
            return False
        return True

    def _execute(self, user_id: str) -> CycleOutcome:
        if self._user_switched(user_id, "before_generation"):
            return CycleOutcome(CYCLE_DISCARDED, user_id, reason="user_switched_before_generation")
        report = self._build_report(user_id)
        if self._user_switched(user_id, "before_delivery"):
            return CycleOutcome(CYCLE_DISCARDED, user_id, report=report, reason="user_switched_before_delivery")
        self._sender.send(report)
        return CycleOutcome(CYCLE_SENT, user_id, report=report)

    def _run_cycle(self, user_id: str) -> CycleOutcome:
        start = time.monotonic()
        try:
            outcome = self._execute(user_id)
        except Exception as e:
            outcome = CycleOutcome(CYCLE_FAILED, user_id, error=e)
        finally:
            with self._lock:
                self._in_flight = False
                self._timer = None
        outcome = replace(outcome, duration_ms=round((time.monotonic() - start) * 1000, 2))
        self._emit(outcome)
        return outcome

    def _emit(self, outcome: CycleOutcome) -> None:
        log = bind_user(outcome.user_id, __name__)
        if outcome.status == CYCLE_SENT:
            log.info(
                "report_sent",
                weak_password_count=outcome.report.weak_password_count,
                total_password_count=outcome.report.total_password_count,
                duration_ms=outcome.duration_ms,
            )
        elif outcome.status == CYCLE_DISCARDED:
            log.info("report_cycle_discarded", reason=outcome.reason)
        else:
            log.warning(
                "report_cycle_failed",
                error=str(outcome.error),
                error_type=type(outcome.error).__name__,
                duration_ms=outcome.duration_ms,
            )
        if self._on_outcome is None:
            return
        try:
            self._on_outcome(outcome)
        except Exception as e:
            log.warning("report_outcome_sink_failed", error=str(e))
