"""
Pytest fixtures for VaultHealth tests.

Fake vault, scorer, sender and active-user collaborators, plus a timer factory
whose timers only fire when the test says so (no sleeps, no real threads).
"""

from __future__ import annotations

from typing import Any

import pytest

from backend_vaulthealth.core.exceptions import ReportDeliveryError
from backend_vaulthealth.vault.models import CipherType, CredentialRecord
from backend_vaulthealth.vault.sources import PasswordStrength

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


def _login(password: str | None = "hunter2", username: str | None = "jane.doe@example.com", **kwargs: Any) -> CredentialRecord:
    """Scorable login record unless overridden."""
    return CredentialRecord(kind=kwargs.pop("kind", CipherType.LOGIN), username=username, password=password, **kwargs)


class FakeScorer:
    """Returns a fixed score per password (default 4) and records every call."""

    def __init__(self, scores: dict[str, int | None] | None = None, default: int | None = 4) -> None:
        self.scores = scores or {}
        self.default = default
        self.calls: list[tuple[str, str | None, list[str] | None]] = []

    def get_password_strength(self, password, context, user_inputs):
        self.calls.append((password, context, user_inputs))
        return PasswordStrength(score=self.scores.get(password, self.default))


class FakeVault:
    """Credential and organization source keyed by user id."""

    def __init__(self) -> None:
        self.credentials: dict[str, list[Any]] = {}
        self.organizations: dict[str, list[str]] = {}
        self.credential_calls = 0
        self.fail_with: Exception | None = None

    def get_all_decrypted(self, user_id):
        self.credential_calls += 1
        if self.fail_with is not None:
            raise self.fail_with
        return list(self.credentials.get(user_id, []))

    def organization_ids(self, user_id):
        return list(self.organizations.get(user_id, []))


class RecordingSender:
    """Collects sent reports; raises ReportDeliveryError while fail is True."""

    def __init__(self) -> None:
        self.sent: list[Any] = []
        self.fail = False
        self.closed = False

    def send(self, report):
        if self.fail:
            raise ReportDeliveryError("backend unavailable", status_code=503)
        self.sent.append(report)

    def close(self):
        self.closed = True


class ActiveUser:
    """Active-user source; set .user_id to simulate an account switch."""

    def __init__(self, user_id: str | None = USER_ID) -> None:
        self.user_id = user_id

    def active_user_id(self):
        return self.user_id


class ManualTimer:
    """threading.Timer stand-in; the test calls fire() to end the delay."""

    def __init__(self, interval, function, args=None, kwargs=None) -> None:
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.kwargs = kwargs or {}
        self.daemon = False
        self.started = False
        self.fired = False

    def start(self):
        self.started = True

    def join(self, timeout=None):
        return None

    def fire(self):
        self.fired = True
        return self.function(*self.args, **self.kwargs)


class ManualTimerFactory:
    def __init__(self) -> None:
        self.timers: list[ManualTimer] = []

    def __call__(self, interval, function, args=None, kwargs=None) -> ManualTimer:
        timer = ManualTimer(interval, function, args=args, kwargs=kwargs)
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> ManualTimer:
        return self.timers[-1]


@pytest.fixture
def scorer():
    return FakeScorer()


@pytest.fixture
def vault():
    v = FakeVault()
    v.credentials[USER_ID] = [_login()]
    v.organizations[USER_ID] = ["org-a", "org-b"]
    return v


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def timers():
    return ManualTimerFactory()


@pytest.fixture
def outcomes():
    return []


@pytest.fixture
def make_scheduler(vault, scorer, sender, timers, outcomes):
    """Factory for a scheduler wired to the fakes; kwargs override defaults."""
    from backend_vaulthealth.scheduler.engine import SchedulerConfig, WeakPasswordReportScheduler

    def _make(**kwargs):
        kwargs.setdefault("config", SchedulerConfig(delay_sec=3.0))
        kwargs.setdefault("on_outcome", outcomes.append)
        kwargs.setdefault("timer_factory", timers)
        return WeakPasswordReportScheduler(vault, vault, scorer, sender, **kwargs)

    return _make


@pytest.fixture
def user_id():
    return USER_ID


@pytest.fixture
def other_user_id():
    return OTHER_USER_ID


@pytest.fixture
def make_login():
    """Build a CredentialRecord: make_login(password=..., username=..., kind=..., ...)."""
    return _login


@pytest.fixture
def make_scorer():
    """FakeScorer class: make_scorer({"pw": 1}, default=4)."""
    return FakeScorer


@pytest.fixture
def active_user():
    """Active-user source currently on user_id; set .user_id to switch accounts."""
    return ActiveUser(USER_ID)
