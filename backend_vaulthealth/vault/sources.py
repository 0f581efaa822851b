"""
Interfaces for external collaborators and the in-process change feed.

Responsibilities:
- Describe what the report needs from the surrounding application: decrypted
  credentials, organization ids, the active user, and a password-strength scorer.
- Provide CredentialFeed, an explicit publish/subscribe channel the vault uses
  to announce "the credential set for this user is now available/changed".
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Callable, Protocol, Sequence

from backend_vaulthealth.vault.models import CredentialRecord
from backend_vaulthealth.vaulthealth_logging import get_logger

logger = get_logger(__name__)

FeedCallback = Callable[[str, Sequence[CredentialRecord]], None]


@dataclass(frozen=True)
class PasswordStrength:
    """Scorer result. score is a small ordinal (0-4) or None when unknown."""

    score: int | None
    details: dict[str, Any] | None = None


class CredentialSource(Protocol):
    def get_all_decrypted(self, user_id: str) -> Sequence[CredentialRecord]:
        """Return the current decrypted credential snapshot for user_id."""
        ...


class OrganizationSource(Protocol):
    def organization_ids(self, user_id: str) -> Sequence[str]:
        """Return ids of the organizations user_id belongs to."""
        ...


class ActiveUserSource(Protocol):
    def active_user_id(self) -> str | None:
        ...


class PasswordStrengthScorer(Protocol):
    def get_password_strength(
        self,
        password: str,
        context: str | None,
        user_inputs: list[str] | None,
    ) -> PasswordStrength:
        ...


class CredentialFeed:
    """
    Thread-safe publish/subscribe channel for credential-set changes.

    subscribe() returns an unsubscribe callable. publish() may be called from
    any thread; a failing subscriber is logged and does not stop delivery to
    the others.
    """

    def __init__(self) -> None:
        self._subscribers: list[FeedCallback] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: FeedCallback) -> Callable[[], None]:
        if not callable(callback):
            raise ValueError(f"Feed callback must be callable: {callback!r}")
        with self._lock:
            self._subscribers.append(callback)

        def _unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return _unsubscribe

    def publish(self, user_id: str, records: Sequence[CredentialRecord] | None) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        snapshot = list(records) if records else []
        for callback in subscribers:
            try:
                callback(user_id, snapshot)
            except Exception as e:
                logger.warning("credential_feed_subscriber_failed", user_id=user_id, error=str(e))

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)
