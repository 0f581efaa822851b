"""
Weak-password report aggregation.

Walks a credential snapshot once, counts scorable and weak passwords, and
builds the immutable report handed to the reporter. Deterministic for a given
snapshot and scorer except for the timestamp.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable

from backend_vaulthealth.analysis_engine.classifier import is_scorable, is_weak
from backend_vaulthealth.vault.models import CredentialRecord
from backend_vaulthealth.vault.sources import PasswordStrengthScorer
from backend_vaulthealth.vaulthealth_logging import get_logger

logger = get_logger(__name__)


def format_timestamp(when: datetime) -> str:
    """ISO 8601 in UTC with millisecond precision and a Z suffix."""
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return when.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class WeakPasswordReport:
    """Aggregate counts for one user at one point in time."""

    user_id: str
    organization_ids: tuple[str, ...]
    weak_password_count: int
    total_password_count: int
    timestamp: str

    def to_dict(self) -> dict[str, Any]:
        """Wire payload (camelCase keys) for the report endpoint."""
        return {
            "userId": self.user_id,
            "organizationIds": list(self.organization_ids),
            "weakPasswordCount": self.weak_password_count,
            "totalPasswordCount": self.total_password_count,
            "timestamp": self.timestamp,
        }


def _as_record(item: Any) -> CredentialRecord | None:
    if isinstance(item, CredentialRecord):
        return item
    if isinstance(item, dict):
        return CredentialRecord.from_dict(item)
    return None


def generate_report(
    user_id: str,
    credentials: Iterable[Any] | None,
    organization_ids: Iterable[str] | None,
    scorer: PasswordStrengthScorer,
    *,
    now: datetime | None = None,
) -> WeakPasswordReport:
    """
    Count scorable and weak passwords in the snapshot and build the report.

    credentials may hold CredentialRecord objects or raw vault dicts; anything
    that cannot be read as a record is skipped, never fatal. organization_ids
    are copied verbatim.
    """
    weak = 0
    total = 0
    skipped = 0
    for item in credentials or ():
        record = _as_record(item)
        if record is None:
            skipped += 1
            continue
        if not is_scorable(record):
            continue
        total += 1
        if is_weak(record, scorer):
            weak += 1
    if skipped:
        logger.debug("report_records_skipped", user_id=user_id, skipped=skipped)
    return WeakPasswordReport(
        user_id=user_id,
        organization_ids=tuple(organization_ids or ()),
        weak_password_count=weak,
        total_password_count=total,
        timestamp=format_timestamp(now or datetime.now(timezone.utc)),
    )
