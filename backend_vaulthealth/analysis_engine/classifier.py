"""
Credential classification: scorable or not, weak or not.

Responsibilities:
- Decide whether a credential takes part in the weak-password report at all.
- Derive user-context tokens from the username so the scorer can penalise
  passwords built from the user's own name.
- Apply the fixed weak threshold to the external scorer's ordinal result.
"""

from __future__ import annotations

import re
from typing import Any

from backend_vaulthealth.vault.models import CipherType, CredentialRecord
from backend_vaulthealth.vault.sources import PasswordStrengthScorer

# Scores 0..WEAK_SCORE_MAX on the scorer's 0-4 scale count as weak
WEAK_SCORE_MAX = 2
MIN_TOKEN_LENGTH = 3

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]+")


def is_scorable(record: CredentialRecord) -> bool:
    """
    True iff the record is a login with a non-empty password that is neither
    deleted nor hidden from the current user. Anything else is invisible to
    the report: it counts toward neither weak nor total.
    """
    return (
        record.kind == CipherType.LOGIN
        and isinstance(record.password, str)
        and record.password != ""
        and record.is_deleted is False
        and record.is_password_viewable is True
    )


def derive_user_inputs(username: str | None) -> list[str]:
    """
    Tokens from the local part of the username (text before the first "@",
    or the whole value), lowercased and split on anything that is not an
    ASCII letter or digit. Fragments shorter than 3 characters are dropped;
    order is preserved.

        derive_user_inputs("jane.doe@example.com") -> ["jane", "doe"]
    """
    if not isinstance(username, str) or not username:
        return []
    local = username.split("@", 1)[0]
    parts = _NON_ALNUM.split(local.strip().lower())
    return [p for p in parts if len(p) >= MIN_TOKEN_LENGTH]


def _extract_score(result: Any) -> Any:
    if result is None:
        return None
    if isinstance(result, dict):
        return result.get("score")
    return getattr(result, "score", None)


def is_weak_score(score: Any) -> bool:
    """Weak iff score is a number <= WEAK_SCORE_MAX. None never counts as weak."""
    if score is None or isinstance(score, bool):
        return False
    if not isinstance(score, (int, float)):
        return False
    return score <= WEAK_SCORE_MAX


def is_weak(record: CredentialRecord, scorer: PasswordStrengthScorer) -> bool:
    """
    Score the record's password with the username tokens as user inputs.
    Non-scorable records are never weak and the scorer is not called.
    An empty token list is passed as None, never as [].
    """
    if not is_scorable(record):
        return False
    tokens = derive_user_inputs(record.username)
    result = scorer.get_password_strength(record.password, None, tokens or None)
    return is_weak_score(_extract_score(result))
