"""
Domain models for vault credential records.

A read-only snapshot of what the external vault store hands us after
decryption. No storage or crypto here; the vault owns the records.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any


class CipherType(IntEnum):
    """Vault item kinds. Only LOGIN carries a scorable password."""

    LOGIN = 1
    SECURE_NOTE = 2
    CARD = 3
    IDENTITY = 4
    SSH_KEY = 5


def _parse_kind(raw: Any) -> CipherType | None:
    if isinstance(raw, CipherType):
        return raw
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        try:
            return CipherType(raw)
        except ValueError:
            return None
    if isinstance(raw, str):
        key = raw.strip().upper().replace(" ", "_")
        if key.isdigit():
            return _parse_kind(int(key))
        return CipherType.__members__.get(key)
    return None


def _optional_text(raw: Any) -> str | None:
    return raw if isinstance(raw, str) else None


def _flag(raw: Any, default: bool) -> bool:
    if isinstance(raw, bool):
        return raw
    return default


@dataclass(frozen=True)
class CredentialRecord:
    """Single decrypted vault item as seen by the weak-password report."""

    kind: CipherType | None
    """Item kind; None when the source value was unrecognised."""
    username: str | None = None
    password: str | None = None
    is_deleted: bool = False
    """True when the item sits in the trash."""
    is_password_viewable: bool = True
    """False when policy hides the password from the current user."""
    id: str | None = None

    @classmethod
    def from_dict(cls, item: dict[str, Any]) -> "CredentialRecord":
        """
        Build from a vault item dict. Accepts camelCase or snake_case keys and
        either a flat shape or a nested "login" object. Malformed fields fall
        back to None/defaults rather than raising, so a bad item is simply
        not scorable.
        """
        login = item.get("login")
        if not isinstance(login, dict):
            login = item
        kind_raw = item.get("kind", item.get("type"))
        deleted_raw = item.get("isDeleted", item.get("is_deleted"))
        if deleted_raw is None and item.get("deletedDate") is not None:
            deleted_raw = True
        viewable_raw = item.get(
            "isPasswordViewable",
            item.get("is_password_viewable", item.get("viewPassword")),
        )
        return cls(
            kind=_parse_kind(kind_raw),
            username=_optional_text(login.get("username")),
            password=_optional_text(login.get("password")),
            is_deleted=_flag(deleted_raw, False),
            is_password_viewable=_flag(viewable_raw, True),
            id=_optional_text(item.get("id")),
        )
