from __future__ import annotations

import re

from econbot.db.ledger import LedgerStore
from econbot.db.models import User
from econbot.services.errors import NotFound

_MENTION = re.compile(r"^<@!?(\d+)>$")
_DIGITS = re.compile(r"^\d{5,}$")


def canonical_identity(raw: int | str) -> int | None:
    """Normalize a user id, ``<@id>`` or ``<@!id>`` mention to one integer identity."""
    if isinstance(raw, int):
        return raw if raw > 0 else None
    text = str(raw).strip()
    match = _MENTION.match(text)
    if match:
        return int(match.group(1))
    if _DIGITS.match(text):
        return int(text)
    return None


def resolve_user(store: LedgerStore, token: str) -> User:
    """Find a registered user by mention, id or username."""
    identity = canonical_identity(token)
    if identity is not None and store.has_user(identity):
        user = store.get_user(identity)
        if user.registered:
            return user
    user = store.user_by_username(token.lstrip("@"))
    if user is None:
        raise NotFound(f"No registered user matches {token}.")
    return user
