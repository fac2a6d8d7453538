from __future__ import annotations

import re

from econbot.db.models import User
from econbot.services.context import Economy
from econbot.services.errors import InvalidChoice

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]{3,15}$")


def register(econ: Economy, identity: int, username: str) -> User:
    """Claim ``username`` for ``identity``; names are unique ignoring case and never change."""
    username = username.strip()
    if not USERNAME_PATTERN.match(username):
        raise InvalidChoice(
            "Usernames must be 3-15 characters using only letters, numbers and underscores."
        )
    return econ.store.register_username(identity, username)
