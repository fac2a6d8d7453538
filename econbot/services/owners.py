from __future__ import annotations

from econbot.db.ledger import LedgerStore
from econbot.services.errors import Conflict, NotFound, Unauthorized


class OwnerRegistry:
    """Bot owners: a fixed configured set plus owners granted at runtime.

    Granted owners live in the ledger so they survive restarts; configured
    owners can never be removed.
    """

    def __init__(self, store: LedgerStore, configured: frozenset[int]) -> None:
        self._store = store
        self._configured = frozenset(configured)

    def is_owner(self, identity: int) -> bool:
        return identity in self._configured or identity in self._store.granted_owners()

    def is_configured(self, identity: int) -> bool:
        return identity in self._configured

    def all(self) -> frozenset[int]:
        return self._configured | self._store.granted_owners()

    def add(self, identity: int) -> None:
        if self.is_owner(identity):
            raise Conflict("That user is already an owner.")
        self._store.grant_owner(identity)

    def remove(self, identity: int) -> None:
        if identity in self._configured:
            raise Unauthorized("Configured owners cannot be removed.")
        if not self._store.revoke_owner(identity):
            raise NotFound("That user is not an owner.")
