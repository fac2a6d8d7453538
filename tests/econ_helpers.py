from __future__ import annotations

import random
from typing import Iterable

from econbot.config.runtime import EconomyConfig
from econbot.db.ledger import LedgerStore
from econbot.services.context import Economy

OWNER = 900000001
ALICE = 100000001
BOB = 100000002
CAROL = 100000003

# 2023-11-14 12:00:00 UTC
NOON = 1699963200.0


class FakeClock:
    def __init__(self, start: float = NOON) -> None:
        self.now = float(start)

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ScriptedRandom(random.Random):
    """Random source whose next floats, ints and top-of-deck cards can be queued."""

    def __init__(self, floats: Iterable[float] = (), ints: Iterable[int] = (), top=()) -> None:
        super().__init__(1234)
        self.floats = list(floats)
        self.ints = list(ints)
        self.top = list(top)

    def random(self) -> float:
        if self.floats:
            return self.floats.pop(0)
        return super().random()

    def getrandbits(self, k: int) -> int:
        return super().getrandbits(k)

    def randint(self, a: int, b: int) -> int:
        if self.ints:
            return self.ints.pop(0)
        return super().randint(a, b)

    def shuffle(self, x) -> None:
        super().shuffle(x)
        if not self.top:
            return
        for card in self.top:
            x.remove(card)
        # Deals pop from the end, so the first queued card goes last.
        x.extend(reversed(self.top))
        self.top = []


def make_economy(rng: random.Random | None = None, clock: FakeClock | None = None, **config) -> Economy:
    clock = clock or FakeClock()
    cfg = EconomyConfig(**config)
    store = LedgerStore(start_balance=cfg.start_balance, bank_capacity=cfg.initial_bank_capacity, clock=clock)
    return Economy(
        store=store,
        config=cfg,
        rng=rng or ScriptedRandom(),
        clock=clock,
        configured_owners=frozenset({OWNER}),
    )


def register(econ: Economy, identity: int, username: str, wallet: int | None = None):
    econ.store.register_username(identity, username)
    if wallet is not None:
        econ.store.update_user(identity, wallet=wallet)
    return econ.store.get_user(identity)
