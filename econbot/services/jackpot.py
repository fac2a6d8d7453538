from __future__ import annotations

from dataclasses import dataclass

from econbot.core.games import draw_jackpot_winner
from econbot.db.models import JackpotEntry, JackpotPool, User
from econbot.services.betting import validate_bet
from econbot.services.context import Economy


@dataclass(frozen=True)
class JackpotStatus:
    total: int
    entries: int
    participants: int
    seconds_until_draw: float | None
    last_winner: int | None
    last_amount: int


@dataclass(frozen=True)
class JackpotEntryResult:
    user: User
    amount: int
    tickets: int
    total_tickets: int

    @property
    def win_chance(self) -> float:
        if self.total_tickets <= 0:
            return 0.0
        return self.tickets / self.total_tickets


@dataclass(frozen=True)
class JackpotDraw:
    winner: User
    amount: int
    tickets: int
    participants: tuple[int, ...]


def enter(econ: Economy, identity: int, raw_amount: str) -> JackpotEntryResult:
    with econ.store.transaction() as store:
        user = store.get_user(identity)
        amount = validate_bet(raw_amount, user.wallet, econ.config)
        pool = store.get_jackpot()
        pool.entries.append(JackpotEntry(identity, amount, amount, econ.now()))
        pool.total += amount
        store.set_jackpot(pool)
        updated = store.update_user(identity, wallet=user.wallet - amount)
    mine = sum(entry.tickets for entry in pool.entries if entry.identity == identity)
    total = sum(entry.tickets for entry in pool.entries)
    return JackpotEntryResult(updated, amount, mine, total)


def status(econ: Economy) -> JackpotStatus:
    pool = econ.store.get_jackpot()
    remaining = None
    if pool.opened_at is not None:
        remaining = max(0.0, pool.opened_at + econ.config.jackpot_draw_interval - econ.now())
    return JackpotStatus(
        total=pool.total,
        entries=len(pool.entries),
        participants=len({entry.identity for entry in pool.entries}),
        seconds_until_draw=remaining,
        last_winner=pool.last_winner,
        last_amount=pool.last_amount,
    )


def is_due(econ: Economy) -> bool:
    pool = econ.store.get_jackpot()
    if not pool.entries:
        return False
    if pool.total >= econ.config.jackpot_draw_threshold:
        return True
    return econ.now() - pool.opened_at >= econ.config.jackpot_draw_interval


def draw(econ: Economy, *, force: bool = False) -> JackpotDraw | None:
    """Pay the whole pool to one weighted entry and start a fresh pool.

    Returns ``None`` when the pool is empty or, unless ``force``, not yet due.
    """
    with econ.store.transaction() as store:
        if not force and not is_due(econ):
            return None
        pool = store.get_jackpot()
        entry = draw_jackpot_winner(pool.entries, econ.rng)
        if entry is None:
            return None
        winner = store.get_user(entry.identity)
        winner = store.update_user(entry.identity, wallet=winner.wallet + pool.total)
        tickets = sum(e.tickets for e in pool.entries if e.identity == entry.identity)
        participants = tuple(sorted({e.identity for e in pool.entries}))
        store.set_jackpot(
            JackpotPool(
                last_draw=econ.now(),
                last_winner=entry.identity,
                last_amount=pool.total,
            )
        )
    return JackpotDraw(winner, pool.total, tickets, participants)
