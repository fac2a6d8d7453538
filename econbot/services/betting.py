from __future__ import annotations

from dataclasses import dataclass

from econbot.config.runtime import EconomyConfig
from econbot.db.models import User
from econbot.services.context import Economy
from econbot.services.errors import AboveMaximum, BelowMinimum, InsufficientFunds, InvalidAmount
from econbot.services.progression import xp_fields


@dataclass(frozen=True)
class Settlement:
    user: User
    stake: int
    payout: int
    won: bool
    old_level: int

    @property
    def net(self) -> int:
        return self.payout - self.stake

    @property
    def leveled_up(self) -> bool:
        return self.user.level > self.old_level


def parse_amount(raw: str | int, available: int) -> int:
    """Resolve ``"all"`` or a positive integer token."""
    if isinstance(raw, str) and raw.strip().lower() == "all":
        amount = int(available)
    else:
        try:
            amount = int(str(raw).strip().replace(",", ""))
        except (TypeError, ValueError):
            raise InvalidAmount("Please enter a valid amount.") from None
    if amount <= 0:
        raise InvalidAmount("Amount must be a positive number.")
    return amount


def validate_bet(
    raw: str | int,
    wallet: int,
    config: EconomyConfig,
    *,
    minimum: int | None = None,
) -> int:
    amount = parse_amount(raw, wallet)
    if amount > wallet:
        raise InsufficientFunds(f"You only have {wallet:,} coins.")
    floor = config.min_bet if minimum is None else max(config.min_bet, minimum)
    if amount < floor:
        raise BelowMinimum(f"Minimum bet is {floor:,} coins.")
    if amount > config.max_bet:
        raise AboveMaximum(f"Maximum bet is {config.max_bet:,} coins.")
    return amount


def settle_bet(
    econ: Economy,
    identity: int,
    stake: int,
    payout: int,
    won: bool,
    *,
    escrowed: bool = False,
) -> Settlement:
    """Apply a resolved bet as one wallet update plus counters, XP and global stats.

    With ``escrowed`` the stake already left the wallet when the game started,
    so only the payout is credited.
    """
    cfg = econ.config
    with econ.store.transaction() as store:
        user = store.get_user(identity)
        debit = 0 if escrowed else stake
        gained = cfg.xp_per_bet + (cfg.xp_per_win if won else cfg.xp_per_loss)
        updated = store.update_user(
            identity,
            wallet=user.wallet - debit + payout,
            games_played=user.games_played + 1,
            games_won=user.games_won + (1 if won else 0),
            **xp_fields(user, gained),
        )
        if won:
            store.add_stats(total_bets=1, total_wagered=stake, total_won=payout)
        else:
            store.add_stats(total_bets=1, total_wagered=stake, total_lost=stake)
    return Settlement(updated, stake, payout, won, user.level)
