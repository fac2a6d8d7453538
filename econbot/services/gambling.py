from __future__ import annotations

import math
from dataclasses import dataclass

from econbot.core import games
from econbot.core.games import SlotResult
from econbot.services.betting import Settlement, settle_bet, validate_bet
from econbot.services.context import Economy
from econbot.services.errors import InvalidChoice

COIN_TOSS_MULTIPLIER = 2
DICE_MULTIPLIER = 5
HIGH_STAKES_MULTIPLIER = 10

_COIN_ALIASES = {"heads": "heads", "head": "heads", "h": "heads", "tails": "tails", "tail": "tails", "t": "tails"}


@dataclass(frozen=True)
class GambleResult:
    game: str
    choice: str | int | None
    outcome: str | int | float
    settlement: Settlement
    slots: SlotResult | None = None

    @property
    def won(self) -> bool:
        return self.settlement.won


def parse_coin_side(raw: str) -> str:
    side = _COIN_ALIASES.get(str(raw).strip().lower())
    if side is None:
        raise InvalidChoice("Choose heads or tails.")
    return side


def parse_dice_face(raw: str) -> int:
    try:
        face = int(str(raw).strip())
    except ValueError:
        raise InvalidChoice("Pick a number between 1 and 6.") from None
    if not 1 <= face <= 6:
        raise InvalidChoice("Pick a number between 1 and 6.")
    return face


def _coin_game(
    econ: Economy,
    identity: int,
    raw_amount: str,
    raw_choice: str,
    *,
    game: str,
    multiplier: int,
    minimum: int | None = None,
) -> GambleResult:
    choice = parse_coin_side(raw_choice)
    with econ.store.transaction() as store:
        user = store.get_user(identity)
        stake = validate_bet(raw_amount, user.wallet, econ.config, minimum=minimum)
        outcome = games.coin_toss(econ.rng)
        won = outcome == choice
        settlement = settle_bet(econ, identity, stake, stake * multiplier if won else 0, won)
    return GambleResult(game, choice, outcome, settlement)


def coin_toss(econ: Economy, identity: int, raw_amount: str, raw_choice: str) -> GambleResult:
    return _coin_game(
        econ,
        identity,
        raw_amount,
        raw_choice,
        game="cointoss",
        multiplier=COIN_TOSS_MULTIPLIER,
    )


def high_stakes(econ: Economy, identity: int, raw_amount: str, raw_choice: str) -> GambleResult:
    return _coin_game(
        econ,
        identity,
        raw_amount,
        raw_choice,
        game="highstakes",
        multiplier=HIGH_STAKES_MULTIPLIER,
        minimum=econ.config.high_stakes_min_bet,
    )


def dice(econ: Economy, identity: int, raw_amount: str, raw_choice: str) -> GambleResult:
    choice = parse_dice_face(raw_choice)
    with econ.store.transaction() as store:
        user = store.get_user(identity)
        stake = validate_bet(raw_amount, user.wallet, econ.config)
        rolled = games.roll_dice(econ.rng)
        won = rolled == choice
        settlement = settle_bet(econ, identity, stake, stake * DICE_MULTIPLIER if won else 0, won)
    return GambleResult("dice", choice, rolled, settlement)


def slots(econ: Economy, identity: int, raw_amount: str) -> GambleResult:
    with econ.store.transaction() as store:
        user = store.get_user(identity)
        stake = validate_bet(raw_amount, user.wallet, econ.config)
        spin = games.play_slots(econ.rng)
        payout = stake * spin.multiplier if spin.win else 0
        settlement = settle_bet(econ, identity, stake, payout, spin.win)
    return GambleResult("slots", None, spin.multiplier, settlement, slots=spin)


def wheel(econ: Economy, identity: int, raw_amount: str) -> GambleResult:
    with econ.store.transaction() as store:
        user = store.get_user(identity)
        stake = validate_bet(raw_amount, user.wallet, econ.config)
        multiplier = games.spin_wheel(econ.rng)
        payout = int(math.floor(stake * multiplier))
        settlement = settle_bet(econ, identity, stake, payout, multiplier > 1)
    return GambleResult("wheel", None, multiplier, settlement)
