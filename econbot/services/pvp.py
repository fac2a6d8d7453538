from __future__ import annotations

import math
from dataclasses import dataclass

from econbot.core.games import coin_toss
from econbot.db.ledger import LedgerStore
from econbot.db.models import Challenge, ChallengeStatus, User
from econbot.services.betting import validate_bet
from econbot.services.context import Economy
from econbot.services.errors import BelowMinimum, Conflict, InsufficientFunds, NotFound
from econbot.services.progression import xp_fields

WINDOW_SECONDS = 3600


@dataclass(frozen=True)
class DuelResult:
    challenge: Challenge
    winner: User | None
    loser: User | None

    @property
    def resolved(self) -> bool:
        return self.challenge.status is ChallengeStatus.ACCEPTED


def expire_challenges(econ: Economy) -> list[Challenge]:
    """Mark every pending challenge past its deadline as expired."""
    now = econ.now()
    expired: list[Challenge] = []
    with econ.store.transaction() as store:
        for challenge in store.challenges(ChallengeStatus.PENDING):
            if challenge.expires_at <= now:
                expired.append(store.update_challenge(challenge.id, status=ChallengeStatus.EXPIRED))
    return expired


def _latest_pending_for(store: LedgerStore, opponent: int) -> Challenge | None:
    pending = [c for c in store.challenges(ChallengeStatus.PENDING) if c.opponent == opponent]
    return pending[-1] if pending else None


def challenge(econ: Economy, identity: int, opponent: int, raw_amount: str | int) -> Challenge:
    if opponent == identity:
        raise Conflict("You cannot challenge yourself.")
    now = econ.now()
    with econ.store.transaction() as store:
        user = store.get_user(identity)
        window_start = user.challenge_window_start
        made = user.challenges_made
        if window_start is None or now - window_start >= WINDOW_SECONDS:
            window_start, made = now, 0
        if made >= econ.config.max_challenges_per_hour:
            minutes = max(1, math.ceil((window_start + WINDOW_SECONDS - now) / 60))
            raise Conflict(
                f"You can only issue {econ.config.max_challenges_per_hour} challenges per hour. "
                f"Try again in {minutes} minute(s)."
            )
        stake = validate_bet(raw_amount, user.wallet, econ.config)
        rival = store.get_user(opponent)
        if rival.wallet < stake:
            raise InsufficientFunds(f"{rival.display_name} doesn't have {stake:,} coins.")
        store.update_user(identity, challenges_made=made + 1, challenge_window_start=window_start)
        return store.add_challenge(identity, opponent, stake, econ.config.challenge_timeout)


def rematch_stake(econ: Economy, user: User, rival: User) -> int:
    cfg = econ.config
    suggested = max(cfg.rematch_min_stake, int(math.floor(user.wallet * cfg.rematch_wallet_fraction)))
    return min(suggested, user.wallet, rival.wallet, cfg.max_bet)


def rematch(econ: Economy, identity: int) -> Challenge:
    with econ.store.transaction() as store:
        user = store.get_user(identity)
        if user.last_opponent is None:
            raise NotFound("You have no previous opponent to rematch.")
        rival = store.get_user(user.last_opponent)
        stake = rematch_stake(econ, user, rival)
        if stake < econ.config.min_bet:
            raise BelowMinimum(
                f"A rematch needs at least {econ.config.min_bet:,} coins from both players."
            )
        return challenge(econ, identity, rival.identity, stake)


def accept(econ: Economy, identity: int) -> DuelResult:
    """Resolve the newest pending challenge addressed to ``identity``.

    If either side can no longer cover the stake the challenge is cancelled
    instead. The challenger wins on heads.
    """
    expire_challenges(econ)
    cfg = econ.config
    with econ.store.transaction() as store:
        pending = _latest_pending_for(store, identity)
        if pending is None:
            raise NotFound("You have no pending challenges.")
        challenger = store.get_user(pending.challenger)
        opponent = store.get_user(identity)
        if challenger.wallet < pending.stake or opponent.wallet < pending.stake:
            cancelled = store.update_challenge(pending.id, status=ChallengeStatus.CANCELLED)
            return DuelResult(cancelled, None, None)
        challenger_wins = coin_toss(econ.rng) == "heads"
        winner, loser = (challenger, opponent) if challenger_wins else (opponent, challenger)
        winner = store.update_user(
            winner.identity,
            wallet=winner.wallet + pending.stake,
            games_played=winner.games_played + 1,
            games_won=winner.games_won + 1,
            last_opponent=loser.identity,
            **xp_fields(winner, cfg.xp_per_bet + cfg.xp_per_win),
        )
        loser = store.update_user(
            loser.identity,
            wallet=loser.wallet - pending.stake,
            games_played=loser.games_played + 1,
            last_opponent=winner.identity,
            **xp_fields(loser, cfg.xp_per_bet + cfg.xp_per_loss),
        )
        resolved = store.update_challenge(
            pending.id,
            status=ChallengeStatus.ACCEPTED,
            winner=winner.identity,
        )
    return DuelResult(resolved, winner, loser)


def decline(econ: Economy, identity: int) -> Challenge:
    expire_challenges(econ)
    with econ.store.transaction() as store:
        pending = _latest_pending_for(store, identity)
        if pending is None:
            raise NotFound("You have no pending challenges.")
        return store.update_challenge(pending.id, status=ChallengeStatus.DECLINED)
