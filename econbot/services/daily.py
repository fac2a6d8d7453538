from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import timedelta

from econbot.db.models import User
from econbot.services.context import Economy
from econbot.services.errors import Conflict


@dataclass(frozen=True)
class DailyReward:
    user: User
    reward: int
    streak: int


@dataclass(frozen=True)
class StreakInfo:
    streak: int
    can_claim: bool
    next_streak: int
    next_reward: int


def reward_for(econ: Economy, streak: int, prestige: int) -> int:
    base = econ.config.daily_base_reward
    return (
        base
        + int(math.floor(base * streak * econ.config.daily_streak_bonus))
        + int(math.floor(base * prestige * econ.config.daily_prestige_bonus))
    )


def _next_streak(econ: Economy, user: User, now: float) -> tuple[bool, int]:
    today = econ.local_date(now)
    if user.last_daily is None:
        return True, 1
    last = econ.local_date(user.last_daily)
    if last == today:
        return False, user.daily_streak
    if last == today - timedelta(days=1):
        return True, user.daily_streak + 1
    return True, 1


def streak_info(econ: Economy, identity: int) -> StreakInfo:
    user = econ.store.get_user(identity)
    can_claim, streak = _next_streak(econ, user, econ.now())
    return StreakInfo(
        streak=user.daily_streak,
        can_claim=can_claim,
        next_streak=streak if can_claim else streak + 1,
        next_reward=reward_for(econ, streak if can_claim else streak + 1, user.prestige),
    )


def claim_daily(econ: Economy, identity: int) -> DailyReward:
    now = econ.now()
    with econ.store.transaction() as store:
        user = store.get_user(identity)
        can_claim, streak = _next_streak(econ, user, now)
        if not can_claim:
            raise Conflict("You already claimed your daily reward today. Come back tomorrow!")
        reward = reward_for(econ, streak, user.prestige)
        updated = store.update_user(
            identity,
            wallet=user.wallet + reward,
            daily_streak=streak,
            last_daily=now,
        )
    return DailyReward(updated, reward, streak)
