from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from econbot.db.models import User
from econbot.services.context import Economy


@dataclass(frozen=True)
class Profile:
    user: User
    invested: int
    net_worth: int
    win_rate: float


def net_worth(user: User) -> int:
    return user.wallet + user.bank + sum(user.investments.values())


def profile(econ: Economy, identity: int) -> Profile:
    user = econ.store.get_user(identity)
    invested = sum(user.investments.values())
    win_rate = user.games_won / user.games_played if user.games_played else 0.0
    return Profile(user, invested, net_worth(user), win_rate)


def _ranked(
    econ: Economy,
    key: Callable[[User], tuple],
    limit: int | None,
    keep: Callable[[User], bool] = lambda u: True,
) -> list[User]:
    players = [u for u in econ.store.users() if u.registered and not u.blacklisted and keep(u)]
    players.sort(key=key, reverse=True)
    return players[: limit or econ.config.leaderboard_size]


def top_rich(econ: Economy, limit: int | None = None) -> list[User]:
    return _ranked(econ, lambda u: (net_worth(u),), limit, lambda u: net_worth(u) > 0)


def top_wins(econ: Economy, limit: int | None = None) -> list[User]:
    return _ranked(econ, lambda u: (u.games_won, -u.games_played), limit, lambda u: u.games_won > 0)


def top_streaks(econ: Economy, limit: int | None = None) -> list[User]:
    return _ranked(econ, lambda u: (u.daily_streak,), limit, lambda u: u.daily_streak > 0)


def top_levels(econ: Economy, limit: int | None = None) -> list[User]:
    return _ranked(econ, lambda u: (u.level, u.xp), limit)


def top_prestige(econ: Economy, limit: int | None = None) -> list[User]:
    return _ranked(econ, lambda u: (u.prestige, u.level), limit, lambda u: u.prestige > 0)
