from __future__ import annotations

from dataclasses import dataclass

from econbot.core.levels import level_for_xp, xp_for_level
from econbot.db.models import User
from econbot.services.context import Economy
from econbot.services.errors import BelowMinimum, InvalidAmount


@dataclass(frozen=True)
class LevelChange:
    user: User
    old_level: int
    new_level: int

    @property
    def leveled_up(self) -> bool:
        return self.new_level > self.old_level


@dataclass(frozen=True)
class PrestigeResult:
    user: User
    bonus: int


def xp_fields(user: User, gained: int) -> dict[str, int]:
    """New ``xp``/``level`` values after ``gained`` XP; level never drops here."""
    xp = max(0, user.xp + int(gained))
    return {"xp": xp, "level": max(user.level, level_for_xp(xp))}


def add_xp(econ: Economy, identity: int, amount: int) -> LevelChange:
    with econ.store.transaction() as store:
        user = store.get_user(identity)
        updated = store.update_user(identity, **xp_fields(user, amount))
    return LevelChange(updated, user.level, updated.level)


def set_xp(econ: Economy, identity: int, xp: int) -> LevelChange:
    if xp < 0:
        raise InvalidAmount("XP cannot be negative.")
    with econ.store.transaction() as store:
        user = store.get_user(identity)
        updated = store.update_user(identity, xp=int(xp), level=level_for_xp(int(xp)))
    return LevelChange(updated, user.level, updated.level)


def level_progress(user: User) -> tuple[int, int, int]:
    """Return ``(xp into level, xp needed for next level, next level threshold)``."""
    floor = xp_for_level(user.level - 1) if user.level > 1 else 0
    ceiling = xp_for_level(user.level)
    return user.xp - floor, ceiling - floor, ceiling


def prestige(econ: Economy, identity: int) -> PrestigeResult:
    with econ.store.transaction() as store:
        user = store.get_user(identity)
        if user.level < econ.config.prestige_level:
            raise BelowMinimum(
                f"You need level {econ.config.prestige_level} to prestige (you are level {user.level})."
            )
        new_prestige = user.prestige + 1
        bonus = econ.config.prestige_coin_bonus * new_prestige
        updated = store.update_user(
            identity,
            level=1,
            xp=0,
            prestige=new_prestige,
            wallet=user.wallet + bonus,
        )
    return PrestigeResult(updated, bonus)
