import math


def level_for_xp(xp: int) -> int:
    return int(math.floor(math.sqrt(max(0, xp) / 100) + 1))


def xp_for_level(level: int) -> int:
    """Total XP at which ``level + 1`` is reached."""
    return level * level * 100
