from __future__ import annotations

from econbot.core.blackjack import Card


def coins(amount: int) -> str:
    return f"{int(amount):,} coins"


def duration(seconds: float) -> str:
    seconds = max(0, int(seconds))
    hours, rem = divmod(seconds, 3600)
    minutes, secs = divmod(rem, 60)
    if hours:
        return f"{hours}h {minutes}m"
    if minutes:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def percent(ratio: float) -> str:
    return f"{ratio * 100:.2f}%"


def hand(cards: list[Card], *, hide_hole: bool = False) -> str:
    if hide_hole and len(cards) > 1:
        return f"{cards[0]} 🂠"
    return " ".join(str(card) for card in cards)


def level_up(old_level: int, new_level: int) -> str:
    if new_level > old_level:
        return f"\n⭐ **Level up!** You reached level {new_level}."
    return ""


def ranked_lines(rows: list[tuple[str, str]]) -> str:
    medals = {1: "🥇", 2: "🥈", 3: "🥉"}
    return "\n".join(
        f"{medals.get(index, f'{index}.')} **{name}** - {value}"
        for index, (name, value) in enumerate(rows, start=1)
    )
