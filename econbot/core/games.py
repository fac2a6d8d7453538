from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Sequence

COIN_SIDES = ("heads", "tails")
_DEFAULT_RNG = random.Random()


@dataclass(frozen=True)
class SlotSymbol:
    emoji: str
    weight: float
    multiplier: int


SLOT_SYMBOLS: tuple[SlotSymbol, ...] = (
    SlotSymbol("🍒", 0.30, 3),
    SlotSymbol("🍊", 0.25, 5),
    SlotSymbol("🍋", 0.20, 7),
    SlotSymbol("7️⃣", 0.15, 10),
    SlotSymbol("💰", 0.07, 15),
    SlotSymbol("⭐", 0.03, 20),
)


@dataclass(frozen=True)
class WheelSegment:
    multiplier: float
    weight: float


WHEEL_SEGMENTS: tuple[WheelSegment, ...] = (
    WheelSegment(0.0, 0.15),
    WheelSegment(0.5, 0.20),
    WheelSegment(1.0, 0.25),
    WheelSegment(1.5, 0.20),
    WheelSegment(2.0, 0.10),
    WheelSegment(3.0, 0.05),
    WheelSegment(5.0, 0.03),
    WheelSegment(10.0, 0.02),
)


@dataclass(frozen=True)
class SlotResult:
    grid: tuple[tuple[str, str, str], ...]
    win: bool
    multiplier: int

    @property
    def middle_row(self) -> tuple[str, str, str]:
        return self.grid[1]


def _rng(rng: random.Random | None) -> random.Random:
    return rng if rng is not None else _DEFAULT_RNG


def coin_toss(rng: random.Random | None = None) -> str:
    return "heads" if _rng(rng).random() < 0.5 else "tails"


def roll_dice(rng: random.Random | None = None) -> int:
    return _rng(rng).randint(1, 6)


def play_slots(rng: random.Random | None = None) -> SlotResult:
    cells = _rng(rng).choices(
        SLOT_SYMBOLS,
        weights=[s.weight for s in SLOT_SYMBOLS],
        k=9,
    )
    grid = tuple(
        (cells[row * 3].emoji, cells[row * 3 + 1].emoji, cells[row * 3 + 2].emoji)
        for row in range(3)
    )
    middle = cells[3:6]
    if middle[0].emoji == middle[1].emoji == middle[2].emoji:
        return SlotResult(grid=grid, win=True, multiplier=middle[0].multiplier)
    return SlotResult(grid=grid, win=False, multiplier=0)


def spin_wheel(rng: random.Random | None = None) -> float:
    segment = _rng(rng).choices(
        WHEEL_SEGMENTS,
        weights=[s.weight for s in WHEEL_SEGMENTS],
        k=1,
    )[0]
    return segment.multiplier


def draw_jackpot_winner(entries: Sequence, rng: random.Random | None = None):
    """Pick one entry with probability proportional to its ``tickets``.

    Returns ``None`` for an empty pool.
    """
    total = sum(int(entry.tickets) for entry in entries)
    if not entries or total <= 0:
        return None
    ticket = _rng(rng).randint(1, total)
    cumulative = 0
    for entry in entries:
        cumulative += int(entry.tickets)
        if cumulative >= ticket:
            return entry
    return entries[-1]
