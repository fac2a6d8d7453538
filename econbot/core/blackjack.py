from __future__ import annotations

import random
from dataclasses import dataclass

SUITS = ("♠", "♥", "♦", "♣")
RANKS = ("A", "2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K")
DEALER_STAND_VALUE = 17

_DEFAULT_RNG = random.Random()


@dataclass(frozen=True)
class Card:
    rank: str
    suit: str

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    @property
    def value(self) -> int:
        if self.rank == "A":
            return 11
        if self.rank in {"J", "Q", "K"}:
            return 10
        return int(self.rank)


def create_deck(rng: random.Random | None = None) -> list[Card]:
    deck = [Card(rank, suit) for suit in SUITS for rank in RANKS]
    (rng or _DEFAULT_RNG).shuffle(deck)
    return deck


def hand_value(hand: list[Card]) -> int:
    total = sum(card.value for card in hand)
    aces = sum(1 for card in hand if card.rank == "A")
    while total > 21 and aces:
        total -= 10
        aces -= 1
    return total


def is_natural(hand: list[Card]) -> bool:
    return len(hand) == 2 and hand_value(hand) == 21


def deal_hand(rng: random.Random | None = None) -> tuple[list[Card], list[Card], list[Card]]:
    """Shuffle a fresh deck and deal two cards each.

    Returns ``(player, dealer, deck)``; the deck holds the undealt cards.
    """
    deck = create_deck(rng)
    player = [deck.pop(), deck.pop()]
    dealer = [deck.pop(), deck.pop()]
    return player, dealer, deck


def hit(hand: list[Card], deck: list[Card], rng: random.Random | None = None) -> Card:
    if not deck:
        deck.extend(create_deck(rng))
    card = deck.pop()
    hand.append(card)
    return card


def dealer_play(hand: list[Card], deck: list[Card], rng: random.Random | None = None) -> int:
    while hand_value(hand) < DEALER_STAND_VALUE:
        hit(hand, deck, rng)
    return hand_value(hand)
