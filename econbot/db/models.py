from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from econbot.core.blackjack import Card


def _int_keys(raw: dict[str, Any] | None) -> dict[int, int]:
    return {int(key): int(value) for key, value in (raw or {}).items()}


def _str_keys(raw: dict[int, int]) -> dict[str, int]:
    return {str(key): int(value) for key, value in raw.items()}


@dataclass
class User:
    identity: int
    username: str | None = None
    wallet: int = 0
    bank: int = 0
    bank_capacity: int = 0
    xp: int = 0
    level: int = 1
    prestige: int = 0
    games_played: int = 0
    games_won: int = 0
    investments: dict[str, int] = field(default_factory=dict)
    shares: dict[str, int] = field(default_factory=dict)
    last_daily: float | None = None
    daily_streak: int = 0
    last_interest: float | None = None
    challenges_made: int = 0
    challenge_window_start: float | None = None
    last_opponent: int | None = None
    blacklisted: bool = False
    joined_at: float = 0.0

    @property
    def registered(self) -> bool:
        return self.username is not None

    @property
    def display_name(self) -> str:
        return self.username or f"user {self.identity}"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "User":
        data = dict(raw)
        data["identity"] = int(data["identity"])
        data["investments"] = {str(k): int(v) for k, v in (data.get("investments") or {}).items()}
        data["shares"] = {str(k): int(v) for k, v in (data.get("shares") or {}).items()}
        return cls(**data)


@dataclass
class Company:
    name: str
    owner: int
    sector: str
    value: int = 0
    total_shares: int = 0
    investors: dict[int, int] = field(default_factory=dict)
    share_distribution: dict[int, int] = field(default_factory=dict)
    created_at: float = 0.0
    closed: bool = False
    closed_at: float | None = None

    def ownership(self, identity: int) -> float:
        if self.value <= 0:
            return 0.0
        return self.investors.get(identity, 0) / self.value

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["investors"] = _str_keys(self.investors)
        data["share_distribution"] = _str_keys(self.share_distribution)
        return data

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Company":
        data = dict(raw)
        data["owner"] = int(data["owner"])
        data["investors"] = _int_keys(data.get("investors"))
        data["share_distribution"] = _int_keys(data.get("share_distribution"))
        return cls(**data)


@dataclass
class MarketOrder:
    id: int
    seller: int
    company: str
    quantity: int
    price: int
    created_at: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "MarketOrder":
        return cls(**raw)


class ChallengeStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


@dataclass
class Challenge:
    id: int
    challenger: int
    opponent: int
    stake: int
    created_at: float
    expires_at: float
    status: ChallengeStatus = ChallengeStatus.PENDING
    winner: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        return data

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Challenge":
        data = dict(raw)
        data["status"] = ChallengeStatus(data.get("status", "pending"))
        return cls(**data)


@dataclass
class JackpotEntry:
    identity: int
    amount: int
    tickets: int
    entered_at: float


@dataclass
class JackpotPool:
    entries: list[JackpotEntry] = field(default_factory=list)
    total: int = 0
    last_draw: float | None = None
    last_winner: int | None = None
    last_amount: int = 0

    @property
    def opened_at(self) -> float | None:
        if not self.entries:
            return None
        return min(entry.entered_at for entry in self.entries)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "JackpotPool":
        data = dict(raw)
        data["entries"] = [JackpotEntry(**entry) for entry in data.get("entries", [])]
        return cls(**data)


@dataclass
class GlobalStats:
    total_bets: int = 0
    total_wagered: int = 0
    total_won: int = 0
    total_lost: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ApprovedGroup:
    group_id: int
    name: str
    approved_at: float
    approved_by: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class BlackjackState(str, Enum):
    PLAYER_TURN = "player_turn"
    RESOLVED = "resolved"


@dataclass
class BlackjackGame:
    identity: int
    stake: int
    player: list[Card]
    dealer: list[Card]
    deck: list[Card]
    state: BlackjackState = BlackjackState.PLAYER_TURN
    started_at: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "identity": self.identity,
            "stake": self.stake,
            "player": [[c.rank, c.suit] for c in self.player],
            "dealer": [[c.rank, c.suit] for c in self.dealer],
            "deck": [[c.rank, c.suit] for c in self.deck],
            "state": self.state.value,
            "started_at": self.started_at,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "BlackjackGame":
        return cls(
            identity=int(raw["identity"]),
            stake=int(raw["stake"]),
            player=[Card(rank, suit) for rank, suit in raw.get("player", [])],
            dealer=[Card(rank, suit) for rank, suit in raw.get("dealer", [])],
            deck=[Card(rank, suit) for rank, suit in raw.get("deck", [])],
            state=BlackjackState(raw.get("state", "player_turn")),
            started_at=float(raw.get("started_at", 0.0)),
        )
