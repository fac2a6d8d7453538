from __future__ import annotations

import copy
import threading
import time
from contextlib import contextmanager
from dataclasses import replace
from typing import Any, Callable, Iterator

from econbot.config.settings import INITIAL_BANK_CAPACITY, START_BALANCE
from econbot.db.models import (
    ApprovedGroup,
    BlackjackGame,
    Challenge,
    ChallengeStatus,
    Company,
    GlobalStats,
    JackpotPool,
    MarketOrder,
    User,
)
from econbot.services.errors import Conflict, NotFound

SNAPSHOT_VERSION = 1


class LedgerStore:
    """Authoritative in-memory tables for every economy entity.

    Every public method takes the store lock, and ``transaction()`` holds it
    across several calls so a multi-entity operation is never observed half
    applied. Records handed out are copies; changes go through ``update_*``.
    """

    def __init__(
        self,
        *,
        start_balance: int = START_BALANCE,
        bank_capacity: int = INITIAL_BANK_CAPACITY,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._lock = threading.RLock()
        self._start_balance = int(start_balance)
        self._bank_capacity = int(bank_capacity)
        self._clock = clock
        self._users: dict[int, User] = {}
        self._usernames: dict[str, int] = {}
        self._companies: dict[str, Company] = {}
        self._company_archive: list[Company] = []
        self._orders: dict[int, MarketOrder] = {}
        self._challenges: dict[int, Challenge] = {}
        self._jackpot = JackpotPool()
        self._stats = GlobalStats()
        self._groups: dict[int, ApprovedGroup] = {}
        self._owners: set[int] = set()
        self._games: dict[int, BlackjackGame] = {}
        self._next_order_id = 1
        self._next_challenge_id = 1

    def set_start_balance(self, amount: int) -> None:
        with self._lock:
            self._start_balance = int(amount)

    @contextmanager
    def transaction(self) -> Iterator["LedgerStore"]:
        with self._lock:
            yield self

    # Users

    def _user(self, identity: int) -> User:
        user = self._users.get(identity)
        if user is None:
            user = User(
                identity=identity,
                wallet=self._start_balance,
                bank_capacity=self._bank_capacity,
                joined_at=self._clock(),
            )
            self._users[identity] = user
        return user

    def get_user(self, identity: int) -> User:
        with self._lock:
            return copy.deepcopy(self._user(int(identity)))

    def has_user(self, identity: int) -> bool:
        with self._lock:
            return int(identity) in self._users

    def update_user(self, identity: int, **fields: Any) -> User:
        if "username" in fields:
            raise ValueError("username is only set through register_username")
        with self._lock:
            updated = replace(self._user(int(identity)), **fields)
            self._users[updated.identity] = updated
            return copy.deepcopy(updated)

    def users(self) -> list[User]:
        with self._lock:
            return [copy.deepcopy(user) for user in self._users.values()]

    def register_username(self, identity: int, username: str) -> User:
        key = username.lower()
        with self._lock:
            user = self._user(int(identity))
            if user.username is not None:
                raise Conflict(f"You are already registered as **{user.username}**.")
            if key in self._usernames:
                raise Conflict(f"The username **{username}** is already taken.")
            self._usernames[key] = user.identity
            registered = replace(user, username=username)
            self._users[user.identity] = registered
            return copy.deepcopy(registered)

    def user_by_username(self, username: str) -> User | None:
        with self._lock:
            identity = self._usernames.get(username.lower())
            if identity is None:
                return None
            return copy.deepcopy(self._users[identity])

    # Companies

    def get_company(self, name: str) -> Company | None:
        with self._lock:
            company = self._companies.get(name)
            return None if company is None else copy.deepcopy(company)

    def companies(self, *, include_closed: bool = False) -> list[Company]:
        with self._lock:
            return [
                copy.deepcopy(company)
                for company in self._companies.values()
                if include_closed or not company.closed
            ]

    def company_archive(self) -> list[Company]:
        with self._lock:
            return [copy.deepcopy(company) for company in self._company_archive]

    def _claim_company_name(self, name: str) -> None:
        existing = self._companies.get(name)
        if existing is None:
            return
        if not existing.closed:
            raise Conflict(f'A company named "{name}" already exists.')
        self._company_archive.append(self._companies.pop(name))

    def create_company(self, company: Company) -> Company:
        with self._lock:
            self._claim_company_name(company.name)
            self._companies[company.name] = copy.deepcopy(company)
            return copy.deepcopy(company)

    def update_company(self, name: str, **fields: Any) -> Company:
        if "name" in fields:
            raise ValueError("company names change through rename_company")
        with self._lock:
            company = self._companies.get(name)
            if company is None:
                raise NotFound(f'Company "{name}" not found.')
            updated = replace(company, **fields)
            self._companies[name] = updated
            return copy.deepcopy(updated)

    def rename_company(self, old_name: str, new_name: str) -> Company:
        with self._lock:
            company = self._companies.get(old_name)
            if company is None:
                raise NotFound(f'Company "{old_name}" not found.')
            self._claim_company_name(new_name)
            del self._companies[old_name]
            renamed = replace(company, name=new_name)
            self._companies[new_name] = renamed
            return copy.deepcopy(renamed)

    # Market orders

    def add_order(self, seller: int, company: str, quantity: int, price: int) -> MarketOrder:
        with self._lock:
            order = MarketOrder(
                id=self._next_order_id,
                seller=seller,
                company=company,
                quantity=quantity,
                price=price,
                created_at=self._clock(),
            )
            self._next_order_id += 1
            self._orders[order.id] = order
            return copy.deepcopy(order)

    def get_order(self, order_id: int) -> MarketOrder | None:
        with self._lock:
            order = self._orders.get(order_id)
            return None if order is None else copy.deepcopy(order)

    def update_order(self, order_id: int, **fields: Any) -> MarketOrder:
        with self._lock:
            order = self._orders.get(order_id)
            if order is None:
                raise NotFound(f"Order #{order_id} not found.")
            updated = replace(order, **fields)
            self._orders[order_id] = updated
            return copy.deepcopy(updated)

    def remove_order(self, order_id: int) -> MarketOrder | None:
        with self._lock:
            order = self._orders.pop(order_id, None)
            return None if order is None else copy.deepcopy(order)

    def orders(self, company: str | None = None) -> list[MarketOrder]:
        with self._lock:
            return [
                copy.deepcopy(order)
                for order in sorted(self._orders.values(), key=lambda o: o.id)
                if company is None or order.company == company
            ]

    # Challenges

    def add_challenge(self, challenger: int, opponent: int, stake: int, timeout: float) -> Challenge:
        with self._lock:
            now = self._clock()
            challenge = Challenge(
                id=self._next_challenge_id,
                challenger=challenger,
                opponent=opponent,
                stake=stake,
                created_at=now,
                expires_at=now + timeout,
            )
            self._next_challenge_id += 1
            self._challenges[challenge.id] = challenge
            return copy.deepcopy(challenge)

    def get_challenge(self, challenge_id: int) -> Challenge | None:
        with self._lock:
            challenge = self._challenges.get(challenge_id)
            return None if challenge is None else copy.deepcopy(challenge)

    def update_challenge(self, challenge_id: int, **fields: Any) -> Challenge:
        with self._lock:
            challenge = self._challenges.get(challenge_id)
            if challenge is None:
                raise NotFound(f"Challenge #{challenge_id} not found.")
            updated = replace(challenge, **fields)
            self._challenges[challenge_id] = updated
            return copy.deepcopy(updated)

    def challenges(self, status: ChallengeStatus | None = None) -> list[Challenge]:
        with self._lock:
            return [
                copy.deepcopy(challenge)
                for challenge in sorted(self._challenges.values(), key=lambda c: c.id)
                if status is None or challenge.status == status
            ]

    # Jackpot, stats, groups, owners

    def get_jackpot(self) -> JackpotPool:
        with self._lock:
            return copy.deepcopy(self._jackpot)

    def set_jackpot(self, pool: JackpotPool) -> JackpotPool:
        with self._lock:
            self._jackpot = copy.deepcopy(pool)
            return copy.deepcopy(pool)

    def get_stats(self) -> GlobalStats:
        with self._lock:
            return copy.deepcopy(self._stats)

    def add_stats(self, **deltas: int) -> GlobalStats:
        with self._lock:
            fields = {
                name: getattr(self._stats, name) + int(delta)
                for name, delta in deltas.items()
            }
            self._stats = replace(self._stats, **fields)
            return copy.deepcopy(self._stats)

    def approve_group(self, group: ApprovedGroup) -> ApprovedGroup:
        with self._lock:
            self._groups[group.group_id] = copy.deepcopy(group)
            return copy.deepcopy(self._groups[group.group_id])

    def revoke_group(self, group_id: int) -> ApprovedGroup | None:
        with self._lock:
            group = self._groups.pop(group_id, None)
            return None if group is None else copy.deepcopy(group)

    def get_group(self, group_id: int) -> ApprovedGroup | None:
        with self._lock:
            group = self._groups.get(group_id)
            return None if group is None else copy.deepcopy(group)

    def groups(self) -> list[ApprovedGroup]:
        with self._lock:
            return [copy.deepcopy(group) for group in self._groups.values()]

    def granted_owners(self) -> frozenset[int]:
        with self._lock:
            return frozenset(self._owners)

    def grant_owner(self, identity: int) -> bool:
        with self._lock:
            if identity in self._owners:
                return False
            self._owners.add(identity)
            return True

    def revoke_owner(self, identity: int) -> bool:
        with self._lock:
            if identity not in self._owners:
                return False
            self._owners.discard(identity)
            return True

    # Blackjack tables

    def get_game(self, identity: int) -> BlackjackGame | None:
        with self._lock:
            game = self._games.get(identity)
            return None if game is None else copy.deepcopy(game)

    def save_game(self, game: BlackjackGame) -> BlackjackGame:
        with self._lock:
            self._games[game.identity] = copy.deepcopy(game)
            return copy.deepcopy(self._games[game.identity])

    def clear_game(self, identity: int) -> BlackjackGame | None:
        with self._lock:
            game = self._games.pop(identity, None)
            return None if game is None else copy.deepcopy(game)

    # Snapshots

    def reset(self, *, keep_admin: bool = True) -> None:
        """Drop every economy table. Granted owners and approved groups survive unless ``keep_admin`` is false."""
        with self._lock:
            self._users.clear()
            self._usernames.clear()
            self._companies.clear()
            self._company_archive.clear()
            self._orders.clear()
            self._challenges.clear()
            self._jackpot = JackpotPool()
            self._stats = GlobalStats()
            self._games.clear()
            self._next_order_id = 1
            self._next_challenge_id = 1
            if not keep_admin:
                self._groups.clear()
                self._owners.clear()

    def to_snapshot(self) -> dict[str, Any]:
        with self._lock:
            return {
                "version": SNAPSHOT_VERSION,
                "users": [user.to_dict() for user in self._users.values()],
                "companies": [company.to_dict() for company in self._companies.values()],
                "company_archive": [company.to_dict() for company in self._company_archive],
                "orders": [order.to_dict() for order in self._orders.values()],
                "challenges": [challenge.to_dict() for challenge in self._challenges.values()],
                "jackpot": self._jackpot.to_dict(),
                "stats": self._stats.to_dict(),
                "groups": [group.to_dict() for group in self._groups.values()],
                "owners": sorted(self._owners),
                "blackjack": [game.to_dict() for game in self._games.values()],
                "next_order_id": self._next_order_id,
                "next_challenge_id": self._next_challenge_id,
            }

    @classmethod
    def from_snapshot(cls, state: dict[str, Any], **kwargs: Any) -> "LedgerStore":
        store = cls(**kwargs)
        for raw in state.get("users", []):
            user = User.from_dict(raw)
            store._users[user.identity] = user
            if user.username is not None:
                store._usernames[user.username.lower()] = user.identity
        for raw in state.get("companies", []):
            company = Company.from_dict(raw)
            store._companies[company.name] = company
        store._company_archive = [Company.from_dict(raw) for raw in state.get("company_archive", [])]
        for raw in state.get("orders", []):
            order = MarketOrder.from_dict(raw)
            store._orders[order.id] = order
        for raw in state.get("challenges", []):
            challenge = Challenge.from_dict(raw)
            store._challenges[challenge.id] = challenge
        if state.get("jackpot"):
            store._jackpot = JackpotPool.from_dict(state["jackpot"])
        if state.get("stats"):
            store._stats = GlobalStats(**state["stats"])
        for raw in state.get("groups", []):
            group = ApprovedGroup(**raw)
            store._groups[group.group_id] = group
        store._owners = {int(identity) for identity in state.get("owners", [])}
        for raw in state.get("blackjack", []):
            game = BlackjackGame.from_dict(raw)
            store._games[game.identity] = game
        store._next_order_id = max(
            int(state.get("next_order_id", 1)),
            max(store._orders, default=0) + 1,
        )
        store._next_challenge_id = max(
            int(state.get("next_challenge_id", 1)),
            max(store._challenges, default=0) + 1,
        )
        return store
