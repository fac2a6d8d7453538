from __future__ import annotations

import math
from dataclasses import dataclass

from econbot.db.models import User
from econbot.services.betting import parse_amount
from econbot.services.context import Economy
from econbot.services.errors import CapacityExceeded, Conflict, InsufficientFunds


@dataclass(frozen=True)
class DepositResult:
    user: User
    requested: int
    deposited: int

    @property
    def truncated(self) -> bool:
        return self.deposited < self.requested


@dataclass(frozen=True)
class InterestResult:
    user: User
    rate: float
    interest: int
    credited: int

    @property
    def clamped(self) -> bool:
        return self.credited < self.interest


@dataclass(frozen=True)
class UpgradeResult:
    user: User
    cost: int
    old_capacity: int


def interest_rate(econ: Economy, user: User) -> float:
    return econ.config.base_bank_interest_rate + user.prestige * econ.config.prestige_interest_bonus


def upgrade_cost(econ: Economy, capacity: int) -> int:
    return int(math.floor(capacity * econ.config.bank_upgrade_cost_percent))


def deposit(econ: Economy, identity: int, raw_amount: str) -> DepositResult:
    with econ.store.transaction() as store:
        user = store.get_user(identity)
        amount = parse_amount(raw_amount, user.wallet)
        if amount > user.wallet:
            raise InsufficientFunds(f"You only have {user.wallet:,} coins in your wallet.")
        space = user.bank_capacity - user.bank
        if space <= 0:
            raise CapacityExceeded("Your bank is full. Upgrade it to deposit more.")
        deposited = min(amount, space)
        updated = store.update_user(
            identity,
            wallet=user.wallet - deposited,
            bank=user.bank + deposited,
        )
    return DepositResult(updated, amount, deposited)


def withdraw(econ: Economy, identity: int, raw_amount: str) -> tuple[User, int]:
    with econ.store.transaction() as store:
        user = store.get_user(identity)
        amount = parse_amount(raw_amount, user.bank)
        if amount > user.bank:
            raise InsufficientFunds(f"You only have {user.bank:,} coins in your bank.")
        updated = store.update_user(
            identity,
            wallet=user.wallet + amount,
            bank=user.bank - amount,
        )
    return updated, amount


def claim_interest(econ: Economy, identity: int) -> InterestResult:
    now = econ.now()
    with econ.store.transaction() as store:
        user = store.get_user(identity)
        if user.last_interest is not None and econ.local_date(user.last_interest) == econ.local_date(now):
            raise Conflict("You already collected interest today. Come back tomorrow.")
        if user.bank >= user.bank_capacity:
            raise CapacityExceeded("Your bank is at capacity. Upgrade it to keep earning interest.")
        rate = interest_rate(econ, user)
        interest = int(math.floor(user.bank * rate))
        if interest <= 0:
            raise InsufficientFunds("Your bank balance is too low to earn interest.")
        credited = min(interest, user.bank_capacity - user.bank)
        updated = store.update_user(identity, bank=user.bank + credited, last_interest=now)
    return InterestResult(updated, rate, interest, credited)


def upgrade_bank(econ: Economy, identity: int) -> UpgradeResult:
    with econ.store.transaction() as store:
        user = store.get_user(identity)
        cost = upgrade_cost(econ, user.bank_capacity)
        if user.wallet < cost:
            raise InsufficientFunds(f"Upgrading costs {cost:,} coins; you have {user.wallet:,}.")
        new_capacity = int(math.floor(user.bank_capacity * (1 + econ.config.bank_capacity_increase_percent)))
        updated = store.update_user(
            identity,
            wallet=user.wallet - cost,
            bank_capacity=new_capacity,
        )
    return UpgradeResult(updated, cost, user.bank_capacity)
