from __future__ import annotations

import math
from dataclasses import dataclass, field

from econbot.db.ledger import LedgerStore
from econbot.db.models import Company, User
from econbot.services.betting import parse_amount
from econbot.services.context import Economy
from econbot.services.errors import (
    BelowMinimum,
    Conflict,
    InsufficientFunds,
    InvalidChoice,
    NotFound,
    Unauthorized,
)


@dataclass(frozen=True)
class InvestResult:
    company: Company
    user: User
    amount: int
    shares_issued: int


@dataclass(frozen=True)
class WithdrawResult:
    company: Company
    user: User
    amount: int
    fee: int
    shares_removed: int

    @property
    def received(self) -> int:
        return self.amount - self.fee


@dataclass(frozen=True)
class Refund:
    identity: int
    invested: int
    fee: int

    @property
    def received(self) -> int:
        return self.invested - self.fee


@dataclass(frozen=True)
class CloseResult:
    company: Company
    refunds: list[Refund] = field(default_factory=list)
    cancelled_orders: int = 0


@dataclass(frozen=True)
class KickResult:
    company: Company
    refund: Refund
    shares_removed: int
    cancelled_orders: int


def _without(mapping: dict, key) -> dict:
    return {k: v for k, v in mapping.items() if k != key}


def adjust_count(mapping: dict, key, delta: int) -> dict:
    updated = dict(mapping)
    value = updated.get(key, 0) + delta
    if value > 0:
        updated[key] = value
    else:
        updated.pop(key, None)
    return updated


def require_open_company(store: LedgerStore, name: str) -> Company:
    company = store.get_company(name)
    if company is None or company.closed:
        raise NotFound(f'Company "{name}" not found.')
    return company


def _owned_company(store: LedgerStore, name: str, identity: int) -> Company:
    company = require_open_company(store, name)
    if company.owner != identity:
        raise Unauthorized(f'Only the owner of "{name}" can do that.')
    return company


def _check_name(econ: Economy, name: str) -> str:
    name = name.strip()
    low = econ.config.company_name_min_length
    high = econ.config.company_name_max_length
    if not low <= len(name) <= high:
        raise InvalidChoice(f"Company name must be between {low} and {high} characters.")
    return name


def split_company_args(store: LedgerStore, tokens: list[str]) -> tuple[str | None, list[str]]:
    """Match the longest leading run of ``tokens`` that names an open company."""
    for end in range(len(tokens), 0, -1):
        candidate = " ".join(tokens[:end])
        company = store.get_company(candidate)
        if company is not None and not company.closed:
            return candidate, tokens[end:]
    return None, tokens


def get_company(econ: Economy, name: str) -> Company:
    return require_open_company(econ.store, name)


def top_companies(econ: Economy, limit: int | None = None) -> list[Company]:
    ranked = sorted(econ.store.companies(), key=lambda c: (-c.value, c.created_at))
    return ranked[: limit or econ.config.leaderboard_size]


def create_company(econ: Economy, identity: int, name: str, raw_amount: str) -> Company:
    name = _check_name(econ, name)
    with econ.store.transaction() as store:
        user = store.get_user(identity)
        amount = parse_amount(raw_amount, user.wallet)
        if amount < econ.config.min_company_investment:
            raise BelowMinimum(
                f"Starting a company takes at least {econ.config.min_company_investment:,} coins."
            )
        if amount > user.wallet:
            raise InsufficientFunds(f"You only have {user.wallet:,} coins.")
        shares = econ.config.company_initial_shares
        company = store.create_company(
            Company(
                name=name,
                owner=identity,
                sector=econ.rng.choice(econ.config.company_sectors),
                value=amount,
                total_shares=shares,
                investors={identity: amount},
                share_distribution={identity: shares},
                created_at=econ.now(),
            )
        )
        store.update_user(
            identity,
            wallet=user.wallet - amount,
            investments=adjust_count(user.investments, name, amount),
            shares=adjust_count(user.shares, name, shares),
        )
    return company


def invest(econ: Economy, identity: int, name: str, raw_amount: str) -> InvestResult:
    """Buy into a company; new shares are priced against the post-investment value."""
    with econ.store.transaction() as store:
        company = require_open_company(store, name)
        user = store.get_user(identity)
        amount = parse_amount(raw_amount, user.wallet)
        if amount < econ.config.min_investment:
            raise BelowMinimum(f"Minimum investment is {econ.config.min_investment:,} coins.")
        if amount > user.wallet:
            raise InsufficientFunds(f"You only have {user.wallet:,} coins.")
        new_value = company.value + amount
        issued = amount * company.total_shares // new_value
        company = store.update_company(
            name,
            value=new_value,
            total_shares=company.total_shares + issued,
            investors=adjust_count(company.investors, identity, amount),
            share_distribution=adjust_count(company.share_distribution, identity, issued),
        )
        user = store.update_user(
            identity,
            wallet=user.wallet - amount,
            investments=adjust_count(user.investments, name, amount),
            shares=adjust_count(user.shares, name, issued),
        )
    return InvestResult(company, user, amount, issued)


def withdraw(econ: Economy, identity: int, name: str, raw_amount: str) -> WithdrawResult:
    with econ.store.transaction() as store:
        company = require_open_company(store, name)
        invested = company.investors.get(identity, 0)
        if invested <= 0:
            raise InsufficientFunds(f'You have no investment in "{name}".')
        amount = parse_amount(raw_amount, invested)
        if amount > invested:
            raise InsufficientFunds(f'You only have {invested:,} coins invested in "{name}".')
        if company.owner == identity and amount >= invested:
            raise Unauthorized("Owners cannot withdraw everything. Close the company instead.")
        user = store.get_user(identity)
        fee = int(math.floor(amount * econ.config.company_withdrawal_fee))
        # Shares go back at the current price, so a full exit can leave some shares behind.
        removed = min(amount * company.total_shares // company.value, user.shares.get(name, 0))
        company = store.update_company(
            name,
            value=company.value - amount,
            total_shares=company.total_shares - removed,
            investors=adjust_count(company.investors, identity, -amount),
            share_distribution=adjust_count(company.share_distribution, identity, -removed),
        )
        user = store.update_user(
            identity,
            wallet=user.wallet + amount - fee,
            investments=adjust_count(user.investments, name, -amount),
            shares=adjust_count(user.shares, name, -removed),
        )
    return WithdrawResult(company, user, amount, fee, removed)


def _cancel_orders(store: LedgerStore, name: str, seller: int | None = None) -> int:
    cancelled = 0
    for order in store.orders(name):
        if seller is None or order.seller == seller:
            store.remove_order(order.id)
            cancelled += 1
    return cancelled


def close_company(econ: Economy, identity: int, name: str) -> CloseResult:
    """Refund every investor minus the withdrawal fee and retire the company.

    Every holder's shares are cleared, including shares escrowed in open orders.
    """
    with econ.store.transaction() as store:
        company = _owned_company(store, name, identity)
        cancelled = _cancel_orders(store, name)
        refunds: list[Refund] = []
        for investor, invested in company.investors.items():
            fee = int(math.floor(invested * econ.config.company_withdrawal_fee))
            refunds.append(Refund(investor, invested, fee))
        affected = set(company.investors) | set(company.share_distribution)
        for holder in affected:
            user = store.get_user(holder)
            refund = next((r.received for r in refunds if r.identity == holder), 0)
            store.update_user(
                holder,
                wallet=user.wallet + refund,
                investments=_without(user.investments, name),
                shares=_without(user.shares, name),
            )
        closed = store.update_company(
            name,
            closed=True,
            closed_at=econ.now(),
            value=0,
            total_shares=0,
            investors={},
            share_distribution={},
        )
    return CloseResult(closed, refunds, cancelled)


def kick_investor(econ: Economy, identity: int, name: str, target: int) -> KickResult:
    with econ.store.transaction() as store:
        company = _owned_company(store, name, identity)
        if target == identity:
            raise Conflict("You cannot kick yourself from your own company.")
        invested = company.investors.get(target, 0)
        if invested <= 0:
            raise NotFound("That user is not an investor in your company.")
        fee = int(math.floor(invested * econ.config.company_withdrawal_fee * 2))
        cancelled = _cancel_orders(store, name, seller=target)
        held = company.share_distribution.get(target, 0)
        company = store.update_company(
            name,
            value=company.value - invested,
            total_shares=company.total_shares - held,
            investors=_without(company.investors, target),
            share_distribution=_without(company.share_distribution, target),
        )
        user = store.get_user(target)
        store.update_user(
            target,
            wallet=user.wallet + invested - fee,
            investments=_without(user.investments, name),
            shares=_without(user.shares, name),
        )
    return KickResult(company, Refund(target, invested, fee), held, cancelled)


def rename_company(econ: Economy, identity: int, old_name: str, new_name: str) -> Company:
    """Rename and carry every per-company map and open order over to the new key."""
    new_name = _check_name(econ, new_name)
    with econ.store.transaction() as store:
        _owned_company(store, old_name, identity)
        if new_name == old_name:
            raise Conflict(f'The company is already called "{old_name}".')
        company = store.rename_company(old_name, new_name)
        for user in store.users():
            if old_name not in user.investments and old_name not in user.shares:
                continue
            investments = _without(user.investments, old_name)
            shares = _without(user.shares, old_name)
            if old_name in user.investments:
                investments[new_name] = user.investments[old_name]
            if old_name in user.shares:
                shares[new_name] = user.shares[old_name]
            store.update_user(user.identity, investments=investments, shares=shares)
        for order in store.orders(old_name):
            store.update_order(order.id, company=new_name)
    return company


def request_investment(econ: Economy, identity: int, name: str) -> Company:
    company = require_open_company(econ.store, name)
    if company.owner == identity:
        raise Conflict("You already own this company.")
    return company
