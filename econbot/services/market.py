from __future__ import annotations

import math
from dataclasses import dataclass

from econbot.db.models import Company, MarketOrder, User
from econbot.services.company import adjust_count, require_open_company
from econbot.services.context import Economy
from econbot.services.errors import Conflict, InsufficientFunds, InvalidAmount, NotFound, Unauthorized


@dataclass(frozen=True)
class FillResult:
    order: MarketOrder
    buyer: User
    seller: User
    quantity: int
    cost: int
    fee: int

    @property
    def remaining(self) -> int:
        return self.order.quantity - self.quantity

    @property
    def proceeds(self) -> int:
        return self.cost - self.fee


@dataclass(frozen=True)
class TransferResult:
    company: Company
    sender: User
    recipient: User
    quantity: int


def parse_positive_int(raw: str, label: str) -> int:
    try:
        value = int(str(raw).strip().replace(",", ""))
    except (TypeError, ValueError):
        raise InvalidAmount(f"{label} must be a whole number.") from None
    if value <= 0:
        raise InvalidAmount(f"{label} must be greater than zero.")
    return value


def list_orders(econ: Economy, company: str | None = None) -> list[MarketOrder]:
    if company is not None:
        require_open_company(econ.store, company)
    return econ.store.orders(company)


def sell_shares(econ: Economy, identity: int, name: str, raw_quantity: str, raw_price: str) -> MarketOrder:
    """Post a sell order; the shares leave the seller's available balance immediately."""
    quantity = parse_positive_int(raw_quantity, "Quantity")
    price = parse_positive_int(raw_price, "Price")
    with econ.store.transaction() as store:
        require_open_company(store, name)
        user = store.get_user(identity)
        available = user.shares.get(name, 0)
        if quantity > available:
            raise InsufficientFunds(f'You only have {available:,} available shares of "{name}".')
        store.update_user(identity, shares=adjust_count(user.shares, name, -quantity))
        return store.add_order(identity, name, quantity, price)


def buy_shares(econ: Economy, identity: int, order_id: int, raw_quantity: str) -> FillResult:
    quantity = parse_positive_int(raw_quantity, "Quantity")
    with econ.store.transaction() as store:
        order = store.get_order(order_id)
        if order is None:
            raise NotFound(f"Order #{order_id} not found.")
        if order.seller == identity:
            raise Conflict("You cannot buy your own order. Cancel it instead.")
        if quantity > order.quantity:
            raise InsufficientFunds(f"Order #{order_id} only has {order.quantity:,} shares left.")
        company = require_open_company(store, order.company)
        cost = order.price * quantity
        buyer = store.get_user(identity)
        if buyer.wallet < cost:
            raise InsufficientFunds(f"That costs {cost:,} coins; you have {buyer.wallet:,}.")
        fee = int(math.floor(cost * econ.config.market_fee))
        buyer = store.update_user(
            identity,
            wallet=buyer.wallet - cost,
            shares=adjust_count(buyer.shares, order.company, quantity),
        )
        seller = store.get_user(order.seller)
        seller = store.update_user(order.seller, wallet=seller.wallet + cost - fee)
        distribution = adjust_count(company.share_distribution, order.seller, -quantity)
        store.update_company(
            order.company,
            share_distribution=adjust_count(distribution, identity, quantity),
        )
        if quantity == order.quantity:
            store.remove_order(order_id)
        else:
            store.update_order(order_id, quantity=order.quantity - quantity)
    return FillResult(order, buyer, seller, quantity, cost, fee)


def cancel_order(econ: Economy, identity: int, order_id: int) -> MarketOrder:
    with econ.store.transaction() as store:
        order = store.get_order(order_id)
        if order is None:
            raise NotFound(f"Order #{order_id} not found.")
        if order.seller != identity:
            raise Unauthorized("You can only cancel your own orders.")
        store.remove_order(order_id)
        user = store.get_user(identity)
        store.update_user(identity, shares=adjust_count(user.shares, order.company, order.quantity))
    return order


def transfer_shares(econ: Economy, identity: int, name: str, target: int, raw_quantity: str) -> TransferResult:
    quantity = parse_positive_int(raw_quantity, "Quantity")
    if target == identity:
        raise Conflict("You cannot transfer shares to yourself.")
    with econ.store.transaction() as store:
        company = require_open_company(store, name)
        sender = store.get_user(identity)
        available = sender.shares.get(name, 0)
        if quantity > available:
            raise InsufficientFunds(f'You only have {available:,} available shares of "{name}".')
        recipient = store.get_user(target)
        sender = store.update_user(identity, shares=adjust_count(sender.shares, name, -quantity))
        recipient = store.update_user(target, shares=adjust_count(recipient.shares, name, quantity))
        distribution = adjust_count(company.share_distribution, identity, -quantity)
        company = store.update_company(
            name,
            share_distribution=adjust_count(distribution, target, quantity),
        )
    return TransferResult(company, sender, recipient, quantity)
