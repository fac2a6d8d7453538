from __future__ import annotations

from econbot.db.models import ApprovedGroup, User
from econbot.services.context import Economy
from econbot.services.errors import Conflict, NotFound, Unauthorized
from econbot.services.market import parse_positive_int


def set_blacklisted(econ: Economy, target: int, blacklisted: bool) -> User:
    with econ.store.transaction() as store:
        if blacklisted and econ.is_owner(target):
            raise Unauthorized("Owners cannot be blacklisted.")
        user = store.get_user(target)
        if user.blacklisted == blacklisted:
            state = "already blacklisted" if blacklisted else "not blacklisted"
            raise Conflict(f"{user.display_name} is {state}.")
        return store.update_user(target, blacklisted=blacklisted)


def add_coins(econ: Economy, target: int, raw_amount: str) -> User:
    amount = parse_positive_int(raw_amount, "Amount")
    with econ.store.transaction() as store:
        user = store.get_user(target)
        return store.update_user(target, wallet=user.wallet + amount)


def remove_coins(econ: Economy, target: int, raw_amount: str) -> tuple[User, int]:
    """Take coins from a wallet, never below zero. Returns the user and the amount removed."""
    amount = parse_positive_int(raw_amount, "Amount")
    with econ.store.transaction() as store:
        user = store.get_user(target)
        removed = min(amount, user.wallet)
        return store.update_user(target, wallet=user.wallet - removed), removed


def reset_economy(econ: Economy, *, wipe_admin: bool = False) -> None:
    econ.store.reset(keep_admin=not wipe_admin)
    print(f"[admin] ledger reset (wipe_admin={wipe_admin})")


def approve_group(econ: Economy, actor: int, group_id: int, name: str) -> ApprovedGroup:
    if econ.store.get_group(group_id) is not None:
        raise Conflict("This server is already approved.")
    return econ.store.approve_group(
        ApprovedGroup(group_id=group_id, name=name, approved_at=econ.now(), approved_by=actor)
    )


def revoke_group(econ: Economy, group_id: int) -> ApprovedGroup:
    group = econ.store.revoke_group(group_id)
    if group is None:
        raise NotFound("This server is not approved.")
    return group


def is_group_allowed(econ: Economy, group_id: int | None) -> bool:
    if not econ.config.require_group_approval or group_id is None:
        return True
    return econ.store.get_group(group_id) is not None
