from __future__ import annotations

from econbot.commands.formatting import coins, percent
from econbot.commands.router import CommandContext, CommandRouter, Reply
from econbot.services import banking
from econbot.services.context import Economy


def setup_bank(router: CommandRouter) -> None:
    @router.command(
        "deposit",
        aliases=("dep",),
        usage="deposit <amount|all>",
        description="Move coins from your wallet into the bank (up to its capacity).",
        category="Banking",
    )
    def deposit(econ: Economy, ctx: CommandContext) -> Reply:
        args = ctx.require(1, "deposit <amount|all>")
        result = banking.deposit(econ, ctx.identity, args[0])
        user = result.user
        note = ""
        if result.truncated:
            note = (
                f"\n⚠️ Only {coins(result.deposited)} fit in your bank "
                f"(you asked for {coins(result.requested)})."
            )
        return Reply(
            f"🏦 Deposited {coins(result.deposited)}.{note}\n"
            f"Wallet: {coins(user.wallet)}\n"
            f"Bank: {coins(user.bank)} / {coins(user.bank_capacity)}"
        )

    @router.command(
        "withdraw",
        aliases=("with",),
        usage="withdraw <amount|all>",
        description="Move coins from the bank back to your wallet.",
        category="Banking",
    )
    def withdraw(econ: Economy, ctx: CommandContext) -> Reply:
        args = ctx.require(1, "withdraw <amount|all>")
        user, amount = banking.withdraw(econ, ctx.identity, args[0])
        return Reply(
            f"🏦 Withdrew {coins(amount)}.\n"
            f"Wallet: {coins(user.wallet)}\n"
            f"Bank: {coins(user.bank)} / {coins(user.bank_capacity)}"
        )

    @router.command(
        "interest",
        aliases=("int",),
        description="Collect today's bank interest.",
        category="Banking",
    )
    def interest(econ: Economy, ctx: CommandContext) -> Reply:
        result = banking.claim_interest(econ, ctx.identity)
        note = ""
        if result.clamped:
            note = f"\n⚠️ Your bank is now full; {coins(result.interest - result.credited)} could not be added."
        return Reply(
            f"💹 You earned {coins(result.credited)} in interest ({percent(result.rate)}).{note}\n"
            f"Bank: {coins(result.user.bank)} / {coins(result.user.bank_capacity)}"
        )

    @router.command(
        "upgradebank",
        aliases=("bank-upgrade",),
        description="Pay 15% of your bank capacity to grow it by 50%.",
        category="Banking",
    )
    def upgrade(econ: Economy, ctx: CommandContext) -> Reply:
        result = banking.upgrade_bank(econ, ctx.identity)
        return Reply(
            f"⬆️ Bank upgraded for {coins(result.cost)}.\n"
            f"Capacity: {coins(result.old_capacity)} → {coins(result.user.bank_capacity)}\n"
            f"Wallet: {coins(result.user.wallet)}"
        )

    @router.command(
        "bank",
        aliases=("bank-info",),
        description="Show bank balance, capacity, interest rate and upgrade cost.",
        category="Banking",
    )
    def bank_info(econ: Economy, ctx: CommandContext) -> Reply:
        user = econ.store.get_user(ctx.identity)
        claimed_today = (
            user.last_interest is not None
            and econ.local_date(user.last_interest) == econ.local_date(econ.now())
        )
        return Reply(
            f"🏦 **BANK: {user.display_name}**\n\n"
            f"Balance: {coins(user.bank)} / {coins(user.bank_capacity)}\n"
            f"Daily interest: {percent(banking.interest_rate(econ, user))}"
            f" ({'collected' if claimed_today else 'available'} today)\n"
            f"Upgrade cost: {coins(banking.upgrade_cost(econ, user.bank_capacity))}"
        )
