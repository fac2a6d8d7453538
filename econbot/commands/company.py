from __future__ import annotations

from econbot.commands.formatting import coins, percent, ranked_lines
from econbot.commands.router import CommandContext, CommandRouter, Reply
from econbot.services import company as companies
from econbot.services.context import Economy
from econbot.services.identity import resolve_user


def setup_company(router: CommandRouter) -> None:
    @router.command(
        "createcompany",
        aliases=("cc",),
        usage="createcompany <amount> <name>",
        description="Found a company with at least 5,000 coins. You receive all 100 starting shares.",
        category="Companies",
    )
    def create(econ: Economy, ctx: CommandContext) -> Reply:
        args = ctx.require(2, "createcompany <amount> <name>")
        company = companies.create_company(econ, ctx.identity, " ".join(args[1:]), args[0])
        return Reply(
            f"🏢 **{company.name}** is open for business!\n\n"
            f"Sector: {company.sector}\n"
            f"Value: {coins(company.value)}\n"
            f"Your shares: {company.share_distribution[ctx.identity]}/{company.total_shares}"
        )

    @router.command(
        "cinfo",
        usage="cinfo <name>",
        description="Show a company's value, sector, investors and shareholders.",
        category="Companies",
    )
    def info(econ: Economy, ctx: CommandContext) -> Reply:
        args = ctx.require(1, "cinfo <name>")
        company = companies.get_company(econ, " ".join(args))
        owner = econ.store.get_user(company.owner)
        investor_lines = [
            f"- {econ.store.get_user(identity).display_name}: {coins(amount)} ({percent(company.ownership(identity))})"
            for identity, amount in sorted(company.investors.items(), key=lambda item: -item[1])
        ]
        share_lines = [
            f"- {econ.store.get_user(identity).display_name}: {shares}/{company.total_shares}"
            for identity, shares in sorted(company.share_distribution.items(), key=lambda item: -item[1])
        ]
        return Reply(
            f"🏢 **{company.name}**\n\n"
            f"Owner: {owner.display_name}\n"
            f"Sector: {company.sector}\n"
            f"Value: {coins(company.value)}\n\n"
            f"**Investors**\n" + "\n".join(investor_lines) + "\n\n"
            f"**Shareholders**\n" + ("\n".join(share_lines) or "none")
        )

    @router.command(
        "companyinvest",
        aliases=("ci",),
        usage="companyinvest <name> <amount>",
        description="Invest at least 1,000 coins in a company and receive newly issued shares.",
        category="Companies",
    )
    def invest(econ: Economy, ctx: CommandContext) -> Reply:
        args = ctx.require(2, "companyinvest <name> <amount>")
        result = companies.invest(econ, ctx.identity, " ".join(args[:-1]), args[-1])
        company = result.company
        return Reply(
            f"📈 You invested {coins(result.amount)} in **{company.name}**.\n"
            f"New shares: {result.shares_issued}\n"
            f"Your stake: {coins(company.investors[ctx.identity])} ({percent(company.ownership(ctx.identity))})\n"
            f"Company value: {coins(company.value)}"
        )

    @router.command(
        "companywithdraw",
        aliases=("cw",),
        usage="companywithdraw <name> <amount|all>",
        description="Pull out part of an investment. A 10% fee is burned.",
        category="Companies",
    )
    def withdraw(econ: Economy, ctx: CommandContext) -> Reply:
        args = ctx.require(2, "companywithdraw <name> <amount|all>")
        result = companies.withdraw(econ, ctx.identity, " ".join(args[:-1]), args[-1])
        return Reply(
            f"📉 Withdrew {coins(result.amount)} from **{result.company.name}**.\n"
            f"Fee: {coins(result.fee)}\n"
            f"Received: {coins(result.received)}\n"
            f"Shares returned: {result.shares_removed}\n"
            f"Wallet: {coins(result.user.wallet)}"
        )

    @router.command(
        "ctop",
        aliases=("topcompanies",),
        description="Most valuable companies.",
        category="Leaderboards",
        public=True,
    )
    def top(econ: Economy, ctx: CommandContext) -> Reply:
        ranked = companies.top_companies(econ)
        if not ranked:
            return Reply("🏢 No companies yet.")
        rows = [(c.name, f"{coins(c.value)} ({c.sector})") for c in ranked]
        return Reply("🏢 **TOP COMPANIES**\n\n" + ranked_lines(rows))

    @router.command(
        "companyrequest",
        aliases=("crq",),
        usage="companyrequest <name>",
        description="Ask a company's owner to let you invest.",
        category="Companies",
    )
    def request(econ: Economy, ctx: CommandContext) -> Reply:
        args = ctx.require(1, "companyrequest <name>")
        company = companies.request_investment(econ, ctx.identity, " ".join(args))
        requester = econ.store.get_user(ctx.identity)
        reply = Reply(
            f"✅ Your request was sent to the owner of **{company.name}**.\n"
            f"You can also invest directly with `{ctx.prefix}ci {company.name} <amount>`."
        )
        return reply.notify(
            company.owner,
            f"📨 **{requester.display_name}** would like to invest in **{company.name}**.",
        )

    @router.command(
        "companyrename",
        aliases=("crn",),
        usage="companyrename <old name> <new name>",
        description="Rename a company you own.",
        category="Companies",
    )
    def rename(econ: Economy, ctx: CommandContext) -> Reply:
        args = ctx.require(2, "companyrename <old name> <new name>")
        old_name, rest = companies.split_company_args(econ.store, args)
        if old_name is None:
            old_name, rest = args[0], args[1:]
        if not rest:
            return Reply(f"❌ Usage: `{ctx.prefix}companyrename <old name> <new name>`", ok=False)
        company = companies.rename_company(econ, ctx.identity, old_name, " ".join(rest))
        return Reply(f"✏️ **{old_name}** is now called **{company.name}**.")

    @router.command(
        "cclose",
        usage="cclose <name>",
        description="Close your company and refund every investor minus the 10% fee.",
        category="Companies",
    )
    def close(econ: Economy, ctx: CommandContext) -> Reply:
        args = ctx.require(1, "cclose <name>")
        name = " ".join(args)
        result = companies.close_company(econ, ctx.identity, name)
        reply = Reply(
            f"🔒 **{name}** has been closed.\n"
            f"Refunded {len(result.refunds)} investor(s); {result.cancelled_orders} open order(s) cancelled."
        )
        for refund in result.refunds:
            if refund.identity == ctx.identity:
                continue
            reply.notify(
                refund.identity,
                f"🔒 **{name}** was closed by its owner. You received {coins(refund.received)} "
                f"(fee {coins(refund.fee)}).",
            )
        return reply

    @router.command(
        "ckick",
        usage="ckick <name> <@user>",
        description="Force an investor out of your company. They pay a double fee.",
        category="Companies",
    )
    def kick(econ: Economy, ctx: CommandContext) -> Reply:
        args = ctx.require(2, "ckick <name> <@user>")
        target = resolve_user(econ.store, args[-1])
        name = " ".join(args[:-1])
        result = companies.kick_investor(econ, ctx.identity, name, target.identity)
        refund = result.refund
        reply = Reply(
            f"👢 **{target.display_name}** was removed from **{name}**.\n"
            f"Refunded {coins(refund.received)} after a {coins(refund.fee)} fee."
        )
        return reply.notify(
            target.identity,
            f"👢 You were removed from **{name}** by its owner. You received {coins(refund.received)} "
            f"(fee {coins(refund.fee)}).",
        )
