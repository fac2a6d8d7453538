from __future__ import annotations

from econbot.commands.formatting import coins
from econbot.commands.router import CommandContext, CommandRouter, Reply
from econbot.services import market
from econbot.services.company import split_company_args
from econbot.services.context import Economy
from econbot.services.identity import resolve_user
from econbot.services.market import parse_positive_int


def setup_market(router: CommandRouter) -> None:
    @router.command(
        "market",
        usage="market [company]",
        description="List open sell orders, optionally for one company.",
        category="Market",
    )
    def listing(econ: Economy, ctx: CommandContext) -> Reply:
        company = " ".join(ctx.args) if ctx.args else None
        orders = market.list_orders(econ, company)
        if not orders:
            return Reply("📭 No open orders.")
        lines = ["🏪 **MARKET**\n"]
        for order in orders:
            seller = econ.store.get_user(order.seller)
            lines.append(
                f"#{order.id} **{order.company}**: {order.quantity:,} share(s) @ {coins(order.price)} "
                f"(seller {seller.display_name})"
            )
        lines.append(f"\nBuy with `{ctx.prefix}buyshares <order id> <quantity>`.")
        return Reply("\n".join(lines))

    @router.command(
        "sellshares",
        usage="sellshares <company> <quantity> <price>",
        description="Post a sell order. The shares are held by the order until it fills or you cancel.",
        category="Market",
    )
    def sell(econ: Economy, ctx: CommandContext) -> Reply:
        args = ctx.require(3, "sellshares <company> <quantity> <price>")
        order = market.sell_shares(econ, ctx.identity, " ".join(args[:-2]), args[-2], args[-1])
        return Reply(
            f"🏷️ Order #{order.id} posted: {order.quantity:,} share(s) of **{order.company}** "
            f"at {coins(order.price)} each."
        )

    @router.command(
        "buyshares",
        usage="buyshares <order id> <quantity>",
        description="Buy shares from an open order. The seller pays a 5% market fee.",
        category="Market",
    )
    def buy(econ: Economy, ctx: CommandContext) -> Reply:
        args = ctx.require(2, "buyshares <order id> <quantity>")
        order_id = parse_positive_int(args[0].lstrip("#"), "Order id")
        fill = market.buy_shares(econ, ctx.identity, order_id, args[1])
        reply = Reply(
            f"✅ Bought {fill.quantity:,} share(s) of **{fill.order.company}** for {coins(fill.cost)}.\n"
            f"Wallet: {coins(fill.buyer.wallet)}"
        )
        left = f"{fill.remaining:,} share(s) still listed." if fill.remaining else "Order filled."
        return reply.notify(
            fill.seller.identity,
            f"💸 **{fill.buyer.display_name}** bought {fill.quantity:,} share(s) of **{fill.order.company}** "
            f"from order #{fill.order.id}. You received {coins(fill.proceeds)} after a {coins(fill.fee)} fee. "
            f"{left}",
        )

    @router.command(
        "cancelorder",
        usage="cancelorder <order id>",
        description="Cancel your sell order and get the unsold shares back.",
        category="Market",
    )
    def cancel(econ: Economy, ctx: CommandContext) -> Reply:
        args = ctx.require(1, "cancelorder <order id>")
        order_id = parse_positive_int(args[0].lstrip("#"), "Order id")
        order = market.cancel_order(econ, ctx.identity, order_id)
        return Reply(f"↩️ Order #{order.id} cancelled. {order.quantity:,} share(s) of **{order.company}** returned.")

    @router.command(
        "transfer",
        usage="transfer <company> <@user> <quantity>",
        description="Give shares to another player.",
        category="Market",
    )
    def transfer(econ: Economy, ctx: CommandContext) -> Reply:
        args = ctx.require(3, "transfer <company> <@user> <quantity>")
        recipient = resolve_user(econ.store, args[-2])
        name, _ = split_company_args(econ.store, args[:-2])
        result = market.transfer_shares(
            econ,
            ctx.identity,
            name or " ".join(args[:-2]),
            recipient.identity,
            args[-1],
        )
        company = result.company.name
        reply = Reply(f"🤝 Sent {result.quantity:,} share(s) of **{company}** to **{recipient.display_name}**.")
        return reply.notify(
            recipient.identity,
            f"🎁 **{result.sender.display_name}** sent you {result.quantity:,} share(s) of **{company}**.",
        )
