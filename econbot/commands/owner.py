from __future__ import annotations

from econbot.commands.formatting import coins
from econbot.commands.router import CommandContext, CommandRouter, Reply
from econbot.config.runtime import ConnectionFactory, get_all_app_configs, load_economy_config, set_app_config
from econbot.db.database import get_connection
from econbot.db.repositories import save_snapshot
from econbot.services import admin, jackpot, progression
from econbot.services.context import Economy
from econbot.services.identity import resolve_user
from econbot.services.market import parse_positive_int

RESET_CONFIRM = "confirm"
RESET_ALL_CONFIRM = ("wipealldatabase", "confirm")


def setup_owner(router: CommandRouter, connection_factory: ConnectionFactory = get_connection) -> None:
    def owner_command(name: str, usage: str = "", description: str = ""):
        return router.command(
            name,
            usage=usage,
            description=description,
            category="Owner",
            owner_only=True,
        )

    @owner_command("blacklist", "blacklist <@user>", "Block a player from using the bot.")
    def blacklist(econ: Economy, ctx: CommandContext) -> Reply:
        target = resolve_user(econ.store, ctx.require(1, "blacklist <@user>")[0])
        admin.set_blacklisted(econ, target.identity, True)
        return Reply(f"⛔ **{target.display_name}** is now blacklisted.")

    @owner_command("unblacklist", "unblacklist <@user>", "Lift a blacklist.")
    def unblacklist(econ: Economy, ctx: CommandContext) -> Reply:
        target = resolve_user(econ.store, ctx.require(1, "unblacklist <@user>")[0])
        admin.set_blacklisted(econ, target.identity, False)
        return Reply(f"✅ **{target.display_name}** can use the bot again.")

    @owner_command("addcoins", "addcoins <@user> <amount>", "Credit coins to a wallet.")
    def add_coins(econ: Economy, ctx: CommandContext) -> Reply:
        args = ctx.require(2, "addcoins <@user> <amount>")
        target = resolve_user(econ.store, args[0])
        user = admin.add_coins(econ, target.identity, args[1])
        return Reply(f"💰 Added coins to **{user.display_name}**. Wallet: {coins(user.wallet)}")

    @owner_command("removecoins", "removecoins <@user> <amount>", "Take coins from a wallet (never below zero).")
    def remove_coins(econ: Economy, ctx: CommandContext) -> Reply:
        args = ctx.require(2, "removecoins <@user> <amount>")
        target = resolve_user(econ.store, args[0])
        user, removed = admin.remove_coins(econ, target.identity, args[1])
        return Reply(f"💸 Removed {coins(removed)} from **{user.display_name}**. Wallet: {coins(user.wallet)}")

    @owner_command("setxp", "setxp <@user> <xp>", "Set a player's XP; the level is recalculated.")
    def set_xp(econ: Economy, ctx: CommandContext) -> Reply:
        args = ctx.require(2, "setxp <@user> <xp>")
        target = resolve_user(econ.store, args[0])
        xp = 0 if args[1].strip() == "0" else parse_positive_int(args[1], "XP")
        change = progression.set_xp(econ, target.identity, xp)
        return Reply(f"✨ **{change.user.display_name}** now has {change.user.xp:,} XP (level {change.new_level}).")

    @owner_command("makeowner", "makeowner <@user>", "Grant bot-owner rights.")
    def make_owner(econ: Economy, ctx: CommandContext) -> Reply:
        target = resolve_user(econ.store, ctx.require(1, "makeowner <@user>")[0])
        econ.owners.add(target.identity)
        return Reply(f"👑 **{target.display_name}** is now a bot owner.")

    @owner_command("removeowner", "removeowner <@user>", "Revoke bot-owner rights granted with makeowner.")
    def remove_owner(econ: Economy, ctx: CommandContext) -> Reply:
        target = resolve_user(econ.store, ctx.require(1, "removeowner <@user>")[0])
        econ.owners.remove(target.identity)
        return Reply(f"👤 **{target.display_name}** is no longer a bot owner.")

    @owner_command("owners", description="List bot owners.")
    def list_owners(econ: Economy, ctx: CommandContext) -> Reply:
        lines = ["👑 **OWNERS**"]
        for identity in sorted(econ.owners.all()):
            user = econ.store.get_user(identity)
            tag = " (configured)" if econ.owners.is_configured(identity) else ""
            lines.append(f"- {user.display_name}{tag}")
        return Reply("\n".join(lines))

    @owner_command("resetdata", "resetdata confirm", "Wipe every player, company, order and challenge.")
    def reset_data(econ: Economy, ctx: CommandContext) -> Reply:
        if [a.lower() for a in ctx.args] != [RESET_CONFIRM]:
            return Reply(
                "⚠️ **DATA RESET**\nThis deletes all players, companies, orders and challenges. "
                f"It cannot be undone.\nTo confirm, type `{ctx.prefix}resetdata confirm`.",
                ok=False,
            )
        admin.reset_economy(econ)
        return Reply("🧹 All economy data has been reset.")

    @owner_command(
        "resetalldata",
        "resetalldata wipealldatabase confirm",
        "Reset everything, including granted owners and approved servers.",
    )
    def reset_all(econ: Economy, ctx: CommandContext) -> Reply:
        if tuple(a.lower() for a in ctx.args) != RESET_ALL_CONFIRM:
            return Reply(
                "🚨 **FULL RESET**\nThis also removes granted owners and approved servers.\n"
                f"To confirm, type `{ctx.prefix}resetalldata wipealldatabase confirm`.",
                ok=False,
            )
        admin.reset_economy(econ, wipe_admin=True)
        return Reply("🧹 Everything has been reset.")

    @owner_command("drawjackpot", description="Draw the jackpot now.")
    def draw_jackpot(econ: Economy, ctx: CommandContext) -> Reply:
        result = jackpot.draw(econ, force=True)
        if result is None:
            return Reply("🎯 The jackpot is empty.", ok=False)
        reply = Reply(f"🎯 **{result.winner.display_name}** won the jackpot of {coins(result.amount)}!")
        return reply.notify(
            result.winner.identity,
            f"🎉 You won the jackpot: {coins(result.amount)}! Wallet: {coins(result.winner.wallet)}",
        )

    @owner_command("approvegroup", description="Allow this server to use the bot.")
    def approve(econ: Economy, ctx: CommandContext) -> Reply:
        if ctx.group_id is None:
            return Reply("❌ Run this inside the server you want to approve.", ok=False)
        group = admin.approve_group(econ, ctx.identity, ctx.group_id, ctx.group_name)
        return Reply(f"✅ **{group.name or group.group_id}** is approved.")

    @owner_command("unapprovegroup", description="Revoke this server's approval.")
    def unapprove(econ: Economy, ctx: CommandContext) -> Reply:
        if ctx.group_id is None:
            return Reply("❌ Run this inside the server you want to revoke.", ok=False)
        group = admin.revoke_group(econ, ctx.group_id)
        return Reply(f"🔒 **{group.name or group.group_id}** is no longer approved.")

    @owner_command("save", description="Write a ledger snapshot now.")
    def save(econ: Economy, ctx: CommandContext) -> Reply:
        snapshot_id = save_snapshot(econ.store.to_snapshot(), connection_factory)
        return Reply(f"💾 Snapshot #{snapshot_id} saved.")

    @owner_command("config", "config [NAME VALUE]", "Show or change runtime settings.")
    def config(econ: Economy, ctx: CommandContext) -> Reply:
        if len(ctx.args) >= 2:
            name = ctx.args[0].upper()
            try:
                value = set_app_config(name, " ".join(ctx.args[1:]), connection_factory)
            except KeyError:
                return Reply(f"❌ Unknown setting `{name}`.", ok=False)
            except (TypeError, ValueError):
                return Reply(f"❌ Invalid value for `{name}`.", ok=False)
            econ.config = load_economy_config(connection_factory)
            econ.store.set_start_balance(econ.config.start_balance)
            return Reply(f"⚙️ `{name}` = `{value}`")
        lines = ["⚙️ **SETTINGS**"]
        for row in get_all_app_configs(connection_factory):
            lines.append(f"`{row['name']}` = `{row['value']}` (default {row['default']}): {row['description']}")
        return Reply("\n".join(lines))
