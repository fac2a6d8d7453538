from __future__ import annotations

from econbot.commands.formatting import coins, percent
from econbot.commands.router import CommandContext, CommandRouter, Reply
from econbot.services import registration
from econbot.services.context import Economy
from econbot.services.identity import resolve_user
from econbot.services.leaderboard import profile

CATEGORY_ORDER = (
    "General",
    "Gambling",
    "Banking",
    "Companies",
    "Market",
    "PvP",
    "Progression",
    "Leaderboards",
    "Owner",
)


def setup_general(router: CommandRouter) -> None:
    @router.command(
        "register",
        usage="register <username>",
        description="Claim your username (3-15 letters, numbers or _). Cannot be changed.",
        public=True,
    )
    def register(econ: Economy, ctx: CommandContext) -> Reply:
        args = ctx.require(1, "register <username>")
        user = registration.register(econ, ctx.identity, args[0])
        return Reply(
            f"✅ Welcome, **{user.username}**! You start with {coins(user.wallet)}.\n"
            f"Type `{ctx.prefix}help` to see what you can do."
        )

    @router.command("help", usage="help [command]", description="List commands or show one in detail.", public=True)
    def help_command(econ: Economy, ctx: CommandContext) -> Reply:
        if ctx.args:
            command = router.resolve(ctx.args[0].lstrip(router.prefix))
            if command is None:
                return Reply(f"❓ No command named `{ctx.args[0]}`.", ok=False)
            aliases = ", ".join(f"`{router.prefix}{alias}`" for alias in command.aliases)
            lines = [f"**{router.usage(command)}**", command.description or "No description."]
            if aliases:
                lines.append(f"Aliases: {aliases}")
            return Reply("\n".join(lines))

        is_owner = econ.is_owner(ctx.identity)
        sections: list[str] = ["📖 **COMMANDS**"]
        for category in CATEGORY_ORDER:
            if category == "Owner" and not is_owner:
                continue
            entries = [c for c in router.commands() if c.category == category]
            if not entries:
                continue
            sections.append(f"\n**{category}**")
            sections.extend(f"`{router.usage(c)}`" for c in entries)
        sections.append(f"\nType `{router.prefix}help <command>` for details.")
        return Reply("\n".join(sections))

    @router.command("ping", description="Check that the bot is alive.", public=True)
    def ping(econ: Economy, ctx: CommandContext) -> Reply:
        return Reply("🏓 Pong!")

    @router.command(
        "balance",
        aliases=("bal",),
        usage="balance [@user]",
        description="Show wallet and bank balances.",
    )
    def balance(econ: Economy, ctx: CommandContext) -> Reply:
        user = resolve_user(econ.store, ctx.args[0]) if ctx.args else econ.store.get_user(ctx.identity)
        return Reply(
            f"💰 **{user.display_name}**\n"
            f"Wallet: {coins(user.wallet)}\n"
            f"Bank: {coins(user.bank)} / {coins(user.bank_capacity)}"
        )

    @router.command("profile", usage="profile [@user]", description="Show stats, level and net worth.")
    def show_profile(econ: Economy, ctx: CommandContext) -> Reply:
        target = resolve_user(econ.store, ctx.args[0]).identity if ctx.args else ctx.identity
        info = profile(econ, target)
        user = info.user
        return Reply(
            f"📊 **PROFILE: {user.display_name}**\n\n"
            f"Level: {user.level} (XP {user.xp:,})\n"
            f"Prestige: {user.prestige}\n"
            f"Wallet: {coins(user.wallet)}\n"
            f"Bank: {coins(user.bank)} / {coins(user.bank_capacity)}\n"
            f"Investments: {coins(info.invested)}\n"
            f"Net Worth: {coins(info.net_worth)}\n\n"
            f"Games: {user.games_played:,} played, {user.games_won:,} won ({percent(info.win_rate)})\n"
            f"Daily streak: {user.daily_streak}"
        )
