from __future__ import annotations

from econbot.commands.formatting import coins
from econbot.commands.router import CommandContext, CommandRouter, Reply
from econbot.services import daily, progression
from econbot.services.context import Economy


def _bar(done: int, total: int, width: int = 10) -> str:
    filled = 0 if total <= 0 else min(width, done * width // total)
    return "▰" * filled + "▱" * (width - filled)


def setup_progression(router: CommandRouter) -> None:
    @router.command("xp", description="Show your XP and progress to the next level.", category="Progression")
    def xp(econ: Economy, ctx: CommandContext) -> Reply:
        user = econ.store.get_user(ctx.identity)
        done, needed, threshold = progression.level_progress(user)
        return Reply(
            f"✨ **XP: {user.display_name}**\n"
            f"Total XP: {user.xp:,}\n"
            f"Level {user.level} {_bar(done, needed)} {done:,}/{needed:,}\n"
            f"Next level at {threshold:,} XP"
        )

    @router.command("level", description="Show your level and prestige.", category="Progression")
    def level(econ: Economy, ctx: CommandContext) -> Reply:
        user = econ.store.get_user(ctx.identity)
        lines = [f"🏅 **{user.display_name}** is level **{user.level}** (prestige {user.prestige})."]
        if user.level >= econ.config.prestige_level:
            lines.append(f"You can prestige now with `{ctx.prefix}prestige`!")
        else:
            lines.append(f"Prestige unlocks at level {econ.config.prestige_level}.")
        return Reply("\n".join(lines))

    @router.command(
        "prestige",
        description="Reset to level 1 for a permanent bonus and a coin reward.",
        category="Progression",
    )
    def do_prestige(econ: Economy, ctx: CommandContext) -> Reply:
        result = progression.prestige(econ, ctx.identity)
        return Reply(
            f"🌟 **PRESTIGE {result.user.prestige}!**\n"
            f"You received {coins(result.bonus)}. Your level and XP were reset.\n"
            f"Bank interest and daily rewards are now higher."
        )

    @router.command("daily", description="Claim your daily reward.", category="Progression")
    def claim(econ: Economy, ctx: CommandContext) -> Reply:
        result = daily.claim_daily(econ, ctx.identity)
        return Reply(
            f"🎁 You claimed {coins(result.reward)}!\n"
            f"Streak: {result.streak} day(s) 🔥\n"
            f"Wallet: {coins(result.user.wallet)}"
        )

    @router.command("streak", description="Show your daily streak and next reward.", category="Progression")
    def streak(econ: Economy, ctx: CommandContext) -> Reply:
        info = daily.streak_info(econ, ctx.identity)
        status = "available now" if info.can_claim else "available tomorrow"
        return Reply(
            f"🔥 Current streak: {info.streak} day(s)\n"
            f"Next reward: {coins(info.next_reward)} ({status})"
        )
