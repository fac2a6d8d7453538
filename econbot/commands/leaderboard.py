from __future__ import annotations

from econbot.commands.formatting import coins, ranked_lines
from econbot.commands.router import CommandContext, CommandRouter, Reply
from econbot.services import leaderboard
from econbot.services.context import Economy


def setup_leaderboard(router: CommandRouter) -> None:
    @router.command("toprich", description="Richest players by net worth.", category="Leaderboards", public=True)
    def top_rich(econ: Economy, ctx: CommandContext) -> Reply:
        rows = [(u.display_name, coins(leaderboard.net_worth(u))) for u in leaderboard.top_rich(econ)]
        return Reply("💰 **RICHEST PLAYERS**\n\n" + (ranked_lines(rows) or "No players yet."))

    @router.command("topwins", description="Players with the most wins.", category="Leaderboards", public=True)
    def top_wins(econ: Economy, ctx: CommandContext) -> Reply:
        rows = [
            (u.display_name, f"{u.games_won:,} wins / {u.games_played:,} games")
            for u in leaderboard.top_wins(econ)
        ]
        return Reply("🏆 **TOP WINNERS**\n\n" + (ranked_lines(rows) or "No wins yet."))

    @router.command("topstreak", description="Longest daily streaks.", category="Leaderboards", public=True)
    def top_streak(econ: Economy, ctx: CommandContext) -> Reply:
        rows = [(u.display_name, f"{u.daily_streak} day(s)") for u in leaderboard.top_streaks(econ)]
        return Reply("🔥 **TOP STREAKS**\n\n" + (ranked_lines(rows) or "No streaks yet."))

    @router.command("toplevels", description="Highest level players.", category="Leaderboards", public=True)
    def top_levels(econ: Economy, ctx: CommandContext) -> Reply:
        rows = [(u.display_name, f"level {u.level} ({u.xp:,} XP)") for u in leaderboard.top_levels(econ)]
        return Reply("🏅 **TOP LEVELS**\n\n" + (ranked_lines(rows) or "No players yet."))

    @router.command("topprestige", description="Highest prestige players.", category="Leaderboards", public=True)
    def top_prestige(econ: Economy, ctx: CommandContext) -> Reply:
        rows = [(u.display_name, f"prestige {u.prestige}") for u in leaderboard.top_prestige(econ)]
        return Reply("🌟 **TOP PRESTIGE**\n\n" + (ranked_lines(rows) or "Nobody has prestiged yet."))
