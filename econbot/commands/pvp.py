from __future__ import annotations

from econbot.commands.formatting import coins
from econbot.commands.router import CommandContext, CommandRouter, Reply
from econbot.db.models import Challenge
from econbot.services import pvp
from econbot.services.context import Economy
from econbot.services.identity import resolve_user


def _invite(econ: Economy, challenge: Challenge, prefix: str) -> str:
    challenger = econ.store.get_user(challenge.challenger)
    return (
        f"⚔️ **{challenger.display_name}** challenged you to a coin flip for {coins(challenge.stake)}!\n"
        f"Reply `{prefix}accept` or `{prefix}decline` within {econ.config.challenge_timeout} seconds."
    )


def setup_pvp(router: CommandRouter) -> None:
    @router.command(
        "challenge",
        usage="challenge <@user> <amount>",
        description="Challenge a player to a winner-takes-all coin flip.",
        category="PvP",
    )
    def issue(econ: Economy, ctx: CommandContext) -> Reply:
        args = ctx.require(2, "challenge <@user> <amount>")
        opponent = resolve_user(econ.store, args[0])
        challenge = pvp.challenge(econ, ctx.identity, opponent.identity, args[-1])
        reply = Reply(
            f"⚔️ Challenge #{challenge.id} sent to **{opponent.display_name}** for {coins(challenge.stake)}."
        )
        return reply.notify(opponent.identity, _invite(econ, challenge, ctx.prefix))

    @router.command("accept", description="Accept your newest pending challenge.", category="PvP")
    def accept(econ: Economy, ctx: CommandContext) -> Reply:
        duel = pvp.accept(econ, ctx.identity)
        challenge = duel.challenge
        if not duel.resolved:
            text = "⚠️ One of you can no longer cover the stake, so the challenge was cancelled."
            return Reply(text, ok=False).notify(challenge.challenger, text)
        winner, loser = duel.winner, duel.loser
        summary = (
            f"⚔️ **DUEL #{challenge.id}**\n"
            f"**{winner.display_name}** beat **{loser.display_name}** and takes {coins(challenge.stake)}!"
        )
        mine = winner if winner.identity == ctx.identity else loser
        reply = Reply(
            f"{summary}\nYour balance: {coins(mine.wallet)}\n"
            f"Type `{ctx.prefix}rematch` to go again."
        )
        return reply.notify(challenge.challenger, summary)

    @router.command("decline", description="Decline your newest pending challenge.", category="PvP")
    def decline(econ: Economy, ctx: CommandContext) -> Reply:
        challenge = pvp.decline(econ, ctx.identity)
        me = econ.store.get_user(ctx.identity)
        reply = Reply(f"🙅 You declined challenge #{challenge.id}.")
        return reply.notify(
            challenge.challenger,
            f"🙅 **{me.display_name}** declined your challenge for {coins(challenge.stake)}.",
        )

    @router.command(
        "rematch",
        description="Challenge your last opponent again with an automatic stake.",
        category="PvP",
    )
    def rematch(econ: Economy, ctx: CommandContext) -> Reply:
        challenge = pvp.rematch(econ, ctx.identity)
        opponent = econ.store.get_user(challenge.opponent)
        reply = Reply(
            f"🔁 Rematch #{challenge.id} sent to **{opponent.display_name}** for {coins(challenge.stake)}."
        )
        return reply.notify(opponent.identity, _invite(econ, challenge, ctx.prefix))
