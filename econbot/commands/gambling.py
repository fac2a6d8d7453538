from __future__ import annotations

from econbot.commands.formatting import coins, duration, hand, level_up, percent
from econbot.commands.router import CommandContext, CommandRouter, Reply
from econbot.services import blackjack, gambling, jackpot
from econbot.services.blackjack import BlackjackOutcome, BlackjackView
from econbot.services.context import Economy
from econbot.services.gambling import GambleResult

_BLACKJACK_HEADLINES = {
    BlackjackOutcome.NATURAL: "🃏 **BLACKJACK!** Natural 21",
    BlackjackOutcome.BUST: "💥 **BUST!** You went over 21",
    BlackjackOutcome.DEALER_BUST: "🎉 **Dealer busts!** You win",
    BlackjackOutcome.WIN: "🎉 **You win!**",
    BlackjackOutcome.LOSE: "😞 **Dealer wins.**",
    BlackjackOutcome.PUSH: "🤝 **Push.** Your stake is returned",
}


def _result_lines(result: GambleResult) -> str:
    settled = result.settlement
    if settled.net > 0:
        line = f"You won {coins(settled.payout)}! (+{settled.net:,})"
    elif settled.net == 0:
        line = f"You got your {coins(settled.stake)} back."
    else:
        line = f"You lost {coins(-settled.net)}."
    return (
        f"{line}\nNew balance: {coins(settled.user.wallet)}"
        f"{level_up(settled.old_level, settled.user.level)}"
    )


def render_blackjack(view: BlackjackView, prefix: str) -> str:
    game = view.game
    if not view.finished:
        title = "🃏 **BLACKJACK** (game in progress)" if view.resumed else "🃏 **BLACKJACK**"
        return (
            f"{title}\nStake: {coins(game.stake)}\n\n"
            f"Your hand: {hand(game.player)} (**{view.player_value}**)\n"
            f"Dealer: {hand(game.dealer, hide_hole=True)}\n\n"
            f"`{prefix}bj hit` to draw, `{prefix}bj stand` to hold."
        )
    settled = view.settlement
    return (
        f"{_BLACKJACK_HEADLINES[view.outcome]}\n\n"
        f"Your hand: {hand(game.player)} (**{view.player_value}**)\n"
        f"Dealer: {hand(game.dealer)} (**{view.dealer_value}**)\n\n"
        f"Payout: {coins(settled.payout)}\nNew balance: {coins(settled.user.wallet)}"
        f"{level_up(settled.old_level, settled.user.level)}"
    )


def setup_gambling(router: CommandRouter) -> None:
    @router.command(
        "cointoss",
        usage="cointoss <amount|all> <heads|tails>",
        description="Call the coin. Pays 2x your stake.",
        category="Gambling",
    )
    def cointoss(econ: Economy, ctx: CommandContext) -> Reply:
        args = ctx.require(2, "cointoss <amount|all> <heads|tails>")
        result = gambling.coin_toss(econ, ctx.identity, args[0], args[1])
        icon = "🎉" if result.won else "😞"
        return Reply(
            f"🪙 The coin landed on **{result.outcome}**! {icon}\n{_result_lines(result)}"
        )

    @router.command(
        "dice",
        usage="dice <amount|all> <1-6>",
        description="Guess the roll. Pays 5x your stake.",
        category="Gambling",
    )
    def dice(econ: Economy, ctx: CommandContext) -> Reply:
        args = ctx.require(2, "dice <amount|all> <1-6>")
        result = gambling.dice(econ, ctx.identity, args[0], args[1])
        return Reply(
            f"🎲 You picked **{result.choice}**, the die shows **{result.outcome}**.\n"
            f"{_result_lines(result)}"
        )

    @router.command(
        "highstakes",
        usage="highstakes <amount|all> <heads|tails>",
        description="High-stakes coin toss, minimum 100. Pays 10x your stake.",
        category="Gambling",
    )
    def highstakes(econ: Economy, ctx: CommandContext) -> Reply:
        args = ctx.require(2, "highstakes <amount|all> <heads|tails>")
        result = gambling.high_stakes(econ, ctx.identity, args[0], args[1])
        return Reply(
            f"🔥 **HIGH STAKES** 🔥\nThe coin landed on **{result.outcome}**!\n{_result_lines(result)}",
            preface=f"🔥 {coins(result.settlement.stake)} on **{result.choice}**... the coin is in the air!",
            delay=econ.config.suspense_delay,
        )

    @router.command(
        "slots",
        usage="slots <amount|all>",
        description="Spin the 3x3 slot machine. Three of a kind on the middle row pays 3x to 20x.",
        category="Gambling",
    )
    def slots(econ: Economy, ctx: CommandContext) -> Reply:
        args = ctx.require(1, "slots <amount|all>")
        result = gambling.slots(econ, ctx.identity, args[0])
        rows = [" | ".join(row) for row in result.slots.grid]
        rows[1] = f"{rows[1]}  ⬅️"
        headline = f"🎰 **JACKPOT x{result.outcome}!**" if result.won else "🎰 No match this time."
        return Reply(
            "\n".join(rows) + f"\n\n{headline}\n{_result_lines(result)}",
            preface="🎰 Spinning the reels...",
            delay=econ.config.suspense_delay,
        )

    @router.command(
        "wheelspin",
        aliases=("wheel",),
        usage="wheelspin <amount|all>",
        description="Spin the wheel for a 0x to 10x multiplier.",
        category="Gambling",
    )
    def wheelspin(econ: Economy, ctx: CommandContext) -> Reply:
        args = ctx.require(1, "wheelspin <amount|all>")
        result = gambling.wheel(econ, ctx.identity, args[0])
        return Reply(
            f"🎡 The wheel stopped on **{result.outcome:g}x**!\n{_result_lines(result)}",
            preface="🎡 The wheel is spinning...",
            delay=econ.config.suspense_delay,
        )

    @router.command(
        "blackjack",
        aliases=("bj",),
        usage="blackjack <amount|all> | hit | stand",
        description="Play blackjack against the dealer. Natural 21 pays 2.5x, a win pays 2x.",
        category="Gambling",
    )
    def play_blackjack(econ: Economy, ctx: CommandContext) -> Reply:
        action = ctx.args[0].lower() if ctx.args else ""
        open_game = blackjack.current(econ, ctx.identity)
        if open_game is not None:
            if action in {"hit", "h"}:
                view = blackjack.hit(econ, ctx.identity)
            elif action in {"stand", "s"}:
                view = blackjack.stand(econ, ctx.identity)
            else:
                view = open_game
            return Reply(render_blackjack(view, ctx.prefix))
        if action in {"hit", "h", "stand", "s"}:
            return Reply(
                f"❌ You don't have an active game. Start one with `{ctx.prefix}bj <amount>`.",
                ok=False,
            )
        args = ctx.require(1, "blackjack <amount|all>")
        return Reply(render_blackjack(blackjack.start(econ, ctx.identity, args[0]), ctx.prefix))

    @router.command(
        "jackpot",
        usage="jackpot <amount|all>",
        description="Buy jackpot tickets (1 coin = 1 ticket). One entry takes the whole pool.",
        category="Gambling",
    )
    def enter_jackpot(econ: Economy, ctx: CommandContext) -> Reply:
        args = ctx.require(1, "jackpot <amount|all>")
        entry = jackpot.enter(econ, ctx.identity, args[0])
        return Reply(
            f"🎯 **JACKPOT ENTRY CONFIRMED**\n\n"
            f"You entered {coins(entry.amount)}.\n"
            f"Your tickets: {entry.tickets:,}\n"
            f"Win chance: {percent(entry.win_chance)}\n\n"
            f"The jackpot is drawn one hour after the first entry or once it reaches "
            f"{coins(econ.config.jackpot_draw_threshold)}.\n"
            f"New balance: {coins(entry.user.wallet)}"
        )

    @router.command(
        "jackpotstatus",
        description="Show the current jackpot pool.",
        category="Gambling",
        public=True,
    )
    def jackpot_status(econ: Economy, ctx: CommandContext) -> Reply:
        state = jackpot.status(econ)
        if state.seconds_until_draw is None:
            next_draw = "after the first entry"
        elif state.seconds_until_draw <= 0:
            next_draw = "draw imminent"
        else:
            next_draw = duration(state.seconds_until_draw)
        lines = [
            "🎯 **JACKPOT STATUS**\n",
            f"Current jackpot: {coins(state.total)}",
            f"Entries: {state.entries:,}",
            f"Participants: {state.participants:,}",
            f"Next draw: {next_draw}",
        ]
        if state.last_winner is not None:
            winner = econ.store.get_user(state.last_winner)
            lines.append(f"Last winner: **{winner.display_name}** ({coins(state.last_amount)})")
        lines.append(f"\nEnter with `{ctx.prefix}jackpot <amount>`.")
        return Reply("\n".join(lines))
