from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from econbot.core import blackjack as engine
from econbot.db.models import BlackjackGame, BlackjackState
from econbot.services.betting import Settlement, settle_bet, validate_bet
from econbot.services.context import Economy
from econbot.services.errors import NotFound

NATURAL_NUMERATOR = 5
NATURAL_DENOMINATOR = 2
WIN_MULTIPLIER = 2


class BlackjackOutcome(str, Enum):
    IN_PROGRESS = "in_progress"
    NATURAL = "natural"
    BUST = "bust"
    DEALER_BUST = "dealer_bust"
    WIN = "win"
    LOSE = "lose"
    PUSH = "push"


@dataclass(frozen=True)
class BlackjackView:
    game: BlackjackGame
    outcome: BlackjackOutcome
    settlement: Settlement | None = None
    resumed: bool = False

    @property
    def player_value(self) -> int:
        return engine.hand_value(self.game.player)

    @property
    def dealer_value(self) -> int:
        return engine.hand_value(self.game.dealer)

    @property
    def finished(self) -> bool:
        return self.outcome is not BlackjackOutcome.IN_PROGRESS


def _resolve(econ: Economy, game: BlackjackGame, outcome: BlackjackOutcome) -> BlackjackView:
    stake = game.stake
    if outcome is BlackjackOutcome.NATURAL:
        payout = stake * NATURAL_NUMERATOR // NATURAL_DENOMINATOR
    elif outcome in (BlackjackOutcome.WIN, BlackjackOutcome.DEALER_BUST):
        payout = stake * WIN_MULTIPLIER
    elif outcome is BlackjackOutcome.PUSH:
        payout = stake
    else:
        payout = 0
    won = payout > stake
    game.state = BlackjackState.RESOLVED
    econ.store.clear_game(game.identity)
    settlement = settle_bet(econ, game.identity, stake, payout, won, escrowed=True)
    return BlackjackView(game, outcome, settlement)


def current(econ: Economy, identity: int) -> BlackjackView | None:
    game = econ.store.get_game(identity)
    if game is None:
        return None
    return BlackjackView(game, BlackjackOutcome.IN_PROGRESS, resumed=True)


def start(econ: Economy, identity: int, raw_amount: str) -> BlackjackView:
    """Deal a new hand, or re-show the open one. The stake leaves the wallet at the deal."""
    with econ.store.transaction() as store:
        open_game = current(econ, identity)
        if open_game is not None:
            return open_game
        user = store.get_user(identity)
        stake = validate_bet(raw_amount, user.wallet, econ.config)
        store.update_user(identity, wallet=user.wallet - stake)
        player, dealer, deck = engine.deal_hand(econ.rng)
        game = BlackjackGame(
            identity=identity,
            stake=stake,
            player=player,
            dealer=dealer,
            deck=deck,
            started_at=econ.now(),
        )
        if engine.is_natural(player):
            return _resolve(econ, game, BlackjackOutcome.NATURAL)
        store.save_game(game)
    return BlackjackView(game, BlackjackOutcome.IN_PROGRESS)


def hit(econ: Economy, identity: int) -> BlackjackView:
    with econ.store.transaction() as store:
        game = store.get_game(identity)
        if game is None:
            raise NotFound("You don't have an active blackjack game.")
        engine.hit(game.player, game.deck, econ.rng)
        if engine.hand_value(game.player) > 21:
            return _resolve(econ, game, BlackjackOutcome.BUST)
        store.save_game(game)
    return BlackjackView(game, BlackjackOutcome.IN_PROGRESS)


def stand(econ: Economy, identity: int) -> BlackjackView:
    with econ.store.transaction() as store:
        game = store.get_game(identity)
        if game is None:
            raise NotFound("You don't have an active blackjack game.")
        dealer_value = engine.dealer_play(game.dealer, game.deck, econ.rng)
        player_value = engine.hand_value(game.player)
        if dealer_value > 21:
            outcome = BlackjackOutcome.DEALER_BUST
        elif player_value > dealer_value:
            outcome = BlackjackOutcome.WIN
        elif player_value < dealer_value:
            outcome = BlackjackOutcome.LOSE
        else:
            outcome = BlackjackOutcome.PUSH
        return _resolve(econ, game, outcome)
