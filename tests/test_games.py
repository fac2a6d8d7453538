import unittest

from econbot.core.games import (
    SLOT_SYMBOLS,
    coin_toss,
    draw_jackpot_winner,
    play_slots,
    roll_dice,
    spin_wheel,
)
from econbot.core.levels import level_for_xp, xp_for_level
from econbot.db.models import JackpotEntry
from econbot.services.betting import parse_amount
from econbot.services.errors import InvalidAmount, InvalidChoice
from econbot.services.gambling import parse_coin_side, parse_dice_face
from econ_helpers import ScriptedRandom


class GameEngineTests(unittest.TestCase):
    def test_coin_toss_splits_at_half(self) -> None:
        self.assertEqual(coin_toss(ScriptedRandom(floats=[0.49])), "heads")
        self.assertEqual(coin_toss(ScriptedRandom(floats=[0.5])), "tails")

    def test_dice_stays_on_the_die(self) -> None:
        rng = ScriptedRandom()
        rolls = {roll_dice(rng) for _ in range(200)}
        self.assertTrue(rolls <= {1, 2, 3, 4, 5, 6})

    def test_slots_win_only_on_matching_middle_row(self) -> None:
        rng = ScriptedRandom(floats=[0.99, 0.5, 0.99, 0.0, 0.0, 0.0, 0.5, 0.99, 0.5])
        result = play_slots(rng)
        self.assertTrue(result.win)
        self.assertEqual(result.middle_row, ("🍒", "🍒", "🍒"))
        self.assertEqual(result.multiplier, SLOT_SYMBOLS[0].multiplier)

        rng = ScriptedRandom(floats=[0.0, 0.0, 0.0, 0.0, 0.99, 0.0, 0.0, 0.0, 0.0])
        result = play_slots(rng)
        self.assertFalse(result.win)
        self.assertEqual(result.multiplier, 0)
        self.assertEqual(result.grid[0], ("🍒", "🍒", "🍒"))

    def test_wheel_picks_weighted_segment(self) -> None:
        self.assertEqual(spin_wheel(ScriptedRandom(floats=[0.01])), 0.0)
        self.assertEqual(spin_wheel(ScriptedRandom(floats=[0.5])), 1.0)
        self.assertEqual(spin_wheel(ScriptedRandom(floats=[0.965])), 5.0)

    def test_jackpot_draw_walks_cumulative_tickets(self) -> None:
        entries = [
            JackpotEntry(identity=1, amount=100, tickets=100, entered_at=0.0),
            JackpotEntry(identity=2, amount=900, tickets=900, entered_at=0.0),
        ]
        self.assertEqual(draw_jackpot_winner(entries, ScriptedRandom(ints=[950])).identity, 2)
        self.assertEqual(draw_jackpot_winner(entries, ScriptedRandom(ints=[100])).identity, 1)
        self.assertEqual(draw_jackpot_winner(entries, ScriptedRandom(ints=[101])).identity, 2)
        self.assertIsNone(draw_jackpot_winner([], ScriptedRandom()))

    def test_levels_follow_square_root_curve(self) -> None:
        self.assertEqual(level_for_xp(0), 1)
        self.assertEqual(level_for_xp(99), 1)
        self.assertEqual(level_for_xp(100), 2)
        self.assertEqual(level_for_xp(400), 3)
        self.assertEqual(xp_for_level(2), 400)


class ParsingTests(unittest.TestCase):
    def test_parse_amount_accepts_all_and_commas(self) -> None:
        self.assertEqual(parse_amount("all", 750), 750)
        self.assertEqual(parse_amount("1,500", 0), 1500)
        with self.assertRaises(InvalidAmount):
            parse_amount("abc", 100)
        with self.assertRaises(InvalidAmount):
            parse_amount("0", 100)
        with self.assertRaises(InvalidAmount):
            parse_amount("all", 0)

    def test_choice_parsing(self) -> None:
        self.assertEqual(parse_coin_side("H"), "heads")
        self.assertEqual(parse_coin_side("tail"), "tails")
        self.assertEqual(parse_dice_face("6"), 6)
        with self.assertRaises(InvalidChoice):
            parse_coin_side("edge")
        with self.assertRaises(InvalidChoice):
            parse_dice_face("7")


if __name__ == "__main__":
    unittest.main()
