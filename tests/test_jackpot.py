import unittest

from econbot.services import jackpot
from econbot.services.errors import BelowMinimum
from econ_helpers import ALICE, BOB, FakeClock, ScriptedRandom, make_economy, register


class JackpotTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self.rng = ScriptedRandom()
        self.econ = make_economy(rng=self.rng, clock=self.clock)
        register(self.econ, ALICE, "alice", wallet=1000)
        register(self.econ, BOB, "bob", wallet=1000)

    def test_weighted_draw_pays_whole_pool(self) -> None:
        jackpot.enter(self.econ, ALICE, "100")
        entry = jackpot.enter(self.econ, BOB, "900")
        self.assertAlmostEqual(entry.win_chance, 0.9)
        self.rng.ints = [950]

        result = jackpot.draw(self.econ, force=True)

        self.assertEqual(result.winner.identity, BOB)
        self.assertEqual(result.amount, 1000)
        self.assertEqual(result.participants, (ALICE, BOB))
        self.assertEqual(self.econ.store.get_user(BOB).wallet, 1100)
        pool = self.econ.store.get_jackpot()
        self.assertEqual((pool.total, pool.entries), (0, []))
        self.assertEqual((pool.last_winner, pool.last_amount), (BOB, 1000))

    def test_draw_waits_for_interval_or_threshold(self) -> None:
        jackpot.enter(self.econ, ALICE, "100")
        self.assertIsNone(jackpot.draw(self.econ))
        self.assertEqual(jackpot.status(self.econ).seconds_until_draw, 3600)

        self.clock.advance(self.econ.config.jackpot_draw_interval)
        self.assertTrue(jackpot.is_due(self.econ))
        self.assertEqual(jackpot.draw(self.econ).winner.identity, ALICE)

    def test_threshold_triggers_draw(self) -> None:
        econ = make_economy(rng=self.rng, clock=self.clock, jackpot_draw_threshold=500)
        register(econ, ALICE, "alice", wallet=1000)
        jackpot.enter(econ, ALICE, "600")
        self.assertTrue(jackpot.is_due(econ))

    def test_entries_are_bets(self) -> None:
        with self.assertRaises(BelowMinimum):
            jackpot.enter(self.econ, ALICE, "5")
        self.assertIsNone(jackpot.draw(self.econ, force=True))
        status = jackpot.status(self.econ)
        self.assertEqual((status.total, status.entries, status.seconds_until_draw), (0, 0, None))


if __name__ == "__main__":
    unittest.main()
