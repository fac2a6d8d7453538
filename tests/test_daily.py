import unittest

from econbot.services import daily
from econbot.services.errors import Conflict
from econ_helpers import ALICE, FakeClock, make_economy, register

DAY = 86400


class DailyRewardTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self.econ = make_economy(clock=self.clock)
        register(self.econ, ALICE, "alice", wallet=0)

    def test_streak_grows_on_consecutive_days(self) -> None:
        first = daily.claim_daily(self.econ, ALICE)
        self.assertEqual((first.streak, first.reward), (1, 1100))

        self.clock.advance(60)
        with self.assertRaises(Conflict):
            daily.claim_daily(self.econ, ALICE)

        self.clock.advance(DAY)
        second = daily.claim_daily(self.econ, ALICE)
        self.assertEqual((second.streak, second.reward), (2, 1200))
        self.assertEqual(second.user.wallet, 2300)

    def test_missed_day_resets_streak(self) -> None:
        daily.claim_daily(self.econ, ALICE)
        self.clock.advance(3 * DAY)
        result = daily.claim_daily(self.econ, ALICE)
        self.assertEqual(result.streak, 1)

    def test_calendar_day_not_rolling_window(self) -> None:
        # 23:59 UTC; two minutes later is the next calendar day
        self.clock.now = 1699963200.0 + 12 * 3600 - 60
        daily.claim_daily(self.econ, ALICE)
        self.clock.advance(120)
        self.assertEqual(daily.claim_daily(self.econ, ALICE).streak, 2)

    def test_prestige_adds_bonus(self) -> None:
        self.econ.store.update_user(ALICE, prestige=2)
        self.assertEqual(daily.claim_daily(self.econ, ALICE).reward, 1000 + 100 + 40)

    def test_streak_info_previews_next_claim(self) -> None:
        info = daily.streak_info(self.econ, ALICE)
        self.assertTrue(info.can_claim)
        self.assertEqual((info.next_streak, info.next_reward), (1, 1100))

        daily.claim_daily(self.econ, ALICE)
        info = daily.streak_info(self.econ, ALICE)
        self.assertFalse(info.can_claim)
        self.assertEqual((info.streak, info.next_streak, info.next_reward), (1, 2, 1200))


if __name__ == "__main__":
    unittest.main()
