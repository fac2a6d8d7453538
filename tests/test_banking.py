import unittest

from econbot.services import banking
from econbot.services.errors import CapacityExceeded, Conflict, InsufficientFunds
from econ_helpers import ALICE, FakeClock, make_economy, register


class DepositTests(unittest.TestCase):
    def setUp(self) -> None:
        self.econ = make_economy()
        register(self.econ, ALICE, "alice")

    def test_deposit_all_moves_whole_wallet(self) -> None:
        self.econ.store.update_user(ALICE, wallet=5000)

        result = banking.deposit(self.econ, ALICE, "all")

        self.assertFalse(result.truncated)
        self.assertEqual(result.user.wallet, 0)
        self.assertEqual(result.user.bank, 5000)

    def test_deposit_is_truncated_at_capacity(self) -> None:
        self.econ.store.update_user(ALICE, wallet=8000, bank=5000, bank_capacity=10000)

        result = banking.deposit(self.econ, ALICE, "8000")

        self.assertTrue(result.truncated)
        self.assertEqual(result.deposited, 5000)
        self.assertEqual(result.user.wallet, 3000)
        self.assertEqual(result.user.bank, 10000)
        with self.assertRaises(CapacityExceeded):
            banking.deposit(self.econ, ALICE, "1")

    def test_cannot_deposit_more_than_wallet(self) -> None:
        self.econ.store.update_user(ALICE, wallet=100)
        with self.assertRaises(InsufficientFunds):
            banking.deposit(self.econ, ALICE, "101")

    def test_withdraw(self) -> None:
        self.econ.store.update_user(ALICE, wallet=0, bank=700)

        with self.assertRaises(InsufficientFunds):
            banking.withdraw(self.econ, ALICE, "701")
        user, amount = banking.withdraw(self.econ, ALICE, "all")

        self.assertEqual(amount, 700)
        self.assertEqual((user.wallet, user.bank), (700, 0))


class InterestTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self.econ = make_economy(clock=self.clock)
        register(self.econ, ALICE, "alice")

    def test_interest_once_per_day(self) -> None:
        self.econ.store.update_user(ALICE, bank=5000)

        first = banking.claim_interest(self.econ, ALICE)
        self.assertEqual(first.credited, 50)
        self.clock.advance(60)
        with self.assertRaises(Conflict):
            banking.claim_interest(self.econ, ALICE)

        self.clock.advance(86400)
        second = banking.claim_interest(self.econ, ALICE)
        self.assertEqual(second.interest, 50)
        self.assertEqual(second.user.bank, 5100)

    def test_prestige_raises_rate(self) -> None:
        self.econ.store.update_user(ALICE, bank=5000, prestige=2)
        result = banking.claim_interest(self.econ, ALICE)
        self.assertAlmostEqual(result.rate, 0.012)
        self.assertEqual(result.credited, 60)

    def test_interest_is_clamped_to_capacity(self) -> None:
        self.econ.store.update_user(ALICE, bank=9950)

        result = banking.claim_interest(self.econ, ALICE)

        self.assertTrue(result.clamped)
        self.assertEqual(result.interest, 99)
        self.assertEqual(result.credited, 50)
        self.assertEqual(result.user.bank, 10000)

    def test_full_or_empty_bank_earns_nothing(self) -> None:
        self.econ.store.update_user(ALICE, bank=10000)
        with self.assertRaises(CapacityExceeded):
            banking.claim_interest(self.econ, ALICE)
        self.econ.store.update_user(ALICE, bank=50)
        with self.assertRaises(InsufficientFunds):
            banking.claim_interest(self.econ, ALICE)


class UpgradeTests(unittest.TestCase):
    def test_upgrade_costs_fifteen_percent_for_half_more_room(self) -> None:
        econ = make_economy()
        register(econ, ALICE, "alice", wallet=1000)

        with self.assertRaises(InsufficientFunds):
            banking.upgrade_bank(econ, ALICE)
        econ.store.update_user(ALICE, wallet=2000)
        result = banking.upgrade_bank(econ, ALICE)

        self.assertEqual(result.cost, 1500)
        self.assertEqual(result.old_capacity, 10000)
        self.assertEqual(result.user.bank_capacity, 15000)
        self.assertEqual(result.user.wallet, 500)


if __name__ == "__main__":
    unittest.main()
