import unittest

from econbot.services import company as companies
from econbot.services import market
from econbot.services.errors import (
    BelowMinimum,
    Conflict,
    InsufficientFunds,
    InvalidChoice,
    NotFound,
    Unauthorized,
)
from econ_helpers import ALICE, BOB, make_economy, register


class CompanyTests(unittest.TestCase):
    def setUp(self) -> None:
        self.econ = make_economy()
        register(self.econ, ALICE, "alice", wallet=10000)
        register(self.econ, BOB, "bob", wallet=10000)

    def assertSharesBalanced(self, name: str) -> None:
        company = self.econ.store.get_company(name)
        self.assertEqual(sum(company.share_distribution.values()), company.total_shares)
        self.assertEqual(sum(company.investors.values()), company.value)

    def test_founding_and_investing(self) -> None:
        founded = companies.create_company(self.econ, ALICE, "Alpha", "6000")
        self.assertEqual(founded.value, 6000)
        self.assertEqual(founded.share_distribution, {ALICE: 100})
        self.assertIn(founded.sector, self.econ.config.company_sectors)
        self.assertEqual(self.econ.store.get_user(ALICE).wallet, 4000)

        result = companies.invest(self.econ, BOB, "Alpha", "4000")

        company = result.company
        self.assertEqual(result.shares_issued, 40)
        self.assertEqual(company.value, 10000)
        self.assertEqual(company.total_shares, 140)
        self.assertEqual(company.share_distribution[ALICE], 100)
        self.assertAlmostEqual(company.ownership(ALICE), 0.6)
        self.assertEqual(self.econ.store.get_user(BOB).shares, {"Alpha": 40})
        self.assertSharesBalanced("Alpha")

    def test_new_company_reads_back_from_store(self) -> None:
        founded = companies.create_company(self.econ, ALICE, "Beta", "5000")

        stored = self.econ.store.get_company("Beta")

        self.assertEqual(stored.owner, ALICE)
        self.assertEqual(stored.sector, founded.sector)
        self.assertEqual(stored.value, 5000)
        self.assertEqual(stored.total_shares, 100)
        self.assertEqual(stored.share_distribution, {ALICE: 100})
        self.assertEqual(stored.investors, {ALICE: 5000})
        self.assertAlmostEqual(stored.ownership(ALICE), 1.0)
        self.assertEqual(self.econ.store.get_user(ALICE).shares, {"Beta": 100})

    def test_creation_rules(self) -> None:
        with self.assertRaises(InvalidChoice):
            companies.create_company(self.econ, ALICE, "ab", "6000")
        with self.assertRaises(BelowMinimum):
            companies.create_company(self.econ, ALICE, "Alpha", "4999")
        with self.assertRaises(InsufficientFunds):
            companies.create_company(self.econ, ALICE, "Alpha", "20000")
        companies.create_company(self.econ, ALICE, "Alpha", "5000")
        with self.assertRaises(Conflict):
            companies.create_company(self.econ, BOB, "Alpha", "5000")
        with self.assertRaises(BelowMinimum):
            companies.invest(self.econ, BOB, "Alpha", "999")
        with self.assertRaises(NotFound):
            companies.invest(self.econ, BOB, "Nothing", "1000")

    def test_withdraw_charges_fee_and_returns_shares(self) -> None:
        companies.create_company(self.econ, ALICE, "Alpha", "6000")
        companies.invest(self.econ, BOB, "Alpha", "4000")

        result = companies.withdraw(self.econ, BOB, "Alpha", "2000")

        self.assertEqual(result.fee, 200)
        self.assertEqual(result.shares_removed, 28)
        self.assertEqual(result.user.wallet, 7800)
        self.assertEqual(result.company.value, 8000)
        self.assertEqual(result.company.total_shares, 112)
        self.assertSharesBalanced("Alpha")
        with self.assertRaises(Unauthorized):
            companies.withdraw(self.econ, ALICE, "Alpha", "all")

    def test_full_withdraw_after_dilution_keeps_leftover_shares(self) -> None:
        self.econ.store.update_user(ALICE, wallet=20000)
        companies.create_company(self.econ, ALICE, "Alpha", "6000")
        companies.invest(self.econ, BOB, "Alpha", "1000")
        companies.invest(self.econ, ALICE, "Alpha", "10000")

        result = companies.withdraw(self.econ, BOB, "Alpha", "all")

        self.assertEqual(result.amount, 1000)
        self.assertEqual(result.fee, 100)
        self.assertEqual(result.shares_removed, 10)
        bob = self.econ.store.get_user(BOB)
        self.assertEqual(bob.wallet, 9900)
        self.assertEqual(bob.investments, {})
        self.assertEqual(bob.shares, {"Alpha": 4})
        company = self.econ.store.get_company("Alpha")
        self.assertNotIn(BOB, company.investors)
        self.assertEqual(company.share_distribution[BOB], 4)
        self.assertEqual(company.total_shares, 171)
        self.assertSharesBalanced("Alpha")

    def test_close_refunds_everyone_and_frees_the_name(self) -> None:
        companies.create_company(self.econ, ALICE, "Alpha", "6000")
        companies.invest(self.econ, BOB, "Alpha", "4000")
        market.sell_shares(self.econ, BOB, "Alpha", "10", "50")

        with self.assertRaises(Unauthorized):
            companies.close_company(self.econ, BOB, "Alpha")
        result = companies.close_company(self.econ, ALICE, "Alpha")

        self.assertEqual(result.cancelled_orders, 1)
        self.assertEqual({r.identity: r.received for r in result.refunds}, {ALICE: 5400, BOB: 3600})
        alice, bob = self.econ.store.get_user(ALICE), self.econ.store.get_user(BOB)
        self.assertEqual(alice.wallet, 9400)
        self.assertEqual(bob.wallet, 9600)
        self.assertEqual(bob.shares, {})
        self.assertEqual(bob.investments, {})
        self.assertEqual(self.econ.store.orders(), [])
        with self.assertRaises(NotFound):
            companies.get_company(self.econ, "Alpha")

        companies.create_company(self.econ, BOB, "Alpha", "5000")
        self.assertEqual(len(self.econ.store.company_archive()), 1)

    def test_kick_applies_double_fee(self) -> None:
        companies.create_company(self.econ, ALICE, "Alpha", "6000")
        companies.invest(self.econ, BOB, "Alpha", "4000")

        with self.assertRaises(Conflict):
            companies.kick_investor(self.econ, ALICE, "Alpha", ALICE)
        with self.assertRaises(Unauthorized):
            companies.kick_investor(self.econ, BOB, "Alpha", ALICE)
        result = companies.kick_investor(self.econ, ALICE, "Alpha", BOB)

        self.assertEqual(result.refund.fee, 800)
        self.assertEqual(result.shares_removed, 40)
        self.assertEqual(result.company.value, 6000)
        self.assertEqual(result.company.total_shares, 100)
        self.assertEqual(self.econ.store.get_user(BOB).wallet, 9200)
        self.assertSharesBalanced("Alpha")
        with self.assertRaises(NotFound):
            companies.kick_investor(self.econ, ALICE, "Alpha", BOB)

    def test_rename_moves_holdings_and_orders(self) -> None:
        companies.create_company(self.econ, ALICE, "Alpha", "6000")
        companies.invest(self.econ, BOB, "Alpha", "4000")
        order = market.sell_shares(self.econ, BOB, "Alpha", "5", "10")

        with self.assertRaises(Unauthorized):
            companies.rename_company(self.econ, BOB, "Alpha", "Beta")
        renamed = companies.rename_company(self.econ, ALICE, "Alpha", "Beta")

        self.assertEqual(renamed.name, "Beta")
        self.assertIsNone(self.econ.store.get_company("Alpha"))
        bob = self.econ.store.get_user(BOB)
        self.assertEqual(bob.investments, {"Beta": 4000})
        self.assertEqual(bob.shares, {"Beta": 35})
        self.assertEqual(self.econ.store.get_order(order.id).company, "Beta")

    def test_multi_word_names_are_split_from_arguments(self) -> None:
        companies.create_company(self.econ, ALICE, "Big Corp", "5000")
        name, rest = companies.split_company_args(self.econ.store, ["Big", "Corp", "100"])
        self.assertEqual((name, rest), ("Big Corp", ["100"]))
        self.assertEqual(companies.split_company_args(self.econ.store, ["Small", "1"]), (None, ["Small", "1"]))

    def test_request_investment(self) -> None:
        companies.create_company(self.econ, ALICE, "Alpha", "6000")
        self.assertEqual(companies.request_investment(self.econ, BOB, "Alpha").owner, ALICE)
        with self.assertRaises(Conflict):
            companies.request_investment(self.econ, ALICE, "Alpha")


if __name__ == "__main__":
    unittest.main()
