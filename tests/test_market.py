import unittest

from econbot.services import company as companies
from econbot.services import market
from econbot.services.errors import Conflict, InsufficientFunds, InvalidAmount, NotFound, Unauthorized
from econ_helpers import ALICE, BOB, make_economy, register


class MarketTests(unittest.TestCase):
    def setUp(self) -> None:
        self.econ = make_economy()
        register(self.econ, ALICE, "alice", wallet=10000)
        register(self.econ, BOB, "bob", wallet=10000)
        companies.create_company(self.econ, ALICE, "Alpha", "6000")

    def distribution(self) -> dict[int, int]:
        return self.econ.store.get_company("Alpha").share_distribution

    def test_listing_escrows_shares(self) -> None:
        order = market.sell_shares(self.econ, ALICE, "Alpha", "10", "100")

        self.assertEqual(order.id, 1)
        self.assertEqual(self.econ.store.get_user(ALICE).shares, {"Alpha": 90})
        self.assertEqual(self.distribution(), {ALICE: 100})
        self.assertEqual(market.list_orders(self.econ, "Alpha"), [order])
        with self.assertRaises(InsufficientFunds):
            market.sell_shares(self.econ, ALICE, "Alpha", "91", "100")
        with self.assertRaises(InvalidAmount):
            market.sell_shares(self.econ, ALICE, "Alpha", "1", "0")

    def test_partial_fill_pays_seller_minus_fee(self) -> None:
        order = market.sell_shares(self.econ, ALICE, "Alpha", "10", "100")

        fill = market.buy_shares(self.econ, BOB, order.id, "4")

        self.assertEqual(fill.cost, 400)
        self.assertEqual(fill.fee, 20)
        self.assertEqual(fill.remaining, 6)
        self.assertEqual(fill.buyer.wallet, 9600)
        self.assertEqual(fill.seller.wallet, 4380)
        self.assertEqual(self.econ.store.get_order(order.id).quantity, 6)
        self.assertEqual(self.distribution(), {ALICE: 96, BOB: 4})
        self.assertEqual(self.econ.store.get_user(BOB).shares, {"Alpha": 4})

        with self.assertRaises(InsufficientFunds):
            market.buy_shares(self.econ, BOB, order.id, "7")
        with self.assertRaises(Conflict):
            market.buy_shares(self.econ, ALICE, order.id, "1")

        market.buy_shares(self.econ, BOB, order.id, "6")
        self.assertIsNone(self.econ.store.get_order(order.id))
        self.assertEqual(self.distribution(), {ALICE: 90, BOB: 10})

    def test_buyer_needs_the_coins(self) -> None:
        order = market.sell_shares(self.econ, ALICE, "Alpha", "10", "100")
        self.econ.store.update_user(BOB, wallet=99)
        with self.assertRaises(InsufficientFunds):
            market.buy_shares(self.econ, BOB, order.id, "1")
        with self.assertRaises(NotFound):
            market.buy_shares(self.econ, BOB, 99, "1")

    def test_cancel_returns_unsold_shares(self) -> None:
        order = market.sell_shares(self.econ, ALICE, "Alpha", "10", "100")
        market.buy_shares(self.econ, BOB, order.id, "4")

        with self.assertRaises(Unauthorized):
            market.cancel_order(self.econ, BOB, order.id)
        market.cancel_order(self.econ, ALICE, order.id)

        self.assertEqual(self.econ.store.get_user(ALICE).shares, {"Alpha": 96})
        self.assertEqual(self.econ.store.orders(), [])
        with self.assertRaises(NotFound):
            market.cancel_order(self.econ, ALICE, order.id)

    def test_transfer_moves_available_shares(self) -> None:
        result = market.transfer_shares(self.econ, ALICE, "Alpha", BOB, "10")

        self.assertEqual(result.sender.shares, {"Alpha": 90})
        self.assertEqual(result.recipient.shares, {"Alpha": 10})
        self.assertEqual(self.distribution(), {ALICE: 90, BOB: 10})
        with self.assertRaises(InsufficientFunds):
            market.transfer_shares(self.econ, BOB, "Alpha", ALICE, "11")
        with self.assertRaises(Conflict):
            market.transfer_shares(self.econ, ALICE, "Alpha", ALICE, "1")


if __name__ == "__main__":
    unittest.main()
