import unittest

from econbot.services import admin, leaderboard, registration
from econbot.services.errors import Conflict, InvalidChoice, NotFound, Unauthorized
from econbot.services.identity import canonical_identity, resolve_user
from econ_helpers import ALICE, BOB, CAROL, OWNER, make_economy, register


class IdentityTests(unittest.TestCase):
    def test_canonical_identity_accepts_ids_and_mentions(self) -> None:
        self.assertEqual(canonical_identity(123456789), 123456789)
        self.assertEqual(canonical_identity("<@123456789>"), 123456789)
        self.assertEqual(canonical_identity("<@!123456789>"), 123456789)
        self.assertEqual(canonical_identity(" 123456789 "), 123456789)
        self.assertIsNone(canonical_identity("alice"))
        self.assertIsNone(canonical_identity("1234"))
        self.assertIsNone(canonical_identity(0))

    def test_resolve_user_by_mention_or_name(self) -> None:
        econ = make_economy()
        register(econ, ALICE, "Alice")
        econ.store.get_user(BOB)

        self.assertEqual(resolve_user(econ.store, f"<@{ALICE}>").identity, ALICE)
        self.assertEqual(resolve_user(econ.store, "@alice").identity, ALICE)
        with self.assertRaises(NotFound):
            resolve_user(econ.store, f"<@{BOB}>")


class RegistrationTests(unittest.TestCase):
    def test_username_rules(self) -> None:
        econ = make_economy()
        with self.assertRaises(InvalidChoice):
            registration.register(econ, ALICE, "ab")
        with self.assertRaises(InvalidChoice):
            registration.register(econ, ALICE, "bad name")
        user = registration.register(econ, ALICE, "alice_1")
        self.assertEqual(user.username, "alice_1")
        with self.assertRaises(Conflict):
            registration.register(econ, BOB, "ALICE_1")


class AdminTests(unittest.TestCase):
    def setUp(self) -> None:
        self.econ = make_economy()
        register(self.econ, ALICE, "alice", wallet=100)

    def test_owner_registry(self) -> None:
        self.assertTrue(self.econ.is_owner(OWNER))
        self.assertFalse(self.econ.is_owner(ALICE))

        self.econ.owners.add(ALICE)
        self.assertTrue(self.econ.is_owner(ALICE))
        with self.assertRaises(Conflict):
            self.econ.owners.add(ALICE)
        with self.assertRaises(Unauthorized):
            self.econ.owners.remove(OWNER)

        self.econ.owners.remove(ALICE)
        self.assertFalse(self.econ.is_owner(ALICE))
        with self.assertRaises(NotFound):
            self.econ.owners.remove(ALICE)

    def test_blacklist(self) -> None:
        admin.set_blacklisted(self.econ, ALICE, True)
        self.assertTrue(self.econ.store.get_user(ALICE).blacklisted)
        with self.assertRaises(Conflict):
            admin.set_blacklisted(self.econ, ALICE, True)
        with self.assertRaises(Unauthorized):
            admin.set_blacklisted(self.econ, OWNER, True)

    def test_coin_grants_never_go_negative(self) -> None:
        self.assertEqual(admin.add_coins(self.econ, ALICE, "400").wallet, 500)
        user, removed = admin.remove_coins(self.econ, ALICE, "900")
        self.assertEqual((user.wallet, removed), (0, 500))

    def test_group_approval(self) -> None:
        self.assertTrue(admin.is_group_allowed(self.econ, 77))
        self.econ.config = make_economy(require_group_approval=1).config
        self.assertFalse(admin.is_group_allowed(self.econ, 77))
        self.assertTrue(admin.is_group_allowed(self.econ, None))

        admin.approve_group(self.econ, OWNER, 77, "guild")
        self.assertTrue(admin.is_group_allowed(self.econ, 77))
        with self.assertRaises(Conflict):
            admin.approve_group(self.econ, OWNER, 77, "guild")
        admin.revoke_group(self.econ, 77)
        with self.assertRaises(NotFound):
            admin.revoke_group(self.econ, 77)


class LeaderboardTests(unittest.TestCase):
    def test_rankings_skip_unregistered_and_blacklisted(self) -> None:
        econ = make_economy()
        register(econ, ALICE, "alice", wallet=500)
        register(econ, BOB, "bob", wallet=900)
        register(econ, CAROL, "carol", wallet=5000)
        econ.store.update_user(ALICE, bank=1000, investments={"Alpha": 100})
        econ.store.update_user(CAROL, blacklisted=True)
        econ.store.get_user(OWNER)

        ranked = leaderboard.top_rich(econ)

        self.assertEqual([u.identity for u in ranked], [ALICE, BOB])
        self.assertEqual(leaderboard.profile(econ, ALICE).net_worth, 1600)
        self.assertEqual(leaderboard.top_wins(econ), [])


if __name__ == "__main__":
    unittest.main()
