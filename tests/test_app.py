import sqlite3
import unittest

from econbot.app import build_store
from econbot.db.database import init_db
from econbot.db.repositories import save_snapshot
from econ_helpers import ALICE, make_economy, register


class BuildStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.conn = sqlite3.connect(":memory:")
        init_db(self.conn)

    def tearDown(self) -> None:
        self.conn.close()

    def factory(self) -> sqlite3.Connection:
        return self.conn

    def test_restores_saved_ledger(self) -> None:
        econ = make_economy()
        register(econ, ALICE, "alice", wallet=4321)
        save_snapshot(econ.store.to_snapshot(), self.factory)

        store = build_store(1000, 10000, self.factory)

        self.assertEqual(store.get_user(ALICE).wallet, 4321)
        self.assertEqual(store.user_by_username("ALICE").identity, ALICE)

    def test_malformed_record_starts_empty_ledger(self) -> None:
        save_snapshot({"users": [{"identity": 1, "investments": [["Alpha", 5]]}]}, self.factory)

        store = build_store(1000, 10000, self.factory)

        self.assertEqual(store.users(), [])
        self.assertEqual(store.get_user(1).wallet, 1000)

    def test_unreadable_database_starts_empty_ledger(self) -> None:
        def broken() -> sqlite3.Connection:
            raise sqlite3.DatabaseError("file is not a database")

        store = build_store(500, 10000, broken)

        self.assertEqual(store.users(), [])
        self.assertEqual(store.get_user(ALICE).wallet, 500)


if __name__ == "__main__":
    unittest.main()
