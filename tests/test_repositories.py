import json
import sqlite3
import unittest

from econbot.db.database import init_db
from econbot.db.repositories import get_state_value, load_snapshot, save_snapshot, set_state_value


class SnapshotRepositoryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.conn = sqlite3.connect(":memory:")
        init_db(self.conn)

    def tearDown(self) -> None:
        self.conn.close()

    def factory(self) -> sqlite3.Connection:
        return self.conn

    def test_newest_snapshot_wins_and_old_ones_are_pruned(self) -> None:
        self.assertIsNone(load_snapshot(self.factory))
        for n in range(4):
            save_snapshot({"version": 1, "n": n}, self.factory, keep=2)

        self.assertEqual(load_snapshot(self.factory)["n"], 3)
        count = self.conn.execute("SELECT COUNT(*) FROM snapshots").fetchone()[0]
        self.assertEqual(count, 2)

    def test_bad_payload_raises_value_error(self) -> None:
        with self.conn:
            self.conn.execute(
                "INSERT INTO snapshots (saved_at, payload) VALUES ('now', ?)",
                (json.dumps([1, 2]),),
            )
        with self.assertRaises(ValueError):
            load_snapshot(self.factory)

        with self.conn:
            self.conn.execute("INSERT INTO snapshots (saved_at, payload) VALUES ('now', '{broken')")
        with self.assertRaises(ValueError):
            load_snapshot(self.factory)

    def test_state_values(self) -> None:
        self.assertIsNone(get_state_value("db_backup_date", self.factory))
        set_state_value("db_backup_date", "2024-01-01", self.factory)
        set_state_value("db_backup_date", "2024-01-02", self.factory)
        self.assertEqual(get_state_value("db_backup_date", self.factory), "2024-01-02")


if __name__ == "__main__":
    unittest.main()
