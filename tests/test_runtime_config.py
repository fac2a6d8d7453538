import sqlite3
import unittest

from econbot.config.runtime import (
    APP_CONFIG_SPECS,
    ensure_app_config_defaults,
    get_all_app_configs,
    get_app_config,
    load_economy_config,
    set_app_config,
)
from econbot.db.database import init_db


class RuntimeConfigTests(unittest.TestCase):
    def setUp(self) -> None:
        self.conn = sqlite3.connect(":memory:")
        init_db(self.conn)

    def tearDown(self) -> None:
        self.conn.close()

    def factory(self) -> sqlite3.Connection:
        return self.conn

    def test_defaults_are_seeded_once(self) -> None:
        ensure_app_config_defaults(self.factory)
        set_app_config("MIN_BET", "25", self.factory)
        ensure_app_config_defaults(self.factory)

        self.assertEqual(get_app_config("MIN_BET", self.factory), 25)
        rows = get_all_app_configs(self.factory)
        self.assertEqual([row["name"] for row in rows], list(APP_CONFIG_SPECS))

    def test_values_are_cast_and_clamped(self) -> None:
        self.assertEqual(set_app_config("MARKET_FEE", "1.5", self.factory), 1.0)
        self.assertEqual(set_app_config("SUSPENSE_DELAY", "-3", self.factory), 0.0)
        self.assertEqual(set_app_config("REQUIRE_GROUP_APPROVAL", "7", self.factory), 1)
        with self.assertRaises(ValueError):
            set_app_config("MIN_BET", "lots", self.factory)
        with self.assertRaises(KeyError):
            set_app_config("NOPE", "1", self.factory)

    def test_corrupt_stored_value_falls_back_to_default(self) -> None:
        with self.conn:
            self.conn.execute("INSERT INTO app_state (key, value) VALUES ('config:MAX_BET', 'oops')")
        self.assertEqual(get_app_config("MAX_BET", self.factory), APP_CONFIG_SPECS["MAX_BET"].default)

    def test_economy_config_reads_overrides(self) -> None:
        set_app_config("START_BALANCE", "2500", self.factory)
        set_app_config("DISPLAY_TIMEZONE", "Europe/Berlin", self.factory)

        config = load_economy_config(self.factory)

        self.assertEqual(config.start_balance, 2500)
        self.assertEqual(config.display_timezone, "Europe/Berlin")
        self.assertEqual(config.company_initial_shares, 100)


if __name__ == "__main__":
    unittest.main()
