from econbot.db.database import get_connection, init_db
from econbot.db.ledger import LedgerStore
from econbot.db.repositories import (
    create_database_backup,
    get_state_value,
    load_snapshot,
    save_snapshot,
    set_state_value,
)

__all__ = [
    "LedgerStore",
    "create_database_backup",
    "get_connection",
    "get_state_value",
    "init_db",
    "load_snapshot",
    "save_snapshot",
    "set_state_value",
]
