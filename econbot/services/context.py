from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable
from zoneinfo import ZoneInfo

from econbot.config.runtime import EconomyConfig
from econbot.config.settings import OWNER_IDS
from econbot.db.ledger import LedgerStore
from econbot.services.owners import OwnerRegistry


@dataclass
class Economy:
    """Everything an economy operation needs: the store, tunables, randomness and time."""

    store: LedgerStore
    config: EconomyConfig = field(default_factory=EconomyConfig)
    rng: random.Random = field(default_factory=random.Random)
    clock: Callable[[], float] = time.time
    configured_owners: frozenset[int] = OWNER_IDS
    owners: OwnerRegistry = field(init=False)

    def __post_init__(self) -> None:
        self.owners = OwnerRegistry(self.store, self.configured_owners)

    def now(self) -> float:
        return float(self.clock())

    def local_date(self, timestamp: float) -> date:
        tz = ZoneInfo(self.config.display_timezone)
        return datetime.fromtimestamp(timestamp, tz).date()

    def is_owner(self, identity: int) -> bool:
        return self.owners.is_owner(identity)
