from __future__ import annotations

import sqlite3
from dataclasses import dataclass, replace
from typing import Any, Callable

from econbot.config import settings
from econbot.db.database import get_connection

ConnectionFactory = Callable[[], sqlite3.Connection]


@dataclass(frozen=True)
class EconomyConfig:
    """Every tunable figure the economy services read.

    Defaults come from ``settings``; the runtime-overridable subset is
    replaced by ``load_economy_config`` with the values stored in ``app_state``.
    """

    start_balance: int = settings.START_BALANCE
    min_bet: int = settings.MIN_BET
    max_bet: int = settings.MAX_BET
    high_stakes_min_bet: int = settings.HIGH_STAKES_MIN_BET
    suspense_delay: float = settings.SUSPENSE_DELAY
    display_timezone: str = settings.DISPLAY_TIMEZONE
    require_group_approval: int = settings.REQUIRE_GROUP_APPROVAL
    initial_bank_capacity: int = settings.INITIAL_BANK_CAPACITY
    base_bank_interest_rate: float = settings.BASE_BANK_INTEREST_RATE
    prestige_interest_bonus: float = settings.PRESTIGE_INTEREST_BONUS
    bank_upgrade_cost_percent: float = settings.BANK_UPGRADE_COST_PERCENT
    bank_capacity_increase_percent: float = settings.BANK_CAPACITY_INCREASE_PERCENT
    min_company_investment: int = settings.MIN_COMPANY_INVESTMENT
    min_investment: int = settings.MIN_INVESTMENT
    company_name_min_length: int = settings.COMPANY_NAME_MIN_LENGTH
    company_name_max_length: int = settings.COMPANY_NAME_MAX_LENGTH
    company_initial_shares: int = settings.COMPANY_INITIAL_SHARES
    company_withdrawal_fee: float = settings.COMPANY_WITHDRAWAL_FEE
    market_fee: float = settings.MARKET_FEE
    company_sectors: tuple[str, ...] = settings.COMPANY_SECTORS
    xp_per_bet: int = settings.XP_PER_BET
    xp_per_win: int = settings.XP_PER_WIN
    xp_per_loss: int = settings.XP_PER_LOSS
    prestige_level: int = settings.PRESTIGE_LEVEL
    prestige_coin_bonus: int = settings.PRESTIGE_COIN_BONUS
    max_challenges_per_hour: int = settings.MAX_CHALLENGES_PER_HOUR
    challenge_timeout: int = settings.CHALLENGE_TIMEOUT
    rematch_min_stake: int = settings.REMATCH_MIN_STAKE
    rematch_wallet_fraction: float = settings.REMATCH_WALLET_FRACTION
    daily_base_reward: int = settings.DAILY_BASE_REWARD
    daily_streak_bonus: float = settings.DAILY_STREAK_BONUS
    daily_prestige_bonus: float = settings.DAILY_PRESTIGE_BONUS
    jackpot_draw_interval: int = settings.JACKPOT_DRAW_INTERVAL
    jackpot_draw_threshold: int = settings.JACKPOT_DRAW_THRESHOLD
    autosave_interval: int = settings.AUTOSAVE_INTERVAL
    leaderboard_size: int = settings.LEADERBOARD_SIZE


@dataclass(frozen=True)
class AppConfigSpec:
    default: Any
    cast: Callable[[str], Any]
    description: str


APP_CONFIG_SPECS: dict[str, AppConfigSpec] = {
    "START_BALANCE": AppConfigSpec(
        default=int(settings.START_BALANCE),
        cast=int,
        description="Wallet given to a newly seen user.",
    ),
    "MIN_BET": AppConfigSpec(
        default=int(settings.MIN_BET),
        cast=int,
        description="Smallest stake accepted by games and challenges.",
    ),
    "MAX_BET": AppConfigSpec(
        default=int(settings.MAX_BET),
        cast=int,
        description="Largest stake accepted by games and challenges.",
    ),
    "HIGH_STAKES_MIN_BET": AppConfigSpec(
        default=int(settings.HIGH_STAKES_MIN_BET),
        cast=int,
        description="Minimum stake for the high-stakes coin toss.",
    ),
    "SUSPENSE_DELAY": AppConfigSpec(
        default=float(settings.SUSPENSE_DELAY),
        cast=float,
        description="Seconds between the suspense message and the result.",
    ),
    "DISPLAY_TIMEZONE": AppConfigSpec(
        default=str(settings.DISPLAY_TIMEZONE),
        cast=str,
        description="Timezone whose calendar day gates daily reward and interest.",
    ),
    "REQUIRE_GROUP_APPROVAL": AppConfigSpec(
        default=int(settings.REQUIRE_GROUP_APPROVAL),
        cast=int,
        description="1 = commands only run in owner-approved guilds.",
    ),
    "BASE_BANK_INTEREST_RATE": AppConfigSpec(
        default=float(settings.BASE_BANK_INTEREST_RATE),
        cast=float,
        description="Daily bank interest before prestige bonus.",
    ),
    "COMPANY_WITHDRAWAL_FEE": AppConfigSpec(
        default=float(settings.COMPANY_WITHDRAWAL_FEE),
        cast=float,
        description="Fraction burned on company withdraw/close (doubled on kick).",
    ),
    "MARKET_FEE": AppConfigSpec(
        default=float(settings.MARKET_FEE),
        cast=float,
        description="Fraction burned from seller proceeds on market fills.",
    ),
    "DAILY_BASE_REWARD": AppConfigSpec(
        default=int(settings.DAILY_BASE_REWARD),
        cast=int,
        description="Base coins for the daily reward.",
    ),
    "MAX_CHALLENGES_PER_HOUR": AppConfigSpec(
        default=int(settings.MAX_CHALLENGES_PER_HOUR),
        cast=int,
        description="PvP challenges a user may issue per hour.",
    ),
    "CHALLENGE_TIMEOUT": AppConfigSpec(
        default=int(settings.CHALLENGE_TIMEOUT),
        cast=int,
        description="Seconds before a pending challenge expires.",
    ),
    "JACKPOT_DRAW_INTERVAL": AppConfigSpec(
        default=int(settings.JACKPOT_DRAW_INTERVAL),
        cast=int,
        description="Seconds after the first entry before the jackpot is drawn.",
    ),
    "JACKPOT_DRAW_THRESHOLD": AppConfigSpec(
        default=int(settings.JACKPOT_DRAW_THRESHOLD),
        cast=int,
        description="Pool size that triggers an immediate jackpot draw.",
    ),
    "AUTOSAVE_INTERVAL": AppConfigSpec(
        default=int(settings.AUTOSAVE_INTERVAL),
        cast=int,
        description="Seconds between ledger snapshots.",
    ),
}


def _state_key(name: str) -> str:
    return f"config:{name}"


def _normalize(name: str, value: Any) -> Any:
    if name in {"START_BALANCE", "DAILY_BASE_REWARD"}:
        return max(0, int(value))
    if name in {"MIN_BET", "HIGH_STAKES_MIN_BET"}:
        return max(1, int(value))
    if name == "MAX_BET":
        return max(1, int(value))
    if name == "SUSPENSE_DELAY":
        return max(0.0, min(30.0, float(value)))
    if name == "DISPLAY_TIMEZONE":
        text = str(value).strip()
        return text or str(settings.DISPLAY_TIMEZONE)
    if name == "REQUIRE_GROUP_APPROVAL":
        return 1 if int(value) else 0
    if name in {"BASE_BANK_INTEREST_RATE", "COMPANY_WITHDRAWAL_FEE", "MARKET_FEE"}:
        return max(0.0, min(1.0, float(value)))
    if name == "MAX_CHALLENGES_PER_HOUR":
        return max(0, int(value))
    if name in {"CHALLENGE_TIMEOUT", "JACKPOT_DRAW_INTERVAL", "AUTOSAVE_INTERVAL"}:
        return max(1, int(value))
    if name == "JACKPOT_DRAW_THRESHOLD":
        return max(1, int(value))
    return value


def _to_string(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.12g}"
    return str(value)


def ensure_app_config_defaults(connection_factory: ConnectionFactory = get_connection) -> None:
    with connection_factory() as conn:
        for name, spec in APP_CONFIG_SPECS.items():
            row = conn.execute(
                "SELECT value FROM app_state WHERE key = ?",
                (_state_key(name),),
            ).fetchone()
            if row is None:
                conn.execute(
                    """
                    INSERT INTO app_state (key, value)
                    VALUES (?, ?)
                    """,
                    (_state_key(name), _to_string(_normalize(name, spec.default))),
                )


def get_app_config(name: str, connection_factory: ConnectionFactory = get_connection) -> Any:
    spec = APP_CONFIG_SPECS.get(name)
    if spec is None:
        raise KeyError(f"Unknown app config: {name}")
    with connection_factory() as conn:
        row = conn.execute(
            "SELECT value FROM app_state WHERE key = ?",
            (_state_key(name),),
        ).fetchone()
    if row is None:
        return _normalize(name, spec.default)
    raw = str(row[0])
    try:
        parsed = spec.cast(raw)
    except (TypeError, ValueError):
        parsed = spec.default
    return _normalize(name, parsed)


def set_app_config(
    name: str,
    value: Any,
    connection_factory: ConnectionFactory = get_connection,
) -> Any:
    spec = APP_CONFIG_SPECS.get(name)
    if spec is None:
        raise KeyError(f"Unknown app config: {name}")
    normalized = _normalize(name, spec.cast(str(value)))
    with connection_factory() as conn:
        conn.execute(
            """
            INSERT INTO app_state (key, value)
            VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value
            """,
            (_state_key(name), _to_string(normalized)),
        )
    return normalized


def get_all_app_configs(connection_factory: ConnectionFactory = get_connection) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for name, spec in APP_CONFIG_SPECS.items():
        value = get_app_config(name, connection_factory)
        rows.append(
            {
                "name": name,
                "value": value,
                "default": _normalize(name, spec.default),
                "type": spec.cast.__name__,
                "description": spec.description,
            }
        )
    return rows


def load_economy_config(connection_factory: ConnectionFactory = get_connection) -> EconomyConfig:
    overrides = {
        name.lower(): get_app_config(name, connection_factory)
        for name in APP_CONFIG_SPECS
    }
    return replace(EconomyConfig(), **overrides)
