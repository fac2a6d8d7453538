from pathlib import Path


_ROOT = Path(__file__).resolve().parents[2]
_TOKEN_PATH = _ROOT / "TOKEN"
TOKEN = _TOKEN_PATH.read_text(encoding="utf-8").strip() if _TOKEN_PATH.exists() else ""
DB_PATH = _ROOT / "data" / "econbot.db"

COMMAND_PREFIX = "."                        # Text commands start with this character
OWNER_IDS = frozenset({123456789012345678})  # Discord user ID(s) with full bot access; cannot be revoked at runtime

# APP CONFIGS
START_BALANCE = 1_000                       # Wallet given to a newly seen user
MIN_BET = 10                                # Smallest stake accepted by any game or challenge
MAX_BET = 1_000_000                         # Largest stake accepted by any game or challenge
HIGH_STAKES_MIN_BET = 100                   # Stricter minimum for the high-stakes coin toss
SUSPENSE_DELAY = 2.0                        # Seconds between the "rolling..." message and the result (display only)
DISPLAY_TIMEZONE = "UTC"                    # Calendar day used by daily reward and bank interest
REQUIRE_GROUP_APPROVAL = 0                  # 1 = guild must be approved by an owner before commands run

# Banking
INITIAL_BANK_CAPACITY = 10_000              # Bank capacity of a new account
BASE_BANK_INTEREST_RATE = 0.01              # Daily interest as fraction of bank balance
PRESTIGE_INTEREST_BONUS = 0.001             # Extra daily interest per prestige level
BANK_UPGRADE_COST_PERCENT = 0.15            # Upgrade costs this fraction of current capacity
BANK_CAPACITY_INCREASE_PERCENT = 0.5        # Upgrade grows capacity by this fraction

# Companies and market
MIN_COMPANY_INVESTMENT = 5_000              # Founding investment floor
MIN_INVESTMENT = 1_000                      # Follow-up investment floor
COMPANY_NAME_MIN_LENGTH = 3
COMPANY_NAME_MAX_LENGTH = 20
COMPANY_INITIAL_SHARES = 100                # Founder receives the whole initial pool
COMPANY_WITHDRAWAL_FEE = 0.1                # Burned on withdraw and close; doubled on kick
MARKET_FEE = 0.05                           # Burned from seller proceeds on every fill
COMPANY_SECTORS = (
    "Technology",
    "Finance",
    "Healthcare",
    "Real Estate",
    "Retail",
    "Energy",
    "Entertainment",
    "Manufacturing",
    "Transportation",
    "Food & Beverage",
)

# XP and levels
XP_PER_BET = 10
XP_PER_WIN = 25
XP_PER_LOSS = 5
PRESTIGE_LEVEL = 50                         # Level needed before prestige is allowed
PRESTIGE_COIN_BONUS = 10_000                # Bonus coins multiplied by the new prestige count

# PvP
MAX_CHALLENGES_PER_HOUR = 5
CHALLENGE_TIMEOUT = 60                      # Seconds a pending challenge stays open
REMATCH_MIN_STAKE = 100
REMATCH_WALLET_FRACTION = 0.1               # Default rematch stake as fraction of the caller's wallet

# Daily reward
DAILY_BASE_REWARD = 1_000
DAILY_STREAK_BONUS = 0.1                    # Extra fraction of base per streak day
DAILY_PRESTIGE_BONUS = 0.02                 # Extra fraction of base per prestige level

# Jackpot
JACKPOT_DRAW_INTERVAL = 3_600               # Seconds after the first entry before a draw
JACKPOT_DRAW_THRESHOLD = 100_000            # Pool size that triggers an immediate draw

# Background tasks
AUTOSAVE_INTERVAL = 60                      # Seconds between ledger snapshots
SWEEP_INTERVAL = 5                          # Seconds between challenge-expiry and jackpot checks
SNAPSHOT_HISTORY = 5                        # Number of snapshots kept in the database
LEADERBOARD_SIZE = 10
