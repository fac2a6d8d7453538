from econbot.commands.bank import setup_bank
from econbot.commands.company import setup_company
from econbot.commands.gambling import setup_gambling
from econbot.commands.general import setup_general
from econbot.commands.leaderboard import setup_leaderboard
from econbot.commands.market import setup_market
from econbot.commands.owner import setup_owner
from econbot.commands.progression import setup_progression
from econbot.commands.pvp import setup_pvp
from econbot.commands.router import CommandRouter
from econbot.config.runtime import ConnectionFactory
from econbot.db.database import get_connection


def setup_commands(router: CommandRouter, connection_factory: ConnectionFactory = get_connection) -> None:
    setup_general(router)
    setup_gambling(router)
    setup_bank(router)
    setup_company(router)
    setup_market(router)
    setup_pvp(router)
    setup_progression(router)
    setup_leaderboard(router)
    setup_owner(router, connection_factory)
