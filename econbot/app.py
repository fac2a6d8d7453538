from __future__ import annotations

import asyncio

import discord

from econbot.commands import setup_commands
from econbot.commands.formatting import coins
from econbot.commands.router import CommandContext, CommandRouter, Reply, parse_command
from econbot.config.runtime import ConnectionFactory, ensure_app_config_defaults, load_economy_config
from econbot.config.settings import COMMAND_PREFIX, SWEEP_INTERVAL, TOKEN
from econbot.db import (
    LedgerStore,
    create_database_backup,
    get_connection,
    get_state_value,
    init_db,
    load_snapshot,
    save_snapshot,
    set_state_value,
)
from econbot.services import jackpot, pvp
from econbot.services.context import Economy
from econbot.services.identity import canonical_identity


class EconBot(discord.Client):
    def __init__(self, router: CommandRouter) -> None:
        intents = discord.Intents.default()
        intents.message_content = True
        super().__init__(intents=intents)
        self.router = router
        self.econ = router.econ
        self._autosave_task: asyncio.Task | None = None
        self._sweep_task: asyncio.Task | None = None

    async def on_ready(self) -> None:
        print(f"[bot] logged in as {self.user} guilds={len(self.guilds)}")
        if self._autosave_task is None:
            self._autosave_task = asyncio.create_task(self._autosave_loop())
        if self._sweep_task is None:
            self._sweep_task = asyncio.create_task(self._sweep_loop())

    async def on_message(self, message: discord.Message) -> None:
        if message.author.bot:
            return
        parsed = parse_command(message.content, self.router.prefix)
        if parsed is None:
            return
        identity = canonical_identity(message.author.id)
        if identity is None:
            return
        keyword, args = parsed
        guild = message.guild
        is_admin = False
        if guild is not None and isinstance(message.author, discord.Member):
            is_admin = message.author.guild_permissions.administrator
        ctx = CommandContext(
            identity=identity,
            keyword=keyword,
            args=args,
            group_id=guild.id if guild is not None else None,
            group_name=guild.name if guild is not None else "",
            is_group_admin=is_admin,
        )
        reply = await asyncio.to_thread(self.router.dispatch, ctx)
        await self._deliver(message.channel, reply)

    async def _deliver(self, channel: discord.abc.Messageable, reply: Reply) -> None:
        try:
            if reply.preface:
                await channel.send(reply.preface)
                if reply.delay > 0:
                    await asyncio.sleep(reply.delay)
            await channel.send(reply.text)
        except (discord.Forbidden, discord.HTTPException) as exc:
            print(f"[reply] failed to send channel={getattr(channel, 'id', 'unknown')}: {exc}")
        for notification in reply.notifications:
            await self._notify(notification.identity, notification.text)

    async def _notify(self, identity: int, text: str) -> None:
        try:
            user = self.get_user(identity) or await self.fetch_user(identity)
            await user.send(text)
        except (discord.NotFound, discord.Forbidden, discord.HTTPException) as exc:
            print(f"[notify] failed to message user={identity}: {exc}")

    async def _autosave_loop(self) -> None:
        while not self.is_closed():
            await asyncio.sleep(max(1, int(self.econ.config.autosave_interval)))
            try:
                await asyncio.to_thread(self._save)
                local_date = self.econ.local_date(self.econ.now()).isoformat()
                await asyncio.to_thread(self._backup_database_if_needed, local_date)
            except Exception as exc:
                print(f"[autosave] snapshot failed: {exc}")

    async def _sweep_loop(self) -> None:
        while not self.is_closed():
            try:
                expired = await asyncio.to_thread(pvp.expire_challenges, self.econ)
                for challenge in expired:
                    print(f"[pvp] challenge #{challenge.id} expired")
                    await self._notify(
                        challenge.challenger,
                        f"⌛ Your challenge #{challenge.id} for {coins(challenge.stake)} expired.",
                    )
            except Exception as exc:
                print(f"[pvp] sweep error: {exc}")
            try:
                result = await asyncio.to_thread(jackpot.draw, self.econ)
                if result is not None:
                    print(
                        f"[jackpot] user={result.winner.identity} won {result.amount} "
                        f"participants={len(result.participants)}"
                    )
                    await self._notify(
                        result.winner.identity,
                        f"🎉 You won the jackpot: {coins(result.amount)}! "
                        f"Wallet: {coins(result.winner.wallet)}",
                    )
            except Exception as exc:
                print(f"[jackpot] draw error: {exc}")
            await asyncio.sleep(SWEEP_INTERVAL)

    def _save(self) -> int:
        return save_snapshot(self.econ.store.to_snapshot())

    def _backup_database_if_needed(self, local_date: str) -> None:
        state_key = "db_backup_date"
        if get_state_value(state_key) == local_date:
            return
        try:
            path = create_database_backup(prefix="daily")
            set_state_value(state_key, local_date)
            print(f"[backup] wrote {path}")
        except Exception as exc:
            print(f"[backup] failed to create daily backup: {exc}")

    async def close(self) -> None:
        try:
            await asyncio.to_thread(self._save)
        except Exception as exc:
            print(f"[autosave] final snapshot failed: {exc}")
        await super().close()


def build_store(
    start_balance: int,
    bank_capacity: int,
    connection_factory: ConnectionFactory = get_connection,
) -> LedgerStore:
    try:
        state = load_snapshot(connection_factory)
        if state is None:
            return LedgerStore(start_balance=start_balance, bank_capacity=bank_capacity)
        store = LedgerStore.from_snapshot(state, start_balance=start_balance, bank_capacity=bank_capacity)
    except Exception as exc:
        print(f"[store] unreadable snapshot, starting empty: {exc}")
        return LedgerStore(start_balance=start_balance, bank_capacity=bank_capacity)
    print(f"[store] restored {len(store.users())} user(s) from snapshot")
    return store


def run() -> None:
    init_db()
    ensure_app_config_defaults()
    config = load_economy_config()
    store = build_store(config.start_balance, config.initial_bank_capacity)
    econ = Economy(store=store, config=config)
    router = CommandRouter(econ, COMMAND_PREFIX)
    setup_commands(router)
    bot = EconBot(router)
    bot.run(TOKEN)
