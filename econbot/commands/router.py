from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from econbot.services.admin import is_group_allowed
from econbot.services.context import Economy
from econbot.services.errors import EconomyError

REGISTER_REQUIRED_MESSAGE = "You must register first. Use `{prefix}register <username>`."
BLACKLISTED_MESSAGE = "⛔ You are blacklisted and cannot use this bot."
UNKNOWN_COMMAND_MESSAGE = "❓ Unknown command `{prefix}{keyword}`. Type `{prefix}help` for the list."
GROUP_NOT_APPROVED_MESSAGE = "🔒 This server is not approved to use the bot yet. Ask a bot owner."
OWNER_ONLY_MESSAGE = "⛔ Only bot owners can use this command."
GENERIC_ERROR_MESSAGE = "❌ Something went wrong while running that command."


class UsageError(EconomyError):
    kind = "usage"


@dataclass(frozen=True)
class Notification:
    identity: int
    text: str


@dataclass
class Reply:
    text: str
    ok: bool = True
    preface: str | None = None
    delay: float = 0.0
    notifications: list[Notification] = field(default_factory=list)

    def notify(self, identity: int, text: str) -> "Reply":
        self.notifications.append(Notification(identity, text))
        return self


@dataclass
class CommandContext:
    identity: int
    keyword: str
    args: list[str] = field(default_factory=list)
    group_id: int | None = None
    group_name: str = ""
    is_group_admin: bool = False
    prefix: str = "."

    def require(self, count: int, usage: str) -> list[str]:
        if len(self.args) < count:
            raise UsageError(f"Usage: `{self.prefix}{usage}`")
        return self.args


Handler = Callable[[Economy, CommandContext], Reply]


@dataclass(frozen=True)
class Command:
    name: str
    handler: Handler
    aliases: tuple[str, ...] = ()
    usage: str = ""
    description: str = ""
    category: str = "General"
    public: bool = False
    owner_only: bool = False


def parse_command(text: str, prefix: str) -> tuple[str, list[str]] | None:
    if not text.startswith(prefix):
        return None
    parts = text[len(prefix):].split()
    if not parts:
        return None
    return parts[0].lower(), parts[1:]


class CommandRouter:
    """Maps keywords and their aliases to handlers and runs the shared checks.

    Order: blacklist, group approval, registration, owner check, handler.
    Expected failures become failure replies; nothing raised by a handler
    escapes ``dispatch``.
    """

    def __init__(self, econ: Economy, prefix: str = ".") -> None:
        self.econ = econ
        self.prefix = prefix
        self._commands: dict[str, Command] = {}
        self._keywords: dict[str, Command] = {}

    def add(self, command: Command) -> Command:
        for keyword in (command.name, *command.aliases):
            if keyword in self._keywords:
                raise ValueError(f"Duplicate command keyword: {keyword}")
        self._commands[command.name] = command
        for keyword in (command.name, *command.aliases):
            self._keywords[keyword] = command
        return command

    def command(
        self,
        name: str,
        *,
        aliases: tuple[str, ...] = (),
        usage: str = "",
        description: str = "",
        category: str = "General",
        public: bool = False,
        owner_only: bool = False,
    ) -> Callable[[Handler], Handler]:
        def decorator(handler: Handler) -> Handler:
            self.add(
                Command(
                    name=name,
                    handler=handler,
                    aliases=aliases,
                    usage=usage or name,
                    description=description,
                    category=category,
                    public=public,
                    owner_only=owner_only,
                )
            )
            return handler

        return decorator

    def resolve(self, keyword: str) -> Command | None:
        return self._keywords.get(keyword.lower())

    def commands(self) -> list[Command]:
        return list(self._commands.values())

    def usage(self, command: Command) -> str:
        return f"{self.prefix}{command.usage}"

    def dispatch(self, ctx: CommandContext) -> Reply:
        command = self.resolve(ctx.keyword)
        if command is None:
            return Reply(
                UNKNOWN_COMMAND_MESSAGE.format(prefix=self.prefix, keyword=ctx.keyword),
                ok=False,
            )

        store = self.econ.store
        is_owner = self.econ.is_owner(ctx.identity)
        if store.has_user(ctx.identity) and store.get_user(ctx.identity).blacklisted:
            return Reply(BLACKLISTED_MESSAGE, ok=False)
        if not is_owner and not is_group_allowed(self.econ, ctx.group_id):
            return Reply(GROUP_NOT_APPROVED_MESSAGE, ok=False)
        if not command.public and not store.get_user(ctx.identity).registered:
            return Reply(REGISTER_REQUIRED_MESSAGE.format(prefix=self.prefix), ok=False)
        if command.owner_only and not is_owner:
            return Reply(OWNER_ONLY_MESSAGE, ok=False)

        ctx.prefix = self.prefix
        try:
            return command.handler(self.econ, ctx)
        except EconomyError as exc:
            return Reply(f"❌ {exc.message}", ok=False)
        except Exception as exc:
            print(f"[router] {command.name} failed for user={ctx.identity}: {exc!r}")
            return Reply(GENERIC_ERROR_MESSAGE, ok=False)
