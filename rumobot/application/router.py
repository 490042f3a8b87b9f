from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Protocol, TypeVar

from ..domain import BedwarsStatsRecord, GuildExperience, StatsError, next_castle, next_fkdr_goal
from ..infrastructure.metrics import metrics
from .commands import ChatCommand, CommandKind, parse_command
from .presenters import ChatPresenter
from .replies import Reply

REPLY_DELAY_SECONDS = 0.3

T = TypeVar("T")

logger = logging.getLogger(__name__)


class StatsClient(Protocol):
    async def fetch_stats(self, player_name: str) -> BedwarsStatsRecord: ...

    async def fetch_guild_experience(self, player_name: str) -> GuildExperience: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CommandRouter:
    def __init__(
        self,
        stats_client: StatsClient,
        presenter: ChatPresenter,
        *,
        reply_delay: float = REPLY_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        now: Callable[[], datetime] = _utcnow,
    ):
        self._stats = stats_client
        self._presenter = presenter
        self._reply_delay = reply_delay
        self._sleep = sleep
        self._now = now

    async def route(self, line: str) -> Reply | None:
        command = parse_command(line)
        if command is None:
            return None
        logger.info("%s triggered %s %s", command.requester or "unknown", command.kind.token, command.argument or "")
        extra = {"requester": command.requester} if command.requester else None
        async with metrics.span_async(f"command:{command.kind.value}", source="guild_chat", extra=extra):
            await self._sleep(self._reply_delay)
            return await self._dispatch(command)

    async def _dispatch(self, command: ChatCommand) -> Reply:
        player = command.argument
        if command.kind is CommandKind.GUILD_EXPERIENCE:
            return await self._lookup(
                player,
                self._stats.fetch_guild_experience,
                self._presenter.guild_experience,
                self._presenter.guild_no_data,
            )
        if command.kind is CommandKind.NEXT_FKDR:
            return await self._lookup(
                player,
                self._stats.fetch_stats,
                lambda name, stats: self._presenter.next_fkdr(name, next_fkdr_goal(stats)),
                self._presenter.no_data,
            )
        if command.kind is CommandKind.STATS:
            return await self._lookup(player, self._stats.fetch_stats, self._presenter.bedwars_stats, self._presenter.no_data)
        if command.kind is CommandKind.DETAILED_STATS:
            return await self._lookup(player, self._stats.fetch_stats, self._presenter.detailed_stats, self._presenter.no_data)
        if command.kind is CommandKind.CASTLE:
            return self._presenter.castle(next_castle(self._now()))
        if command.kind is CommandKind.ABOUT:
            return self._presenter.about()
        return self._presenter.help()

    async def _lookup(
        self,
        player: str,
        fetch: Callable[[str], Awaitable[T]],
        render: Callable[[str, T], Reply],
        fallback: Callable[[str], Reply],
    ) -> Reply:
        try:
            result = await fetch(player)
        except StatsError as exc:
            logger.warning("Lookup for %s failed: %s", player, exc)
            return fallback(player)
        except Exception:
            logger.exception("Lookup for %s failed unexpectedly", player)
            return fallback(player)
        return render(player, result)
