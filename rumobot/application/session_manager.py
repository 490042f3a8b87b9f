from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, Protocol

from .replies import Reply
from .session import GameSession, SessionFactory

GUILD_CHANNEL_COMMAND = "/chat g"
CHANNEL_SWITCH_DELAY_SECONDS = 1.5
RECONNECT_DELAY_SECONDS = 3.0

logger = logging.getLogger(__name__)


class Router(Protocol):
    async def route(self, line: str) -> Reply | None: ...


class SessionState(Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class _ConnectionListener:
    """Tags events with the connection they came from."""

    def __init__(self, manager: "SessionManager", generation: int):
        self._manager = manager
        self._generation = generation

    def on_spawn(self) -> None:
        self._manager._handle_spawn(self._generation)

    def on_message(self, text: str) -> None:
        self._manager._handle_message(self._generation, text)

    def on_kicked(self, reason: str) -> None:
        self._manager._handle_termination(self._generation, f"kicked: {reason}")

    def on_end(self, reason: str) -> None:
        self._manager._handle_termination(self._generation, f"disconnected: {reason}")


class SessionManager:
    """
    Owns the single game session: connects, routes guild chat through the
    command router and reconnects after a flat delay whenever the session ends.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        router: Router,
        *,
        channel_switch_delay: float = CHANNEL_SWITCH_DELAY_SECONDS,
        reconnect_delay: float = RECONNECT_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._session_factory = session_factory
        self._router = router
        self._channel_switch_delay = channel_switch_delay
        self._reconnect_delay = reconnect_delay
        self._sleep = sleep

        self._state = SessionState.DISCONNECTED
        self._session: GameSession | None = None
        self._generation = 0
        self._tasks: set[asyncio.Task] = set()
        self._stopped = asyncio.Event()
        self._closing = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def session(self) -> GameSession | None:
        return self._session

    async def run(self) -> None:
        self.start()
        await self._stopped.wait()

    def start(self) -> None:
        self._closing = False
        self._stopped.clear()
        self._spawn_task(self._connect())

    async def stop(self) -> None:
        self._closing = True
        self._generation += 1
        pending = [task for task in self._tasks if task is not asyncio.current_task()]
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        self._close_session()
        self._state = SessionState.DISCONNECTED
        self._stopped.set()

    def _spawn_task(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _close_session(self) -> None:
        session, self._session = self._session, None
        if session is not None:
            session.close()

    async def _connect(self) -> None:
        self._generation += 1
        generation = self._generation
        self._state = SessionState.CONNECTING
        logger.info("Connecting (attempt #%s)", generation)
        try:
            session = await self._session_factory(_ConnectionListener(self, generation))
        except Exception:
            logger.exception("Failed to open game session")
            self._handle_termination(generation, "connect failed")
            return
        if generation != self._generation or self._closing or self._state is SessionState.DISCONNECTED:
            session.close()
            return
        self._session = session

    def _handle_spawn(self, generation: int) -> None:
        if generation != self._generation or self._state is not SessionState.CONNECTING:
            return
        self._state = SessionState.CONNECTED
        logger.info("Spawned on server, joining guild chat in %.1fs", self._channel_switch_delay)
        self._spawn_task(self._join_guild_channel(generation))

    async def _join_guild_channel(self, generation: int) -> None:
        await self._sleep(self._channel_switch_delay)
        if self._send(generation, GUILD_CHANNEL_COMMAND):
            logger.info("Switched to guild chat")

    def _handle_message(self, generation: int, text: str) -> None:
        if generation != self._generation or self._state is not SessionState.CONNECTED:
            return
        self._spawn_task(self._handle_line(generation, text))

    async def _handle_line(self, generation: int, text: str) -> None:
        try:
            reply = await self._router.route(text)
        except Exception:
            logger.exception("Unhandled error while handling chat line %r", text)
            return
        if reply is None:
            return
        if self._send(generation, reply.text):
            logger.info("Reply sent: %s", reply.text)

    def _send(self, generation: int, text: str) -> bool:
        session = self._session
        if generation != self._generation or self._state is not SessionState.CONNECTED or session is None:
            logger.warning("Session gone, dropping outgoing message: %s", text)
            return False
        try:
            session.chat(text)
        except Exception as exc:
            logger.warning("Failed to send chat message %r: %s", text, exc)
            return False
        return True

    def _handle_termination(self, generation: int, reason: str) -> None:
        if generation != self._generation or self._state is SessionState.DISCONNECTED:
            return
        self._state = SessionState.DISCONNECTED
        self._close_session()
        if self._closing:
            return
        logger.warning("Session ended (%s), reconnecting in %.1fs", reason, self._reconnect_delay)
        self._spawn_task(self._reconnect_later())

    async def _reconnect_later(self) -> None:
        await self._sleep(self._reconnect_delay)
        if self._closing:
            return
        await self._connect()
