from __future__ import annotations

import asyncio
import logging

from ...application.session import GameSession, SessionListener

logger = logging.getLogger(__name__)


class MineflayerSession:
    """
    Game session backed by a mineflayer bot running in the Node bridge.

    Bridge callbacks arrive on a foreign thread and are forwarded to the
    listener on the event loop.
    """

    def __init__(self, bot, loop: asyncio.AbstractEventLoop):
        self._bot = bot
        self._loop = loop

    def chat(self, text: str) -> None:
        self._bot.chat(text)

    def close(self) -> None:
        try:
            self._bot.quit()
        except Exception as exc:
            logger.warning("Failed to quit mineflayer bot cleanly: %s", exc)

    def _forward(self, callback, *args) -> None:
        if self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(callback, *args)

    def bind(self, listener: SessionListener) -> None:
        from javascript import On

        bot = self._bot

        @On(bot, "spawn")
        def handle_spawn(this, *args):
            self._forward(listener.on_spawn)

        @On(bot, "message")
        def handle_message(this, json_msg, *args):
            self._forward(listener.on_message, str(json_msg.toString()))

        @On(bot, "kicked")
        def handle_kicked(this, reason, *args):
            self._forward(listener.on_kicked, str(reason))

        @On(bot, "end")
        def handle_end(this, reason=None, *args):
            self._forward(listener.on_end, str(reason or "connection closed"))

        @On(bot, "error")
        def handle_error(this, err, *args):
            message = getattr(err, "message", None) or str(err)
            logger.error("Session error: %s", message)


class MineflayerSessionFactory:
    def __init__(self, *, host: str, version: str, username: str, auth: str = "microsoft", check_timeout_ms: int = 30000):
        self.host = host
        self.version = version
        self.username = username
        self.auth = auth
        self.check_timeout_ms = check_timeout_ms

    def _bot_options(self) -> dict:
        return {
            "host": self.host,
            "version": self.version,
            "username": self.username,
            "auth": self.auth,
            "checkTimeoutInterval": self.check_timeout_ms,
            "hideErrors": False,
        }

    def _create_bot(self):
        from javascript import require

        mineflayer = require("mineflayer")
        return mineflayer.createBot(self._bot_options())

    async def __call__(self, listener: SessionListener) -> GameSession:
        loop = asyncio.get_running_loop()
        logger.info("Creating mineflayer bot for %s (version %s)", self.host, self.version)
        bot = await asyncio.to_thread(self._create_bot)
        session = MineflayerSession(bot, loop)
        session.bind(listener)
        return session
