import asyncio
import sys
import types
import unittest
from unittest.mock import patch

from rumobot.infrastructure.minecraft import MineflayerSession, MineflayerSessionFactory


class FakeBot:
    def __init__(self):
        self.sent: list[str] = []
        self.quit_calls = 0

    def chat(self, text: str) -> None:
        self.sent.append(text)

    def quit(self) -> None:
        self.quit_calls += 1
        raise RuntimeError("already ended")


class RecordingListener:
    def __init__(self):
        self.events: list[tuple] = []

    def on_spawn(self) -> None:
        self.events.append(("spawn",))

    def on_message(self, text: str) -> None:
        self.events.append(("message", text))

    def on_kicked(self, reason: str) -> None:
        self.events.append(("kicked", reason))

    def on_end(self, reason: str) -> None:
        self.events.append(("end", reason))


class FakeChatMessage:
    def __init__(self, text: str):
        self._text = text

    def toString(self):
        return self._text


class FakeJsError:
    message = "read ECONNRESET"


def fake_bridge_module(handlers: dict):
    module = types.ModuleType("javascript")

    def On(emitter, event):
        def register(fn):
            handlers[event] = fn
            return fn

        return register

    module.On = On
    return module


class MineflayerSessionTests(unittest.IsolatedAsyncioTestCase):
    async def test_chat_and_close_delegate_to_bot(self):
        bot = FakeBot()
        session = MineflayerSession(bot, asyncio.get_running_loop())

        session.chat("/chat g")
        with self.assertLogs("rumobot.infrastructure.minecraft.session", level="WARNING"):
            session.close()

        self.assertEqual(bot.sent, ["/chat g"])
        self.assertEqual(bot.quit_calls, 1)

    async def test_forward_runs_callback_on_loop(self):
        session = MineflayerSession(FakeBot(), asyncio.get_running_loop())
        received: list[str] = []

        await asyncio.to_thread(session._forward, received.append, "Guild > X: hi")
        await asyncio.sleep(0)

        self.assertEqual(received, ["Guild > X: hi"])

    def test_factory_bot_options(self):
        factory = MineflayerSessionFactory(host="mc.hypixel.net", version="1.8.9", username="bot")

        options = factory._bot_options()

        self.assertEqual(options["host"], "mc.hypixel.net")
        self.assertEqual(options["version"], "1.8.9")
        self.assertEqual(options["auth"], "microsoft")
        self.assertEqual(options["checkTimeoutInterval"], 30000)


class MineflayerBindTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.bot = FakeBot()
        self.listener = RecordingListener()
        self.handlers: dict = {}
        session = MineflayerSession(self.bot, asyncio.get_running_loop())
        with patch.dict(sys.modules, {"javascript": fake_bridge_module(self.handlers)}):
            session.bind(self.listener)

    def test_registers_every_bot_event(self):
        self.assertEqual(set(self.handlers), {"spawn", "message", "kicked", "end", "error"})

    async def test_message_is_forwarded_as_text(self):
        self.handlers["message"](self.bot, FakeChatMessage("Guild > Someone: !bw Dream"), "chat")
        await asyncio.sleep(0)

        self.assertEqual(self.listener.events, [("message", "Guild > Someone: !bw Dream")])
        self.assertIsInstance(self.listener.events[0][1], str)

    async def test_spawn_and_kicked_are_forwarded(self):
        self.handlers["spawn"](self.bot)
        self.handlers["kicked"](self.bot, "You logged in from another location", True)
        await asyncio.sleep(0)

        self.assertEqual(
            self.listener.events,
            [("spawn",), ("kicked", "You logged in from another location")],
        )

    async def test_end_without_reason_reports_connection_closed(self):
        self.handlers["end"](self.bot)
        await asyncio.sleep(0)

        self.assertEqual(self.listener.events, [("end", "connection closed")])

    async def test_end_with_reason_is_forwarded(self):
        self.handlers["end"](self.bot, "socketClosed")
        await asyncio.sleep(0)

        self.assertEqual(self.listener.events, [("end", "socketClosed")])

    async def test_error_is_logged_not_forwarded(self):
        with self.assertLogs("rumobot.infrastructure.minecraft.session", level="ERROR") as logs:
            self.handlers["error"](self.bot, FakeJsError())
        await asyncio.sleep(0)

        self.assertIn("read ECONNRESET", logs.output[0])
        self.assertEqual(self.listener.events, [])
