from __future__ import annotations

from typing import Awaitable, Callable, Protocol


class GameSession(Protocol):
    def chat(self, text: str) -> None: ...

    def close(self) -> None: ...


class SessionListener(Protocol):
    """Receives session events; called on the event loop thread."""

    def on_spawn(self) -> None: ...

    def on_message(self, text: str) -> None: ...

    def on_kicked(self, reason: str) -> None: ...

    def on_end(self, reason: str) -> None: ...


SessionFactory = Callable[[SessionListener], Awaitable[GameSession]]
