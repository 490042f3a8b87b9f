from __future__ import annotations

from contextlib import asynccontextmanager

from .container import AppConfig, create_container
from .session import SessionFactory


@asynccontextmanager
async def bootstrap_app(config: AppConfig, *, session_factory: SessionFactory | None = None):
    container = create_container(config, session_factory=session_factory)
    await container.init_resources()
    try:
        yield container
    finally:
        await container.close()
