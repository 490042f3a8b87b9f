from __future__ import annotations

import logging
from dataclasses import dataclass

from ..infrastructure.hypixel import HYPIXEL_API_BASE, HypixelStatsClient
from ..infrastructure.minecraft import MineflayerSessionFactory
from ..infrastructure.metrics import metrics
from .metrics import attach_metrics_file
from .presenters import ChatPresenter
from .router import REPLY_DELAY_SECONDS, CommandRouter
from .session import SessionFactory
from .session_manager import CHANNEL_SWITCH_DELAY_SECONDS, RECONNECT_DELAY_SECONDS, SessionManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppConfig:
    hypixel_api_key: str | None
    minecraft_username: str = "RumoniumGC"
    minecraft_auth: str = "microsoft"
    server_host: str = "mc.hypixel.net"
    server_version: str = "1.8.9"
    api_base_url: str = HYPIXEL_API_BASE
    request_timeout: float = 10.0
    reply_delay: float = REPLY_DELAY_SECONDS
    channel_switch_delay: float = CHANNEL_SWITCH_DELAY_SECONDS
    reconnect_delay: float = RECONNECT_DELAY_SECONDS
    metrics_log_path: str | None = None


class AppContainer:
    def __init__(
        self,
        *,
        config: AppConfig,
        stats_client: HypixelStatsClient,
        router: CommandRouter,
        session_manager: SessionManager,
    ):
        self.config = config
        self.stats_client = stats_client
        self.router = router
        self.session_manager = session_manager

    async def init_resources(self) -> None:
        if self.config.metrics_log_path:
            attach_metrics_file(metrics, self.config.metrics_log_path)
            logger.info("Writing action metrics to %s", self.config.metrics_log_path)
        if not self.stats_client.configured:
            logger.warning("HYPIXEL_API_KEY is not set; stats commands will answer 'no data found'")

    async def close(self) -> None:
        await self.session_manager.stop()
        await self.stats_client.close()


def create_container(config: AppConfig, *, session_factory: SessionFactory | None = None) -> AppContainer:
    stats_client = HypixelStatsClient(
        api_key=config.hypixel_api_key,
        base_url=config.api_base_url,
        request_timeout=config.request_timeout,
    )
    router = CommandRouter(stats_client, ChatPresenter(), reply_delay=config.reply_delay)
    if session_factory is None:
        session_factory = MineflayerSessionFactory(
            host=config.server_host,
            version=config.server_version,
            username=config.minecraft_username,
            auth=config.minecraft_auth,
        )
    session_manager = SessionManager(
        session_factory,
        router,
        channel_switch_delay=config.channel_switch_delay,
        reconnect_delay=config.reconnect_delay,
    )
    return AppContainer(
        config=config,
        stats_client=stats_client,
        router=router,
        session_manager=session_manager,
    )
