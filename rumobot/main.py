import asyncio
import logging
import os

from dotenv import load_dotenv

from .application.bootstrap import bootstrap_app
from .application.container import AppConfig

load_dotenv()
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


def load_app_config() -> AppConfig:
    api_key = os.getenv("HYPIXEL_API_KEY", "").strip() or None
    username = os.getenv("MINECRAFT_USERNAME", "").strip() or "RumoniumGC"
    auth = os.getenv("MINECRAFT_AUTH", "").strip() or "microsoft"
    metrics_path = os.getenv("METRICS_LOG_PATH", "").strip() or None
    config = AppConfig(
        hypixel_api_key=api_key,
        minecraft_username=username,
        minecraft_auth=auth,
        metrics_log_path=metrics_path,
    )
    logger.info(
        "Config loaded: server=%s, version=%s, username=%s, auth=%s, api_key=%s, metrics=%s",
        config.server_host,
        config.server_version,
        config.minecraft_username,
        config.minecraft_auth,
        "set" if config.hypixel_api_key else "missing",
        config.metrics_log_path or "off",
    )
    return config


async def main():
    config = load_app_config()
    logger.info("Bootstrapping application")
    async with bootstrap_app(config) as container:
        logger.info("Starting session loop")
        try:
            await container.session_manager.run()
        finally:
            logger.info("Session loop finished")


def run():
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Interrupted by user, shutting down")


if __name__ == "__main__":
    run()
