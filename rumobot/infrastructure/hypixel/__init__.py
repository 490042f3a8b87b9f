from .client import HYPIXEL_API_BASE, HYPIXEL_GUILD_URL, HYPIXEL_PLAYER_URL, HypixelStatsClient

__all__ = ["HYPIXEL_API_BASE", "HYPIXEL_GUILD_URL", "HYPIXEL_PLAYER_URL", "HypixelStatsClient"]
