from .castle import CastleCountdown, next_castle
from .errors import ApiError, ConfigError, StatsError
from .guild import guild_experience
from .models import BedwarsStatsRecord, FkdrGoal, GuildExperience
from .stats import compute_ratio, derive_stats, next_fkdr_goal

__all__ = [
    "BedwarsStatsRecord",
    "FkdrGoal",
    "GuildExperience",
    "CastleCountdown",
    "next_castle",
    "StatsError",
    "ConfigError",
    "ApiError",
    "compute_ratio",
    "derive_stats",
    "next_fkdr_goal",
    "guild_experience",
]
