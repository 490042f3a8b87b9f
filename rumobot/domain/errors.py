from __future__ import annotations


class StatsError(Exception):
    """Base error for a failed stats lookup."""


class ConfigError(StatsError):
    """The stats API key is not configured."""


class ApiError(StatsError):
    """The stats API call failed or returned no player."""
