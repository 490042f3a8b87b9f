from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from ...domain import ApiError, BedwarsStatsRecord, ConfigError, GuildExperience, derive_stats, guild_experience
from ..metrics import metrics

HYPIXEL_API_BASE = "https://api.hypixel.net/v2"
HYPIXEL_PLAYER_URL = f"{HYPIXEL_API_BASE}/player"
HYPIXEL_GUILD_URL = f"{HYPIXEL_API_BASE}/guild"

logger = logging.getLogger(__name__)


class HypixelStatsClient:
    def __init__(
        self,
        *,
        api_key: str | None,
        base_url: str = HYPIXEL_API_BASE,
        request_timeout: float = 10.0,
    ):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._request_timeout = request_timeout
        self._session: aiohttp.ClientSession | None = None

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    async def fetch_stats(self, player_name: str) -> BedwarsStatsRecord:
        player = await self._fetch_player(player_name)
        return derive_stats(player)

    async def fetch_guild_experience(self, player_name: str) -> GuildExperience:
        player = await self._fetch_player(player_name)
        uuid = player.get("uuid")
        if not isinstance(uuid, str) or not uuid:
            raise ApiError(f"Player has no uuid: {player_name}")
        payload = await self._request_json("guild", {"key": self._api_key, "player": uuid})
        guild = payload.get("guild")
        if not isinstance(guild, dict):
            raise ApiError(f"Player not in a guild: {player_name}")
        result = guild_experience(guild, uuid)
        if result is None:
            raise ApiError(f"Member not found in guild: {player_name}")
        return result

    async def _fetch_player(self, player_name: str) -> dict[str, Any]:
        payload = await self._request_json("player", {"key": self._api_key, "name": player_name})
        player = payload.get("player")
        if not isinstance(player, dict):
            raise ApiError(f"Player not found: {player_name}")
        return player

    async def _request_json(self, endpoint: str, params: dict[str, Any]) -> dict[str, Any]:
        if not self._api_key:
            raise ConfigError("HYPIXEL_API_KEY is not configured")
        async with metrics.span_async(f"hypixel:{endpoint}", source="hypixel"):
            payload = await self._get(f"{self._base_url}/{endpoint}", params)
        if payload.get("success") is not True:
            raise ApiError(f"API request failed: {payload.get('cause') or 'unknown cause'}")
        return payload

    async def _get(self, url: str, params: dict[str, Any]) -> dict[str, Any]:
        session = self._get_session()
        timeout = aiohttp.ClientTimeout(total=self._request_timeout)
        try:
            async with session.get(url, params=params, timeout=timeout) as resp:
                try:
                    payload = await resp.json(content_type=None)
                except ValueError:
                    payload = None
                if resp.status != 200:
                    cause = payload.get("cause") if isinstance(payload, dict) else None
                    raise ApiError(f"HTTP {resp.status}: {cause or 'request rejected'}")
        except asyncio.TimeoutError as exc:
            raise ApiError(f"request timed out after {self._request_timeout:g}s") from exc
        except aiohttp.ClientError as exc:
            raise ApiError(f"network error: {exc}") from exc
        if not isinstance(payload, dict):
            raise ApiError("malformed response body")
        logger.debug("Hypixel %s answered success=%s", url, payload.get("success"))
        return payload

    def _get_session(self) -> aiohttp.ClientSession:
        if not self._session or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
