from __future__ import annotations

from typing import Any

from .models import GuildExperience
from .stats import to_int


def _weekly_total(member: Any) -> int:
    history = member.get("expHistory") if isinstance(member, dict) else None
    if not isinstance(history, dict):
        return 0
    return sum(to_int(value) for value in history.values())


def guild_experience(guild: Any, player_uuid: str) -> GuildExperience | None:
    """
    Weekly guild experience of one member and their place in the guild.

    Returns ``None`` when the player is not listed among the members.
    """
    members = guild.get("members") if isinstance(guild, dict) else None
    if not isinstance(members, list):
        return None
    totals = [
        (member.get("uuid"), _weekly_total(member))
        for member in members
        if isinstance(member, dict)
    ]
    own = next((gexp for uuid, gexp in totals if uuid == player_uuid), None)
    if own is None:
        return None
    leaderboard = sorted(totals, key=lambda entry: entry[1], reverse=True)
    rank = next(idx for idx, (uuid, _) in enumerate(leaderboard, start=1) if uuid == player_uuid)
    return GuildExperience(weekly_gexp=own, rank=rank, total_members=len(members))
