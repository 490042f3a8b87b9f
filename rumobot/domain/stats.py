from __future__ import annotations

import math
from typing import Any

from .models import BedwarsStatsRecord, FkdrGoal

EXPERIENCE_PER_STAR = 5000


def _to_number(value: Any) -> float:
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def to_int(value: Any) -> int:
    return int(_to_number(value))


def compute_ratio(numerator: Any, denominator: Any) -> str:
    n = _to_number(numerator)
    d = _to_number(denominator)
    if d == 0:
        return "inf" if n > 0 else "0.00"
    return f"{n / d:.2f}"


def _section(data: Any, key: str) -> dict:
    if not isinstance(data, dict):
        return {}
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def derive_stats(player: Any) -> BedwarsStatsRecord:
    """
    Build a stats record from the raw ``player`` object of the API.

    Missing or malformed sections count as empty, so the result always has
    every field filled in.
    """
    bedwars = _section(_section(player, "stats"), "Bedwars")
    achievements = _section(player, "achievements")

    level = achievements.get("bedwars_level")
    if level is not None:
        star = max(0, to_int(level))
    else:
        star = max(0, math.floor(_to_number(bedwars.get("Experience")) / EXPERIENCE_PER_STAR))

    return BedwarsStatsRecord(
        star=star,
        final_kill_death_ratio=compute_ratio(
            bedwars.get("final_kills_bedwars"), bedwars.get("final_deaths_bedwars")
        ),
        kill_death_ratio=compute_ratio(bedwars.get("kills_bedwars"), bedwars.get("deaths_bedwars")),
        win_loss_ratio=compute_ratio(bedwars.get("wins_bedwars"), bedwars.get("losses_bedwars")),
        final_kills=to_int(bedwars.get("final_kills_bedwars")),
        final_deaths=to_int(bedwars.get("final_deaths_bedwars")),
        wins=to_int(bedwars.get("wins_bedwars")),
        beds_broken=to_int(bedwars.get("beds_broken_bedwars")),
    )


def next_fkdr_goal(stats: BedwarsStatsRecord) -> FkdrGoal:
    """Finals needed, without dying, to reach the next whole FKDR."""
    if stats.final_deaths <= 0:
        return FkdrGoal(current=stats.final_kill_death_ratio, target=0, finals_needed=0)
    target = stats.final_kills // stats.final_deaths + 1
    return FkdrGoal(
        current=stats.final_kill_death_ratio,
        target=target,
        finals_needed=target * stats.final_deaths - stats.final_kills,
    )
