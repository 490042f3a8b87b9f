from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

FIRST_CASTLE = datetime(2026, 1, 16, 0, 8, tzinfo=timezone.utc)
CASTLE_CYCLE = timedelta(days=56)


@dataclass(frozen=True)
class CastleCountdown:
    next_castle: datetime
    days: int


def next_castle(now: datetime, *, first: datetime = FIRST_CASTLE, cycle: timedelta = CASTLE_CYCLE) -> CastleCountdown:
    diff = now - first
    cycles = -1 if diff < timedelta(0) else diff // cycle
    upcoming = first + (cycles + 1) * cycle
    days = math.ceil((upcoming - now) / timedelta(days=1))
    return CastleCountdown(next_castle=upcoming, days=days)
