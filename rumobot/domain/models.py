from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BedwarsStatsRecord:
    star: int
    final_kill_death_ratio: str
    kill_death_ratio: str
    win_loss_ratio: str
    final_kills: int = 0
    final_deaths: int = 0
    wins: int = 0
    beds_broken: int = 0


@dataclass(frozen=True)
class FkdrGoal:
    current: str
    target: int
    finals_needed: int

    @property
    def reached(self) -> bool:
        return self.finals_needed <= 0


@dataclass(frozen=True)
class GuildExperience:
    weekly_gexp: int
    rank: int
    total_members: int
