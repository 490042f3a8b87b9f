from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ...domain import BedwarsStatsRecord, CastleCountdown, FkdrGoal, GuildExperience
from ..commands import COMMAND_ORDER
from ..replies import Reply

AUTHOR = "Relaquent"
PRODUCT = "RumoniumGC"
ABOUT_VERSION = "v2.3"


class ChatPresenter:
    def __init__(self, templates_dir: Path | None = None):
        base_dir = templates_dir or (Path(__file__).resolve().parent / "templates")
        # Chat is plain text, nothing to escape.
        self._env = Environment(
            loader=FileSystemLoader(str(base_dir)),
            autoescape=False,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def _render(self, template: str, **context) -> str:
        return self._env.get_template(template).render(**context).strip()

    def bedwars_stats(self, player: str, stats: BedwarsStatsRecord) -> Reply:
        return Reply(self._render("bedwars_stats.j2", player=player, stats=stats, author=AUTHOR))

    def detailed_stats(self, player: str, stats: BedwarsStatsRecord) -> Reply:
        return Reply(self._render("detailed_stats.j2", player=player, stats=stats))

    def no_data(self, player: str) -> Reply:
        return Reply(f"BW Stats - {player} | no data found.")

    def guild_experience(self, player: str, gexp: GuildExperience) -> Reply:
        return Reply(f"{player} | Weekly GEXP: {gexp.weekly_gexp:,} | Rank: #{gexp.rank}/{gexp.total_members}")

    def guild_no_data(self, player: str) -> Reply:
        return Reply(f"GEXP - {player} | no data found.")

    def next_fkdr(self, player: str, goal: FkdrGoal) -> Reply:
        return Reply(self._render("next_fkdr.j2", player=player, goal=goal))

    def about(self) -> Reply:
        return Reply(f"{PRODUCT} - automated by {AUTHOR} | {ABOUT_VERSION}")

    def castle(self, countdown: CastleCountdown) -> Reply:
        if countdown.days <= 0:
            return Reply("Castle today!")
        when = countdown.next_castle
        return Reply(f"Castle in {countdown.days} days ({when.month}/{when.day}/{when.year})")

    def help(self) -> Reply:
        return Reply(self._render("help.j2", commands=COMMAND_ORDER))
