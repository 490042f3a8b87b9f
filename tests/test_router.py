import unittest
from datetime import datetime, timezone

from rumobot.application.presenters import ChatPresenter
from rumobot.application.router import CommandRouter
from rumobot.domain import ApiError, BedwarsStatsRecord, ConfigError, GuildExperience


def make_record() -> BedwarsStatsRecord:
    return BedwarsStatsRecord(
        star=100,
        final_kill_death_ratio="2.50",
        kill_death_ratio="1.00",
        win_loss_ratio="0.75",
        final_kills=250,
        final_deaths=100,
        wins=30,
        beds_broken=60,
    )


class FakeStatsClient:
    def __init__(self):
        self.calls: list[str] = []
        self.record: BedwarsStatsRecord | None = make_record()
        self.error: Exception | None = None
        self.guild_calls: list[str] = []
        self.guild = GuildExperience(weekly_gexp=45210, rank=4, total_members=97)

    async def fetch_stats(self, player_name: str) -> BedwarsStatsRecord:
        self.calls.append(player_name)
        if self.error:
            raise self.error
        return self.record

    async def fetch_guild_experience(self, player_name: str) -> GuildExperience:
        self.guild_calls.append(player_name)
        if self.error:
            raise self.error
        return self.guild


class RecordingSleep:
    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class CommandRouterTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.stats = FakeStatsClient()
        self.sleep = RecordingSleep()
        self.router = CommandRouter(
            self.stats,
            ChatPresenter(),
            sleep=self.sleep,
            now=lambda: datetime(2026, 3, 10, 0, 8, tzinfo=timezone.utc),
        )

    async def test_stats_success_reply(self):
        reply = await self.router.route("Guild > X: !bw Dream")

        self.assertEqual(
            reply.text,
            "RumoGC - Dream | Star: 100 | FKDR: 2.50 | KD: 1.00 | WL: 0.75 - by Relaquent",
        )
        self.assertEqual(self.stats.calls, ["Dream"])

    async def test_stats_failure_gives_fallback_line(self):
        self.stats.error = ApiError("Player not found")

        reply = await self.router.route("Guild > X: !bw Dream")

        self.assertEqual(reply.text, "BW Stats - Dream | no data found.")

    async def test_missing_api_key_gives_fallback_line(self):
        self.stats.error = ConfigError("HYPIXEL_API_KEY is not configured")

        with self.assertLogs("rumobot.application.router", level="WARNING") as logs:
            reply = await self.router.route("Guild > X: !bw Dream")

        self.assertEqual(reply.text, "BW Stats - Dream | no data found.")
        self.assertIn("HYPIXEL_API_KEY", "\n".join(logs.output))

    async def test_about_needs_no_network(self):
        reply = await self.router.route("Guild > X: !about")

        self.assertEqual(reply.text, ChatPresenter().about().text)
        self.assertEqual(self.stats.calls, [])

    async def test_pacing_delay_applies_to_every_command(self):
        await self.router.route("Guild > X: !about")
        await self.router.route("Guild > X: !bw Dream")

        self.assertEqual(self.sleep.delays, [0.3, 0.3])

    async def test_ignored_lines_do_not_wait(self):
        self.assertIsNone(await self.router.route("Guild > X: hello"))
        self.assertIsNone(await self.router.route("Guild > X: !bwsomething"))
        self.assertIsNone(await self.router.route("From Y: !bw Dream"))

        self.assertEqual(self.sleep.delays, [])
        self.assertEqual(self.stats.calls, [])

    async def test_detailed_stats(self):
        reply = await self.router.route("Guild > X: !stats Dream")

        self.assertEqual(reply.text, "Dream | Star: 100 | Finals: 250 | Wins: 30 | Beds: 60")

    async def test_detailed_stats_failure(self):
        self.stats.error = ApiError("boom")

        reply = await self.router.route("Guild > X: !stats Dream")

        self.assertEqual(reply.text, "BW Stats - Dream | no data found.")

    async def test_castle_countdown(self):
        reply = await self.router.route("Guild > X: !when")

        self.assertEqual(reply.text, "Castle in 3 days (3/13/2026)")

    async def test_help(self):
        reply = await self.router.route("Guild > X: !help")

        self.assertTrue(reply.text.startswith("!bw <player>"))

    async def test_unexpected_lookup_error_still_gives_fallback_line(self):
        self.stats.error = RuntimeError("Session is closed")

        with self.assertLogs("rumobot.application.router", level="ERROR"):
            reply = await self.router.route("Guild > X: !bw Dream")

        self.assertEqual(reply.text, "BW Stats - Dream | no data found.")

    async def test_guild_experience(self):
        reply = await self.router.route("Guild > X: !gexp Dream")

        self.assertEqual(reply.text, "Dream | Weekly GEXP: 45,210 | Rank: #4/97")
        self.assertEqual(self.stats.guild_calls, ["Dream"])
        self.assertEqual(self.stats.calls, [])

    async def test_guild_experience_failure(self):
        self.stats.error = ApiError("Player not in a guild")

        reply = await self.router.route("Guild > X: !gexp Dream")

        self.assertEqual(reply.text, "GEXP - Dream | no data found.")

    async def test_next_fkdr_for_requester(self):
        reply = await self.router.route("Guild > [MVP+] Someone: !nfkdr")

        self.assertEqual(reply.text, "Someone | Current: 2.50 FKDR | Target: 3.00 | Finals needed: 50 (no deaths)")
        self.assertEqual(self.stats.calls, ["Someone"])

    async def test_next_fkdr_failure(self):
        self.stats.error = ApiError("Player not found")

        reply = await self.router.route("Guild > X: !nfkdr Dream")

        self.assertEqual(reply.text, "BW Stats - Dream | no data found.")
