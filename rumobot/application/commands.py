from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

GUILD_PREFIX = "Guild >"
PLAYER_NAME_PATTERN = r"[A-Za-z0-9_]{1,16}"

_REQUESTER_RE = re.compile(rf"^Guild > (?:\[[^\]]+\] )?({PLAYER_NAME_PATTERN})")


class CommandKind(Enum):
    GUILD_EXPERIENCE = "gexp"
    NEXT_FKDR = "nfkdr"
    STATS = "bw"
    DETAILED_STATS = "stats"
    CASTLE = "when"
    ABOUT = "about"
    HELP = "help"

    @property
    def token(self) -> str:
        return f"!{self.value}"

    @property
    def takes_player(self) -> bool:
        return self in (CommandKind.GUILD_EXPERIENCE, CommandKind.STATS, CommandKind.DETAILED_STATS)

    @property
    def defaults_to_requester(self) -> bool:
        return self is CommandKind.NEXT_FKDR

    @property
    def usage(self) -> str:
        if self.takes_player:
            return f"{self.token} <player>"
        if self.defaults_to_requester:
            return f"{self.token} [player]"
        return self.token


# First token found in a line wins.
COMMAND_ORDER = (
    CommandKind.GUILD_EXPERIENCE,
    CommandKind.NEXT_FKDR,
    CommandKind.STATS,
    CommandKind.DETAILED_STATS,
    CommandKind.CASTLE,
    CommandKind.ABOUT,
    CommandKind.HELP,
)

_ARGUMENT_RES = {
    kind: re.compile(
        rf"{re.escape(kind.token)}\s+({PLAYER_NAME_PATTERN})"
        if kind.takes_player
        else rf"{re.escape(kind.token)}(?:\s+({PLAYER_NAME_PATTERN}))?",
        re.IGNORECASE,
    )
    for kind in COMMAND_ORDER
    if kind.takes_player or kind.defaults_to_requester
}


@dataclass(frozen=True)
class ChatCommand:
    kind: CommandKind
    argument: str | None = None
    requester: str | None = None


def is_guild_line(line: str) -> bool:
    return line.startswith(GUILD_PREFIX)


def _last_match(pattern: re.Pattern, line: str) -> re.Match | None:
    matches = list(pattern.finditer(line))
    return matches[-1] if matches else None


def parse_command(line: str) -> ChatCommand | None:
    """
    Extract a command from a guild chat line.

    Returns ``None`` for lines outside guild chat, lines without a known
    token, and player commands that are missing a valid name. When a token
    is repeated, the name after its last occurrence is used.
    """
    if not is_guild_line(line):
        return None
    lowered = line.lower()
    kind = next((k for k in COMMAND_ORDER if k.token in lowered), None)
    if kind is None:
        return None

    requester_match = _REQUESTER_RE.match(line)
    requester = requester_match.group(1) if requester_match else None

    pattern = _ARGUMENT_RES.get(kind)
    if pattern is None:
        return ChatCommand(kind=kind, requester=requester)
    match = _last_match(pattern, line)
    argument = match.group(1) if match else None
    if argument is None and kind.defaults_to_requester:
        argument = requester
    if argument is None:
        return None
    return ChatCommand(kind=kind, argument=argument, requester=requester)
