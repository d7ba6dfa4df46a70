"""Character input parsing.

Accepted forms:
    - ``name@server`` (a full-width ``＠`` also works)
    - ``name server``
    - ``name`` (no server)

Server names match case-insensitively against English or local names. Latin
character names are title-cased; Hangul is left as typed.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import NamedTuple

from raidrecord.core.models import KR_SERVERS, Server

_VALID_NAME = re.compile(r"^[가-힣a-zA-Z']+$")
_AT_SEPARATED = re.compile(r"^(.+?)[@＠](.+)$")


class ParsedCharacter(NamedTuple):
    name: str
    server: Server | None


_INVALID = ParsedCharacter("", None)


def _format_name(name: str) -> str:
    return " ".join(word[:1].upper() + word[1:].lower() for word in name.split(" "))


def _match_server(text: str, servers: Sequence[Server]) -> Server | None:
    folded = text.strip().lower()
    for server in servers:
        if folded in (server.name.lower(), server.local_name.lower()):
            return server
    return None


def parse_character_input(
    text: str | None, servers: Sequence[Server] = KR_SERVERS
) -> ParsedCharacter:
    """Split user input into a character name and an optional server.

    Returns:
        ParsedCharacter; the name is empty when the input is not a valid name
    """
    if not text or not isinstance(text, str):
        return _INVALID
    trimmed = text.strip()
    if not trimmed:
        return _INVALID

    at_match = _AT_SEPARATED.match(trimmed)
    if at_match:
        name = at_match.group(1).strip()
        if not _VALID_NAME.match(name):
            return _INVALID
        server = _match_server(at_match.group(2), servers)
        if server is not None:
            return ParsedCharacter(_format_name(name), server)

    # Longest server names first so one name never shadows another
    candidates = sorted(
        ((label, server) for server in servers for label in (server.name, server.local_name)),
        key=lambda pair: len(pair[0]),
        reverse=True,
    )
    for label, server in candidates:
        pattern = re.compile(rf"^(.+?)\s+{re.escape(label)}$", re.IGNORECASE)
        space_match = pattern.match(trimmed)
        if space_match:
            name = space_match.group(1).strip()
            if _VALID_NAME.match(name):
                return ParsedCharacter(_format_name(name), server)

    if not _VALID_NAME.match(trimmed):
        return _INVALID
    return ParsedCharacter(_format_name(trimmed), None)
