"""World server reference data."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Server:
    """A game world; ``name`` is the slug FFLogs expects."""

    name: str
    local_name: str
    region: str

    @property
    def slug(self) -> str:
        return self.name.lower()


KR_SERVERS: tuple[Server, ...] = (
    Server("Carbuncle", "카벙클", "KR"),
    Server("Moogle", "모그리", "KR"),
    Server("Chocobo", "초코보", "KR"),
    Server("Tonberry", "톤베리", "KR"),
    Server("Fenrir", "펜리르", "KR"),
)


def servers_for_region(region: str) -> tuple[Server, ...]:
    """Servers known for a region (only KR is bundled)."""
    region = region.upper()
    return tuple(server for server in KR_SERVERS if server.region == region)


def find_server(name: str, servers: tuple[Server, ...] = KR_SERVERS) -> Server | None:
    """Case-insensitive lookup by English or local name."""
    folded = name.strip().lower()
    for server in servers:
        if server.name.lower() == folded or server.local_name.lower() == folded:
            return server
    return None
