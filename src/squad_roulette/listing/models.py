"""
Data models for the server listing.

A Listing is produced wholesale by one fetch cycle and never edited
afterwards; the controller swaps the whole object on the next delivery.
"""

from dataclasses import dataclass
from typing import Any, Iterator

# Fixed allow-list of two-letter country codes, not configurable
EU_COUNTRIES: frozenset[str] = frozenset(
    "DE,FR,PL,GB,UA,NL,CZ,SK,IT,ES,AT,BE,DK,SE,NO,FI,IE,TR".split(",")
)

UNKNOWN = "Unknown"
UNKNOWN_COUNTRY = "??"


@dataclass(frozen=True)
class ServerRecord:
    """A live game server as shown in the roulette."""

    name: str
    players: int
    max_players: int
    map: str = UNKNOWN
    mode: str = UNKNOWN
    country: str = UNKNOWN_COUNTRY

    @property
    def player_count(self) -> str:
        """Get formatted player count."""
        return f"{self.players}/{self.max_players}"

    @property
    def is_eligible(self) -> bool:
        """Check whether the server's country is in the allow-list."""
        return self.country in EU_COUNTRIES

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> "ServerRecord":
        """Build a record from one entry of a listing page's ``data`` array.

        Raises:
            KeyError, TypeError, ValueError: If a required attribute is
                missing or has the wrong type
        """
        attributes = item["attributes"]
        details = attributes.get("details") or {}

        name = attributes["name"]
        if not isinstance(name, str):
            raise TypeError(f"Server name must be a string, got {type(name).__name__}")

        return cls(
            name=name,
            players=_count(attributes["players"], "players"),
            max_players=_count(attributes["maxPlayers"], "maxPlayers"),
            map=details.get("map") or UNKNOWN,
            mode=details.get("gameMode") or UNKNOWN,
            country=attributes.get("country") or UNKNOWN_COUNTRY,
        )


def _count(value: Any, field_name: str) -> int:
    """Validate a non-negative integer attribute."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{field_name} must be an integer, got {value!r}")
    if value < 0:
        raise ValueError(f"{field_name} must be non-negative, got {value}")
    return value


@dataclass(frozen=True)
class Listing:
    """Ordered, immutable snapshot of eligible servers."""

    servers: tuple[ServerRecord, ...] = ()

    def __post_init__(self) -> None:
        for server in self.servers:
            if not server.is_eligible:
                raise ValueError(f"Server outside allow-list: {server.name} ({server.country})")

    @classmethod
    def from_records(cls, records: list[ServerRecord]) -> "Listing":
        """Keep only allow-listed records, preserving order."""
        return cls(tuple(record for record in records if record.is_eligible))

    def __len__(self) -> int:
        return len(self.servers)

    def __iter__(self) -> Iterator[ServerRecord]:
        return iter(self.servers)

    def __getitem__(self, index: int) -> ServerRecord:
        return self.servers[index]

    @property
    def is_empty(self) -> bool:
        return not self.servers
