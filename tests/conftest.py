from __future__ import annotations

import random
from typing import Any

import pytest

from squad_roulette.listing.models import Listing, ServerRecord


def make_server(name: str, country: str = "DE", players: int = 80, max_players: int = 100) -> ServerRecord:
    return ServerRecord(
        name=name,
        players=players,
        max_players=max_players,
        map="Narva",
        mode="RAAS",
        country=country,
    )


def api_item(
    name: str,
    country: str | None = "DE",
    players: int = 80,
    max_players: int = 100,
    map_name: str | None = "Gorodok",
    game_mode: str | None = "AAS",
) -> dict[str, Any]:
    """One entry of a listing page's ``data`` array."""
    return {
        "type": "server",
        "id": name,
        "attributes": {
            "name": name,
            "players": players,
            "maxPlayers": max_players,
            "country": country,
            "details": {"map": map_name, "gameMode": game_mode},
        },
    }


def api_page(items: list[dict[str, Any]], next_url: str | None = None) -> dict[str, Any]:
    return {"data": items, "links": {"next": next_url} if next_url else {}}


class ScriptedRandom(random.Random):
    """Random source with a fixed winner index and scripted fractions."""

    def __init__(self, index: int, fractions: tuple[float, ...] = (0.0, 0.5)) -> None:
        super().__init__(0)
        self._index = index
        self._fractions = list(fractions)

    def randrange(self, *args: Any, **kwargs: Any) -> int:
        return self._index

    def random(self) -> float:
        if self._fractions:
            return self._fractions.pop(0)
        return 0.5


class FakeClock:
    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeWorker:
    """Synchronous stand-in for FetchWorker."""

    def __init__(self) -> None:
        self.in_flight = False
        self.started: list[tuple[int, int]] = []
        self._pending: Listing | None = None

    def start(self, min_players: int, max_players: int) -> bool:
        if self.in_flight:
            return False
        self.in_flight = True
        self.started.append((min_players, max_players))
        return True

    def deliver(self, listing: Listing) -> None:
        self._pending = listing

    def poll(self) -> Listing | None:
        if self._pending is None:
            return None
        listing, self._pending = self._pending, None
        self.in_flight = False
        return listing


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(1337)


@pytest.fixture
def listing() -> Listing:
    return Listing(tuple(make_server(f"EU #{i}", country=c) for i, c in enumerate(["DE", "FR", "GB", "PL", "NL"])))


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_worker() -> FakeWorker:
    return FakeWorker()
