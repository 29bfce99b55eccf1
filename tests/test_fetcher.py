"""Tests for paginated listing retrieval against a fake aiohttp session."""

from __future__ import annotations

import asyncio
from typing import Any

import aiohttp
import pytest

from squad_roulette.listing.fetcher import MAX_PAGES, ListingFetcher, build_query, parse_page
from squad_roulette.listing.models import ServerRecord
from tests.conftest import api_item, api_page

BASE_URL = "https://api.example.test/servers"


class FakeResponse:
    def __init__(self, payload: Any = None, status: int = 200, json_error: Exception | None = None) -> None:
        self.payload = payload
        self.status = status
        self.json_error = json_error

    @property
    def ok(self) -> bool:
        return self.status < 400

    async def json(self, content_type: str | None = "application/json") -> Any:
        if self.json_error is not None:
            raise self.json_error
        return self.payload

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, *exc_info: Any) -> bool:
        return False


class FakeSession:
    """Serves scripted responses (or raises scripted errors) in order."""

    def __init__(self, responses: list[FakeResponse | Exception]) -> None:
        self._responses = list(responses)
        self.calls: list[tuple[str, dict[str, str] | None]] = []

    def get(self, url: str, params: dict[str, str] | None = None) -> FakeResponse:
        self.calls.append((url, params))
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def page_url(n: int) -> str:
    return f"{BASE_URL}?page[key]={n}"


def fetch(session: FakeSession, min_players: int = 60, max_players: int = 100):
    fetcher = ListingFetcher(base_url=BASE_URL)
    return asyncio.run(fetcher.fetch(min_players, max_players, session=session))


def test_first_request_carries_query_then_follows_cursor() -> None:
    session = FakeSession([
        FakeResponse(api_page([api_item("A")], next_url=page_url(2))),
        FakeResponse(api_page([api_item("B")])),
    ])

    listing = fetch(session, 10, 90)

    assert [s.name for s in listing] == ["A", "B"]
    assert session.calls[0] == (BASE_URL, build_query(10, 90))
    assert session.calls[1] == (page_url(2), None)


def test_query_parameters() -> None:
    assert build_query(60, 100) == {
        "filter[game]": "squad",
        "filter[status]": "online",
        "page[size]": "100",
        "sort": "-players",
        "filter[players][min]": "60",
        "filter[players][max]": "100",
    }


def test_transport_error_keeps_earlier_pages() -> None:
    session = FakeSession([
        FakeResponse(api_page([api_item("A1"), api_item("A2", country="US")], next_url=page_url(2))),
        FakeResponse(api_page([api_item("B1", country="FR")], next_url=page_url(3))),
        FakeResponse(api_page([api_item("C1", country="PL")], next_url=page_url(4))),
        aiohttp.ClientConnectionError("connection reset"),
    ])

    listing = fetch(session)

    assert [s.name for s in listing] == ["A1", "B1", "C1"]
    assert len(session.calls) == 4


def test_stops_after_max_pages() -> None:
    responses = [
        FakeResponse(api_page([api_item(f"S{n}")], next_url=page_url(n + 1)))
        for n in range(MAX_PAGES + 3)
    ]
    session = FakeSession(responses)

    listing = fetch(session)

    assert len(session.calls) == MAX_PAGES == 5
    assert len(listing) == MAX_PAGES


@pytest.mark.parametrize(
    "failure",
    [
        FakeResponse(status=503),
        FakeResponse(status=429),
        FakeResponse(json_error=ValueError("Expecting value")),
        FakeResponse({"errors": [{"status": "400"}]}),
        FakeResponse({"data": [{"attributes": {"name": "no players"}}]}),
        asyncio.TimeoutError(),
    ],
)
def test_bad_page_ends_pagination_with_partial_result(failure: FakeResponse | Exception) -> None:
    session = FakeSession([
        FakeResponse(api_page([api_item("A")], next_url=page_url(2))),
        failure,
        FakeResponse(api_page([api_item("never fetched")])),
    ])

    listing = fetch(session)

    assert [s.name for s in listing] == ["A"]
    assert len(session.calls) == 2


def test_failure_on_first_page_gives_empty_listing() -> None:
    session = FakeSession([aiohttp.ClientConnectionError("dns failure")])

    listing = fetch(session)

    assert listing.is_empty


def test_country_filter() -> None:
    session = FakeSession([
        FakeResponse(api_page([
            api_item("US server", country="US"),
            api_item("DE server", country="DE"),
            api_item("No country", country=None),
            api_item("TR server", country="TR"),
        ])),
    ])

    listing = fetch(session)

    assert [s.name for s in listing] == ["DE server", "TR server"]


def test_parse_page_applies_defaults() -> None:
    payload = api_page([api_item("Bare", country=None, map_name=None, game_mode=None)])

    records, next_url = parse_page(payload)

    assert records == [ServerRecord(name="Bare", players=80, max_players=100)]
    assert records[0].map == "Unknown"
    assert records[0].mode == "Unknown"
    assert records[0].country == "??"
    assert next_url is None


def test_parse_page_reads_cursor() -> None:
    _, next_url = parse_page(api_page([], next_url=page_url(2)))

    assert next_url == page_url(2)


@pytest.mark.parametrize(
    "attributes",
    [
        {"players": 1, "maxPlayers": 2},
        {"name": "A", "players": "many", "maxPlayers": 2},
        {"name": "A", "players": -1, "maxPlayers": 2},
        {"name": 7, "players": 1, "maxPlayers": 2},
    ],
)
def test_malformed_records_are_rejected(attributes: dict[str, Any]) -> None:
    with pytest.raises((KeyError, TypeError, ValueError)):
        ServerRecord.from_api({"attributes": attributes})


def test_non_string_cursor_rejects_page_and_keeps_earlier_ones() -> None:
    session = FakeSession([
        FakeResponse(api_page([api_item("A")], next_url=page_url(2))),
        FakeResponse({"data": [api_item("B")], "links": {"next": 12345}}),
        FakeResponse(api_page([api_item("never fetched")])),
    ])

    listing = fetch(session)

    assert [s.name for s in listing] == ["A"]
    assert len(session.calls) == 2


def test_parse_page_rejects_non_string_cursor() -> None:
    with pytest.raises(TypeError):
        parse_page({"data": [], "links": {"next": 12345}})


def test_unbuildable_request_keeps_earlier_pages() -> None:
    session = FakeSession([
        FakeResponse(api_page([api_item("A")], next_url=page_url(2))),
        TypeError("Constructor parameter should be str"),
    ])

    listing = fetch(session)

    assert [s.name for s in listing] == ["A"]
