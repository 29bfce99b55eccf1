"""Tests for the background fetch handoff."""

from __future__ import annotations

import threading

from squad_roulette.listing.models import Listing
from squad_roulette.listing.worker import FetchWorker
from tests.conftest import make_server


class GatedFetcher:
    """Fetcher that blocks until released, to observe the in-flight window."""

    def __init__(self, listing: Listing) -> None:
        self.listing = listing
        self.release = threading.Event()
        self.calls: list[tuple[int, int]] = []
        self.threads: list[str] = []

    async def fetch(self, min_players: int, max_players: int) -> Listing:
        self.calls.append((min_players, max_players))
        self.threads.append(threading.current_thread().name)
        self.release.wait(5)
        return self.listing


class CrashingFetcher:
    async def fetch(self, min_players: int, max_players: int) -> Listing:
        raise RuntimeError("unexpected")


def test_result_is_delivered_once_through_poll() -> None:
    listing = Listing((make_server("A"), make_server("B", country="FR")))
    fetcher = GatedFetcher(listing)
    worker = FetchWorker(fetcher)

    assert worker.start(40, 90) is True
    assert worker.in_flight is True
    assert worker.poll() is None

    fetcher.release.set()
    worker.join(5)

    assert worker.poll() is listing
    assert worker.in_flight is False
    assert worker.poll() is None
    assert fetcher.calls == [(40, 90)]
    assert fetcher.threads == ["listing-fetch"]


def test_second_fetch_rejected_while_in_flight() -> None:
    fetcher = GatedFetcher(Listing())
    worker = FetchWorker(fetcher)

    assert worker.start(0, 100) is True
    assert worker.start(10, 20) is False

    fetcher.release.set()
    worker.join(5)
    worker.poll()

    assert fetcher.calls == [(0, 100)]

    # Accepted again once the previous result was collected
    assert worker.start(10, 20) is True
    worker.join(5)
    worker.poll()
    assert fetcher.calls == [(0, 100), (10, 20)]


def test_crashed_fetch_still_delivers_empty_listing() -> None:
    worker = FetchWorker(CrashingFetcher())

    worker.start(0, 100)
    worker.join(5)

    result = worker.poll()
    assert result is not None
    assert result.is_empty
    assert worker.in_flight is False
