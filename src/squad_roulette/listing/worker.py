"""Background listing fetch.

The fetch does blocking network I/O across several sequential requests,
so it runs on its own thread with a private asyncio loop. The finished
Listing is handed back through a single-slot queue that the UI thread
polls once per frame without blocking.

Usage:
    worker = FetchWorker(ListingFetcher())
    worker.start(60, 100)

    # every frame
    listing = worker.poll()
    if listing is not None:
        ...
"""

import asyncio
import logging
import queue
import threading
from typing import Optional

from squad_roulette.listing.fetcher import ListingFetcher
from squad_roulette.listing.models import Listing

logger = logging.getLogger(__name__)


class FetchWorker:
    """Runs at most one listing fetch at a time off the UI thread."""

    def __init__(self, fetcher: ListingFetcher):
        self._fetcher = fetcher
        self._results: "queue.Queue[Listing]" = queue.Queue(maxsize=1)
        self._thread: Optional[threading.Thread] = None
        # Only touched from the UI thread (start/poll)
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        """Check if a fetch has been started and not yet collected."""
        return self._in_flight

    def start(self, min_players: int, max_players: int) -> bool:
        """Start a fetch. Rejected while another one is in flight.

        Returns:
            True if a fetch was started
        """
        if self._in_flight:
            logger.debug("Fetch already in flight, ignoring request")
            return False

        self._in_flight = True
        self._thread = threading.Thread(
            target=self._run,
            args=(min_players, max_players),
            name="listing-fetch",
            daemon=True,
        )
        self._thread.start()
        return True

    def poll(self) -> Optional[Listing]:
        """Collect the finished Listing, if any. Never blocks."""
        try:
            listing = self._results.get_nowait()
        except queue.Empty:
            return None

        self._in_flight = False
        self._thread = None
        return listing

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for the current fetch thread to finish (tests and shutdown)."""
        thread = self._thread
        if thread is not None:
            thread.join(timeout)

    def _run(self, min_players: int, max_players: int) -> None:
        try:
            listing = asyncio.run(self._fetcher.fetch(min_players, max_players))
        except Exception:
            logger.exception("Listing fetch crashed")
            listing = Listing()

        self._results.put(listing)
