"""Listing fetcher for the BattleMetrics servers endpoint.

Walks the paginated server listing with a fixed Squad/online/descending-by-
players query and a caller-supplied player range. Pagination is bounded and
best-effort: the first failing page ends the walk and whatever was already
collected is returned.

API docs: https://www.battlemetrics.com/developers/documentation
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

import aiohttp

from squad_roulette.listing.models import Listing, ServerRecord

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.battlemetrics.com/servers"

GAME = "squad"
STATUS = "online"
PAGE_SIZE = 100
SORT = "-players"

# Upper bound on sequential requests per fetch
MAX_PAGES = 5


def build_query(min_players: int, max_players: int) -> Dict[str, str]:
    """Query parameters for the first page."""
    return {
        "filter[game]": GAME,
        "filter[status]": STATUS,
        "page[size]": str(PAGE_SIZE),
        "sort": SORT,
        "filter[players][min]": str(min_players),
        "filter[players][max]": str(max_players),
    }


def parse_page(payload: Any) -> Tuple[List[ServerRecord], Optional[str]]:
    """Parse one listing page into records and the next-page cursor.

    Records are returned unfiltered; country filtering happens when the
    Listing is assembled.

    Raises:
        KeyError, TypeError, ValueError, AttributeError: On a malformed page
    """
    records = [ServerRecord.from_api(item) for item in payload["data"]]
    links = payload.get("links") or {}
    next_url = links.get("next") or None
    if next_url is not None and not isinstance(next_url, str):
        raise TypeError(f"Next-page cursor must be a string, got {next_url!r}")
    return records, next_url


class ListingFetcher:
    """Fetches the filtered EU Squad server listing."""

    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: float = 15.0):
        self._base_url = base_url
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._base_url

    async def fetch(
        self,
        min_players: int,
        max_players: int,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> Listing:
        """Fetch every eligible server in the player range.

        Args:
            min_players: Lower bound of the player-count filter
            max_players: Upper bound of the player-count filter
            session: Existing session to reuse; a private one is opened
                and closed otherwise

        Returns:
            Listing of allow-listed servers, possibly partial or empty
        """
        if session is not None:
            return await self._paginate(session, min_players, max_players)

        async with aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self._timeout),
        ) as own_session:
            return await self._paginate(own_session, min_players, max_players)

    async def _paginate(self, session: Any, min_players: int, max_players: int) -> Listing:
        logger.info(f"Fetching servers with {min_players}-{max_players} players")

        records: List[ServerRecord] = []
        next_url: Optional[str] = self._base_url
        params: Optional[Dict[str, str]] = build_query(min_players, max_players)
        pages_fetched = 0

        while next_url and pages_fetched < MAX_PAGES:
            pages_fetched += 1
            page = await self._fetch_page(session, next_url, params)
            if page is None:
                break

            page_records, next_url = page
            records.extend(page_records)
            # The cursor already carries the query
            params = None
            logger.debug(f"Page {pages_fetched}: {len(page_records)} servers")

        if next_url and pages_fetched >= MAX_PAGES:
            logger.info(f"Stopped after {MAX_PAGES} pages")

        listing = Listing.from_records(records)
        logger.info(f"Fetched {len(listing)} eligible servers ({len(records)} total)")
        return listing

    async def _fetch_page(
        self,
        session: Any,
        url: str,
        params: Optional[Dict[str, str]],
    ) -> Optional[Tuple[List[ServerRecord], Optional[str]]]:
        """Fetch and parse one page, or None if pagination must stop."""
        try:
            async with session.get(url, params=params) as response:
                if not response.ok:
                    logger.warning(f"Listing request failed: HTTP {response.status}")
                    return None

                payload = await response.json(content_type=None)

        except asyncio.TimeoutError:
            logger.warning("Listing request timed out")
            return None
        except aiohttp.ClientError as e:
            logger.warning(f"Listing request error: {e}")
            return None
        except TypeError as e:
            # aiohttp rejects URLs and parameters it cannot build a request from
            logger.warning(f"Listing request could not be built: {e}")
            return None
        except ValueError as e:
            logger.warning(f"Listing response is not JSON: {e}")
            return None

        try:
            return parse_page(payload)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Malformed listing page: {e!r}")
            return None
