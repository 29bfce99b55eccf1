"""Server listing: records, remote fetcher and background worker."""

from .models import EU_COUNTRIES, Listing, ServerRecord
from .fetcher import MAX_PAGES, ListingFetcher, build_query, parse_page
from .worker import FetchWorker

__all__ = [
    "EU_COUNTRIES",
    "Listing",
    "ServerRecord",
    "MAX_PAGES",
    "ListingFetcher",
    "build_query",
    "parse_page",
    "FetchWorker",
]
