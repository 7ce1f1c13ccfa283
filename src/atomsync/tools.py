"""MCP tool definitions for atomsync.

Each tool does exactly one thing. All exceptions are caught at the
tool boundary and returned as "Error: ..." strings so the MCP protocol
never sees an uncaught exception.
"""

import asyncio
import logging

from fastmcp import FastMCP

from .client import FeedClient
from .feed import Feed
from .history import collect_everything

logger = logging.getLogger(__name__)


class FeedStore:
    """Tracked feeds by URI, so cached validators survive between tool calls."""

    def __init__(self, client: FeedClient, max_history_hops: int | None = None):
        self.client = client
        self.max_history_hops = max_history_hops
        self._feeds: dict[str, Feed] = {}
        # Feeds are single-owner; engine calls from concurrent tools run one at a time.
        self.lock = asyncio.Lock()

    def get(self, url: str) -> Feed:
        feed = self._feeds.get(url)
        if feed is None:
            feed = Feed(url, self.client)
            self._feeds[url] = feed
        return feed

    def forget(self, url: str) -> bool:
        return self._feeds.pop(url, None) is not None

    def feeds(self) -> list[Feed]:
        return list(self._feeds.values())


def _newest_entries(feed: Feed, limit: int) -> list[dict]:
    ordered = sorted(
        feed.entries,
        key=lambda e: e.updated.timestamp() if e.updated else float("-inf"),
        reverse=True,
    )
    return [e.to_dict() for e in ordered[: max(limit, 0)]]


def register_tools(mcp: FastMCP, store: FeedStore) -> None:
    """Register all atomsync tools on the given MCP server instance."""

    @mcp.tool()
    async def fetch_feed(url: str, limit: int = 20) -> str:
        """Fetch an Atom feed, merging any changes into the tracked copy.

        Repeated calls send the cached ETag / Last-Modified validators, so an
        unchanged feed costs a single 304 round trip.

        Args:
            url: Absolute URL of the Atom feed document.
            limit: Maximum number of entries to return, newest first (default 20).

        Returns a JSON-formatted object with the feed summary and its entries.
        """
        try:
            feed = store.get(url)
            async with store.lock:
                await asyncio.to_thread(feed.update)
                result = feed.to_dict()
                result["entries"] = _newest_entries(feed, limit)
            return str(result)
        except Exception as e:
            logger.error("fetch_feed failed: %s", e, exc_info=True)
            return f"Error: {e}"

    @mcp.tool()
    async def fetch_feed_history(url: str, limit: int = 50, max_hops: int | None = None) -> str:
        """Assemble the complete logical feed by following its previous/next pages.

        Args:
            url: Absolute URL of any page of a paginated Atom feed.
            limit: Maximum number of entries to return, newest first (default 50).
            max_hops: Maximum pages to follow in each direction (default from config).

        Returns a JSON-formatted object with the feed summary and its entries.
        """
        try:
            feed = store.get(url)
            hops = max_hops if max_hops is not None else store.max_history_hops
            async with store.lock:
                await asyncio.to_thread(collect_everything, feed, hops)
                result = feed.to_dict()
                result["entries"] = _newest_entries(feed, limit)
            return str(result)
        except Exception as e:
            logger.error("fetch_feed_history failed: %s", e, exc_info=True)
            return f"Error: {e}"

    @mcp.tool()
    async def list_tracked_feeds() -> str:
        """List every feed fetched so far with its cached state.

        Returns a JSON-formatted list of feed summaries with uri, title,
        state, entry_count and cached validators.
        """
        try:
            async with store.lock:
                return str([f.to_dict() for f in store.feeds()])
        except Exception as e:
            logger.error("list_tracked_feeds failed: %s", e, exc_info=True)
            return f"Error: {e}"

    @mcp.tool()
    async def forget_feed(url: str) -> str:
        """Stop tracking a feed and drop its cached entries and validators.

        Args:
            url: URL the feed was fetched with.

        Returns "OK" on success or an error message.
        """
        try:
            if not store.forget(url):
                return f"Error: Feed {url} is not tracked"
            return "OK"
        except Exception as e:
            logger.error("forget_feed failed: %s", e, exc_info=True)
            return f"Error: {e}"
