"""Assembling a complete logical feed from its paginated history.

Starting from one document, follow its ``previous`` and ``next`` links,
fetching each page once and folding its entries into the starting feed.
"""

import logging
from urllib.parse import urldefrag, urlsplit, urlunsplit

from .feed import Feed

logger = logging.getLogger(__name__)


def normalize_uri(uri: str) -> str:
    """Canonical form used to recognise a page already visited."""
    parts = urlsplit(urldefrag(uri)[0])
    return urlunsplit(
        (parts.scheme.lower(), parts.netloc.lower(), parts.path or "/", parts.query, "")
    )


def _walk(feed: Feed, direction: str, visited: set[str], max_hops: int | None) -> int:
    page = getattr(feed, direction)
    hops = 0
    while page is not None:
        key = normalize_uri(page.uri)
        if key in visited:
            logger.warning("%s chain of %s loops back to %s, stopping", direction, feed.uri, page.uri)
            break
        if max_hops is not None and hops >= max_hops:
            logger.warning("%s chain of %s exceeds %d pages, stopping", direction, feed.uri, max_hops)
            break

        visited.add(key)
        page.update()
        feed.merge_entries(page)
        hops += 1
        page = getattr(page, direction)
    return hops


def collect_everything(feed: Feed, max_hops: int | None = None) -> Feed:
    """Update ``feed`` and merge in the entries of every page in its history.

    Args:
        feed: The feed to start from; it receives all collected entries.
        max_hops: Maximum number of pages fetched in each direction, or
            ``None`` for no limit. Loops are detected regardless.

    Returns:
        ``feed`` itself.
    """
    feed.update()
    visited = {normalize_uri(feed.uri)}

    before = _walk(feed, "prev", visited, max_hops)
    after = _walk(feed, "next", visited, max_hops)

    logger.info(
        "Collected %s: %d earlier and %d later pages, %d entries",
        feed.uri,
        before,
        after,
        len(feed),
    )
    return feed
