"""Conditional GET of a feed document.

One round trip per call: cached validators go out as ``If-None-Match`` /
``If-Modified-Since``, the response is classified by status code and media
type, and a 200 is parsed into a :class:`~atomsync.parser.ParsedFeed`.
``None`` means "nothing new", either because the server answered 304 or
because the document is no newer than what the feed already holds.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .client import (
    ConfigurationError,
    FeedGoneError,
    UnexpectedContentTypeError,
    UnexpectedResponseError,
)
from .models import ATOM_MEDIA_TYPE
from .parser import ParsedFeed, parse

if TYPE_CHECKING:
    from .feed import Feed

logger = logging.getLogger(__name__)


def is_atom_media_type(content_type: str | None) -> bool:
    """True if a Content-Type header names an Atom document; parameters are ignored."""
    if not content_type:
        return False
    return content_type.split(";", 1)[0].strip().lower().startswith(ATOM_MEDIA_TYPE)


def conditional_headers(etag: str | None, last_modified: str | None) -> dict[str, str]:
    headers = {}
    if etag:
        headers["If-None-Match"] = etag
    if last_modified:
        headers["If-Modified-Since"] = last_modified
    return headers


def conditional_fetch(feed: Feed) -> ParsedFeed | None:
    """Fetch ``feed.uri`` and return the parsed document, or ``None`` if unchanged.

    Updates ``feed.etag`` / ``feed.last_modified`` from a successful response.

    Raises:
        ConfigurationError: If the feed has no URI.
        FeedGoneError: On 410.
        UnexpectedResponseError: On any status other than 200, 304 or 410.
        UnexpectedContentTypeError: If a 200 response is not an Atom document
            (including :class:`~atomsync.parser.FeedParseError`).
    """
    if not feed.uri:
        raise ConfigurationError("Can't fetch a feed without a URI.")

    uri = feed.uri
    response = feed.client.get(uri, conditional_headers(feed.etag, feed.last_modified))
    status = response.status_code

    if status == 304:
        logger.info("%s not modified", uri)
        return None
    if status == 410:
        raise FeedGoneError(uri)
    if status != 200:
        raise UnexpectedResponseError(uri, status)

    content_type = response.headers.get("Content-Type", "")
    if not is_atom_media_type(content_type):
        raise UnexpectedContentTypeError(
            f"Unexpected HTTP response Content-Type: {content_type or '(none)'} "
            f"(wanted {ATOM_MEDIA_TYPE}) ({uri})",
            uri=uri,
            content_type=content_type,
        )

    # Parse before touching the validators so a malformed body is refetched in full.
    document = parse(response.content, uri)

    etag = response.headers.get("ETag")
    if etag:
        feed.etag = etag
    last_modified = response.headers.get("Last-Modified")
    if last_modified:
        feed.last_modified = last_modified

    if feed.updated and document.updated and feed.updated >= document.updated:
        logger.info(
            "%s unchanged since %s, skipping merge", uri, feed.updated.isoformat()
        )
        return None

    logger.info("Fetched %s (%d entries)", uri, len(document.entries))
    return document
