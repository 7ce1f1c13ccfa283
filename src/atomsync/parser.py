"""Atom document parsing using feedparser."""

import logging
import xml.sax
from dataclasses import dataclass, field
from datetime import datetime, timezone
from time import struct_time
from urllib.parse import urljoin

import feedparser

from .client import UnexpectedContentTypeError
from .models import ATOM_MEDIA_TYPE, Category, Entry, Link, Person, find_link

logger = logging.getLogger(__name__)


@dataclass
class ParsedFeed:
    """Result of parsing one physical Atom document."""

    id: str | None = None
    title: str | None = None
    subtitle: str | None = None
    rights: str | None = None
    updated: datetime | None = None
    generator: str | None = None
    icon: str | None = None
    logo: str | None = None
    links: list[Link] = field(default_factory=list)
    categories: list[Category] = field(default_factory=list)
    authors: list[Person] = field(default_factory=list)
    contributors: list[Person] = field(default_factory=list)
    entries: list[Entry] = field(default_factory=list)


class FeedParseError(UnexpectedContentTypeError):
    """Raised when a document is malformed or is not an Atom feed."""


def parse(body: bytes, base_uri: str = "") -> ParsedFeed:
    """Parse an Atom document.

    Args:
        body: Raw document bytes.
        base_uri: URI the document was fetched from; relative hrefs are
            resolved against it.

    Raises:
        FeedParseError: If the body is not well-formed XML or not an Atom feed.
    """
    # No content-location: feedparser would resolve atom:id against it as a relative URI.
    parsed = feedparser.parse(body, response_headers={"content-type": ATOM_MEDIA_TYPE})

    exc = parsed.get("bozo_exception")
    if parsed.get("bozo") and isinstance(exc, xml.sax.SAXException):
        raise FeedParseError(f"Document is not well-formed XML: {exc}", uri=base_uri or None)

    if not parsed.get("version", "").startswith("atom"):
        raise FeedParseError(
            f"Document is not an Atom feed (detected {parsed.get('version') or 'unknown'!r})",
            uri=base_uri or None,
        )

    meta = parsed.feed
    return ParsedFeed(
        id=meta.get("id"),
        title=meta.get("title"),
        subtitle=meta.get("subtitle"),
        rights=meta.get("rights"),
        updated=_parse_time(dict.get(meta, "updated_parsed")),
        generator=meta.get("generator"),
        icon=meta.get("icon"),
        logo=meta.get("logo"),
        links=_links(meta.get("links", []), base_uri),
        categories=_categories(meta.get("tags", [])),
        authors=_people(meta.get("authors", [])),
        contributors=_people(meta.get("contributors", [])),
        entries=_entries(parsed.entries, base_uri),
    )


def _entries(raw_entries: list, base_uri: str) -> list[Entry]:
    entries = []
    for raw in raw_entries:
        links = _links(raw.get("links", []), base_uri)
        alternate = find_link(links, "alternate")
        entry_id = raw.get("id") or (alternate.href if alternate else None)
        if not entry_id:
            logger.warning(
                "Skipping entry with no identifier: %s", raw.get("title", "unknown")
            )
            continue

        content = raw.get("content")
        entries.append(
            Entry(
                id=entry_id,
                updated=_parse_time(dict.get(raw, "updated_parsed")),
                title=raw.get("title", ""),
                summary=raw.get("summary"),
                content=content[0].get("value") if content else None,
                published=_parse_time(dict.get(raw, "published_parsed")),
                links=links,
                categories=_categories(raw.get("tags", [])),
                authors=_people(raw.get("authors", [])),
                contributors=_people(raw.get("contributors", [])),
                rights=raw.get("rights"),
            )
        )
    return entries


def _links(raw_links: list, base_uri: str) -> list[Link]:
    return [
        Link(
            href=urljoin(base_uri, raw["href"]),
            rel=raw.get("rel", "alternate"),
            type=raw.get("type"),
            title=raw.get("title"),
        )
        for raw in raw_links
        if raw.get("href")
    ]


def _categories(raw_tags: list) -> list[Category]:
    return [
        Category(term=raw["term"], scheme=raw.get("scheme"), label=raw.get("label"))
        for raw in raw_tags
        if raw.get("term")
    ]


def _people(raw_people: list) -> list[Person]:
    return [
        Person(name=raw.get("name", ""), email=raw.get("email"), uri=raw.get("href"))
        for raw in raw_people
        if raw
    ]


def _parse_time(value: struct_time | None) -> datetime | None:
    """Convert a feedparser UTC struct_time into an aware datetime.

    Callers read the raw key with ``dict.get``: ``FeedParserDict`` lookups of
    ``updated_parsed`` fall back to ``published_parsed`` when it is missing.
    """
    if not isinstance(value, struct_time):
        return None
    try:
        return datetime(*value[:6], tzinfo=timezone.utc)
    except (ValueError, OverflowError):
        return None
