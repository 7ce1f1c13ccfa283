"""The Feed aggregate: metadata, entries, validators and history links."""

import copy
import enum
import logging
from collections import Counter
from collections.abc import Iterable, Iterator
from datetime import datetime
from urllib.parse import urljoin

from .client import FeedClient, FeedGoneError
from .fetch import conditional_fetch
from .merge import MergeAction, merge_entries, merge_entry
from .models import ATOM_MEDIA_TYPE, Category, Entry, Link, Person, find_link
from .parser import ParsedFeed

logger = logging.getLogger(__name__)

# Scalar metadata taken wholesale from the incoming document.
OVERWRITE_FIELDS = ("id", "title", "subtitle", "updated", "rights")
# Sequences appended to, duplicates included.
UNION_FIELDS = ("links", "categories", "authors", "contributors")


class FeedState(enum.Enum):
    UNFETCHED = "unfetched"
    FRESH = "fresh"
    GONE = "gone"


class Feed:
    """A logical Atom feed, kept up to date with conditional GETs.

    A feed built without a URI is local: it can be merged into and out of,
    but never fetched. ``prev`` and ``next`` point at the neighbouring
    documents of a paginated feed once an update has discovered them; each
    keeps its own validators and shares this feed's client.
    """

    def __init__(self, uri: str | None = None, client: FeedClient | None = None):
        self.uri = uri
        self._client = client

        self.id: str | None = None
        self.title: str | None = None
        self.subtitle: str | None = None
        self.rights: str | None = None
        self.updated: datetime | None = None

        self.entries: list[Entry] = []
        self.links: list[Link] = []
        self.categories: list[Category] = []
        self.authors: list[Person] = []
        self.contributors: list[Person] = []

        self.etag: str | None = None
        self.last_modified: str | None = None

        self.prev: Feed | None = None
        self.next: Feed | None = None
        self.state = FeedState.UNFETCHED

    @property
    def client(self) -> FeedClient:
        if self._client is None:
            self._client = FeedClient()
        return self._client

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"<Feed {self.uri} entries: {len(self.entries)} title={self.title!r}>"

    def entry(self, entry_id: str) -> Entry | None:
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None

    def link_for(self, rel: str, media_type: str | None = None) -> Link | None:
        return find_link(self.links, rel, media_type)

    def add(self, entry: Entry) -> MergeAction:
        """Add an entry; if one with the same id exists, the newest wins."""
        return merge_entry(self.entries, entry)

    def merge_entries(self, other: "Feed | ParsedFeed | Iterable[Entry]") -> Counter:
        """Merge the entries of another feed into this one, in its order."""
        incoming = other.entries if isinstance(other, (Feed, ParsedFeed)) else other
        return merge_entries(self.entries, incoming)

    def merge_all(self, other: "Feed | ParsedFeed") -> Counter:
        """Take ``other``'s metadata and entries into this feed, in place.

        Scalar fields are overwritten, sequence fields are appended to and
        entries are merged newest-wins. Not commutative.
        """
        for name in OVERWRITE_FIELDS:
            setattr(self, name, getattr(other, name))
        for name in UNION_FIELDS:
            getattr(self, name).extend(getattr(other, name))
        return self.merge_entries(other)

    def copy(self) -> "Feed":
        """Shallow copy with its own sequences; client and history links are shared."""
        clone = copy.copy(self)
        clone.entries = list(self.entries)
        for name in UNION_FIELDS:
            setattr(clone, name, list(getattr(self, name)))
        return clone

    def merged(self, other: "Feed | ParsedFeed") -> "Feed":
        """Return a new feed: this one with ``other`` merged in. Neither is changed."""
        clone = self.copy()
        clone.merge_all(other)
        return clone

    def update(self) -> "Feed":
        """Fetch this feed's URI and merge in whatever changed.

        Raises:
            ConfigurationError: If the feed has no URI.
            FeedGoneError: If the server answered 410, now or on an earlier call.
            UnexpectedResponseError: On an unexpected status code.
            UnexpectedContentTypeError: If the response is not an Atom document.
        """
        if self.state is FeedState.GONE:
            raise FeedGoneError(self.uri)

        try:
            document = conditional_fetch(self)
        except FeedGoneError:
            self.state = FeedState.GONE
            raise

        self.state = FeedState.FRESH
        if document is None:
            return self

        tally = self.merge_all(document)
        logger.info(
            "Merged %s: %d inserted, %d replaced, %d ignored",
            self.uri,
            tally[MergeAction.INSERT],
            tally[MergeAction.REPLACE],
            tally[MergeAction.IGNORE],
        )

        self.next = self._follow(document, "next", self.next)
        self.prev = self._follow(document, "previous", self.prev)
        return self

    def _follow(self, document: ParsedFeed, rel: str, current: "Feed | None") -> "Feed | None":
        link = find_link(document.links, rel, ATOM_MEDIA_TYPE)
        if link is None:
            return current

        target = urljoin(self.uri, link.href)
        if current is not None and current.uri == target:
            return current

        logger.debug("%s: %s page at %s", self.uri, rel, target)
        return Feed(target, self.client)

    def to_dict(self) -> dict:
        return {
            "uri": self.uri,
            "id": self.id,
            "title": self.title,
            "subtitle": self.subtitle,
            "updated": self.updated.isoformat() if self.updated else None,
            "state": self.state.value,
            "entry_count": len(self.entries),
            "etag": self.etag,
            "last_modified": self.last_modified,
            "prev": self.prev.uri if self.prev else None,
            "next": self.next.uri if self.next else None,
        }
