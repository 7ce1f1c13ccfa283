"""Data models for Atom feed entries and their metadata."""

from dataclasses import dataclass, field
from datetime import datetime

ATOM_MEDIA_TYPE = "application/atom+xml"


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


@dataclass
class Link:
    """An atom:link element."""

    href: str
    rel: str = "alternate"
    type: str | None = None
    title: str | None = None

    def to_dict(self) -> dict:
        return {
            "href": self.href,
            "rel": self.rel,
            "type": self.type,
            "title": self.title,
        }


@dataclass
class Category:
    """An atom:category element."""

    term: str
    scheme: str | None = None
    label: str | None = None

    def to_dict(self) -> dict:
        return {"term": self.term, "scheme": self.scheme, "label": self.label}


@dataclass
class Person:
    """An atom:author or atom:contributor."""

    name: str
    email: str | None = None
    uri: str | None = None

    def to_dict(self) -> dict:
        return {"name": self.name, "email": self.email, "uri": self.uri}


def find_link(links: list[Link], rel: str, media_type: str | None = None) -> Link | None:
    """Return the first link with the given relation (and media type prefix)."""
    for link in links:
        if link.rel != rel:
            continue
        if media_type is not None and not (link.type or "").lower().startswith(media_type):
            continue
        return link
    return None


@dataclass
class Entry:
    """A single feed entry.

    Only ``id`` and ``updated`` take part in merging. An entry is replaced
    as a whole when a newer copy arrives, never patched field by field.
    """

    id: str
    updated: datetime | None = None
    title: str = ""
    summary: str | None = None
    content: str | None = None
    published: datetime | None = None
    links: list[Link] = field(default_factory=list)
    categories: list[Category] = field(default_factory=list)
    authors: list[Person] = field(default_factory=list)
    contributors: list[Person] = field(default_factory=list)
    rights: str | None = None

    def link_for(self, rel: str, media_type: str | None = None) -> Link | None:
        return find_link(self.links, rel, media_type)

    @property
    def edit_url(self) -> str | None:
        """The href of this entry's ``rel="edit"`` link, if it has one."""
        link = self.link_for("edit")
        return link.href if link else None

    def to_dict(self) -> dict:
        alternate = self.link_for("alternate")
        return {
            "id": self.id,
            "title": self.title,
            "updated": _isoformat(self.updated),
            "published": _isoformat(self.published),
            "summary": self.summary,
            "url": alternate.href if alternate else None,
            "authors": [a.name for a in self.authors],
            "categories": [c.term for c in self.categories],
        }
