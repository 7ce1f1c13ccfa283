"""Shared fixtures: Atom document builders and a scripted HTTP server."""

from collections.abc import Callable

import httpx
import pytest

from atomsync.client import FeedClient
from atomsync.config import Config

ATOM = "application/atom+xml"


def atom_entry(entry_id: str, updated: str | None = None, title: str | None = None) -> str:
    parts = [f"<id>{entry_id}</id>", f"<title>{title or entry_id}</title>"]
    if updated:
        parts.append(f"<updated>{updated}</updated>")
    return "<entry>" + "".join(parts) + "</entry>"


def atom_feed(
    updated: str | None = "2026-02-13T10:00:00Z",
    entries: list[tuple[str, str | None]] = (),
    links: list[tuple[str, str, str | None]] = (),
    title: str = "Test Feed",
    feed_id: str = "urn:uuid:feed",
) -> bytes:
    """Build an Atom document; links are (rel, href, type) triples."""
    parts = [f"<id>{feed_id}</id>", f"<title>{title}</title>"]
    if updated:
        parts.append(f"<updated>{updated}</updated>")
    for rel, href, media_type in links:
        type_attr = f' type="{media_type}"' if media_type else ""
        parts.append(f'<link rel="{rel}" href="{href}"{type_attr}/>')
    parts.extend(atom_entry(entry_id, entry_updated) for entry_id, entry_updated in entries)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<feed xmlns="http://www.w3.org/2005/Atom">' + "".join(parts) + "</feed>"
    ).encode()


def atom_response(body: bytes, **headers: str) -> httpx.Response:
    return httpx.Response(200, headers={"Content-Type": ATOM, **headers}, content=body)


class FakeServer:
    """Serves scripted responses per URL and records every request.

    A route is either a single response, a list consumed one per request
    (the last one repeats), or a callable taking the request.
    """

    def __init__(self):
        self.routes: dict[str, httpx.Response | list | Callable] = {}
        self.requests: list[httpx.Request] = []

    def __setitem__(self, url: str, route) -> None:
        self.routes[url] = route

    def hits(self, url: str) -> int:
        return sum(1 for r in self.requests if str(r.url) == url)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(str(request.url))
        if route is None:
            return httpx.Response(404)
        if callable(route):
            return route(request)
        if isinstance(route, list):
            route = route.pop(0) if len(route) > 1 else route[0]
        # fresh copy so one scripted response can be served repeatedly
        return httpx.Response(route.status_code, headers=route.headers, content=route.content)


@pytest.fixture
def config():
    return Config(ATOMSYNC_USER_AGENT="atomsync-tests/1.0", ATOMSYNC_HTTP_TIMEOUT=5)


@pytest.fixture
def server():
    return FakeServer()


@pytest.fixture
def client(config, server):
    feed_client = FeedClient(config, transport=httpx.MockTransport(server.handler))
    yield feed_client
    feed_client.close()
