"""Blocking HTTP transport for fetching feed documents."""

import logging

import httpx

from .config import Config

logger = logging.getLogger(__name__)


class FeedClient:
    """Synchronous HTTP client shared by a feed and the pages it links to.

    Designed for single-owner use: one thread drives every request made
    through a given client.
    """

    def __init__(self, config: Config | None = None, transport: httpx.BaseTransport | None = None):
        self._config = config or Config()
        self._client = httpx.Client(
            timeout=self._config.http_timeout,
            follow_redirects=True,
            headers={"User-Agent": self._config.user_agent},
            transport=transport,
        )

    def get(self, uri: str, headers: dict[str, str] | None = None) -> httpx.Response:
        """Perform a GET request and return the response unchecked.

        Transport failures (``httpx.HTTPError``) propagate to the caller.
        """
        logger.debug("GET %s headers=%s", uri, headers)
        response = self._client.get(uri, headers=headers or {})
        logger.debug("GET %s -> %d", uri, response.status_code)
        return response

    def close(self) -> None:
        """Close the HTTP client."""
        if not self._client.is_closed:
            self._client.close()

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    def __enter__(self) -> "FeedClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class FeedError(Exception):
    """Base class for failures while synchronising a feed."""

    def __init__(self, message: str, uri: str | None = None):
        super().__init__(message)
        self.uri = uri


class ConfigurationError(FeedError):
    """Raised when an operation needs a feed URI that was never given."""


class FeedGoneError(FeedError):
    """Raised when the server reports the feed as permanently removed (410)."""

    def __init__(self, uri: str):
        super().__init__(f"410 Gone ({uri})", uri)


class UnexpectedResponseError(FeedError):
    """Raised for any status code other than 200, 304 or 410."""

    def __init__(self, uri: str, status_code: int):
        super().__init__(f"Unexpected HTTP response code: {status_code} ({uri})", uri)
        self.status_code = status_code


class UnexpectedContentTypeError(FeedError):
    """Raised when a successful response does not carry an Atom document."""

    def __init__(self, message: str, uri: str | None = None, content_type: str | None = None):
        super().__init__(message, uri)
        self.content_type = content_type
