"""atomsync: conditional-fetch Atom feed synchronisation with paginated history."""

from .client import (
    ConfigurationError,
    FeedClient,
    FeedError,
    FeedGoneError,
    UnexpectedContentTypeError,
    UnexpectedResponseError,
)
from .feed import Feed, FeedState
from .history import collect_everything
from .merge import MergeAction, merge_entry
from .models import Category, Entry, Link, Person
from .parser import FeedParseError, ParsedFeed, parse

__all__ = [
    "Feed",
    "FeedState",
    "FeedClient",
    "collect_everything",
    "merge_entry",
    "MergeAction",
    "parse",
    "ParsedFeed",
    "Entry",
    "Link",
    "Category",
    "Person",
    "FeedError",
    "ConfigurationError",
    "FeedGoneError",
    "UnexpectedResponseError",
    "UnexpectedContentTypeError",
    "FeedParseError",
]

__version__ = "0.1.0"
