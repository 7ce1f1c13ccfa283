"""Newest-wins merging of entries into an ordered collection."""

import enum
import logging
from collections import Counter
from collections.abc import Iterable

from .models import Entry

logger = logging.getLogger(__name__)


class MergeAction(enum.Enum):
    INSERT = "insert"
    REPLACE = "replace"
    IGNORE = "ignore"


def _supersedes(incoming: Entry, existing: Entry) -> bool:
    # An entry with no known modification time can always be replaced.
    if existing.updated is None:
        return True
    if incoming.updated is None:
        return False
    return incoming.updated >= existing.updated


def merge_entry(entries: list[Entry], incoming: Entry) -> MergeAction:
    """Fold ``incoming`` into ``entries`` in place.

    Appends entries with an unseen id. An entry sharing an id with an
    existing one replaces it in the same position when it is at least as
    new; otherwise it is dropped.
    """
    for index, existing in enumerate(entries):
        if existing.id != incoming.id:
            continue
        if _supersedes(incoming, existing):
            entries[index] = incoming
            action = MergeAction.REPLACE
        else:
            action = MergeAction.IGNORE
        logger.debug("Entry %s: %s", incoming.id, action.value)
        return action

    entries.append(incoming)
    logger.debug("Entry %s: %s", incoming.id, MergeAction.INSERT.value)
    return MergeAction.INSERT


def merge_entries(entries: list[Entry], incoming: Iterable[Entry]) -> Counter:
    """Merge every entry of ``incoming`` in order; returns a tally of actions."""
    tally: Counter = Counter()
    for entry in incoming:
        tally[merge_entry(entries, entry)] += 1
    return tally
