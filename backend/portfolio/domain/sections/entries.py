# portfolio/domain/sections/entries.py
"""
Entry helpers for a section's JSON content blob.

Content blobs are treated as immutable values: every helper returns a new
blob and leaves its input (including the entries list and the entry dicts)
untouched. Entries that are not changed are shared between the old and the
new blob, so callers must not mutate entries in place either.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, TypedDict

from portfolio.domain.invariants.exceptions import EntryNotFound, MissingEntries
from .identifiers import generate_entry_id, utc_timestamp

logger = logging.getLogger(__name__)

Content = Mapping[str, Any]

# Keys owned by the helpers; a patch cannot overwrite them.
PROTECTED_ENTRY_KEYS = frozenset({"id", "createdAt", "updatedAt"})


class BaseEntry(TypedDict, total=False):
    """Keys every stored entry carries; the rest depend on the template."""
    id: str
    createdAt: str
    updatedAt: str


def _entries(content: Content) -> Optional[List[Dict[str, Any]]]:
    entries = content.get("entries")
    if entries is None:
        return None
    return list(entries)


def add_entry_to_section(content: Content, new_entry: Mapping[str, Any]) -> Dict[str, Any]:
    entries = _entries(content) or []
    now = utc_timestamp()

    entry: Dict[str, Any] = dict(new_entry)
    entry["id"] = entry.get("id") or generate_entry_id()
    entry["createdAt"] = entry.get("createdAt") or now
    entry["updatedAt"] = now

    entries.append(entry)
    logger.debug("Added entry %s (%d entries)", entry["id"], len(entries))

    return {**content, "entries": entries}


def update_entry_in_section(
    content: Content,
    entry_id: str,
    fields: Mapping[str, Any],
) -> Dict[str, Any]:
    """
    Shallow-merge `fields` onto the entry with `entry_id`.

    Keys absent from the patch are preserved and the entry keeps its
    position. `id` and `createdAt` cannot be changed through a patch.

    Raises:
    - MissingEntries if the blob has no entries list
    - EntryNotFound if no entry has that id
    """
    entries = _entries(content)
    if entries is None:
        raise MissingEntries()

    index = next(
        (i for i, entry in enumerate(entries) if entry.get("id") == entry_id),
        None,
    )
    if index is None:
        raise EntryNotFound(entry_id)

    patch = {k: v for k, v in fields.items() if k not in PROTECTED_ENTRY_KEYS}
    entries[index] = {
        **entries[index],
        **patch,
        "updatedAt": utc_timestamp(),
    }
    logger.debug("Updated entry %s fields=%s", entry_id, sorted(patch))

    return {**content, "entries": entries}


def remove_entry_from_section(content: Content, entry_id: str) -> Dict[str, Any]:
    """
    Drop the entry with `entry_id`.

    Removing an id that is not present returns an equal blob instead of
    raising, so repeated deletes are harmless. Only a blob without any
    entries list raises MissingEntries.
    """
    entries = _entries(content)
    if entries is None:
        raise MissingEntries()

    remaining = [entry for entry in entries if entry.get("id") != entry_id]
    if len(remaining) == len(entries):
        logger.debug("Entry %s not present, nothing removed", entry_id)

    return {**content, "entries": remaining}


def get_entry_by_id(content: Content, entry_id: str) -> Optional[BaseEntry]:
    for entry in content.get("entries") or ():
        if entry.get("id") == entry_id:
            return entry
    return None
