# portfolio/application/sections/manage_entries.py
"""
Entry use-cases: read the section row, compute the new content blob with the
pure helpers from portfolio.domain.sections.entries, validate and write it
back.

The write is a read-modify-write on the whole blob. Two guards keep
concurrent editors from silently overwriting each other:
- the row is read with a row-level lock inside the transaction
- CustomSection.version makes the UPDATE conditional on the version read,
  and callers may pin the version they last saw (If-Match)
"""
import logging
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Tuple
from portfolio.models.custom_section import CustomSection
from portfolio.domain.invariants.exceptions import ContentValidationError
from portfolio.domain.invariants.section import assert_entry_capacity, assert_section_content
from portfolio.domain.sections.entries import (
    add_entry_to_section,
    get_entry_by_id,
    remove_entry_from_section,
    update_entry_in_section,
)
from portfolio.domain.sections.validation import validate_section_content
from portfolio.utils.audit import log_action
from portfolio.utils.optimistic_lock import enforce_optimistic_lock
from portfolio.utils.transaction import transactional
from .queries import get_section, lock_section

logger = logging.getLogger(__name__)


def _validate_entry(content: Mapping[str, Any], entry: Optional[Mapping[str, Any]]) -> None:
    result = validate_section_content(entry, content)
    if not result.is_valid:
        raise ContentValidationError(result.errors)


def add_entry(
    *,
    user_id: str,
    section_id: str,
    entry: Dict[str, Any],
    expected_version: Optional[int] = None,
    unmodified_since: Optional[datetime] = None,
) -> Tuple[CustomSection, Dict[str, Any]]:
    """
    Append an entry to a section.

    Returns the section and the stored entry (with id and timestamps).
    """
    with transactional():
        section = lock_section(user_id=user_id, section_id=section_id)
        enforce_optimistic_lock(
            section,
            expected_version=expected_version,
            unmodified_since=unmodified_since,
        )

        assert_section_content(section.content)
        content = add_entry_to_section(section.content, entry)
        stored = content["entries"][-1]

        _validate_entry(content, stored)
        assert_entry_capacity(content)

        section.content = content

        log_action(
            action="entry.create",
            entity_type="section",
            entity_id=section.id,
            actor_id=user_id,
            payload={"entry_id": stored["id"]},
        )

    logger.info("Added entry %s to section %s", stored["id"], section.id)
    return section, stored


def update_entry(
    *,
    user_id: str,
    section_id: str,
    entry_id: str,
    fields: Dict[str, Any],
    expected_version: Optional[int] = None,
    unmodified_since: Optional[datetime] = None,
) -> Tuple[CustomSection, Dict[str, Any]]:
    """
    Patch an entry. Keys missing from `fields` are preserved.

    Raises EntryNotFound for an unknown entry id.
    """
    with transactional():
        section = lock_section(user_id=user_id, section_id=section_id)
        enforce_optimistic_lock(
            section,
            expected_version=expected_version,
            unmodified_since=unmodified_since,
        )

        content = update_entry_in_section(section.content, entry_id, fields)
        stored = get_entry_by_id(content, entry_id)

        _validate_entry(content, stored)

        section.content = content

        log_action(
            action="entry.update",
            entity_type="section",
            entity_id=section.id,
            actor_id=user_id,
            payload={"entry_id": entry_id, "fields": sorted(fields)},
        )

    return section, stored


def remove_entry(
    *,
    user_id: str,
    section_id: str,
    entry_id: str,
    expected_version: Optional[int] = None,
    unmodified_since: Optional[datetime] = None,
) -> Tuple[CustomSection, bool]:
    """
    Remove an entry.

    Returns (section, removed). Removing an id that is not present is not
    an error: nothing is written and `removed` is False.
    """
    with transactional():
        section = lock_section(user_id=user_id, section_id=section_id)
        enforce_optimistic_lock(
            section,
            expected_version=expected_version,
            unmodified_since=unmodified_since,
        )

        content = remove_entry_from_section(section.content, entry_id)
        removed = len(content["entries"]) != len(section.entries)

        if removed:
            section.content = content

            log_action(
                action="entry.delete",
                entity_type="section",
                entity_id=section.id,
                actor_id=user_id,
                payload={"entry_id": entry_id},
            )

    return section, removed


def get_entry(*, user_id: str, section_id: str, entry_id: str) -> Optional[Dict[str, Any]]:
    section = get_section(user_id=user_id, section_id=section_id)
    return get_entry_by_id(section.content, entry_id)
