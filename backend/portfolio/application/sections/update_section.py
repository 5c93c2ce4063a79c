from datetime import datetime
from typing import Any, Dict, Optional
from sqlalchemy.exc import IntegrityError
from portfolio.extensions import db
from portfolio.models.custom_section import CustomSection
from portfolio.domain.invariants.section import assert_section, assert_section_input
from portfolio.domain.sections.identifiers import generate_slug
from portfolio.utils.audit import log_action
from portfolio.utils.optimistic_lock import enforce_optimistic_lock
from portfolio.utils.transaction import transactional
from .queries import lock_section


ALLOWED_UPDATE_FIELDS = ("title", "slug", "description", "layout", "is_public")


def update_section(
    *,
    user_id: str,
    section_id: str,
    data: Dict[str, Any],
    expected_version: Optional[int] = None,
    unmodified_since: Optional[datetime] = None,
) -> CustomSection:
    """
    Update the mutable attributes of a section (not its entries).

    Design rules:
    - Only whitelisted fields are mutable
    - A new title does not re-slug the section; send "slug" for that
    - No silent no-op updates
    - Invariants always revalidated
    """
    try:
        with transactional():
            section = lock_section(user_id=user_id, section_id=section_id)
            enforce_optimistic_lock(
                section,
                expected_version=expected_version,
                unmodified_since=unmodified_since,
            )

            assert_section_input(data)
            changes = dict(data)
            if changes.get("slug"):
                changes["slug"] = generate_slug(changes["slug"])

            changed_fields: list[str] = []
            for field in ALLOWED_UPDATE_FIELDS:
                if field in changes and getattr(section, field) != changes[field]:
                    setattr(section, field, changes[field])
                    changed_fields.append(field)

            if not changed_fields:
                # Explicitly fail instead of silently succeeding
                raise ValueError("No valid fields provided for update")

            if "layout" in changed_fields or "is_public" in changed_fields:
                section.content = {
                    **section.content,
                    "layout": section.layout,
                    "isPublic": section.is_public,
                }

            assert_section(section)

            log_action(
                action="section.update",
                entity_type="section",
                entity_id=section.id,
                actor_id=user_id,
                payload={"fields": changed_fields},
            )

    except IntegrityError as exc:
        db.session.rollback()
        raise ValueError("A section with this slug already exists") from exc

    return section
