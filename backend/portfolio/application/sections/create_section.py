import logging
from typing import Any, Dict
from sqlalchemy.exc import IntegrityError
from portfolio.extensions import db
from portfolio.models.custom_section import CustomSection
from portfolio.domain.invariants.section import assert_section, assert_section_input
from portfolio.domain.sections.factory import create_custom_section, create_section_from_template
from portfolio.domain.sections.identifiers import generate_slug
from portfolio.domain.sections.registry import CUSTOM_SECTION_TYPE, TemplateRegistry
from portfolio.utils.audit import log_action
from portfolio.utils.transaction import transactional

logger = logging.getLogger(__name__)


def create_section(
    *,
    user_id: str,
    data: Dict[str, Any],
    registry: TemplateRegistry,
) -> CustomSection:
    """
    Create a custom section for a user.

    `data["type"]` is either a predefined type from the registry or
    "custom", in which case `data["fields"]` holds the field definitions.
    The new section is appended after the user's existing sections.

    Edge cases handled:
    - Unknown type / missing title / wrongly typed input (domain errors)
    - Duplicate slug per user
    - Invariant violations
    """
    assert_section_input(data)
    section_type = data.get("type")

    if section_type == CUSTOM_SECTION_TYPE:
        record = create_custom_section(
            user_id,
            data.get("title"),
            data.get("fields") or [],
            layout=data.get("layout", "list"),
            description=data.get("description"),
            is_public=data.get("is_public", True),
        )
    else:
        record = create_section_from_template(
            section_type,
            user_id,
            data.get("title"),
            data.get("description"),
            registry=registry,
        )

    max_order = db.session.query(db.func.max(CustomSection.order))\
        .filter(CustomSection.user_id == user_id)\
        .scalar() or 0

    section = CustomSection()
    section.user_id = record["user_id"]
    section.title = record["title"]
    section.slug = generate_slug(data["slug"]) if data.get("slug") else record["slug"]
    section.type = record["type"]
    section.description = record["description"]
    section.is_public = data.get("is_public", record["is_public"])
    section.layout = data.get("layout", record["layout"])
    section.order = max_order + 1
    section.content = {
        **record["content"],
        "layout": section.layout,
        "isPublic": section.is_public,
    }

    try:
        with transactional():
            db.session.add(section)
            db.session.flush()  # ensures section.id is available

            assert_section(section)

            log_action(
                action="section.create",
                entity_type="section",
                entity_id=section.id,
                actor_id=user_id,
                payload={
                    "type": section.type,
                    "slug": section.slug,
                    "order": section.order,
                },
            )

    except IntegrityError as exc:
        # unique (user_id, slug)
        db.session.rollback()
        raise ValueError("A section with this slug already exists") from exc

    logger.info("Created %s section %s for user %s", section.type, section.id, user_id)
    return section
