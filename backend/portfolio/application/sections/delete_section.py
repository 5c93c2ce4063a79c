from portfolio.extensions import db
from portfolio.models.custom_section import CustomSection
from portfolio.utils.audit import log_action
from portfolio.utils.order import compact_order
from portfolio.utils.transaction import transactional
from .queries import lock_section


def delete_section(
    *,
    user_id: str,
    section_id: str,
) -> None:
    """
    Hard-delete a section together with its entries, then re-compact the
    order of the user's remaining sections.
    """
    with transactional():
        section = lock_section(user_id=user_id, section_id=section_id)
        entry_count = len(section.entries)

        db.session.delete(section)
        db.session.flush()

        compact_order(
            CustomSection.query.filter_by(user_id=user_id),
            CustomSection,
        )

        log_action(
            action="section.delete",
            entity_type="section",
            entity_id=section_id,
            actor_id=user_id,
            payload={"type": section.type, "entries": entry_count},
        )
