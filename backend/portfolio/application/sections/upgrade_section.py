from portfolio.models.custom_section import CustomSection
from portfolio.domain.invariants.section import assert_section
from portfolio.domain.sections.registry import TemplateRegistry
from portfolio.domain.sections.schema_version import content_version, needs_upgrade, upgrade_content
from portfolio.utils.audit import log_action
from portfolio.utils.transaction import transactional
from .queries import lock_section


def upgrade_section_content(
    *,
    user_id: str,
    section_id: str,
    registry: TemplateRegistry,
) -> CustomSection:
    """
    Re-shape a section's stored template snapshot to the current version of
    its predefined template. Sections that are already current are left
    untouched (no write, no audit row).
    """
    with transactional():
        section = lock_section(user_id=user_id, section_id=section_id)

        if not needs_upgrade(section.content, registry):
            return section

        from_version = content_version(section.content)
        section.content = upgrade_content(section.content, registry)

        assert_section(section)

        log_action(
            action="section.upgrade",
            entity_type="section",
            entity_id=section.id,
            actor_id=user_id,
            payload={
                "from_version": from_version,
                "to_version": section.content["templateVersion"],
            },
        )

    return section
