from typing import List, Optional
from sqlalchemy import select
from portfolio.extensions import db
from portfolio.models.custom_section import CustomSection
from portfolio.models.user import User
from portfolio.domain.invariants.exceptions import SectionNotFound


def list_sections(*, user_id: str, public_only: bool = False) -> List[CustomSection]:
    query = CustomSection.query.filter_by(user_id=user_id)
    if public_only:
        query = query.filter_by(is_public=True)

    return query.order_by(CustomSection.order.asc(), CustomSection.created_at.asc()).all()


def get_section(*, user_id: str, section_id: str) -> CustomSection:
    section = CustomSection.query.filter_by(id=section_id, user_id=user_id).first()
    if not section:
        raise SectionNotFound(section_id)
    return section


def lock_section(*, user_id: str, section_id: str) -> CustomSection:
    """Fetch a user's section with a row-level lock for read-modify-write."""
    section = (
        db.session.execute(
            select(CustomSection)
            .where(CustomSection.id == section_id, CustomSection.user_id == user_id)
            .with_for_update()
        )
        .scalar_one_or_none()
    )

    if not section:
        raise SectionNotFound(section_id)
    return section


def find_portfolio_owner(slug: str) -> Optional[User]:
    return User.query.filter_by(slug=slug, is_active=True, is_public=True).first()
