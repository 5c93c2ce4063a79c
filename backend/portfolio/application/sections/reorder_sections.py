from typing import Any, Dict, List
from portfolio.models.custom_section import CustomSection
from portfolio.domain.invariants.section import assert_section_order
from portfolio.utils.audit import log_action
from portfolio.utils.order import compact_order
from portfolio.utils.transaction import transactional


def reorder_sections(
    *,
    user_id: str,
    items: List[Dict[str, Any]],
) -> List[CustomSection]:
    """
    Apply [{id, order}, ...] to a user's sections and normalize to 1..N.

    Ids that are not the user's sections are ignored.
    """
    if not isinstance(items, list):
        raise ValueError("Invalid payload")

    with transactional():
        query = CustomSection.query.filter_by(user_id=user_id)
        section_map = {s.id: s for s in query.all()}

        applied = 0
        for item in items:
            if not isinstance(item, dict) or "id" not in item or "order" not in item:
                raise ValueError("Each item needs an id and an order")
            order = item["order"]
            if not isinstance(item["id"], str) or isinstance(order, bool) or not isinstance(order, int):
                raise ValueError("Each item needs a string id and an integer order")
            section = section_map.get(item["id"])
            if section is not None:
                section.order = order
                applied += 1

        sections = compact_order(query, CustomSection)
        assert_section_order(sections)

        log_action(
            action="section.reorder",
            entity_type="user",
            entity_id=user_id,
            actor_id=user_id,
            payload={"count": applied},
        )

    return sections
