from portfolio.domain.sections.registry import LAYOUTS
from .exceptions import InvariantViolation

def assert_section_content(content):
    if not isinstance(content, dict):
        raise InvariantViolation("Section content must be an object.")

    fields = content.get("fields") or []
    template = content.get("template") or {}

    missing = [name for name in fields if name not in template]
    if missing:
        raise InvariantViolation(
            f"Section fields without a template config: {missing}"
        )

    entries = content.get("entries")
    if entries is not None and not isinstance(entries, list):
        raise InvariantViolation("Section entries must be a list.")

def assert_entry_capacity(content):
    limit = content.get("maxEntries")
    entries = content.get("entries") or []

    if limit is not None and len(entries) > limit:
        raise InvariantViolation(
            f"Section accepts at most {limit} entries."
        )

def assert_section(section):
    if not section.title or not section.title.strip():
        raise InvariantViolation("Section must have a title.")

    if not section.slug:
        raise InvariantViolation("Section must have a slug.")

    if section.layout not in LAYOUTS:
        raise InvariantViolation(f"Unknown layout: {section.layout}")

    assert_section_content(section.content)
    assert_entry_capacity(section.content)

def assert_section_order(sections):
    orders = [section.order for section in sections]
    if not orders:
        return

    expected = list(range(1, len(orders) + 1))
    if sorted(orders) != expected:
        raise InvariantViolation(
            f"Section orders are not consecutive starting from 1: {orders}"
        )

SECTION_STRING_INPUTS = ("title", "slug", "description", "layout")

def assert_section_input(data):
    for key in SECTION_STRING_INPUTS:
        value = data.get(key)
        if value is not None and not isinstance(value, str):
            raise InvariantViolation(f"Section {key} must be a string.")

    if "is_public" in data and not isinstance(data["is_public"], bool):
        raise InvariantViolation("Section is_public must be a boolean.")
