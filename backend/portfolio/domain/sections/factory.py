from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from portfolio.domain.invariants.exceptions import InvariantViolation, UnknownSectionType
from .identifiers import generate_slug
from .registry import (
    CUSTOM_SECTION_TYPE,
    DEFAULT_REGISTRY,
    LAYOUTS,
    FieldConfig,
    TemplateRegistry,
)

logger = logging.getLogger(__name__)


def _require_title(title: Optional[str]) -> str:
    if title is not None and not isinstance(title, str):
        raise InvariantViolation("Section title must be a string")
    if not title or not title.strip():
        raise InvariantViolation("Section title is required")
    return title.strip()


def _field_config(definition: Any) -> Tuple[str, FieldConfig]:
    if not isinstance(definition, Mapping):
        raise InvariantViolation("Every custom field must be an object")

    name = definition.get("name")
    if not isinstance(name, str) or not name.strip():
        raise InvariantViolation("Every custom field needs a name")
    name = name.strip()

    label = definition.get("label") or name
    if not isinstance(label, str):
        raise InvariantViolation(f"Label of custom field '{name}' must be a string")

    field_type = definition.get("type", "text")
    if not isinstance(field_type, str):
        raise InvariantViolation(f"Type of custom field '{name}' must be a string")

    validation = definition.get("validation")
    if validation is not None and not isinstance(validation, Mapping):
        raise InvariantViolation(f"Validation of custom field '{name}' must be an object")

    return name, FieldConfig.from_dict({
        "label": label,
        "required": definition.get("required", False),
        "type": field_type,
        "placeholder": definition.get("placeholder"),
        "validation": validation,
    })


def create_section_from_template(
    section_type: str,
    user_id: str,
    title: str,
    description: Optional[str] = None,
    *,
    registry: TemplateRegistry = DEFAULT_REGISTRY,
) -> Dict[str, Any]:
    """
    Build (but do not persist) a section record for a predefined type.

    The record's content is a fresh snapshot of the template with no entries;
    order, layout and visibility come from the template defaults.
    """
    template = registry.get_template(section_type)
    if template is None:
        raise UnknownSectionType(section_type)

    title = _require_title(title)
    logger.debug("Building %s section '%s' for user %s", section_type, title, user_id)

    return {
        "user_id": user_id,
        "title": title,
        "slug": generate_slug(title),
        "type": template.type,
        "description": description,
        "content": template.to_content(),
        "is_public": template.is_public,
        "order": template.order,
        "layout": template.layout,
    }


def create_custom_section(
    user_id: str,
    title: str,
    fields: Sequence[Mapping[str, Any]],
    *,
    layout: str = "list",
    description: Optional[str] = None,
    is_public: bool = True,
) -> Dict[str, Any]:
    """
    Build a user-defined section from field definitions.

    Each definition is {name, label?, type, required?, placeholder?,
    validation?}; the label defaults to the name.
    """
    title = _require_title(title)

    if layout not in LAYOUTS:
        raise InvariantViolation(f"Unknown layout: {layout}")
    if not isinstance(is_public, bool):
        raise InvariantViolation("Section is_public must be a boolean")
    if not isinstance(fields, (list, tuple)):
        raise InvariantViolation("Custom section fields must be a list")

    template: Dict[str, Dict[str, Any]] = {}
    for definition in fields:
        name, config = _field_config(definition)
        if name in template:
            raise InvariantViolation(f"Duplicate custom field: {name}")
        template[name] = config.to_dict()

    if not template:
        raise InvariantViolation("A custom section needs at least one field")

    content = {
        "type": CUSTOM_SECTION_TYPE,
        "layout": layout,
        "isPublic": is_public,
        "order": 0,
        "allowImages": True,
        "allowCode": False,
        "fields": list(template),
        "template": template,
        "entries": [],
    }

    return {
        "user_id": user_id,
        "title": title,
        "slug": generate_slug(title),
        "type": CUSTOM_SECTION_TYPE,
        "description": description,
        "content": content,
        "is_public": is_public,
        "order": 0,
        "layout": layout,
    }
