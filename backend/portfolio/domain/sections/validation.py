from __future__ import annotations

from typing import Any, List, Mapping, NamedTuple, Tuple, Union

from .registry import ARRAY_FIELD_TYPES, SectionTemplate


class ValidationResult(NamedTuple):
    is_valid: bool
    errors: List[str]


def _required_fields(template: Union[SectionTemplate, Mapping[str, Any]]) -> List[Tuple[str, bool]]:
    """
    (name, is_array) for every required field, in field order.

    Accepts a SectionTemplate or a stored content blob, whose `fields` and
    `template` keys are the template snapshot taken at creation time.
    """
    if isinstance(template, SectionTemplate):
        return [
            (name, config.is_array)
            for name, config in template.template.items()
            if config.required
        ]

    configs = template.get("template") or {}
    order = template.get("fields") or list(configs)
    return [
        (name, configs[name].get("type") in ARRAY_FIELD_TYPES)
        for name in order
        if name in configs and configs[name].get("required")
    ]


def _is_missing(value: Any, is_array: bool) -> bool:
    if is_array and isinstance(value, (list, tuple)):
        # [""] is what an untouched tag input posts
        return not any(value)
    return not value


def validate_section_content(
    content: Any,
    template: Union[SectionTemplate, Mapping[str, Any]],
) -> ValidationResult:
    """
    Presence check of the template's required fields on `content`.

    Field types are not checked: a date field holding "soon" is valid.
    """
    if not isinstance(content, Mapping):
        return ValidationResult(False, ["Content must be an object"])

    errors = [
        f"Required field '{name}' is missing"
        for name, is_array in _required_fields(template)
        if _is_missing(content.get(name), is_array)
    ]

    return ValidationResult(not errors, errors)
