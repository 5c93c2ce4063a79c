import pytest

from portfolio.domain.invariants.exceptions import InvariantViolation
from portfolio.domain.sections.registry import (
    DEFAULT_REGISTRY,
    FieldConfig,
    SectionTemplate,
    TemplateRegistry,
)

PREDEFINED = [
    "star-memo",
    "project-showcase",
    "community-engagement",
    "speaking-engagements",
    "certifications",
]


def test_list_types_in_registration_order():
    assert DEFAULT_REGISTRY.list_types() == PREDEFINED


@pytest.mark.parametrize("section_type", PREDEFINED)
def test_fields_match_template_keys(section_type):
    template = DEFAULT_REGISTRY.get_template(section_type)
    assert list(template.fields) == list(template.template)

    content = template.to_content()
    assert content["fields"] == list(content["template"])
    assert content["entries"] == []


def test_unknown_type_returns_none():
    assert DEFAULT_REGISTRY.get_template("nonexistent-type") is None
    assert DEFAULT_REGISTRY.get_template(None) is None
    assert "nonexistent-type" not in DEFAULT_REGISTRY


def test_star_memo_is_star_ordered_and_all_required():
    template = DEFAULT_REGISTRY.get_template("star-memo")
    assert template.fields == ("situation", "task", "action", "result")
    assert all(config.required for config in template.template.values())
    assert template.layout == "timeline"
    assert template.max_entries == 10


def test_to_content_returns_independent_copies():
    template = DEFAULT_REGISTRY.get_template("certifications")
    first = template.to_content()
    first["fields"].append("hacked")
    first["template"]["name"]["required"] = False

    second = template.to_content()
    assert "hacked" not in second["fields"]
    assert second["template"]["name"]["required"] is True
    assert template.template["name"].required is True


def test_templates_are_read_only():
    template = DEFAULT_REGISTRY.get_template("star-memo")
    with pytest.raises(TypeError):
        template.template["extra"] = FieldConfig("Extra", False, "text")
    with pytest.raises(AttributeError):
        template.layout = "grid"


def test_template_rejects_field_mismatch():
    with pytest.raises(InvariantViolation):
        SectionTemplate(
            type="broken",
            layout="list",
            fields=("a", "b"),
            template={"a": FieldConfig("A", True, "text")},
        )


def test_registry_rejects_duplicate_types():
    template = DEFAULT_REGISTRY.get_template("star-memo")
    with pytest.raises(InvariantViolation):
        TemplateRegistry([template, template])


def test_field_config_rejects_unknown_type():
    with pytest.raises(InvariantViolation):
        FieldConfig("Color", False, "color")
