from portfolio.domain.sections.entries import add_entry_to_section
from portfolio.domain.sections.registry import DEFAULT_REGISTRY
from portfolio.domain.sections.schema_version import content_version, needs_upgrade, upgrade_content


def legacy_star_memo():
    """A STAR memo blob written before the template dropped its title field."""
    return {
        "type": "star-memo",
        "layout": "list",
        "isPublic": False,
        "order": 7,
        "allowImages": True,
        "allowCode": False,
        "maxEntries": 10,
        "fields": ["title", "task", "action", "result", "situation"],
        "template": {
            "title": {"label": "Title", "required": True, "type": "text"},
            "task": {"label": "Task", "required": True, "type": "textarea"},
            "action": {"label": "Action", "required": True, "type": "textarea"},
            "result": {"label": "Result", "required": True, "type": "textarea"},
            "situation": {"label": "Situation", "required": True, "type": "textarea"},
        },
        "entries": [{"id": "entry_1", "title": "Old win", "situation": "s"}],
    }


def test_unversioned_blob_is_v1():
    assert content_version(legacy_star_memo()) == 1
    assert needs_upgrade(legacy_star_memo(), DEFAULT_REGISTRY)


def test_upgrade_reshapes_template_and_keeps_entries():
    legacy = legacy_star_memo()
    upgraded = upgrade_content(legacy, DEFAULT_REGISTRY)

    assert upgraded["fields"] == ["situation", "task", "action", "result"]
    assert list(upgraded["template"]) == upgraded["fields"]
    assert upgraded["templateVersion"] == 2
    assert upgraded["entries"] == legacy["entries"]
    # user choices survive
    assert upgraded["layout"] == "list"
    assert upgraded["isPublic"] is False
    assert upgraded["order"] == 7
    # input untouched
    assert legacy["fields"][0] == "title"
    assert "templateVersion" not in legacy


def test_current_blob_needs_no_upgrade():
    content = DEFAULT_REGISTRY.get_template("star-memo").to_content()
    content = add_entry_to_section(content, {"situation": "s"})

    assert not needs_upgrade(content, DEFAULT_REGISTRY)
    assert upgrade_content(content, DEFAULT_REGISTRY) == content


def test_custom_and_unknown_types_are_left_alone():
    custom = {"type": "custom", "fields": ["a"], "template": {"a": {"label": "A", "required": False, "type": "text"}}}

    assert not needs_upgrade(custom, DEFAULT_REGISTRY)
    assert upgrade_content(custom, DEFAULT_REGISTRY) == custom
    assert upgrade_content({"type": "gone"}, DEFAULT_REGISTRY) == {"type": "gone"}
