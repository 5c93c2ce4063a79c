# portfolio/domain/sections/registry.py
"""
Section templates.

A template describes what a section of a given type looks like: its layout,
how many entries it accepts and the ordered field list with one FieldConfig
per field. Only the type tag is persisted on a section; the descriptor is
resolved again from a TemplateRegistry whenever it is needed.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from portfolio.domain.invariants.exceptions import InvariantViolation

LAYOUTS = ("grid", "list", "timeline", "cards")
FIELD_TYPES = ("text", "textarea", "date", "number", "url", "tags", "image-gallery")
ARRAY_FIELD_TYPES = frozenset({"tags", "image-gallery"})
VALIDATION_RULES = ("minLength", "maxLength", "pattern")

CUSTOM_SECTION_TYPE = "custom"


@dataclass(frozen=True)
class FieldConfig:
    label: str
    required: bool
    type: str
    placeholder: Optional[str] = None
    validation: Optional[Mapping[str, Any]] = None

    def __post_init__(self):
        if self.type not in FIELD_TYPES:
            raise InvariantViolation(f"Unknown field type: {self.type}")

        if self.validation is not None:
            unknown = set(self.validation) - set(VALIDATION_RULES)
            if unknown:
                raise InvariantViolation(
                    f"Unknown validation rules: {sorted(unknown)}"
                )
            object.__setattr__(self, "validation", MappingProxyType(dict(self.validation)))

    @property
    def is_array(self) -> bool:
        return self.type in ARRAY_FIELD_TYPES

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "label": self.label,
            "required": self.required,
            "type": self.type,
        }
        if self.placeholder is not None:
            data["placeholder"] = self.placeholder
        if self.validation is not None:
            data["validation"] = dict(self.validation)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FieldConfig":
        return cls(
            label=data.get("label", ""),
            required=bool(data.get("required", False)),
            type=data.get("type", "text"),
            placeholder=data.get("placeholder"),
            validation=data.get("validation"),
        )


@dataclass(frozen=True)
class SectionTemplate:
    type: str
    layout: str
    fields: Tuple[str, ...]
    template: Mapping[str, FieldConfig]
    is_public: bool = True
    order: int = 0
    allow_images: bool = True
    allow_code: bool = False
    max_entries: Optional[int] = None
    version: int = 1

    def __post_init__(self):
        if self.layout not in LAYOUTS:
            raise InvariantViolation(f"Unknown layout: {self.layout}")

        if tuple(self.fields) != tuple(self.template):
            raise InvariantViolation(
                f"Template '{self.type}' fields {list(self.fields)} do not match "
                f"its field configs {list(self.template)}"
            )

        object.__setattr__(self, "fields", tuple(self.fields))
        object.__setattr__(self, "template", MappingProxyType(dict(self.template)))

    def to_content(self) -> Dict[str, Any]:
        """
        Build a fresh content blob for a new section of this type.

        The returned dict shares nothing with the template, so callers may
        store or mutate it freely.
        """
        content: Dict[str, Any] = {
            "type": self.type,
            "layout": self.layout,
            "isPublic": self.is_public,
            "order": self.order,
            "allowImages": self.allow_images,
            "allowCode": self.allow_code,
        }
        if self.max_entries is not None:
            content["maxEntries"] = self.max_entries

        content["fields"] = list(self.fields)
        content["template"] = {
            name: config.to_dict() for name, config in self.template.items()
        }
        content["entries"] = []
        content["templateVersion"] = self.version
        return content

    def to_dict(self) -> Dict[str, Any]:
        data = self.to_content()
        del data["entries"]
        return data


class TemplateRegistry:
    """
    Read-only lookup of section templates by type tag.

    Built once and handed to whatever needs it (see create_app), so tests can
    swap in their own set of templates.
    """

    def __init__(self, templates: Iterable[SectionTemplate]):
        table: Dict[str, SectionTemplate] = {}
        for tpl in templates:
            if tpl.type in table:
                raise InvariantViolation(f"Duplicate section type: {tpl.type}")
            table[tpl.type] = tpl
        self._templates = MappingProxyType(table)

    def get_template(self, section_type: Optional[str]) -> Optional[SectionTemplate]:
        if not isinstance(section_type, str):
            return None
        return self._templates.get(section_type)

    def list_types(self) -> List[str]:
        return list(self._templates)

    def __contains__(self, section_type: object) -> bool:
        return section_type in self._templates

    def __len__(self) -> int:
        return len(self._templates)


def _fields(*configs: Tuple[str, FieldConfig]) -> Dict[str, FieldConfig]:
    return dict(configs)


STAR_MEMO_TEMPLATE = SectionTemplate(
    type="star-memo",
    layout="timeline",
    order=1,
    allow_images=True,
    allow_code=False,
    max_entries=10,
    # v1 had a leading "title" field and TARS ordering
    version=2,
    fields=("situation", "task", "action", "result"),
    template=_fields(
        ("situation", FieldConfig("Situation", True, "textarea")),
        ("task", FieldConfig("Task", True, "textarea")),
        ("action", FieldConfig("Action", True, "textarea")),
        ("result", FieldConfig("Result", True, "textarea")),
    ),
)

PROJECT_SHOWCASE_TEMPLATE = SectionTemplate(
    type="project-showcase",
    layout="grid",
    order=2,
    allow_images=True,
    allow_code=True,
    max_entries=6,
    fields=("title", "description", "technologies", "outcome", "images"),
    template=_fields(
        ("title", FieldConfig("Project Title", True, "text")),
        ("description", FieldConfig("Description", True, "textarea")),
        ("technologies", FieldConfig("Technologies Used", False, "tags")),
        ("outcome", FieldConfig("Outcome/Results", True, "textarea")),
        ("images", FieldConfig("Project Images", False, "image-gallery")),
    ),
)

COMMUNITY_ENGAGEMENT_TEMPLATE = SectionTemplate(
    type="community-engagement",
    layout="list",
    order=3,
    fields=("event", "role", "date", "description", "impact"),
    template=_fields(
        ("event", FieldConfig("Event/Organization", True, "text")),
        ("role", FieldConfig("Your Role", True, "text")),
        ("date", FieldConfig("Date", True, "date")),
        ("description", FieldConfig("Description", True, "textarea")),
        ("impact", FieldConfig("Impact/Outcome", False, "textarea")),
    ),
)

SPEAKING_ENGAGEMENTS_TEMPLATE = SectionTemplate(
    type="speaking-engagements",
    layout="timeline",
    order=4,
    fields=("event", "title", "date", "audience", "description", "slides"),
    template=_fields(
        ("event", FieldConfig("Event/Conference", True, "text")),
        ("title", FieldConfig("Presentation Title", True, "text")),
        ("date", FieldConfig("Date", True, "date")),
        ("audience", FieldConfig("Audience Size", False, "text")),
        ("description", FieldConfig("Description", True, "textarea")),
        ("slides", FieldConfig("Slides/Recording URL", False, "url")),
    ),
)

CERTIFICATIONS_TEMPLATE = SectionTemplate(
    type="certifications",
    layout="cards",
    order=5,
    fields=("name", "issuer", "date", "expiry", "credentialId", "description"),
    template=_fields(
        ("name", FieldConfig("Certification Name", True, "text")),
        ("issuer", FieldConfig("Issuing Organization", True, "text")),
        ("date", FieldConfig("Date Earned", True, "date")),
        ("expiry", FieldConfig("Expiry Date", False, "date")),
        ("credentialId", FieldConfig("Credential ID", False, "text")),
        ("description", FieldConfig("Description", False, "textarea")),
    ),
)

PREDEFINED_TEMPLATES: Tuple[SectionTemplate, ...] = (
    STAR_MEMO_TEMPLATE,
    PROJECT_SHOWCASE_TEMPLATE,
    COMMUNITY_ENGAGEMENT_TEMPLATE,
    SPEAKING_ENGAGEMENTS_TEMPLATE,
    CERTIFICATIONS_TEMPLATE,
)

DEFAULT_REGISTRY = TemplateRegistry(PREDEFINED_TEMPLATES)
