# portfolio/domain/sections/schema_version.py
"""
Upgrading stored content blobs when a predefined template changes.

A blob snapshots its template when the section is created. When the
template's field list changes later, `upgrade_content` re-shapes the
snapshot to the current template version. Entries are kept as they are:
keys that are no longer template fields stay on the entry and are simply
not rendered.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping

from .registry import TemplateRegistry

logger = logging.getLogger(__name__)

# Blobs written before templates were versioned carry no marker.
UNVERSIONED = 1

TEMPLATE_KEYS = ("fields", "template", "allowImages", "allowCode", "maxEntries")


def content_version(content: Mapping[str, Any]) -> int:
    return int(content.get("templateVersion") or UNVERSIONED)


def needs_upgrade(content: Mapping[str, Any], registry: TemplateRegistry) -> bool:
    template = registry.get_template(content.get("type"))
    if template is None:
        return False
    return content_version(content) < template.version


def upgrade_content(content: Mapping[str, Any], registry: TemplateRegistry) -> Dict[str, Any]:
    """
    Return `content` re-shaped to its type's current template.

    Custom sections, unknown types and blobs already at the current version
    come back as an unchanged copy. Layout, visibility and order are user
    choices and are never touched.
    """
    upgraded = dict(content)
    template = registry.get_template(content.get("type"))
    if template is None or not needs_upgrade(content, registry):
        return upgraded

    current = template.to_content()
    for key in TEMPLATE_KEYS:
        if key in current:
            upgraded[key] = current[key]
        else:
            upgraded.pop(key, None)

    upgraded["entries"] = list(content.get("entries") or [])
    upgraded["templateVersion"] = template.version

    logger.info(
        "Upgraded %s content from v%d to v%d",
        template.type, content_version(content), template.version,
    )
    return upgraded
