def normalize_section(section, admin=False):
    content = section.content or {}

    data = {
        "id": section.id,
        "title": section.title,
        "slug": section.slug,
        "type": section.type,
        "description": section.description,
        "layout": section.layout,
        "order": section.order,
        "fields": content.get("fields", []),
        "template": content.get("template", {}),
        "entries": list(content.get("entries") or []),
    }

    if admin:
        data["is_public"] = section.is_public
        data["version"] = section.version
        data["template_version"] = content.get("templateVersion", 1)
        data["created_at"] = section.created_at.isoformat() if section.created_at else None
        data["updated_at"] = section.updated_at.isoformat() if section.updated_at else None

    return data
