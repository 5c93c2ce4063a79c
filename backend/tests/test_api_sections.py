import pytest

from portfolio.extensions import db
from portfolio.models.audit_log import AuditLog
from portfolio.models.custom_section import CustomSection


def test_section_types_are_public(client):
    resp = client.get("/api/v1/section-types")

    assert resp.status_code == 200
    types = resp.get_json()
    assert [t["type"] for t in types] == [
        "star-memo",
        "project-showcase",
        "community-engagement",
        "speaking-engagements",
        "certifications",
    ]
    assert "entries" not in types[0]


def test_sections_require_token(client):
    assert client.get("/api/v1/sections").status_code == 401


def test_create_section_from_template(client, auth_headers, user):
    resp = client.post(
        "/api/v1/sections",
        json={"type": "certifications", "title": "My Certs! 2024"},
        headers=auth_headers,
    )

    assert resp.status_code == 201
    assert resp.headers["ETag"] == '"1"'
    body = resp.get_json()
    assert body["slug"] == "my-certs-2024"
    assert body["layout"] == "cards"
    assert body["order"] == 1
    assert body["version"] == 1
    assert body["entries"] == []

    section = db.session.get(CustomSection, body["id"])
    assert section.user_id == user.id
    assert section.content["templateVersion"] == 1

    log = AuditLog.query.filter_by(entity_id=body["id"]).one()
    assert log.action == "section.create"
    assert log.actor_id == user.id


def test_create_unknown_type(client, auth_headers):
    resp = client.post(
        "/api/v1/sections",
        json={"type": "nonexistent-type", "title": "Nope"},
        headers=auth_headers,
    )

    assert resp.status_code == 400
    assert resp.get_json() == {
        "error": "UnknownSectionType",
        "message": "Unknown section type: nonexistent-type",
    }


def test_create_custom_section(client, auth_headers):
    resp = client.post(
        "/api/v1/sections",
        json={
            "type": "custom",
            "title": "Reading List",
            "layout": "grid",
            "fields": [
                {"name": "book", "type": "text", "required": True},
                {"name": "tags", "type": "tags"},
            ],
        },
        headers=auth_headers,
    )

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["type"] == "custom"
    assert body["layout"] == "grid"
    assert body["fields"] == ["book", "tags"]


def test_duplicate_slug_is_rejected(client, auth_headers, star_section):
    resp = client.post(
        "/api/v1/sections",
        json={"type": "certifications", "title": "Wins at work"},
        headers=auth_headers,
    )

    assert resp.status_code == 400
    assert "slug already exists" in resp.get_json()["message"]


def test_sections_are_appended_and_scoped_to_user(client, auth_headers, other_user, bearer, star_section):
    second = client.post(
        "/api/v1/sections",
        json={"type": "certifications", "title": "Certs"},
        headers=auth_headers,
    ).get_json()
    assert second["order"] == 2

    mine = client.get("/api/v1/sections", headers=auth_headers).get_json()
    assert [s["id"] for s in mine] == [star_section["id"], second["id"]]

    theirs = bearer(other_user)
    assert client.get("/api/v1/sections", headers=theirs).get_json() == []
    resp = client.get(f"/api/v1/sections/{star_section['id']}", headers=theirs)
    assert resp.status_code == 404


def test_update_section(client, auth_headers, star_section):
    resp = client.patch(
        f"/api/v1/sections/{star_section['id']}",
        json={"title": "Big Wins", "layout": "cards", "is_public": False},
        headers={**auth_headers, "If-Match": '"1"'},
    )

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["title"] == "Big Wins"
    assert body["slug"] == "wins-at-work"
    assert body["layout"] == "cards"
    assert body["is_public"] is False
    assert body["version"] == 2
    assert resp.headers["ETag"] == '"2"'

    section = db.session.get(CustomSection, star_section["id"])
    assert section.content["layout"] == "cards"
    assert section.content["isPublic"] is False


def test_update_section_rejects_noop_and_stale(client, auth_headers, star_section):
    url = f"/api/v1/sections/{star_section['id']}"

    resp = client.patch(url, json={"title": "Wins at Work"}, headers=auth_headers)
    assert resp.status_code == 400

    resp = client.patch(url, json={"title": "Later"}, headers={**auth_headers, "If-Match": '"7"'})
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "StaleSection"

    resp = client.patch(url, json={"layout": "masonry"}, headers=auth_headers)
    assert resp.status_code == 400


def test_if_match_must_be_a_version(client, auth_headers, star_section):
    resp = client.patch(
        f"/api/v1/sections/{star_section['id']}",
        json={"title": "Later"},
        headers={**auth_headers, "If-Match": "abc"},
    )
    assert resp.status_code == 400


def test_delete_section_recompacts_order(client, auth_headers, star_section):
    ids = [star_section["id"]]
    for title in ("Certs", "Talks"):
        resp = client.post(
            "/api/v1/sections",
            json={"type": "certifications", "title": title},
            headers=auth_headers,
        )
        ids.append(resp.get_json()["id"])

    resp = client.delete(f"/api/v1/sections/{ids[0]}", headers=auth_headers)
    assert resp.status_code == 200

    remaining = client.get("/api/v1/sections", headers=auth_headers).get_json()
    assert [(s["id"], s["order"]) for s in remaining] == [(ids[1], 1), (ids[2], 2)]


def test_reorder_sections(client, auth_headers, star_section):
    certs = client.post(
        "/api/v1/sections",
        json={"type": "certifications", "title": "Certs"},
        headers=auth_headers,
    ).get_json()

    resp = client.post(
        "/api/v1/sections/reorder",
        json=[
            {"id": certs["id"], "order": 1},
            {"id": star_section["id"], "order": 5},
            {"id": "someone-elses", "order": 0},
        ],
        headers=auth_headers,
    )

    assert resp.status_code == 200
    assert resp.get_json() == [
        {"id": certs["id"], "order": 1},
        {"id": star_section["id"], "order": 2},
    ]


def test_reorder_rejects_non_list(client, auth_headers):
    resp = client.post("/api/v1/sections/reorder", json={"id": "x"}, headers=auth_headers)
    assert resp.status_code == 400


def test_upgrade_legacy_section(client, auth_headers, star_section):
    section = db.session.get(CustomSection, star_section["id"])
    legacy = dict(section.content)
    legacy.pop("templateVersion")
    legacy["fields"] = ["title", *legacy["fields"]]
    legacy["template"] = {
        "title": {"label": "Title", "required": True, "type": "text"},
        **legacy["template"],
    }
    section.content = legacy
    db.session.commit()

    resp = client.post(f"/api/v1/sections/{star_section['id']}/upgrade", headers=auth_headers)

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["fields"] == ["situation", "task", "action", "result"]
    assert body["template_version"] == 2

    history = client.get(f"/api/v1/sections/{star_section['id']}/history", headers=auth_headers)
    assert history.get_json()[0]["action"] == "section.upgrade"


def test_upgrade_current_section_is_noop(client, auth_headers, star_section):
    resp = client.post(f"/api/v1/sections/{star_section['id']}/upgrade", headers=auth_headers)

    assert resp.status_code == 200
    assert resp.get_json()["version"] == star_section["version"]


@pytest.mark.parametrize("payload", [
    {"type": "certifications", "title": "Certs", "is_public": "yes"},
    {"type": "custom", "title": "Books", "is_public": 1, "fields": [{"name": "book"}]},
    {"type": "certifications", "title": 123},
    {"type": "certifications", "title": "Certs", "slug": 5},
    {"type": "certifications", "title": "Certs", "description": ["x"]},
    {"type": "custom", "title": "Books", "fields": ["book"]},
    {"type": "custom", "title": "Books", "fields": "book"},
    {"type": "custom", "title": "Books", "fields": [{"name": 7}]},
    {"type": "custom", "title": "Books", "fields": [{"name": "book", "validation": 3}]},
])
def test_create_section_rejects_wrongly_typed_input(client, auth_headers, payload):
    resp = client.post("/api/v1/sections", json=payload, headers=auth_headers)

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "InvariantViolation"
    assert CustomSection.query.count() == 0


@pytest.mark.parametrize("payload", [
    {"is_public": "yes"},
    {"is_public": None},
    {"title": 123},
    {"slug": 5},
])
def test_update_section_rejects_wrongly_typed_input(client, auth_headers, star_section, payload):
    resp = client.patch(f"/api/v1/sections/{star_section['id']}", json=payload, headers=auth_headers)

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "InvariantViolation"

    section = db.session.get(CustomSection, star_section["id"])
    assert section.is_public is True
    assert section.version == 1


def test_create_section_with_symbol_title_needs_a_slug(client, auth_headers):
    resp = client.post(
        "/api/v1/sections",
        json={"type": "certifications", "title": "!!!"},
        headers=auth_headers,
    )
    assert resp.status_code == 400

    resp = client.post(
        "/api/v1/sections",
        json={"type": "certifications", "title": "!!!", "slug": "highlights"},
        headers=auth_headers,
    )
    assert resp.status_code == 201
    assert resp.get_json()["slug"] == "highlights"


def test_reorder_rejects_wrongly_typed_items(client, auth_headers, star_section):
    resp = client.post(
        "/api/v1/sections/reorder",
        json=[{"id": star_section["id"], "order": None}],
        headers=auth_headers,
    )
    assert resp.status_code == 400

    resp = client.post(
        "/api/v1/sections/reorder",
        json=[{"id": [star_section["id"]], "order": 1}],
        headers=auth_headers,
    )
    assert resp.status_code == 400
