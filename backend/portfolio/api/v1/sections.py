# portfolio/api/v1/sections.py
from flask import g, request, jsonify
from portfolio.extensions import section_registry
from portfolio.utils.decorators import user_required
from portfolio.utils.optimistic_lock import parse_if_match, parse_unmodified_since
from portfolio.models.audit_log import AuditLog
from portfolio.normalizers.section import normalize_section
from portfolio.normalizers.audit import normalize_audit_log
from portfolio.application.sections.queries import get_section, list_sections
from portfolio.application.sections.create_section import create_section
from portfolio.application.sections.update_section import update_section
from portfolio.application.sections.delete_section import delete_section
from portfolio.application.sections.reorder_sections import reorder_sections
from portfolio.application.sections.upgrade_section import upgrade_section_content
from portfolio.application.sections.manage_entries import (
    add_entry,
    get_entry,
    remove_entry,
    update_entry,
)
from . import v1_bp


def _lock_markers():
    """Optimistic lock markers sent by the client, if any."""
    return {
        "expected_version": parse_if_match(request.headers.get("If-Match")),
        "unmodified_since": parse_unmodified_since(request.headers.get("If-Unmodified-Since")),
    }


def _with_etag(payload, section, status=200):
    response = jsonify(payload)
    response.status_code = status
    response.set_etag(str(section.version))
    return response


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValueError("Invalid request body")
    return data


# ------------------------
# Templates
# ------------------------

@v1_bp.route("/section-types", methods=["GET"])
def list_section_types():
    registry = section_registry()

    return jsonify([
        registry.get_template(section_type).to_dict()
        for section_type in registry.list_types()
    ])


# ------------------------
# Sections
# ------------------------

@v1_bp.route("/sections", methods=["GET"])
@user_required
def list_my_sections():
    sections = list_sections(user_id=g.current_user.id)
    return jsonify([normalize_section(s, admin=True) for s in sections])


@v1_bp.route("/sections", methods=["POST"])
@user_required
def create_my_section():
    section = create_section(
        user_id=g.current_user.id,
        data=_json_body(),
        registry=section_registry(),
    )
    return _with_etag(normalize_section(section, admin=True), section, 201)


@v1_bp.route("/sections/<section_id>", methods=["GET"])
@user_required
def get_my_section(section_id):
    section = get_section(user_id=g.current_user.id, section_id=section_id)
    return _with_etag(normalize_section(section, admin=True), section)


@v1_bp.route("/sections/<section_id>", methods=["PATCH"])
@user_required
def update_my_section(section_id):
    section = update_section(
        user_id=g.current_user.id,
        section_id=section_id,
        data=_json_body(),
        **_lock_markers(),
    )
    return _with_etag(normalize_section(section, admin=True), section)


@v1_bp.route("/sections/<section_id>", methods=["DELETE"])
@user_required
def delete_my_section(section_id):
    delete_section(user_id=g.current_user.id, section_id=section_id)
    return jsonify({"message": "Section deleted and order re-compacted"}), 200


@v1_bp.route("/sections/reorder", methods=["POST"])
@user_required
def reorder_my_sections():
    data = request.get_json(silent=True)  # [{id: "...", order: 1}, ...]
    if not isinstance(data, list):
        return jsonify({"error": "Invalid payload"}), 400

    sections = reorder_sections(user_id=g.current_user.id, items=data)
    return jsonify([
        {"id": s.id, "order": s.order} for s in sections
    ]), 200


@v1_bp.route("/sections/<section_id>/upgrade", methods=["POST"])
@user_required
def upgrade_my_section(section_id):
    section = upgrade_section_content(
        user_id=g.current_user.id,
        section_id=section_id,
        registry=section_registry(),
    )
    return _with_etag(normalize_section(section, admin=True), section)


@v1_bp.route("/sections/<section_id>/history", methods=["GET"])
@user_required
def section_history(section_id):
    section = get_section(user_id=g.current_user.id, section_id=section_id)

    limit = min(request.args.get("limit", 50, type=int) or 50, 200)
    logs = (
        AuditLog.query
        .filter_by(entity_type="section", entity_id=section.id)
        .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
        .limit(limit)
        .all()
    )

    return jsonify([normalize_audit_log(log) for log in logs])


# ------------------------
# Entries
# ------------------------

@v1_bp.route("/sections/<section_id>/entries", methods=["POST"])
@user_required
def create_entry(section_id):
    section, entry = add_entry(
        user_id=g.current_user.id,
        section_id=section_id,
        entry=_json_body(),
        **_lock_markers(),
    )
    return _with_etag({"entry": entry, "version": section.version}, section, 201)


@v1_bp.route("/sections/<section_id>/entries/<entry_id>", methods=["GET"])
@user_required
def read_entry(section_id, entry_id):
    entry = get_entry(
        user_id=g.current_user.id,
        section_id=section_id,
        entry_id=entry_id,
    )
    if entry is None:
        return jsonify({"error": "EntryNotFound", "message": f"Entry with ID {entry_id} not found"}), 404

    return jsonify(entry)


@v1_bp.route("/sections/<section_id>/entries/<entry_id>", methods=["PATCH"])
@user_required
def patch_entry(section_id, entry_id):
    section, entry = update_entry(
        user_id=g.current_user.id,
        section_id=section_id,
        entry_id=entry_id,
        fields=_json_body(),
        **_lock_markers(),
    )
    return _with_etag({"entry": entry, "version": section.version}, section)


@v1_bp.route("/sections/<section_id>/entries/<entry_id>", methods=["DELETE"])
@user_required
def delete_entry(section_id, entry_id):
    section, removed = remove_entry(
        user_id=g.current_user.id,
        section_id=section_id,
        entry_id=entry_id,
        **_lock_markers(),
    )
    return _with_etag({"removed": removed, "version": section.version}, section)
