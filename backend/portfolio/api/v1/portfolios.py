from flask import g, request, jsonify
from portfolio.utils.decorators import user_required
from portfolio.application.portfolios.set_visibility import set_portfolio_visibility
from portfolio.application.sections.queries import find_portfolio_owner, list_sections
from portfolio.normalizers.section import normalize_section
from . import v1_bp


@v1_bp.route("/portfolios/<slug>/sections", methods=["GET"])
def public_sections(slug):
    owner = find_portfolio_owner(slug)
    if not owner:
        # Unknown, inactive and private portfolios look the same
        return jsonify({"error": "Portfolio not found"}), 404

    sections = list_sections(user_id=owner.id, public_only=True)

    return jsonify({
        "slug": owner.slug,
        "name": owner.name,
        "sections": [normalize_section(s, admin=False) for s in sections],
    })


@v1_bp.route("/portfolio", methods=["GET"])
@user_required
def my_portfolio():
    user = g.current_user
    return jsonify({"slug": user.slug, "is_public": user.is_public})


@v1_bp.route("/portfolio", methods=["PATCH"])
@user_required
def update_my_portfolio():
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or "is_public" not in data:
        return jsonify({"error": "is_public is required"}), 400

    user = set_portfolio_visibility(user=g.current_user, is_public=data["is_public"])
    return jsonify({"slug": user.slug, "is_public": user.is_public})
