from functools import wraps
from flask import g, jsonify
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request
from portfolio.extensions import db
from portfolio.models.user import User

def user_required(fn):
    """
    Requires a valid access token for an active user and exposes that user
    as g.current_user.
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        identity = get_jwt_identity()

        user = db.session.get(User, identity) if identity else None
        if not user or not user.is_active:
            return jsonify({"error": "User account disabled or missing"}), 403

        g.current_user = user
        return fn(*args, **kwargs)
    return wrapper
