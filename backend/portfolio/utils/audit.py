from flask import g, has_request_context
from portfolio.extensions import db
from portfolio.models.audit_log import AuditLog
from typing import Optional

def log_action(
    *,
    action: str,
    entity_type: str,
    entity_id: Optional[str],
    actor_id: Optional[str] = None,
    payload: dict | None = None
):
    if actor_id is None and has_request_context():
        user = getattr(g, "current_user", None)
        actor_id = user.id if user else None

    log = AuditLog()
    log.actor_id = actor_id
    log.action = action
    log.entity_type = entity_type
    log.entity_id = entity_id or "*"
    log.payload = payload or {}

    db.session.add(log)
    return log
