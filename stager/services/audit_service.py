"""Admin audit trail.

Audit writes commit separately, after the action they describe. A failing
write is logged and rolled back and never undoes the action.
"""
import logging
from datetime import datetime, timezone

from stager.extensions import db
from stager.models.audit_log import AdminAction

logger = logging.getLogger(__name__)


def log_admin_action(
    admin_id, action, target_type, target_id, target_name=None,
    metadata=None, ip_address=None, user_agent=None,
):
    if action not in AdminAction.ACTIONS:
        logger.warning("Unknown admin action %s", action)

    try:
        entry = AdminAction(
            admin_id=admin_id,
            action=action,
            target_resource_type=target_type,
            target_resource_id=target_id,
            target_resource_name=target_name,
            metadata_=metadata,
            ip_address=ip_address or "unknown",
            user_agent=user_agent or "unknown",
            created_at=datetime.now(timezone.utc),
        )
        db.session.add(entry)
        db.session.commit()
        return entry
    except Exception:
        logger.exception(
            "Failed to record admin action %s on %s %s", action, target_type, target_id
        )
        db.session.rollback()
        return None


def recent_actions(admin_id=None, action=None, limit=100):
    query = AdminAction.query
    if admin_id:
        query = query.filter_by(admin_id=admin_id)
    if action:
        query = query.filter_by(action=action)
    return query.order_by(AdminAction.created_at.desc()).limit(limit).all()
