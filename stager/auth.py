"""Request identity.

Sessions are handled by the auth proxy in front of this service. It
forwards the authenticated user id in AUTH_USER_HEADER, and we only load
the user and enforce role and suspension.
"""
import functools
import logging
from flask import current_app, g, request

from stager.errors import Forbidden, Unauthorized
from stager.extensions import db
from stager.models.user import User

logger = logging.getLogger(__name__)


def current_user():
    user_id = request.headers.get(current_app.config["AUTH_USER_HEADER"], "").strip()
    if not user_id:
        return None
    return db.session.get(User, user_id)


def client_address():
    """Best guess at the caller's address behind Cloudflare/proxies."""
    forwarded = request.headers.get("X-Forwarded-For", "")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.headers.get("X-Real-IP") or request.remote_addr or "unknown"


def user_agent():
    return request.headers.get("User-Agent", "unknown")


def login_required(view):
    @functools.wraps(view)
    def wrapped(*args, **kwargs):
        user = current_user()
        if not user:
            raise Unauthorized()
        if user.suspended:
            logger.info("Rejected suspended user %s", user.id)
            raise Forbidden("Account suspended")
        g.current_user = user
        return view(*args, **kwargs)

    return wrapped


def admin_required(view):
    @functools.wraps(view)
    @login_required
    def wrapped(*args, **kwargs):
        if not g.current_user.is_admin:
            raise Forbidden("Admin access required")
        return view(*args, **kwargs)

    return wrapped
