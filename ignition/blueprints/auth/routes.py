"""
Session blueprint routes.

Provides public session properties, login, and logout endpoints.
"""

from flask import Blueprint, Response, current_app, jsonify, request

from ignition.core import session as session_mw
from ignition.core import settings
from ignition.core.errors import Unauthenticated, ValidationError
from ignition.core.events import publish_event
from ignition.core.helpers import NON_BLANK_ERROR, as_map, is_non_blank_string
from ignition.core.security import require_login
from ignition.core.setup import ensure_token, has_user_setup
from ignition.models import db, User

auth_bp = Blueprint(
    "auth",
    __name__,
    url_prefix="/api/session",
)

PASSWORD_MISMATCH_ERROR = "did not match stored password"


@auth_bp.route("/properties", methods=["GET"])
def properties():
    """Public settings, plus the setup token while no user exists."""
    props = settings.public_values()
    user_setup = has_user_setup()
    props["has_user_setup"] = user_setup
    props["setup_token"] = None if user_setup else ensure_token()
    return props


@auth_bp.route("", methods=["POST"])
def login():
    """Log in with email and password; returns the new session ID."""
    body = as_map(request.get_json(silent=True))
    username = body.get("username")
    password = body.get("password")
    if not is_non_blank_string(username):
        raise ValidationError("username", NON_BLANK_ERROR)
    if not is_non_blank_string(password):
        raise ValidationError("password", NON_BLANK_ERROR)

    user = User.query.filter_by(email=username.strip().lower(), is_active=True).first()
    if user is None or not user.check_password(password):
        current_app.logger.info(f"Failed login attempt for '{username}'")
        return {"errors": {"password": PASSWORD_MISMATCH_ERROR}}, 401

    session = session_mw.create_session(user)
    user.update_last_login()
    session_id, user_id = session.id, user.id
    response = jsonify({"id": session_id})
    session_mw.set_session_cookie(response, session_id)
    db.session.commit()

    publish_event("user-login", {"user_id": user_id})
    return response


@auth_bp.route("", methods=["DELETE"])
@require_login
def logout():
    """Delete the current session."""
    session = session_mw.current_session()
    if session is None:
        raise Unauthenticated()
    db.session.delete(session)
    db.session.commit()
    return session_mw.clear_session_cookie(Response(status=204))
