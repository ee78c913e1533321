"""
Session handling for Ignition.

A session is a row in core_session whose UUID is handed to the client in the
`ignition.SESSION` cookie (or sent back in the X-Ignition-Session header).
"""

from datetime import timedelta
from typing import Optional

from flask import Response, current_app, request

from ignition.models import db, Session, User


def _max_age() -> timedelta:
    return timedelta(days=current_app.config.get("SESSION_MAX_AGE_DAYS", 14))


def create_session(user: User) -> Session:
    """Add a new session for user to the current database session."""
    session = Session(
        user_id=user.id,
        ip_address=request.remote_addr if request else None,
        user_agent=request.headers.get("User-Agent") if request else None,
    )
    db.session.add(session)
    db.session.flush()
    return session


def set_session_cookie(response: Response, session_id: str) -> Response:
    """Attach the session cookie to response."""
    config = current_app.config
    response.set_cookie(
        config["SESSION_COOKIE_NAME"],
        session_id,
        max_age=int(_max_age().total_seconds()),
        httponly=config.get("SESSION_COOKIE_HTTPONLY", True),
        secure=config.get("SESSION_COOKIE_SECURE", True),
        samesite=config.get("SESSION_COOKIE_SAMESITE", "Lax"),
    )
    return response


def clear_session_cookie(response: Response) -> Response:
    response.delete_cookie(current_app.config["SESSION_COOKIE_NAME"])
    return response


def request_session_id() -> Optional[str]:
    """Session ID sent with the current request, from cookie or header."""
    config = current_app.config
    return request.cookies.get(config["SESSION_COOKIE_NAME"]) or request.headers.get(
        config["SESSION_HEADER_NAME"]
    )


def current_session() -> Optional[Session]:
    """The unexpired Session for the current request, or None."""
    session_id = request_session_id()
    if not session_id:
        return None
    session = db.session.get(Session, session_id)
    if session is None or session.is_expired(_max_age()):
        return None
    return session
