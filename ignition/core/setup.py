"""
Setup token management.

The setup token is a UUID stored in the internal `setup-token` setting. It
authorizes the one-time POST /api/setup call and is replaced once setup
succeeds.
"""

import hmac
import logging
import uuid
from typing import Any, Optional

from ignition.models import db, User
from . import settings

logger = logging.getLogger(__name__)

TOKEN_ERROR = "Token does not match the setup token."


def setup_token() -> Optional[str]:
    """Return the current setup token, or None if none was created.

    Read from the database on every call so a token rotated by another
    thread or process is never accepted.
    """
    return settings.get("setup-token", cached=False)


def rotate_token() -> str:
    """
    Replace the setup token within the current session, without committing.

    The setup transaction calls this so a rollback restores the old token.
    """
    token = str(uuid.uuid4())
    settings.set_value("setup-token", token)
    return token


def create_token() -> str:
    """Generate, store and commit a new setup token."""
    token = rotate_token()
    db.session.commit()
    logger.info("Created a new setup token")
    return token


def ensure_token() -> str:
    """Return the setup token, creating one if none exists."""
    return setup_token() or create_token()


def token_match(token: Any) -> bool:
    """True if token equals the stored setup token."""
    current = setup_token()
    if not current or not isinstance(token, str):
        return False
    return hmac.compare_digest(token.encode(), current.encode())


def has_user_setup() -> bool:
    """True once at least one user exists."""
    return db.session.query(User.id).first() is not None
