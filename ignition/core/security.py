"""
Security utilities for Ignition.

Provides encryption of stored connection details, password complexity
checks, and access control decorators.
"""

import json
import logging
from functools import wraps
from typing import Any, Callable, Dict, Optional

from cryptography.fernet import Fernet, InvalidToken
from flask import current_app, g

from .errors import PermissionDenied, Unauthenticated

logger = logging.getLogger(__name__)

_ciphers: Dict[str, Fernet] = {}


def get_cipher() -> Optional[Fernet]:
    """Get the Fernet cipher for the configured key, or None if no key is set."""
    key = current_app.config.get("IGNITION_ENCRYPTION_KEY")
    if not key:
        return None
    if key not in _ciphers:
        _ciphers[key] = Fernet(key.encode() if isinstance(key, str) else key)
    return _ciphers[key]


def encrypt_details(details: Dict[str, Any]) -> str:
    """Serialize connection details, encrypting them when a key is configured."""
    plaintext = json.dumps(details)
    cipher = get_cipher()
    if cipher is None:
        return plaintext
    return cipher.encrypt(plaintext.encode()).decode()


def decrypt_details(stored: Optional[str]) -> Dict[str, Any]:
    """Decrypt stored connection details."""
    if not stored:
        return {}
    # Plain JSON is stored when no key was configured at write time
    if stored.lstrip().startswith("{"):
        return json.loads(stored)
    cipher = get_cipher()
    if cipher is None:
        logger.warning("Encrypted database details found but no encryption key is set")
        return {}
    try:
        return json.loads(cipher.decrypt(stored.encode()).decode())
    except InvalidToken:
        logger.warning("Could not decrypt database details with the configured key")
        return {}


# ====================== Passwords ======================

PASSWORD_ERROR = "Insufficient password strength"

PASSWORD_COMPLEXITY_RULES = {
    "weak": {"total": 6},
    "normal": {"total": 6, "digit": 1},
    "strong": {"total": 8, "lower": 2, "upper": 2, "digit": 1, "special": 1},
}


def count_character_kinds(password: str) -> Dict[str, int]:
    """Count total, lower, upper, digit and special characters."""
    counts = {"total": 0, "lower": 0, "upper": 0, "digit": 0, "special": 0}
    for ch in password:
        counts["total"] += 1
        if ch.islower():
            counts["lower"] += 1
        elif ch.isupper():
            counts["upper"] += 1
        elif ch.isdigit():
            counts["digit"] += 1
        else:
            counts["special"] += 1
    return counts


def password_requirements() -> Dict[str, int]:
    """Minimum character counts for the configured complexity."""
    complexity = current_app.config.get("PASSWORD_COMPLEXITY", "normal")
    requirements = dict(
        PASSWORD_COMPLEXITY_RULES.get(complexity, PASSWORD_COMPLEXITY_RULES["normal"])
    )
    length = current_app.config.get("PASSWORD_LENGTH")
    if length:
        requirements["total"] = int(length)
    return requirements


def is_valid_password(password: Any) -> bool:
    """Check a password against the configured complexity rules."""
    if not isinstance(password, str) or not password:
        return False
    counts = count_character_kinds(password)
    return all(counts[kind] >= minimum for kind, minimum in password_requirements().items())


# ====================== Access control ======================


def get_current_user():
    """Get the user for the current request's session, or None."""
    if "current_user" not in g:
        from .session import current_session

        session = current_session()
        g.current_user = session.user if session is not None else None
    return g.current_user


def require_login(f: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator to require a valid session."""

    @wraps(f)
    def decorated_function(*args: Any, **kwargs: Any) -> Any:
        user = get_current_user()
        if user is None or not user.is_active:
            raise Unauthenticated()
        return f(*args, **kwargs)

    return decorated_function


def require_superuser(f: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator to require a superuser session."""

    @wraps(f)
    def decorated_function(*args: Any, **kwargs: Any) -> Any:
        user = get_current_user()
        if user is None or not user.is_active:
            raise Unauthenticated()
        if not user.is_superuser:
            raise PermissionDenied()
        return f(*args, **kwargs)

    return decorated_function
