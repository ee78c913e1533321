"""
Core utilities package for Ignition.

This package contains shared utilities used by blueprints and services:
- settings: Declared settings and their cache
- setup: Setup token management
- security: Encryption, password rules and access control
- session: Session cookies
- drivers: Database engines and connection checks
- events: Background activity recording
- checklist: Admin onboarding checklist
"""

from .errors import (
    ApiError,
    ValidationError,
    Unauthenticated,
    PermissionDenied,
)

from .helpers import (
    is_non_blank_string,
    is_email,
    coerce_boolean,
)

from .security import (
    encrypt_details,
    decrypt_details,
    is_valid_password,
    get_current_user,
    require_login,
    require_superuser,
)

from .setup import (
    setup_token,
    create_token,
    ensure_token,
    token_match,
    has_user_setup,
)

from .events import publish_event

__all__ = [
    # errors
    "ApiError",
    "ValidationError",
    "Unauthenticated",
    "PermissionDenied",
    # helpers
    "is_non_blank_string",
    "is_email",
    "coerce_boolean",
    # security
    "encrypt_details",
    "decrypt_details",
    "is_valid_password",
    "get_current_user",
    "require_login",
    "require_superuser",
    # setup
    "setup_token",
    "create_token",
    "ensure_token",
    "token_match",
    "has_user_setup",
    # events
    "publish_event",
]
