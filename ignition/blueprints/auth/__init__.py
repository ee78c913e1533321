"""
Auth blueprint package.

Provides session routes (public properties, login, logout).
"""

from .routes import auth_bp

__all__ = ["auth_bp"]
