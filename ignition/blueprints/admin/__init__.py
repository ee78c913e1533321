"""
Admin blueprint package.

Provides the settings API for superusers.
"""

from .routes import admin_bp

__all__ = ["admin_bp"]
