"""
Setup blueprint for the first-run API.

Provides initial admin user setup, database validation and the admin checklist.
"""

from .routes import setup_bp

__all__ = ["setup_bp"]
