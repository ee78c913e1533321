"""
Database models for Ignition.

This package contains SQLAlchemy models for all database entities.
The db instance is created here and should be initialized with the Flask app
using db.init_app(app) in the application factory.
"""

from flask_sqlalchemy import SQLAlchemy

# Create the shared SQLAlchemy instance
db = SQLAlchemy()

# Import models after db is created to avoid circular imports
# These imports make the models available when importing from ignition.models
from .user import User, Session
from .setting import Setting
from .database import Database
from .activity import Activity
from .content import Table, Card, Dashboard, Pulse, Collection, Metric, Segment

__all__ = [
    "db",
    "User",
    "Session",
    "Setting",
    "Database",
    "Activity",
    "Table",
    "Card",
    "Dashboard",
    "Pulse",
    "Collection",
    "Metric",
    "Segment",
]
