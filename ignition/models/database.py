"""
Database connection model for Ignition.

A Database row describes a connection to an analytics data source. The
connection details are kept as JSON, encrypted when an encryption key is
configured.
"""

from datetime import datetime
from typing import Any, Dict

# Import the shared db instance from the models package
from . import db


class Database(db.Model):
    """Connection settings for one data source."""

    __tablename__ = "database_connection"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(254), nullable=False)
    engine = db.Column(db.String(254), nullable=False)
    details_blob = db.Column("details", db.Text, nullable=True)
    is_on_demand = db.Column(db.Boolean, nullable=False, default=False)
    is_full_sync = db.Column(db.Boolean, nullable=False, default=True)
    auto_run_queries = db.Column(db.Boolean, nullable=False, default=True)
    is_sample = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=True, onupdate=datetime.utcnow)

    __table_args__ = (
        db.Index("idx_database_name", "name"),
        db.Index("idx_database_engine", "engine"),
    )

    # Flags a caller may set when creating a database, with their defaults.
    FLAG_DEFAULTS = {
        "is_on_demand": False,
        "is_full_sync": True,
        "auto_run_queries": True,
    }

    def __repr__(self) -> str:
        return f"<Database {self.name} ({self.engine})>"

    @property
    def details(self) -> Dict[str, Any]:
        """Decrypted connection details."""
        from ignition.core.security import decrypt_details

        return decrypt_details(self.details_blob)

    @details.setter
    def details(self, value: Dict[str, Any]) -> None:
        from ignition.core.security import encrypt_details

        self.details_blob = encrypt_details(value or {})

    def to_dict(self) -> dict:
        """Serialize for API responses. Passwords in details are masked."""
        details = dict(self.details)
        if details.get("password"):
            details["password"] = "**********"
        return {
            "id": self.id,
            "name": self.name,
            "engine": self.engine,
            "details": details,
            "is_on_demand": self.is_on_demand,
            "is_full_sync": self.is_full_sync,
            "auto_run_queries": self.auto_run_queries,
            "is_sample": self.is_sample,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
