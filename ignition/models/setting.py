"""
Setting model for Ignition.

Settings are stored as key/value rows. Typing, defaults and validation live
in ignition.core.settings; this table only holds the raw string values.
"""

from datetime import datetime
from typing import Dict

# Import the shared db instance from the models package
from . import db


class Setting(db.Model):
    """Key/value application setting."""

    __tablename__ = "setting"

    key = db.Column(db.String(254), primary_key=True)
    value = db.Column(db.Text, nullable=False)
    updated_at = db.Column(
        db.DateTime, nullable=True, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<Setting {self.key}>"

    @classmethod
    def all_values(cls) -> Dict[str, str]:
        """Return every stored setting as a {key: value} dict."""
        return {row.key: row.value for row in cls.query.all()}
