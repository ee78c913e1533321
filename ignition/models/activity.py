"""
Activity model for Ignition.

Activity rows record notable events (a user joining, a database being
added) for the activity feed. They are written by the event worker.
"""

import json
from datetime import datetime
from typing import Any, Optional

# Import the shared db instance from the models package
from . import db


class Activity(db.Model):
    """Activity model for tracking user-visible events."""

    __tablename__ = "activity"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    topic = db.Column(db.String(32), nullable=False)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("core_user.id", ondelete="SET NULL"),
        nullable=True,
    )
    model = db.Column(db.String(16), nullable=True)
    model_id = db.Column(db.Integer, nullable=True)
    timestamp = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    details = db.Column(db.Text, nullable=True)

    # Relationships
    user = db.relationship(
        "User",
        backref=db.backref("activities", lazy="dynamic"),
    )

    # Indexes
    __table_args__ = (
        db.Index("idx_activity_user_id", "user_id"),
        db.Index("idx_activity_topic", "topic"),
        db.Index("idx_activity_timestamp", "timestamp"),
    )

    def __repr__(self) -> str:
        return f"<Activity {self.id}: {self.topic} {self.model}={self.model_id}>"

    @property
    def details_dict(self) -> dict:
        return json.loads(self.details) if self.details else {}

    @classmethod
    def record(
        cls,
        topic: str,
        user_id: Optional[int] = None,
        model: Optional[str] = None,
        model_id: Optional[int] = None,
        details: Optional[Any] = None,
    ) -> "Activity":
        """Create a new activity entry.

        Args:
            topic: The event topic (e.g., 'user-joined', 'database-create')
            user_id: ID of the user who caused the event, if known
            model: Name of the model the event is about (e.g., 'user')
            model_id: ID of the affected object
            details: Optional extra details, serialized as JSON

        Returns:
            The created Activity entry
        """
        entry = cls(
            topic=topic,
            user_id=user_id,
            model=model,
            model_id=model_id,
            details=json.dumps(details) if details is not None else None,
            timestamp=datetime.utcnow(),
        )
        db.session.add(entry)
        return entry
