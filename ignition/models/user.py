"""
User and Session models for Ignition.

These models handle user authentication and session management.
"""

import uuid
from datetime import datetime, timedelta

from werkzeug.security import generate_password_hash, check_password_hash

# Import the shared db instance from the models package
from . import db


class User(db.Model):
    """User model for authentication and access control."""

    __tablename__ = "core_user"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    email = db.Column(db.String(254), unique=True, nullable=False, index=True)
    first_name = db.Column(db.String(254), nullable=False)
    last_name = db.Column(db.String(254), nullable=False)
    password_hash = db.Column(db.Text, nullable=False)
    is_superuser = db.Column(db.Boolean, nullable=False, default=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    date_joined = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow
    )
    last_login = db.Column(db.DateTime, nullable=True)

    # Relationships
    sessions = db.relationship(
        "Session", back_populates="user", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        role = "superuser" if self.is_superuser else "user"
        return f"<User {self.email} ({role})>"

    def set_password(self, password: str) -> None:
        """Hash and set the user's password."""
        self.password_hash = generate_password_hash(password, method="pbkdf2:sha256")

    def check_password(self, password: str) -> bool:
        """Check if the provided password matches the stored hash."""
        return check_password_hash(self.password_hash, password)

    def update_last_login(self) -> None:
        """Update the last_login timestamp to now."""
        self.last_login = datetime.utcnow()


class Session(db.Model):
    """Session model for tracking user sessions."""

    __tablename__ = "core_session"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    user_id = db.Column(
        db.Integer, db.ForeignKey("core_user.id", ondelete="CASCADE"), nullable=False
    )
    ip_address = db.Column(db.String(45), nullable=True)  # IPv6 can be up to 45 chars
    user_agent = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    user = db.relationship("User", back_populates="sessions")

    def __repr__(self) -> str:
        return f"<Session {self.id[:8]}... for user_id={self.user_id}>"

    def is_expired(self, max_age: timedelta) -> bool:
        """Check if the session is older than max_age."""
        return datetime.utcnow() > self.created_at + max_age
