"""
Content models for Ignition.

Tables, saved questions (cards), dashboards, pulses, collections, metrics and
segments. The setup flow only reads whether these exist and how many there
are; editing them is handled elsewhere.
"""

from datetime import datetime

# Import the shared db instance from the models package
from . import db


class Table(db.Model):
    """A table discovered in a connected database."""

    __tablename__ = "metadata_table"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    db_id = db.Column(
        db.Integer,
        db.ForeignKey("database_connection.id", ondelete="CASCADE"),
        nullable=False,
    )
    name = db.Column(db.String(254), nullable=False)
    schema = db.Column(db.String(254), nullable=True)
    # None means visible; "hidden", "technical" or "cruft" hide the table
    visibility_type = db.Column(db.String(254), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    database = db.relationship(
        "Database",
        backref=db.backref("tables", cascade="all, delete-orphan", lazy="dynamic"),
    )

    __table_args__ = (db.Index("idx_metadata_table_db_id", "db_id"),)

    def __repr__(self) -> str:
        return f"<Table {self.schema}.{self.name}>"


class Collection(db.Model):
    """A folder for saved questions and dashboards."""

    __tablename__ = "collection"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<Collection {self.name}>"


class Card(db.Model):
    """A saved question."""

    __tablename__ = "report_card"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(254), nullable=False)
    creator_id = db.Column(
        db.Integer, db.ForeignKey("core_user.id", ondelete="SET NULL"), nullable=True
    )
    collection_id = db.Column(
        db.Integer, db.ForeignKey("collection.id", ondelete="SET NULL"), nullable=True
    )
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<Card {self.name}>"


class Dashboard(db.Model):
    """A dashboard of saved questions."""

    __tablename__ = "report_dashboard"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(254), nullable=False)
    creator_id = db.Column(
        db.Integer, db.ForeignKey("core_user.id", ondelete="SET NULL"), nullable=True
    )
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<Dashboard {self.name}>"


class Pulse(db.Model):
    """A scheduled delivery of saved questions by email or Slack."""

    __tablename__ = "pulse"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(254), nullable=False)
    creator_id = db.Column(
        db.Integer, db.ForeignKey("core_user.id", ondelete="SET NULL"), nullable=True
    )
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<Pulse {self.name}>"


class Metric(db.Model):
    """A canonical aggregation defined on a table."""

    __tablename__ = "metric"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    table_id = db.Column(
        db.Integer,
        db.ForeignKey("metadata_table.id", ondelete="CASCADE"),
        nullable=False,
    )
    name = db.Column(db.String(254), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<Metric {self.name}>"


class Segment(db.Model):
    """A canonical set of filters defined on a table."""

    __tablename__ = "segment"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    table_id = db.Column(
        db.Integer,
        db.ForeignKey("metadata_table.id", ondelete="CASCADE"),
        nullable=False,
    )
    name = db.Column(db.String(254), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<Segment {self.name}>"
