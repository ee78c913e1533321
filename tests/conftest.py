"""
Pytest configuration and fixtures for Ignition tests.

This file provides shared fixtures for all tests, including:
- Flask application factory
- Test client
- Database setup/teardown
- Setup token and user fixtures

The event worker writes from its own thread, so the suite runs against a
temporary SQLite file rather than an in-memory database.
"""

import os
import shutil
import tempfile
from typing import Any, Dict, Generator

import pytest

# Set testing environment before importing app
_db_dir = tempfile.mkdtemp(prefix="ignition-tests-")
os.environ["FLASK_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_db_dir, "ignition.db")

from ignition.app import create_app
from ignition.core import settings
from ignition.core.events import get_worker
from ignition.core.setup import create_token
from ignition.models import db, Session, User

PASSWORD = "TestPassword123!"


@pytest.fixture(scope="session")
def app():
    """
    Create a Flask application configured for testing.

    This fixture creates a single application instance for the entire
    test session. No application context is left pushed, so every test
    request gets its own context.
    """
    application = create_app("testing")

    with application.app_context():
        db.create_all()

    yield application

    get_worker(application).stop()
    with application.app_context():
        db.drop_all()
        db.engine.dispose()
    shutil.rmtree(_db_dir, ignore_errors=True)


@pytest.fixture(scope="function")
def client(app):
    """
    Create a test client for the Flask application.

    This fixture provides a test client that can be used to make
    requests to the application without running a server.
    """
    return app.test_client()


@pytest.fixture(scope="function", autouse=True)
def db_session(app) -> Generator:
    """
    Give each test an empty database and settings cache.

    Queued events are recorded before the tables are cleared.
    """
    settings.clear_cache()
    yield db.session
    get_worker(app).drain()
    with app.app_context():
        db.session.rollback()
        # Clean up all tables
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
    settings.clear_cache()


@pytest.fixture
def setup_token(app) -> str:
    """A freshly created setup token."""
    with app.app_context():
        return create_token()


def create_user(app, email: str, is_superuser: bool = False) -> Dict[str, Any]:
    """Create and commit a user; returns its id, email and password."""
    with app.app_context():
        user = User(
            first_name="Test",
            last_name="User",
            email=email,
            is_superuser=is_superuser,
        )
        user.set_password(PASSWORD)
        db.session.add(user)
        db.session.commit()
        return {"id": user.id, "email": email, "password": PASSWORD}


def session_headers(app, user_id: int) -> Dict[str, str]:
    """Create a session for user_id and return headers that carry it."""
    with app.app_context():
        session = Session(user_id=user_id)
        db.session.add(session)
        db.session.commit()
        header = app.config["SESSION_HEADER_NAME"]
        return {header: session.id}


@pytest.fixture
def admin_user(app) -> Dict[str, Any]:
    """
    Create an admin user for testing.

    Returns a superuser with full permissions.
    """
    return create_user(app, "admin@example.com", is_superuser=True)


@pytest.fixture
def regular_user(app) -> Dict[str, Any]:
    """
    Create a regular user for testing.

    Returns a user without superuser permissions.
    """
    return create_user(app, "user@example.com")


@pytest.fixture
def admin_headers(app, admin_user) -> Dict[str, str]:
    """Session headers for the admin user."""
    return session_headers(app, admin_user["id"])


@pytest.fixture
def user_headers(app, regular_user) -> Dict[str, str]:
    """Session headers for the regular user."""
    return session_headers(app, regular_user["id"])
