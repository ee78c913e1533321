#!/usr/bin/env python3
"""
Prepare an Ignition database for first use.

Runs the Alembic migrations, which also record the head revision, and,
while no user exists yet, makes sure there is a setup token and prints it.
The token is what the first POST /api/setup call must present.

Usage:
    python scripts/init_db.py           # migrate and print the setup token
    python scripts/init_db.py --reset   # drop everything first

Environment Variables:
    DATABASE_URL: Database connection string (optional, defaults to config)
    FLASK_ENV: Application environment (development|production|testing)
"""

import argparse
import os
import sys

# Make the ignition package importable when run from a checkout
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from flask import Flask
from flask_migrate import upgrade

from ignition.app import create_app
from ignition.core.setup import ensure_token, has_user_setup
from ignition.models import db


def _environment() -> str:
    return os.environ.get("FLASK_ENV", "development")


def print_setup_token() -> None:
    """Print the setup token, creating it if setup has not happened yet."""
    if has_user_setup():
        print("Setup already completed; no setup token is needed.")
        return
    print(f"Setup token: {ensure_token()}")


def init_database(app: Flask) -> bool:
    """Migrate the schema and print the setup token. True on success."""
    with app.app_context():
        try:
            print("Applying migrations...")
            upgrade()
            print_setup_token()
        except Exception as e:
            db.session.rollback()
            print(f"Database initialization failed: {e}")
            import traceback
            traceback.print_exc()
            return False
    print("Database ready.")
    return True


def reset_database(app: Flask) -> bool:
    """
    Drop every table, including the Alembic version table.

    Refuses to run in production unless ALLOW_DB_RESET is set, and asks for
    confirmation on the terminal.
    """
    env = _environment()
    if env == "production" and not os.environ.get("ALLOW_DB_RESET"):
        print("ERROR: Refusing to reset a production database without ALLOW_DB_RESET=1")
        return False

    answer = input(f"All data in the {env} database will be lost. Type 'RESET' to continue: ")
    if answer != "RESET":
        print("Reset cancelled.")
        return False

    with app.app_context():
        try:
            db.drop_all()
            db.session.execute(db.text("DROP TABLE IF EXISTS alembic_version"))
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            print(f"Database reset failed: {e}")
            return False
    print("All tables dropped.")
    return True


def main() -> int:
    parser = argparse.ArgumentParser(description="Initialize the Ignition database")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Drop all tables before migrating (WARNING: deletes all data)",
    )
    args = parser.parse_args()

    print(f"Environment: {_environment()}")
    app = create_app(_environment())

    if args.reset and not reset_database(app):
        return 1
    return 0 if init_database(app) else 1


if __name__ == "__main__":
    sys.exit(main())
