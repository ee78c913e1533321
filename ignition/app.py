"""
Application factory for Ignition.

create_app() builds a configured Flask instance: extensions, the setup,
session and settings blueprints, JSON error handlers and CLI commands.
"""

import logging
import os
from typing import Optional

import click
from flask import Flask
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException

from ignition.config import get_config, ProductionConfig
from ignition.core import events
from ignition.core.errors import ApiError
from ignition.models import db

MIGRATIONS_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "migrations")

# Global migrate instance for CLI commands
migrate = Migrate(directory=MIGRATIONS_DIR)


def create_app(config_name: Optional[str] = None) -> Flask:
    """
    Build the Flask application.

    Args:
        config_name: 'development', 'production' or 'testing'. When None the
                    FLASK_ENV environment variable decides.

    Returns:
        The configured application.

    Raises:
        RuntimeError: In production when FLASK_SECRET_KEY is not set.
    """
    app = Flask(__name__)

    config_class = get_config(config_name)
    app.config.from_object(config_class)

    if config_class == ProductionConfig and not app.config.get("SECRET_KEY"):
        raise RuntimeError(
            "FLASK_SECRET_KEY environment variable must be set in production. "
            "Generate one with: python -c \"import secrets; print(secrets.token_hex(32))\""
        )

    _configure_logging(app)
    _init_extensions(app)
    _register_blueprints(app)
    _register_error_handlers(app)
    _register_commands(app)

    @app.route("/health")
    def health_check() -> dict:
        """Liveness probe for load balancers and orchestration."""
        return {"status": "healthy", "service": "ignition"}

    return app


def _configure_logging(app: Flask) -> None:
    """
    Set the log level for the application and library loggers.

    Args:
        app: Flask application instance.
    """
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    app.logger.setLevel(level)
    logging.getLogger("ignition").setLevel(level)


def _init_extensions(app: Flask) -> None:
    """
    Initialize Flask extensions.

    Args:
        app: Flask application instance.
    """
    # Initialize Flask-SQLAlchemy
    db.init_app(app)

    # Initialize Flask-Migrate for database migrations
    migrate.init_app(app, db)

    # Background worker that records activity events
    events.init_app(app)


def _register_blueprints(app: Flask) -> None:
    """
    Register application blueprints.

    Args:
        app: Flask application instance.
    """
    from ignition.blueprints.setup import setup_bp
    from ignition.blueprints.auth import auth_bp
    from ignition.blueprints.admin import admin_bp

    app.register_blueprint(setup_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp)


def _register_error_handlers(app: Flask) -> None:
    """
    Register error handlers for the application.

    Args:
        app: Flask application instance.
    """

    @app.errorhandler(ApiError)
    def api_error(error: ApiError):
        """Handle validation and permission errors raised by routes."""
        return error.to_response(), error.status_code

    @app.errorhandler(HTTPException)
    def http_error(error: HTTPException):
        """Handle 404, 405 and other HTTP errors."""
        return {"error": error.name, "status": error.code}, error.code

    @app.errorhandler(Exception)
    def internal_error(error: Exception):
        """Handle anything else as a 500 Internal Server error."""
        app.logger.error(f"Unhandled error: {error}", exc_info=error)
        return {"message": str(error) or "Internal Server Error", "status": 500}, 500


def _register_commands(app: Flask) -> None:
    """
    Register CLI commands.

    Args:
        app: Flask application instance.
    """
    from ignition.core.setup import ensure_token, has_user_setup

    @app.cli.command("setup-token")
    def setup_token_command():
        """Print the setup token, creating it if needed."""
        if has_user_setup():
            click.echo("Setup has already been completed.")
            return
        click.echo(ensure_token())
