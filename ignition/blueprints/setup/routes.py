"""
Setup blueprint routes.

Provides the first-run API: creating the first admin user, applying initial
settings, optionally adding the first database, validating a database before
setup, and the admin onboarding checklist.
"""

from typing import Any, Dict, Optional

from flask import Blueprint, current_app, jsonify, request

from ignition.core import checklist, drivers, settings
from ignition.core import session as session_mw
from ignition.core.errors import ValidationError
from ignition.core.events import publish_event
from ignition.core.helpers import (
    EMAIL_ERROR,
    MAP_ERROR,
    NON_BLANK_ERROR,
    as_map,
    coerce_boolean,
    is_email,
    is_non_blank_string,
)
from ignition.core.locales import normalize_locale
from ignition.core.security import PASSWORD_ERROR, is_valid_password, require_superuser
from ignition.core.setup import TOKEN_ERROR, rotate_token, token_match
from ignition.models import db, Database, User


setup_bp = Blueprint(
    "setup",
    __name__,
    url_prefix="/api/setup",
)

EMAIL_IN_USE_ERROR = "Email address already in use."


def _json_body() -> Dict[str, Any]:
    return as_map(request.get_json(silent=True))


def _require_token(token: Any) -> None:
    if not token_match(token):
        raise ValidationError("token", TOKEN_ERROR)


def _require_non_blank(field: str, value: Any) -> str:
    if not is_non_blank_string(value):
        raise ValidationError(field, NON_BLANK_ERROR)
    return value.strip()


def _coerce_flag(field: str, value: Any) -> Optional[bool]:
    try:
        return coerce_boolean(value)
    except ValueError as e:
        raise ValidationError(field, str(e)) from None


def _validate_database(spec: Any) -> Dict[str, Any]:
    """Validate the optional database section; flags get their defaults."""
    if not isinstance(spec, dict):
        raise ValidationError("database", MAP_ERROR)
    driver = drivers.get_driver(spec.get("engine"))
    if driver is None:
        raise ValidationError("engine", drivers.ENGINE_ERROR)
    details = spec.get("details")
    if details is not None and not isinstance(details, dict):
        raise ValidationError("details", MAP_ERROR)
    database = {
        "engine": driver.engine,
        "name": _require_non_blank("name", spec.get("name")),
        "details": details or {},
    }
    for flag, default in Database.FLAG_DEFAULTS.items():
        value = _coerce_flag(flag, spec.get(flag))
        database[flag] = default if value is None else value
    return database


def validate_setup_request(body: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate a setup request body.

    Checks run in a fixed order and stop at the first failure.

    Returns:
        The normalized request values.

    Raises:
        ValidationError: Naming the first field that failed.
    """
    _require_token(body.get("token"))

    prefs = as_map(body.get("prefs"))
    user = as_map(body.get("user"))

    site_name = _require_non_blank("site_name", prefs.get("site_name"))
    try:
        site_locale = normalize_locale(prefs.get("site_locale"))
    except ValueError as e:
        raise ValidationError("site_locale", str(e)) from None
    allow_tracking = _coerce_flag("allow_tracking", prefs.get("allow_tracking"))

    first_name = _require_non_blank("first_name", user.get("first_name"))
    last_name = _require_non_blank("last_name", user.get("last_name"))
    email = user.get("email")
    if not is_email(email):
        raise ValidationError("email", EMAIL_ERROR)
    email = email.strip().lower()
    password = user.get("password")
    if not is_valid_password(password):
        raise ValidationError("password", PASSWORD_ERROR)

    database = body.get("database")
    if database is not None:
        database = _validate_database(database)

    if User.query.filter_by(email=email).first() is not None:
        raise ValidationError("email", EMAIL_IN_USE_ERROR)

    return {
        "site_name": site_name,
        "site_locale": site_locale,
        "allow_tracking": True if allow_tracking is None else allow_tracking,
        "first_name": first_name,
        "last_name": last_name,
        "email": email,
        "password": password,
        "database": database,
    }


@setup_bp.route("", methods=["POST"])
def setup():
    """
    Create the first admin user and apply initial settings.

    Everything after validation happens in one transaction; if any step
    fails, including setting the session cookie, nothing is kept and the
    setup token stays valid.
    """
    values = validate_setup_request(_json_body())

    try:
        user = User(
            first_name=values["first_name"],
            last_name=values["last_name"],
            email=values["email"],
            is_superuser=True,
        )
        user.set_password(values["password"])
        db.session.add(user)
        db.session.flush()
        settings.set_value("admin-email", user.email)

        database = None
        if values["database"]:
            database = Database(**values["database"])
            db.session.add(database)
            db.session.flush()

        settings.set_value("site-name", values["site_name"])
        if values["site_locale"]:
            settings.set_value("site-locale", values["site_locale"])
        settings.set_value("anon-tracking-enabled", values["allow_tracking"])

        rotate_token()

        session = session_mw.create_session(user)
        user.update_last_login()
        session_id, user_id = session.id, user.id
        database_event = (
            {"database_id": database.id, "name": database.name, "engine": database.engine, "user_id": user_id}
            if database is not None
            else None
        )

        response = jsonify({"id": session_id})
        session_mw.set_session_cookie(response, session_id)
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.warning("Setup failed; all changes rolled back")
        raise

    current_app.logger.info(f"Setup complete: admin user '{values['email']}' created")

    publish_event("user-joined", {"user_id": user_id})
    if database_event:
        publish_event("database-create", database_event)

    return response


@setup_bp.route("/validate", methods=["POST"])
def validate():
    """Check a token and database connection details without saving anything."""
    body = _json_body()
    _require_token(body.get("token"))

    spec = as_map(body.get("details"))
    engine = spec.get("engine")
    if not drivers.is_valid_engine(engine):
        raise ValidationError("engine", drivers.ENGINE_ERROR)

    details = spec.get("details")
    try:
        drivers.check_connection(engine, details if isinstance(details, dict) else {})
    except drivers.ConnectionCheckError as e:
        current_app.logger.info(f"Database connection check failed: {e.message}")
        return jsonify(e.to_response()), 400

    return {"valid": True}


@setup_bp.route("/admin_checklist", methods=["GET"])
@require_superuser
def admin_checklist():
    """Onboarding checklist for administrators."""
    return jsonify(checklist.admin_checklist())
