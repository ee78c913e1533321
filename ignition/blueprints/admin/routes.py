"""
Admin blueprint routes.

Provides the settings API. These routes are restricted to superusers only.
"""

import os
from typing import Any, Dict

from flask import Blueprint, Response, current_app, jsonify, request

from ignition.core import settings
from ignition.core.errors import ApiError, ValidationError
from ignition.core.helpers import MAP_ERROR
from ignition.core.security import require_superuser
from ignition.models import db

admin_bp = Blueprint(
    "admin",
    __name__,
    url_prefix="/api/setting",
)

MASKED_VALUE = "**********"


def _definition(key: str) -> settings.SettingDefinition:
    try:
        definition = settings.get_definition(key)
    except KeyError:
        raise ApiError("Not found.", status_code=404) from None
    if definition.visibility == "internal":
        raise ApiError("Not found.", status_code=404)
    return definition


def _describe(definition: settings.SettingDefinition) -> Dict[str, Any]:
    value = settings.get(definition.key)
    if definition.sensitive and value is not None:
        value = MASKED_VALUE
    return {
        "key": definition.key,
        "value": value,
        "description": definition.description,
        "default": definition.default,
        "env_name": definition.env_var,
        "is_env_setting": bool(os.environ.get(definition.env_var)),
    }


def _apply(values: Dict[str, Any]) -> None:
    """Set several settings in one transaction."""
    try:
        for key, value in values.items():
            _definition(key)
            try:
                settings.set_value(key, value)
            except ValueError as e:
                raise ValidationError(key, str(e)) from None
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    current_app.logger.info(f"Settings updated: {', '.join(sorted(values))}")


@admin_bp.route("", methods=["GET"])
@require_superuser
def list_settings():
    """All settings that are not internal."""
    return jsonify(
        [_describe(d) for d in settings.all_definitions() if d.visibility != "internal"]
    )


@admin_bp.route("", methods=["PUT"])
@require_superuser
def update_settings():
    """Update several settings at once."""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("body", MAP_ERROR)
    _apply(body)
    return Response(status=204)


@admin_bp.route("/<key>", methods=["GET"])
@require_superuser
def get_setting(key: str):
    """A single setting's value."""
    return jsonify(_describe(_definition(key))["value"])


@admin_bp.route("/<key>", methods=["PUT"])
@require_superuser
def put_setting(key: str):
    """Update a single setting from {"value": ...}."""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("body", MAP_ERROR)
    _apply({key: body.get("value")})
    return Response(status=204)
