"""
Application settings for Ignition.

Settings are declared with define_setting() and stored as strings in the
`setting` table. A value is resolved in this order: database row,
environment variable (IGNITION_<KEY>), declared default.

Reads go through a process-wide cache. It is dropped whenever any session
commits or rolls back, and every write also bumps the `settings-last-updated`
row, which other processes compare against their cached copy at most once
every LAST_UPDATE_CHECK_SECONDS.
"""

import logging
import os
import threading
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import event
from sqlalchemy.orm import Session as OrmSession

from ignition.models import db, Setting
from .helpers import NON_BLANK_ERROR, coerce_boolean, is_non_blank_string
from .locales import DEFAULT_LOCALE, normalize_locale

logger = logging.getLogger(__name__)

SETTING_TYPES = ("string", "boolean", "integer")

LAST_UPDATED_KEY = "settings-last-updated"
LAST_UPDATE_CHECK_SECONDS = 60


@dataclass(frozen=True)
class SettingDefinition:
    """A declared setting."""

    key: str
    description: str
    type: str = "string"
    default: Any = None
    # Normalizes (and validates) a value before it is stored; raises ValueError
    setter: Optional[Callable[[Any], Any]] = None
    # "public" settings are readable without a session, "internal" ones are
    # never exposed through the API.
    visibility: str = "admin"
    # Sensitive values are masked when listed
    sensitive: bool = False

    @property
    def env_var(self) -> str:
        return "IGNITION_" + self.key.replace("-", "_").upper()


_REGISTRY: Dict[str, SettingDefinition] = {}

_cache: Optional[Dict[str, str]] = None
_cache_lock = threading.Lock()
# Bumped by clear_cache(); a load that overlaps a clear is not kept
_generation = 0
_last_update_check = 0.0


def define_setting(
    key: str,
    description: str,
    type: str = "string",
    default: Any = None,
    setter: Optional[Callable[[Any], Any]] = None,
    visibility: str = "admin",
    sensitive: bool = False,
) -> SettingDefinition:
    """Declare a setting and add it to the registry."""
    if type not in SETTING_TYPES:
        raise ValueError(f"Unknown setting type: {type}")
    definition = SettingDefinition(
        key=key,
        description=description,
        type=type,
        default=default,
        setter=setter,
        visibility=visibility,
        sensitive=sensitive,
    )
    _REGISTRY[key] = definition
    return definition


def get_definition(key: str) -> SettingDefinition:
    try:
        return _REGISTRY[key]
    except KeyError:
        raise KeyError(f"Unknown setting: {key}") from None


def all_definitions(visibility: Optional[str] = None) -> List[SettingDefinition]:
    return [
        d for d in _REGISTRY.values() if visibility is None or d.visibility == visibility
    ]


# ====================== Cache ======================


def _stored_value(key: str) -> Optional[str]:
    """The committed (or this session's flushed) value of a row, bypassing the cache."""
    return db.session.query(Setting.value).filter(Setting.key == key).scalar()


def _cache_is_stale(cache: Dict[str, str]) -> bool:
    """Check, at most once per interval, whether another process wrote settings."""
    global _last_update_check
    now = time.monotonic()
    if now - _last_update_check < LAST_UPDATE_CHECK_SECONDS:
        return False
    _last_update_check = now
    stale = _stored_value(LAST_UPDATED_KEY) != cache.get(LAST_UPDATED_KEY)
    if stale:
        logger.debug("Settings changed in another process; reloading cache")
    return stale


def _load_cache() -> Dict[str, str]:
    global _cache, _last_update_check
    with _cache_lock:
        cache, generation = _cache, _generation
    if cache is not None and not _cache_is_stale(cache):
        return cache

    values = Setting.all_values()
    with _cache_lock:
        if generation == _generation:
            _cache = values
            _last_update_check = time.monotonic()
            logger.debug("Loaded %d settings into cache", len(values))
    return values


def clear_cache() -> None:
    """Drop the cache; the next read reloads it from the database."""
    global _cache, _generation
    with _cache_lock:
        _cache = None
        _generation += 1


def restore_cache() -> Dict[str, str]:
    """Reload the cache from the database and return a copy of it."""
    clear_cache()
    return dict(_load_cache())


def cache_loaded() -> bool:
    return _cache is not None


def reset_last_update_check() -> None:
    """Make the next cached read compare against the database."""
    global _last_update_check
    _last_update_check = 0.0


@event.listens_for(OrmSession, "after_commit")
def _clear_after_commit(session) -> None:
    clear_cache()


@event.listens_for(OrmSession, "after_soft_rollback")
def _clear_after_rollback(session, previous_transaction) -> None:
    clear_cache()


# ====================== Conversion ======================


def _parse(definition: SettingDefinition, raw: str) -> Any:
    if definition.type == "boolean":
        return coerce_boolean(raw)
    if definition.type == "integer":
        return int(raw)
    return raw


def _coerce(definition: SettingDefinition, value: Any) -> Any:
    if value is None:
        return None
    if definition.type == "boolean":
        return coerce_boolean(value)
    if definition.type == "integer":
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ValueError("value must be an integer.") from None
    return str(value)


def _serialize(definition: SettingDefinition, value: Any) -> str:
    if definition.type == "boolean":
        return "true" if value else "false"
    return str(value)


# ====================== Access ======================


def get_raw(key: str, cached: bool = True) -> Optional[str]:
    """The stored string for key: database row first, then environment."""
    definition = get_definition(key)
    value = _load_cache().get(key) if cached else _stored_value(key)
    if value is None:
        value = os.environ.get(definition.env_var) or None
    return value


def get(key: str, cached: bool = True) -> Any:
    """
    Typed value of a setting, falling back to its default.

    Pass cached=False to read the database row directly, e.g. for values
    that authorize a request.
    """
    definition = get_definition(key)
    raw = get_raw(key, cached=cached)
    if raw is None:
        return definition.default
    return _parse(definition, raw)


def _write_row(key: str, raw: Optional[str]) -> None:
    row = db.session.get(Setting, key)
    if raw is None:
        if row is not None:
            db.session.delete(row)
    elif row is None:
        db.session.add(Setting(key=key, value=raw))
    else:
        row.value = raw


def set_value(key: str, value: Any) -> Any:
    """
    Store a setting in the current database session.

    The caller owns the transaction; nothing is committed here. Setting None
    deletes the row so the environment or default value applies again.

    Returns:
        The normalized value that was stored.

    Raises:
        ValueError: If the setter or type coercion rejects the value.
    """
    definition = get_definition(key)
    if definition.setter is not None:
        value = definition.setter(value)
    value = _coerce(definition, value)

    _write_row(key, None if value is None else _serialize(definition, value))
    _write_row(LAST_UPDATED_KEY, datetime.utcnow().isoformat())
    db.session.flush()
    clear_cache()
    logger.debug("Setting %s updated", key)
    return value


def public_values() -> Dict[str, Any]:
    """Values of every public setting, keyed with underscores."""
    return {d.key.replace("-", "_"): get(d.key) for d in all_definitions("public")}


# ====================== Declared settings ======================


def _non_blank(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not is_non_blank_string(value):
        raise ValueError(NON_BLANK_ERROR)
    return value.strip()


site_name = define_setting(
    "site-name",
    "The name used for this instance.",
    default="Ignition",
    setter=_non_blank,
    visibility="public",
)

site_locale = define_setting(
    "site-locale",
    "The default language for this instance.",
    default=DEFAULT_LOCALE,
    setter=normalize_locale,
    visibility="public",
)

anon_tracking_enabled = define_setting(
    "anon-tracking-enabled",
    "Enable the collection of anonymous usage data.",
    type="boolean",
    default=True,
    visibility="public",
)

admin_email = define_setting(
    "admin-email",
    "The email address users should be referred to if they encounter a problem.",
)

setup_token = define_setting(
    "setup-token",
    "Token that authorizes the one-time initial setup call.",
    visibility="internal",
)

email_smtp_host = define_setting(
    "email-smtp-host", "The address of the SMTP server that handles your emails."
)

email_smtp_port = define_setting(
    "email-smtp-port", "The port your SMTP server uses for outgoing emails.", type="integer"
)

email_smtp_username = define_setting("email-smtp-username", "SMTP username.")

email_smtp_password = define_setting(
    "email-smtp-password", "SMTP password.", sensitive=True
)

email_from_address = define_setting(
    "email-from-address", "Email address you want to use as the sender."
)

slack_token = define_setting(
    "slack-token", "Slack API bot token used to send messages.", sensitive=True
)

settings_last_updated = define_setting(
    LAST_UPDATED_KEY,
    "When any setting was last written; compared to detect changes made by other processes.",
    visibility="internal",
)
