"""
Database drivers known to Ignition.

Each driver names an engine, lists the connection details it needs and can
check a set of details before a Database is saved. Only SQLite opens a real
connection; the other engines are checked for required details.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

ENGINE_ERROR = "value must be a valid database engine."
MISSING_DETAIL_ERROR = "value is required to connect to this database."


class ConnectionCheckError(Exception):
    """A connection check failed.

    field is set when the failure is tied to one connection detail.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_response(self) -> Dict[str, Any]:
        if self.field:
            return {"errors": {self.field: self.message}}
        return {"message": self.message}


class Driver:
    """Base driver: checks that the required details are present."""

    engine: str = ""
    display_name: str = ""
    required_details: Tuple[str, ...] = ()

    def __repr__(self) -> str:
        return f"<Driver {self.engine}>"

    def check_details(self, details: Dict[str, Any]) -> None:
        for key in self.required_details:
            value = details.get(key)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise ConnectionCheckError(MISSING_DETAIL_ERROR, field=key)

    def check_connection(self, details: Dict[str, Any]) -> None:
        """Raise ConnectionCheckError if details cannot be used."""
        self.check_details(details)


class H2Driver(Driver):
    engine = "h2"
    display_name = "H2"
    required_details = ("db",)


class PostgresDriver(Driver):
    engine = "postgres"
    display_name = "PostgreSQL"
    required_details = ("host", "port", "dbname", "user")

    def check_details(self, details: Dict[str, Any]) -> None:
        super().check_details(details)
        try:
            port = int(details["port"])
        except (TypeError, ValueError):
            raise ConnectionCheckError("value must be a valid port number.", field="port") from None
        if not 0 < port < 65536:
            raise ConnectionCheckError("value must be a valid port number.", field="port")


class MySQLDriver(PostgresDriver):
    engine = "mysql"
    display_name = "MySQL"


class MongoDriver(Driver):
    engine = "mongo"
    display_name = "MongoDB"
    required_details = ("host", "dbname")


class SQLiteDriver(Driver):
    engine = "sqlite"
    display_name = "SQLite"
    required_details = ("db",)

    def check_connection(self, details: Dict[str, Any]) -> None:
        self.check_details(details)
        path = Path(str(details["db"])).expanduser()
        if not path.is_file():
            raise ConnectionCheckError(f"Database file {path} does not exist.")
        engine = create_engine(f"sqlite:///{path}")
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.info("SQLite connection check failed for %s: %s", path, e)
            raise ConnectionCheckError(f"Could not connect to {path}: {e.__class__.__name__}") from e
        finally:
            engine.dispose()


DRIVERS: Dict[str, Driver] = {
    driver.engine: driver
    for driver in (H2Driver(), PostgresDriver(), MySQLDriver(), MongoDriver(), SQLiteDriver())
}


def get_driver(engine: Any) -> Optional[Driver]:
    """Return the driver for engine, or None if the engine is unknown."""
    if not isinstance(engine, str):
        return None
    return DRIVERS.get(engine.strip().lower())


def is_valid_engine(engine: Any) -> bool:
    return get_driver(engine) is not None


def check_connection(engine: str, details: Optional[Dict[str, Any]]) -> None:
    """
    Check that details can be used to connect with engine.

    Raises:
        ConnectionCheckError: If the engine is unknown or the check fails.
    """
    driver = get_driver(engine)
    if driver is None:
        raise ConnectionCheckError(ENGINE_ERROR, field="engine")
    driver.check_connection(details or {})
