"""Tests for the database driver registry and connection checks."""

import pytest

from ignition.core import drivers
from ignition.core.drivers import ConnectionCheckError, check_connection


class TestDriverRegistry:
    """Tests for engine lookup."""

    @pytest.mark.parametrize("engine", ["h2", "postgres", "mysql", "sqlite", "mongo", "Postgres "])
    def test_known_engines(self, engine):
        assert drivers.is_valid_engine(engine)

    @pytest.mark.parametrize("engine", [None, "", "oracle9000", 3])
    def test_unknown_engines(self, engine):
        assert not drivers.is_valid_engine(engine)
        assert drivers.get_driver(engine) is None

    def test_display_names(self):
        assert drivers.get_driver("postgres").display_name == "PostgreSQL"


class TestConnectionChecks:
    """Tests for driver-specific detail checks."""

    def test_unknown_engine(self):
        with pytest.raises(ConnectionCheckError) as exc_info:
            check_connection("oracle9000", {})
        assert exc_info.value.to_response() == {"errors": {"engine": drivers.ENGINE_ERROR}}

    @pytest.mark.parametrize(
        "engine,details,field",
        [
            ("h2", {}, "db"),
            ("postgres", {"port": 5432, "dbname": "a", "user": "u"}, "host"),
            ("mysql", {"host": "h", "dbname": "a", "user": "u"}, "port"),
            ("mongo", {"host": "h", "dbname": "  "}, "dbname"),
        ],
    )
    def test_missing_detail(self, engine, details, field):
        with pytest.raises(ConnectionCheckError) as exc_info:
            check_connection(engine, details)
        assert exc_info.value.field == field

    @pytest.mark.parametrize("port", [0, 70000, "abc"])
    def test_invalid_port(self, port):
        details = {"host": "h", "port": port, "dbname": "a", "user": "u"}
        with pytest.raises(ConnectionCheckError) as exc_info:
            check_connection("postgres", details)
        assert exc_info.value.field == "port"

    def test_sqlite_connects(self, tmp_path):
        db_file = tmp_path / "data.db"
        db_file.write_bytes(b"")

        check_connection("sqlite", {"db": str(db_file)})

    def test_sqlite_missing_file(self, tmp_path):
        with pytest.raises(ConnectionCheckError) as exc_info:
            check_connection("sqlite", {"db": str(tmp_path / "nope.db")})
        assert exc_info.value.field is None
        assert "does not exist" in exc_info.value.to_response()["message"]
