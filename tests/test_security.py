"""
Tests for password rules, connection detail encryption and value helpers.
"""

import pytest
from cryptography.fernet import Fernet

from ignition.core.helpers import BOOLEAN_ERROR, coerce_boolean, is_email
from ignition.core.security import (
    count_character_kinds,
    decrypt_details,
    encrypt_details,
    is_valid_password,
)
from ignition.models import db, Database


@pytest.fixture
def app_context(app):
    with app.app_context():
        yield app


class TestPasswordComplexity:
    """Tests for the configurable password rules."""

    def test_count_character_kinds(self):
        assert count_character_kinds("abC1!") == {
            "total": 5,
            "lower": 2,
            "upper": 1,
            "digit": 1,
            "special": 1,
        }

    @pytest.mark.parametrize(
        "password,valid",
        [
            ("abcde1", True),
            ("anythingUP12!!", True),
            ("abcdef", False),
            ("abc1", False),
            ("", False),
            (None, False),
        ],
    )
    def test_normal(self, app_context, password, valid):
        assert is_valid_password(password) is valid

    def test_weak(self, app_context, monkeypatch):
        monkeypatch.setitem(app_context.config, "PASSWORD_COMPLEXITY", "weak")

        assert is_valid_password("abcdef") is True
        assert is_valid_password("abcde") is False

    def test_strong(self, app_context, monkeypatch):
        monkeypatch.setitem(app_context.config, "PASSWORD_COMPLEXITY", "strong")

        assert is_valid_password("abcde1") is False
        assert is_valid_password("abCDe1!x") is True

    def test_length_override(self, app_context, monkeypatch):
        monkeypatch.setitem(app_context.config, "PASSWORD_LENGTH", 10)

        assert is_valid_password("abcde1") is False
        assert is_valid_password("abcdefghi1") is True


class TestDetailsEncryption:
    """Tests for encrypting database connection details."""

    DETAILS = {"host": "db.example.com", "password": "hunter22"}

    def test_plain_json_without_key(self, app_context):
        stored = encrypt_details(self.DETAILS)

        assert stored.startswith("{")
        assert decrypt_details(stored) == self.DETAILS

    def test_encrypted_with_key(self, app_context, monkeypatch):
        monkeypatch.setitem(
            app_context.config, "IGNITION_ENCRYPTION_KEY", Fernet.generate_key().decode()
        )

        stored = encrypt_details(self.DETAILS)

        assert "hunter22" not in stored
        assert decrypt_details(stored) == self.DETAILS

    def test_wrong_key(self, app_context, monkeypatch):
        monkeypatch.setitem(
            app_context.config, "IGNITION_ENCRYPTION_KEY", Fernet.generate_key().decode()
        )
        stored = encrypt_details(self.DETAILS)
        monkeypatch.setitem(
            app_context.config, "IGNITION_ENCRYPTION_KEY", Fernet.generate_key().decode()
        )

        assert decrypt_details(stored) == {}

    def test_database_masks_password(self, app_context, monkeypatch):
        monkeypatch.setitem(
            app_context.config, "IGNITION_ENCRYPTION_KEY", Fernet.generate_key().decode()
        )
        database = Database(name="Warehouse", engine="postgres", details=self.DETAILS)
        db.session.add(database)
        db.session.commit()

        assert "hunter22" not in database.details_blob
        assert database.details == self.DETAILS
        assert database.to_dict()["details"]["password"] == "**********"


class TestHelpers:
    """Tests for value coercion helpers."""

    @pytest.mark.parametrize(
        "value,expected",
        [(True, True), (False, False), ("TRUE", True), ("false", False), (None, None)],
    )
    def test_coerce_boolean(self, value, expected):
        assert coerce_boolean(value) is expected

    @pytest.mark.parametrize("value", ["yes", "1", 1, [], {}])
    def test_coerce_boolean_rejects(self, value):
        with pytest.raises(ValueError) as exc_info:
            coerce_boolean(value)
        assert str(exc_info.value) == BOOLEAN_ERROR

    @pytest.mark.parametrize(
        "value,valid",
        [
            ("rasta@toucan.com", True),
            ("Rasta.Toucan@Example.COM", True),
            ("anything", False),
            ("no@tld", False),
            (None, False),
        ],
    )
    def test_is_email(self, value, valid):
        assert is_email(value) is valid
