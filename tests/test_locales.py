"""Tests for locale normalization."""

import pytest

from ignition.core.locales import (
    LOCALE_ERROR,
    RECOGNIZED_LOCALES,
    normalize_locale,
    parse_locale,
)


@pytest.mark.parametrize(
    "value,expected",
    [
        ("en", "en"),
        ("ES", "es"),
        ("es-mx", "es_MX"),
        ("es_MX", "es_MX"),
        ("PT-br", "pt_BR"),
        (" fr ", "fr"),
        (None, None),
    ],
)
def test_normalize_locale(value, expected):
    assert normalize_locale(value) == expected


@pytest.mark.parametrize("value", ["eng-USA", "en-EN", "xx", "e", "en_", "en-us-x", 7])
def test_rejects_invalid_locales(value):
    with pytest.raises(ValueError, match="two-letter ISO"):
        normalize_locale(value)


def test_parse_only_checks_format():
    assert parse_locale("en-en") == "en_EN"
    assert parse_locale("eng-USA") is None


def test_recognized_locales_are_canonical():
    for locale in RECOGNIZED_LOCALES:
        assert parse_locale(locale) == locale


def test_error_message():
    assert "valid two-letter ISO language or language-country code" in LOCALE_ERROR
