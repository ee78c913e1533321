"""
Locale codes recognized by Ignition.

    Locale codes are written the way the UI translations are keyed: a
    lower-case two-letter ISO 639-1 language, optionally followed by an
    underscore and an upper-case two-letter ISO 3166-1 country, e.g. 'es'
    or 'es_MX'. Input may use either '-' or '_' as the separator and any
    letter case; normalize_locale() maps it to the canonical form and
    rejects codes that are not in RECOGNIZED_LOCALES.

"""

import re
from typing import FrozenSet, Optional

DEFAULT_LOCALE = "en"

LOCALE_ERROR = (
    "value must be a valid two-letter ISO language or language-country code."
)

_LOCALE_RE = re.compile(r"^([a-zA-Z]{2})(?:[-_]([a-zA-Z]{2}))?$")

# Languages that may be selected on their own
LANGUAGES: FrozenSet[str] = frozenset(
    {
        "ar", "bg", "ca", "cs", "da", "de", "el", "en", "es", "et",
        "fa", "fi", "fr", "ga", "he", "hi", "hr", "hu", "id", "is",
        "it", "ja", "ko", "lt", "lv", "ms", "nb", "nl", "nn", "no",
        "pl", "pt", "ro", "ru", "sk", "sl", "sr", "sv", "th", "tr",
        "uk", "vi", "zh",
    }
)

# Language-country combinations
REGIONAL_LOCALES: FrozenSet[str] = frozenset(
    {
        # English
        "en_AU", "en_BZ", "en_CA", "en_GB", "en_IE", "en_IN", "en_JM",
        "en_MY", "en_NZ", "en_PH", "en_SG", "en_TT", "en_US", "en_ZA",
        "en_ZW",
        # Spanish
        "es_AR", "es_BO", "es_CL", "es_CO", "es_CR", "es_DO", "es_EC",
        "es_ES", "es_GT", "es_HN", "es_MX", "es_NI", "es_PA", "es_PE",
        "es_PR", "es_PY", "es_SV", "es_US", "es_UY", "es_VE",
        # French
        "fr_BE", "fr_CA", "fr_CH", "fr_FR", "fr_LU",
        # German
        "de_AT", "de_CH", "de_DE", "de_LU",
        # Portuguese
        "pt_BR", "pt_PT",
        # Chinese
        "zh_CN", "zh_HK", "zh_SG", "zh_TW",
        # Nordic
        "da_DK", "fi_FI", "is_IS", "nb_NO", "nn_NO", "no_NO", "sv_FI",
        "sv_SE",
        # Everything else
        "ar_AE", "ar_EG", "ar_SA", "bg_BG", "ca_ES", "cs_CZ", "el_GR",
        "et_EE", "fa_IR", "ga_IE", "he_IL", "hi_IN", "hr_HR", "hu_HU",
        "id_ID", "it_CH", "it_IT", "ja_JP", "ko_KR", "lt_LT", "lv_LV",
        "ms_MY", "nl_BE", "nl_NL", "pl_PL", "ro_RO", "ru_RU", "sk_SK",
        "sl_SI", "sr_RS", "th_TH", "tr_TR", "uk_UA", "vi_VN",
    }
)

RECOGNIZED_LOCALES: FrozenSet[str] = LANGUAGES | REGIONAL_LOCALES


def parse_locale(value: str) -> Optional[str]:
    """Return the canonical spelling of value, or None if it is malformed."""
    m = _LOCALE_RE.match(value.strip())
    if m is None:
        return None
    language, country = m.group(1).lower(), m.group(2)
    if country is None:
        return language
    return f"{language}_{country.upper()}"


def is_recognized_locale(value: str) -> bool:
    return value in RECOGNIZED_LOCALES


def normalize_locale(value: Optional[str]) -> Optional[str]:
    """
    Normalize a locale code, e.g. 'ES' -> 'es' and 'es-mx' -> 'es_MX'.

    None passes through unchanged.

    Raises:
        ValueError: If the code is malformed or not a recognized locale.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(LOCALE_ERROR)
    lc = parse_locale(value)
    if lc is None or not is_recognized_locale(lc):
        raise ValueError(LOCALE_ERROR)
    return lc
