"""Locale resolution — short UI locale codes to database locale codes.

Every translated lookup in the storefront is scoped to two database locales:
the one resolved from the request and the fallback locale. Lookups try the
resolved locale first, then the fallback, then a raw untranslated value so
the UI never renders empty text.
"""

from enum import Enum


class Locale(Enum):
    US = "us"
    FR = "fr"
    TW = "tw"


DEFAULT_LOCALE = Locale.US

DB_LOCALES = {
    Locale.US: "en-US",
    Locale.FR: "fr-FR",
    Locale.TW: "zh-TW",
}

FALLBACK_DB_LOCALE = DB_LOCALES[DEFAULT_LOCALE]

CURRENCIES = {
    Locale.US: "USD",
    Locale.FR: "EUR",
    Locale.TW: "TWD",
}


def to_locale(value) -> Locale:
    """Coerce a short code (or Locale) into a Locale, defaulting when unknown."""
    if isinstance(value, Locale):
        return value
    try:
        return Locale(str(value).lower())
    except ValueError:
        return DEFAULT_LOCALE


def resolve_db_locale(locale) -> str:
    """Return the database locale for a short code. Never fails."""
    return DB_LOCALES.get(to_locale(locale), FALLBACK_DB_LOCALE)


def lookup_locales(locale) -> tuple[str, ...]:
    """Database locales to fetch for a request: resolved first, then fallback."""
    db_locale = resolve_db_locale(locale)
    if db_locale == FALLBACK_DB_LOCALE:
        return (db_locale,)
    return (db_locale, FALLBACK_DB_LOCALE)


def currency_for(locale) -> str:
    return CURRENCIES[to_locale(locale)]


def pick_translation(records, db_locale: str):
    """Pick the record for ``db_locale``, else the fallback locale's record."""
    records = list(records or [])
    for wanted in (db_locale, FALLBACK_DB_LOCALE):
        match = next((r for r in records if r.locale == wanted), None)
        if match is not None:
            return match
    return None


def localized(records, db_locale: str, field: str, default: str = "") -> str:
    """Two-tier lookup of one translated field, then ``default``.

    The fallback applies per field: a resolved-locale record with a blank
    value still falls through to the fallback locale's value.
    """
    records = list(records or [])
    for wanted in (db_locale, FALLBACK_DB_LOCALE):
        match = next((r for r in records if r.locale == wanted), None)
        value = getattr(match, field, None) if match is not None else None
        if value:
            return value
    return default
