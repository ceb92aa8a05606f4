import re
from datetime import datetime

import dateparser

# "24 juni 2025": day, month name, year
DATE_PATTERN = re.compile(r"^\d{1,2} [a-z]+ \d{4}$", re.IGNORECASE)

DATE_LANGUAGES = ["nl", "fr", "en", "de"]
DATE_SETTINGS = {
    "DATE_ORDER": "DMY",
    "PREFER_DAY_OF_MONTH": "first",
    "RETURN_AS_TIMEZONE_AWARE": False,
    "REQUIRE_PARTS": ["day", "month", "year"],
}


def is_event_date(date_str):
    """True when the string has the "DD monthname YYYY" shape."""
    if not isinstance(date_str, str):
        return False
    return bool(DATE_PATTERN.match(" ".join(date_str.split())))


def parse_event_date(date_str):
    """
    Parse a "DD monthname YYYY" string into a datetime.
    Month names may be Dutch, French, English or German.
    Returns None for anything else (including "Date not found").
    """
    if not is_event_date(date_str):
        return None
    return dateparser.parse(" ".join(date_str.split()), languages=DATE_LANGUAGES, settings=DATE_SETTINGS)


def date_sort_key(date_str):
    """Sort key putting unparseable dates after every real date."""
    parsed = parse_event_date(date_str)
    if parsed is None:
        return (1, datetime.min)
    return (0, parsed)


def sort_dates(dates):
    """Stable chronological sort of date strings."""
    return sorted(dates, key=date_sort_key)
