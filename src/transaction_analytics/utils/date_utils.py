"""Date parsing utilities.

Transaction dates are carried as the strings the extractor produced. They
are parsed only to order records in time and to format them for display;
the stored string is never rewritten.
"""

import re
from datetime import date, datetime

# Accepted transaction date formats.
#
# Extracted records are expected in ISO form (YYYY-MM-DD). Other layouts are
# recognized for ordering and display. Slash-separated dates are read as US
# (MM/DD/YYYY); period-separated dates are read as European (DD.MM.YYYY).
DATE_PATTERNS = [
    (r"^(\d{4})-(\d{1,2})-(\d{1,2})$", "%Y-%m-%d"),
    (r"^(\d{1,2})/(\d{1,2})/(\d{4})$", "%m/%d/%Y"),
    (r"^(\d{1,2})/(\d{1,2})/(\d{2})$", "%m/%d/%y"),
    (r"^(\d{1,2})\.(\d{1,2})\.(\d{4})$", "%d.%m.%Y"),
    (r"^(\d{1,2})-(\w{3})-(\d{4})$", "%d-%b-%Y"),
    (r"^(\w{3})\s+(\d{1,2}),?\s+(\d{4})$", "%b %d, %Y"),
    (r"^(\w+)\s+(\d{1,2}),?\s+(\d{4})$", "%B %d, %Y"),
    (r"^(\d{8})$", "%Y%m%d"),
]

COMPILED_PATTERNS = [(re.compile(pattern), fmt) for pattern, fmt in DATE_PATTERNS]


def parse_date(raw_date: object) -> date:
    """Parse a transaction date.

    Handles:
    - date / datetime objects (datetime is truncated to its date)
    - ISO: 2024-01-15
    - US: 01/15/2024, 1/15/24
    - European: 15.01.2024
    - Text: 15-Jan-2024, Jan 15, 2024, January 15, 2024
    - Compact: 20240115

    Args:
        raw_date: The raw date value.

    Returns:
        Parsed date object.

    Raises:
        ValueError: If the date cannot be parsed.
    """
    if isinstance(raw_date, datetime):
        return raw_date.date()
    if isinstance(raw_date, date):
        return raw_date
    if not isinstance(raw_date, str) or not raw_date.strip():
        raise ValueError(f"Empty or non-string date: {raw_date!r}")

    date_str = raw_date.strip()
    # Normalize "Jan 15,2024" style spacing before matching
    date_str = re.sub(r",(?=\S)", ", ", date_str)

    for pattern, fmt in COMPILED_PATTERNS:
        if pattern.match(date_str):
            try:
                return datetime.strptime(date_str, fmt).date()
            except ValueError:
                continue

    raise ValueError(f"Cannot parse date: '{raw_date}'")


def as_date_string(value: object) -> str:
    """Return the stored form of a transaction date.

    Strings are kept exactly as given, including ones that do not parse.
    ``date`` and ``datetime`` objects are written in ISO form.

    Raises:
        ValueError: If the value is missing.
    """
    if value is None:
        raise ValueError("Date is missing")
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def date_sort_key(raw_date: str) -> tuple[int, int, str]:
    """Chronological sort key for a stored date string.

    Parseable dates sort by calendar day, then by their text. Unparseable
    dates sort after every parseable one, by their text.
    """
    try:
        return (0, parse_date(raw_date).toordinal(), raw_date)
    except ValueError:
        return (1, 0, raw_date)


def display_date(raw_date: str, fmt: str = "%Y-%m-%d") -> str:
    """Format a stored date string, or return it unchanged if it does not parse."""
    try:
        return parse_date(raw_date).strftime(fmt)
    except ValueError:
        return raw_date
