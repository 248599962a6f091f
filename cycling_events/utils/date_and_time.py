import re
from datetime import UTC, datetime

# Anything but digits, separators, whitespace and the letters of AM/PM.
_DISALLOWED_CHARS = re.compile(r"[^\d/\-\s:APMapm]")
_GLUED_MERIDIEM = re.compile(r"(\d)([AaPp][Mm])\b")
_WEEKDAY = re.compile(
    r"\b(?:monday|tuesday|wednesday|thursday|friday|saturday|sunday"
    r"|mon|tues|tue|wed|thurs|thur|thu|fri|sat|sun)\b\.?",
    re.IGNORECASE,
)
_ORDINAL = re.compile(r"(\d+)(?:st|nd|rd|th)\b", re.IGNORECASE)
_FILLER = re.compile(r"(?:\bat\b|@)", re.IGNORECASE)
_ISO_INSTANT = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")
_ISO_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}T")

DATE_FORMATS = [
    "%m/%d/%Y",  # 05/10/2024
    "%m/%d/%y",  # 5/10/24
    "%m-%d-%Y",  # 05-10-2024
    "%Y-%m-%d",  # 2024-05-10
    "%Y/%m/%d",  # 2024/05/10
    "%B %d %Y",  # May 10 2024
    "%b %d %Y",  # Sep 10 2024
    "%d %B %Y",  # 10 May 2024
    "%d %b %Y",  # 10 Sep 2024
]

TIME_FORMATS = [
    "",
    " %I:%M %p",  # 8:00 AM
    " %I %p",  # 8 AM
    " %H:%M",  # 18:30
    " %H:%M:%S",  # 18:30:00
]


def clean_date_text(raw_text: str) -> str:
    """Strips a date string down to digits, separators and AM/PM markers.

    Letters left over from words (e.g. the "a" of "Sat") are dropped as whole
    tokens so only numeric dates and times remain.

    Args:
        raw_text: Date text as scraped.

    Returns:
        The cleaned text, whitespace collapsed.
    """
    text = _GLUED_MERIDIEM.sub(r"\1 \2", raw_text)
    text = _DISALLOWED_CHARS.sub(" ", text)
    tokens = [
        t for t in text.split() if not t.isalpha() or t.lower() in ("am", "pm")
    ]
    return " ".join(tokens)


def simplify_date_text(raw_text: str) -> str:
    """Removes weekdays, ordinal suffixes, commas and "at" from a date string.

    Example: "Saturday, May 10th, 2024 at 8:00am" -> "May 10 2024 8:00 am"
    """
    text = _WEEKDAY.sub(" ", raw_text)
    text = _ORDINAL.sub(r"\1", text)
    text = _FILLER.sub(" ", text)
    text = text.replace(",", " ")
    text = _GLUED_MERIDIEM.sub(r"\1 \2", text)
    return " ".join(text.split())


def parse_date(text: str | None) -> datetime | None:
    """Parses a date string into an aware UTC datetime.

    Accepts ISO 8601 strings plus the numeric and month-name layouts in
    DATE_FORMATS, each optionally followed by a time from TIME_FORMATS.
    Naive values are taken as UTC.

    Args:
        text: The date string.

    Returns:
        The parsed datetime, or None if the text is not a recognised date.
    """
    if not text:
        return None

    text = " ".join(text.split())

    if _ISO_PREFIX.match(text):
        try:
            return _as_utc(datetime.fromisoformat(text))
        except ValueError:
            pass

    for date_fmt in DATE_FORMATS:
        for time_fmt in TIME_FORMATS:
            try:
                return _as_utc(datetime.strptime(text, date_fmt + time_fmt))
            except ValueError:
                continue

    return None


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def format_iso_instant(dt: datetime) -> str:
    """Formats a datetime as a UTC instant with millisecond precision.

    Example: 2024-05-10T00:00:00.000Z
    """
    dt = _as_utc(dt)
    return f"{dt:%Y-%m-%dT%H:%M:%S}.{dt.microsecond // 1000:03d}Z"


def is_iso_instant(value: str | None) -> bool:
    return bool(value) and bool(_ISO_INSTANT.match(value))


def normalize_date(raw_text: str | None) -> str | None:
    """Normalizes scraped date text to an ISO 8601 UTC instant.

    The text is first reduced to digits, separators and AM/PM markers and
    parsed. If that fails, month-name forms are tried on the text with
    weekdays, ordinals and commas removed.

    Args:
        raw_text: Date text as scraped.

    Returns:
        The ISO instant, the input text if it cannot be parsed, or None
        for empty input.
    """
    if raw_text is None or not raw_text.strip():
        return None

    dt = parse_date(clean_date_text(raw_text))
    if dt is None:
        dt = parse_date(simplify_date_text(raw_text))
    if dt is None:
        return raw_text

    return format_iso_instant(dt)
