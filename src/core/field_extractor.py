"""
Field Extractor Module - Deterministic Calendar Field Extraction

Turns a free-text scheduling request into the fields of a calendar event
using ordered pattern-matching rules. Every rule list is evaluated in its
declared order and the first match wins; when nothing matches, a fixed
default is used, so extraction never fails.
"""

import re
from dataclasses import dataclass
from datetime import date
from typing import Callable, List, Optional, Tuple

from dateutil.relativedelta import relativedelta, MO, TU, WE, FR

DEFAULT_TIME = "10:00 AM"
DEFAULT_TITLE = "Scheduled Meeting"
DEFAULT_ATTENDEES = "team@company.com"

DATE_FORMAT = "%Y-%m-%d"

TIME_PATTERN = re.compile(r"(\d{1,2})(am|pm|:\d{2})", re.IGNORECASE)

TITLE_PATTERNS: List[re.Pattern] = [
    re.compile(r"schedule (?:a |an )?(.+?)(?:meeting|event|call|session)", re.IGNORECASE),
    re.compile(r"create (?:a |an )?(.+?)(?:meeting|event|call|session)", re.IGNORECASE),
    re.compile(r"book (?:a |an )?(.+?)(?:meeting|event|call|session)", re.IGNORECASE),
]

ATTENDEE_RULES: List[Tuple[str, str]] = [
    ("production team", "production-team@company.com"),
    ("quality", "quality@company.com"),
    ("supplier", "suppliers@company.com"),
    ("management", "management@company.com"),
]


def _tomorrow(today: date) -> date:
    return today + relativedelta(days=+1)


def _next_weekday(weekday) -> Callable[[date], date]:
    """Resolver for the next occurrence of a weekday, never today itself."""
    def resolve(today: date) -> date:
        return today + relativedelta(days=+1, weekday=weekday(+1))
    return resolve


# Order matters: "friday" is checked before "wednesday", and so on.
DATE_RULES: List[Tuple[str, Callable[[date], date]]] = [
    ("tomorrow", _tomorrow),
    ("next monday", _next_weekday(MO)),
    ("next tuesday", _next_weekday(TU)),
    ("friday", _next_weekday(FR)),
    ("wednesday", _next_weekday(WE)),
]


@dataclass(frozen=True)
class EventFields:
    """Structured fields extracted from a scheduling request."""
    title: str
    date: str
    time: str
    attendees: str
    description: str


def normalize_time(time_str: str) -> str:
    """
    Normalize a matched time token.

    "10:30" is upper-cased as-is; "3pm" becomes "3:00 PM".
    """
    if ':' in time_str:
        return time_str.upper()
    hour = int(re.match(r"\d+", time_str).group(0))
    suffix = 'PM' if 'pm' in time_str.lower() else 'AM'
    return f"{hour}:00 {suffix}"


def extract_time(query: str) -> str:
    match = TIME_PATTERN.search(query)
    return normalize_time(match.group(0)) if match else DEFAULT_TIME


def extract_date(query: str, today: date) -> str:
    """Resolve the first recognized date phrase against ``today``."""
    lower_query = query.lower()
    for phrase, resolve in DATE_RULES:
        if phrase in lower_query:
            return resolve(today).strftime(DATE_FORMAT)
    return _tomorrow(today).strftime(DATE_FORMAT)


def extract_title(query: str) -> str:
    for pattern in TITLE_PATTERNS:
        match = pattern.search(query)
        if match:
            return match.group(1).strip() + ' meeting'
    return DEFAULT_TITLE


def extract_attendees(query: str) -> str:
    lower_query = query.lower()
    for phrase, address in ATTENDEE_RULES:
        if phrase in lower_query:
            return address
    return DEFAULT_ATTENDEES


def extract(query: str, today: Optional[date] = None) -> EventFields:
    """
    Extract calendar event fields from a free-text request.

    Args:
        query: The raw scheduling request
        today: Reference date for relative phrases (defaults to the system date)

    Returns:
        A fully populated EventFields; unmatched fields fall back to defaults
    """
    if today is None:
        today = date.today()

    return EventFields(
        title=extract_title(query),
        date=extract_date(query, today),
        time=extract_time(query),
        attendees=extract_attendees(query),
        description=query
    )
