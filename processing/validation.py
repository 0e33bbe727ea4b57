"""
Property value validation.

Converts raw sheet answers into values Notion accepts. Every validator
returns None (or an empty list) for values that should not be sent; the
page writer omits those properties instead of failing the whole page.
"""

import re
from datetime import datetime
from typing import Optional
from urllib.parse import urlparse

from config.form_layout import (
    AVAILABILITY_OPTIONS,
    VALID_FUNDING_STAGES,
    VALID_LOCATIONS,
    VALID_VALUATIONS,
)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[\d\s\-+().]+$")
MIN_PHONE_LENGTH = 7

# Google Forms writes timestamps in the sheet's locale
DATE_FORMATS = [
    "%m/%d/%Y %H:%M:%S",
    "%d/%m/%Y %H:%M:%S",
    "%d.%m.%Y %H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%m/%d/%Y",
    "%d/%m/%Y",
    "%d.%m.%Y",
    "%Y-%m-%d",
]


def _clean(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


def validate_email(value) -> Optional[str]:
    email = _clean(value)
    if email and EMAIL_PATTERN.match(email):
        return email
    return None


def validate_url(value) -> Optional[str]:
    """Return a URL with a scheme, adding https:// when it is missing."""
    url = _clean(value)
    if not url or any(ch.isspace() for ch in url):
        return None

    parsed = urlparse(url)
    if parsed.scheme in ("http", "https") and parsed.netloc:
        return url

    parsed = urlparse(f"https://{url}")
    if parsed.netloc and "." in parsed.netloc:
        return f"https://{url}"
    return None


def validate_phone(value) -> Optional[str]:
    phone = _clean(value)
    if len(phone) >= MIN_PHONE_LENGTH and PHONE_PATTERN.match(phone):
        return phone
    return None


def validate_number(value) -> Optional[float]:
    """Finite number or None. Integral values come back as int."""
    raw = _clean(value)
    if not raw:
        return None
    try:
        number = float(raw)
    except ValueError:
        return None
    if number != number or number in (float("inf"), float("-inf")):
        return None
    return int(number) if number.is_integer() else number


def validate_date(value) -> Optional[str]:
    """
    Parse a sheet date/timestamp into an ISO 8601 string.

    Returns:
        ISO string (date or datetime) or None when unparseable
    """
    raw = _clean(value)
    if not raw:
        return None

    for fmt in DATE_FORMATS:
        try:
            parsed = datetime.strptime(raw, fmt)
        except ValueError:
            continue
        if "%H" in fmt:
            return parsed.isoformat()
        return parsed.date().isoformat()

    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).isoformat()
    except ValueError:
        return None


def parse_comma_list(value) -> list[str]:
    """Split "a, b,,c" into ["a", "b", "c"]."""
    raw = _clean(value)
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _from_vocabulary(value, vocabulary: list[str]) -> Optional[str]:
    raw = _clean(value)
    return raw if raw in vocabulary else None


def validate_location(value) -> Optional[str]:
    return _from_vocabulary(value, VALID_LOCATIONS)


def validate_valuation(value) -> Optional[str]:
    return _from_vocabulary(value, VALID_VALUATIONS)


def validate_funding_stage(value) -> Optional[str]:
    return _from_vocabulary(value, VALID_FUNDING_STAGES)


def coerce_intern_searcher(value) -> Optional[str]:
    """"intern" / "searcher" (any case) to the select option; anything else None."""
    role = _clean(value).lower()
    if role == "intern":
        return "Intern"
    if role == "searcher":
        return "Searcher"
    return None


def map_availability_option(value) -> Optional[str]:
    """
    Map a touchpoint-window answer onto a select option.

    The full label (text before the time range) is tried against every option
    first, so "Late afternoon" never lands on "Late evening". Only then is the
    first word of each label tried, in option order.
    """
    answer = _clean(value).lower()
    if not answer:
        return None

    labels = [(option, option.lower().split(" (")[0]) for option in AVAILABILITY_OPTIONS]

    # Longest labels first so "late evening" beats "evening"
    for option, label in sorted(labels, key=lambda pair: len(pair[1]), reverse=True):
        if label in answer:
            return option

    for option, label in labels:
        if label.split(" ")[0] in answer:
            return option

    if "flex" in answer:
        return AVAILABILITY_OPTIONS[-1]
    return None
