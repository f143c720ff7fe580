"""
Utility functions for commons-batch.
"""

import logging
import re
import warnings
from datetime import date, datetime
from typing import Any, Optional

import pandas as pd

logger = logging.getLogger(__name__)

# EXIF format: "2024:01:15 10:30:00" (colons in the date part)
EXIF_DATE_PREFIX = re.compile(r"^(\d{4}):(\d{2}):(\d{2})")
_HAS_DIGIT = re.compile(r"\d")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a metadata timestamp into a datetime.

    Supported inputs:
    - datetime objects (returned as is, pandas Timestamps included)
    - date objects (midnight of that day)
    - EXIF strings with colon-separated dates (e.g., "2024:01:15 10:30:00")
    - Free-form date text (e.g., "2024-01-15T10:30", "January 15, 2024")

    Args:
        value: The raw metadata value

    Returns:
        datetime object, or None if the value cannot be parsed
    """
    if isinstance(value, datetime):
        return None if pd.isna(value) else value

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    if not isinstance(value, str):
        return None

    text = value.strip().rstrip("\x00")
    if not text:
        return None

    # Words like "now" and "today" parse to the current time
    if not _HAS_DIGIT.search(text):
        logger.debug("Timestamp without digits '%s'", value)
        return None

    # Only the date part of an EXIF timestamp uses colons
    text = EXIF_DATE_PREFIX.sub(r"\1-\2-\3", text)

    try:
        with warnings.catch_warnings():
            # pandas warns when it falls back to dateutil for free-form text
            warnings.simplefilter("ignore", UserWarning)
            parsed = pd.to_datetime(text, errors="coerce")
    except (ValueError, TypeError, OverflowError) as e:
        logger.debug("Failed to parse timestamp '%s': %s", value, e)
        return None

    if pd.isna(parsed):
        logger.debug("Unparseable timestamp '%s'", value)
        return None

    return parsed.to_pydatetime()


def format_date(value: Any) -> Optional[str]:
    """
    Format a metadata timestamp as YYYY-MM-DD.

    Args:
        value: Any input accepted by parse_timestamp

    Returns:
        Formatted date, or None if the value cannot be parsed
    """
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    return f"{parsed.year:04d}-{parsed.month:02d}-{parsed.day:02d}"


def format_date_time(value: Any) -> Optional[str]:
    """
    Format a metadata timestamp as YYYY-MM-DD HH:mm.

    The wall-clock fields of the parsed value are used as they are; an
    offset in the input is not converted to the local timezone.

    Args:
        value: Any input accepted by parse_timestamp

    Returns:
        Formatted date and time, or None if the value cannot be parsed
    """
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    return (
        f"{parsed.year:04d}-{parsed.month:02d}-{parsed.day:02d} "
        f"{parsed.hour:02d}:{parsed.minute:02d}"
    )


def stringify_value(value: Any) -> Optional[str]:
    """
    Convert a context value to the text substituted into a template.

    Mappings and sequences are not substitutable and yield None, as do
    None and empty strings. Whole floats drop their fractional part so
    that 1.0 renders as "1".

    Args:
        value: A value found in a template context

    Returns:
        String form of the value, or None if it counts as absent
    """
    if value is None:
        return None
    if isinstance(value, (dict, list, tuple, set)):
        return None
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value)
    return text if text != "" else None
