"""
Utility values derived per image and per render.

These are exposed to templates under the utility namespace:
- <<<utility.extension>>>: lower-cased file extension without the dot
- <<<utility.index>>>: 1-based position of the image in the batch
- <<<utility.date>>>: capture date (YYYY-MM-DD)
- <<<utility.dateTime>>>: capture date and time (YYYY-MM-DD HH:mm)
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence

from commons_batch.utils import format_date, format_date_time

logger = logging.getLogger(__name__)

# Metadata fields holding the capture time, best first
DEFAULT_DATE_FIELDS = ("DateTimeOriginal", "CreateDate")


@dataclass(frozen=True)
class UtilityValues:
    """
    Values computed for one image at render time.

    Never stored with the image; recomputed from the image's current
    position and metadata on every render.

    Attributes:
        extension: Lower-cased text after the last "." of the filename, or ""
        index: 1-based position of the image in the working order
        date: Capture date (YYYY-MM-DD), None if no usable timestamp
        date_time: Capture date and time (YYYY-MM-DD HH:mm), None if no usable timestamp
    """
    extension: str
    index: int
    date: Optional[str] = None
    date_time: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Template-facing mapping, keyed by the names used in placeholders."""
        return {
            "extension": self.extension,
            "index": self.index,
            "date": self.date,
            "dateTime": self.date_time,
        }


def get_extension(filename: str) -> str:
    """
    Get the lower-cased extension of a filename, without the dot.

    Examples:
        >>> get_extension("Photo.JPG")
        'jpg'
        >>> get_extension("my.photo.file.png")
        'png'
        >>> get_extension("photo")
        ''
    """
    if "." not in filename:
        return ""
    return filename.rsplit(".", 1)[1].lower()


def select_timestamp(
    metadata: Optional[Mapping[str, Any]],
    date_fields: Sequence[str] = DEFAULT_DATE_FIELDS,
) -> Any:
    """
    Pick the first available timestamp value from metadata.

    Args:
        metadata: Extracted metadata of the image
        date_fields: Field names to try, in priority order

    Returns:
        The raw value of the first field that is present and not empty,
        or None
    """
    if not metadata:
        return None

    for field_name in date_fields:
        value = metadata.get(field_name)
        if value is not None and value != "":
            return value
    return None


def derive_utility_values(
    filename: str,
    index: int,
    metadata: Optional[Mapping[str, Any]] = None,
    date_fields: Sequence[str] = DEFAULT_DATE_FIELDS,
) -> UtilityValues:
    """
    Compute the utility values for one image.

    Args:
        filename: Filename of the image
        index: Zero-based position of the image in the working order
        metadata: Extracted metadata of the image
        date_fields: Metadata fields holding the capture time, in priority order

    Returns:
        UtilityValues with a 1-based index

    Example:
        >>> values = derive_utility_values("Photo.JPG", 5, {"DateTimeOriginal": "2024:01:15 10:30:00"})
        >>> values.extension, values.index, values.date, values.date_time
        ('jpg', 6, '2024-01-15', '2024-01-15 10:30')
    """
    timestamp = select_timestamp(metadata, date_fields)
    date = format_date(timestamp)
    date_time = format_date_time(timestamp)

    if timestamp is not None and date is None:
        logger.debug("Ignoring unparseable capture time %r for %s", timestamp, filename)

    return UtilityValues(
        extension=get_extension(filename),
        index=index + 1,
        date=date,
        date_time=date_time,
    )
