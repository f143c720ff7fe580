"""
Metadata extraction for image files.

This module reads the metadata that templates reach through the exif
namespace (<<<exif.Model>>>, <<<exif.DateTimeOriginal>>>, ...):
- RAW files (CR2, CR3, NEF, DNG, etc.) and HEIC/HEIF: Uses exifread library
- Standard formats (JPEG, PNG, TIFF, WEBP): Uses Pillow/PIL library

The result is a flat mapping of tag names to plain values (str, int, float
or lists of those). A few fields are added for convenience:
- CreateDate: alias of DateTimeDigitized, the fallback capture time
- ModifyDate: alias of DateTime
- latitude/longitude: GPS position in decimal degrees
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from commons_batch.models.enums import FileFormat

logger = logging.getLogger(__name__)

# Tag aliases added next to the original names
TAG_ALIASES = {
    "DateTimeDigitized": "CreateDate",
    "DateTime": "ModifyDate",
}

# Binary blobs with no use in a description
SKIPPED_TAGS = {"MakerNote", "JPEGThumbnail", "TIFFThumbnail", "PrintImageMatching", "ExifOffset", "GPSInfo"}


def extract_metadata(file_path: Path) -> Dict[str, Any]:
    """
    Extract metadata from an image file.

    Any failure is logged and results in an empty mapping; this function
    never raises for unreadable files.

    Args:
        file_path: Path to the image file

    Returns:
        Mapping of tag name to value, empty if nothing could be read

    Example:
        >>> metadata = extract_metadata(Path("/photos/IMG_1234.jpg"))
        >>> metadata.get("DateTimeOriginal")
        '2024:01:15 10:30:00'
    """
    if not file_path.exists() or not file_path.is_file():
        logger.warning("File not found or not a file: %s", file_path)
        return {}

    if file_path.stat().st_size == 0:
        logger.warning("File is empty (0 bytes): %s", file_path)
        return {}

    file_format = FileFormat.from_filename(file_path.name)

    try:
        if file_format.needs_exifread:
            metadata = _extract_with_exifread(file_path)
        else:
            metadata = _extract_with_pillow(file_path)
    except Exception as e:
        logger.error("Failed to extract metadata from %s: %s", file_path, e)
        return {}

    _add_aliases(metadata)
    logger.debug("Extracted %d metadata fields from %s", len(metadata), file_path.name)
    return metadata


def _extract_with_exifread(file_path: Path) -> Dict[str, Any]:
    """
    Extract metadata using exifread library.

    exifread prefixes tag names with their IFD ("EXIF DateTimeOriginal",
    "Image Make"); the prefix is dropped.
    """
    import exifread

    with open(file_path, "rb") as f:
        tags = exifread.process_file(f, details=False)

    if not tags:
        logger.debug("No EXIF data found in %s", file_path)
        return {}

    metadata: Dict[str, Any] = {}
    for full_name, tag in tags.items():
        name = full_name.split(" ", 1)[-1]
        if name in SKIPPED_TAGS or full_name.startswith("Thumbnail"):
            continue
        value = _exifread_value(tag)
        if value is not None:
            metadata.setdefault(name, value)

    latitude, longitude = _parse_exifread_gps(tags)
    if latitude is not None and longitude is not None:
        metadata["latitude"] = latitude
        metadata["longitude"] = longitude

    return metadata


def _extract_with_pillow(file_path: Path) -> Dict[str, Any]:
    """
    Extract metadata using Pillow/PIL.

    Reads the base IFD plus the Exif and GPS sub-IFDs, where the capture
    time and camera settings live.
    """
    from PIL import Image
    from PIL.ExifTags import GPSTAGS, IFD, TAGS

    with Image.open(file_path) as img:
        exif_data = img.getexif()

        if not exif_data:
            logger.debug("No EXIF data found in %s", file_path)
            return {}

        metadata: Dict[str, Any] = {}
        for tag_id, value in exif_data.items():
            _set_plain(metadata, TAGS.get(tag_id, str(tag_id)), value)

        for tag_id, value in exif_data.get_ifd(IFD.Exif).items():
            _set_plain(metadata, TAGS.get(tag_id, str(tag_id)), value)

        gps_raw = exif_data.get_ifd(IFD.GPSInfo)
        if gps_raw:
            gps_info = {GPSTAGS.get(tag_id, str(tag_id)): value for tag_id, value in gps_raw.items()}
            latitude, longitude = _parse_gps_coords(gps_info)
            if latitude is not None and longitude is not None:
                metadata["latitude"] = latitude
                metadata["longitude"] = longitude

    return metadata


def _set_plain(metadata: Dict[str, Any], name: str, value: Any) -> None:
    if name in SKIPPED_TAGS:
        return
    plain = _plain_value(value)
    if plain is not None:
        metadata[name] = plain


def _plain_value(value: Any) -> Any:
    """
    Convert a Pillow tag value to a plain Python value.

    Rationals become floats, bytes become cleaned text (or are dropped when
    they are not text), tuples become lists.
    """
    if value is None:
        return None
    if isinstance(value, bytes):
        try:
            return _clean_string(value.decode("utf-8"))
        except UnicodeDecodeError:
            return None
    if isinstance(value, str):
        return _clean_string(value)
    if isinstance(value, (bool, int)):
        return value
    if isinstance(value, (tuple, list)):
        items = [_plain_value(item) for item in value]
        return [item for item in items if item is not None] or None
    if hasattr(value, "numerator") and hasattr(value, "denominator"):
        # IFDRational
        try:
            return float(value)
        except (ZeroDivisionError, ValueError):
            return None
    if isinstance(value, float):
        return value
    return _clean_string(str(value))


def _exifread_value(tag: Any) -> Any:
    """Convert an exifread IfdTag to a plain Python value."""
    values = getattr(tag, "values", None)

    if isinstance(values, str):
        return _clean_string(values)

    if isinstance(values, list) and len(values) == 1:
        single = values[0]
        if hasattr(single, "num") and hasattr(single, "den"):
            return single.num / single.den if single.den else None
        if isinstance(single, int):
            return single

    return _clean_string(getattr(tag, "printable", None) or str(tag))


def _add_aliases(metadata: Dict[str, Any]) -> None:
    for name, alias in TAG_ALIASES.items():
        if name in metadata and alias not in metadata:
            metadata[alias] = metadata[name]


def _parse_gps_coords(gps_info: Dict) -> Tuple[Optional[float], Optional[float]]:
    """
    Parse GPS coordinates from EXIF GPS info.

    GPS coordinates in EXIF are stored as tuples of rational numbers
    (degrees, minutes, seconds) plus a reference (N/S for latitude, E/W for longitude).

    Args:
        gps_info: Dictionary of GPS EXIF tags

    Returns:
        Tuple of (latitude, longitude) in decimal degrees, or (None, None) if parsing fails
    """
    try:
        lat = gps_info.get("GPSLatitude")
        lat_ref = gps_info.get("GPSLatitudeRef")
        lon = gps_info.get("GPSLongitude")
        lon_ref = gps_info.get("GPSLongitudeRef")

        if not all([lat, lat_ref, lon, lon_ref]):
            return None, None

        return _dms_to_decimal(lat, lat_ref), _dms_to_decimal(lon, lon_ref)

    except Exception as e:
        logger.debug("Failed to parse GPS coordinates: %s", e)
        return None, None


def _dms_to_decimal(dms: Tuple, ref: str) -> float:
    """
    Convert GPS coordinates from degrees/minutes/seconds to decimal degrees.

    Args:
        dms: Tuple of (degrees, minutes, seconds); each is a number or a
             (numerator, denominator) tuple
        ref: Reference direction ('N', 'S', 'E', 'W')

    Returns:
        Decimal degrees, negative for South and West
    """
    parts = []
    for part in dms:
        if isinstance(part, tuple):
            part = part[0] / part[1]
        parts.append(float(part))
    degrees, minutes, seconds = parts

    decimal = degrees + minutes / 60 + seconds / 3600

    if str(ref).strip().rstrip("\x00") in {"S", "W", "South", "West"}:
        decimal = -decimal

    return decimal


def _parse_exifread_gps(tags: Dict) -> Tuple[Optional[float], Optional[float]]:
    """
    Parse GPS coordinates from exifread tags.

    Args:
        tags: Dictionary of exifread tags

    Returns:
        Tuple of (latitude, longitude) in decimal degrees, or (None, None) if parsing fails
    """
    try:
        lat = tags.get("GPS GPSLatitude")
        lat_ref = tags.get("GPS GPSLatitudeRef")
        lon = tags.get("GPS GPSLongitude")
        lon_ref = tags.get("GPS GPSLongitudeRef")

        if not all([lat, lat_ref, lon, lon_ref]):
            return None, None

        # exifread Ratio objects carry .num and .den
        lat_dms = tuple((v.num, v.den) for v in lat.values)
        lon_dms = tuple((v.num, v.den) for v in lon.values)

        return (
            _dms_to_decimal(lat_dms, str(lat_ref.values)),
            _dms_to_decimal(lon_dms, str(lon_ref.values)),
        )

    except Exception as e:
        logger.debug("Failed to parse exifread GPS coordinates: %s", e)
        return None, None


def _clean_string(value: Optional[str]) -> Optional[str]:
    """
    Clean and normalize a string value from EXIF.

    Strips whitespace and trailing null characters; empty strings become None.
    """
    if value is None:
        return None

    value = str(value).strip().rstrip("\x00").strip()
    return value or None
