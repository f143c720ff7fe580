"""
Title normalization for Wikimedia Commons file pages.

MediaWiki rewrites file titles before storing them. Applying the same
rewriting up front means the filename shown at review time is the one the
upload ends up with, and titles containing forbidden characters are fixed
instead of rejected.

See: https://www.mediawiki.org/wiki/Manual:Page_title
"""

import re

# Forbidden in titles, mapped to safe alternatives
FORBIDDEN_CHARS = {
    "#": "-",  # fragment identifier
    "<": "-",  # HTML
    ">": "-",  # HTML
    "[": "(",  # wikilink syntax
    "]": ")",
    "{": "(",  # template syntax
    "}": ")",
    "|": "-",  # pipe separator
    ":": "-",  # namespace separator
}

_FORBIDDEN_TABLE = str.maketrans(FORBIDDEN_CHARS)
_UNDERSCORE_RUN = re.compile(r"_{2,}")


def normalize_title(filename: str) -> str:
    """
    Normalize a filename the way MediaWiki normalizes file titles.

    Steps, in order:
    1. Replace forbidden characters (# < > [ ] { } | :) with safe alternatives
    2. Replace spaces with underscores
    3. Collapse runs of underscores into one
    4. Trim leading and trailing underscores from the name, keeping the
       extension as it is
    5. Capitalize the first character

    Args:
        filename: Rendered title, usually ending in an extension

    Returns:
        Normalized filename; empty input is returned unchanged

    Examples:
        >>> normalize_title("photo 12:30:45.jpg")
        'Photo_12-30-45.jpg'
        >>> normalize_title("file___.jpg")
        'File.jpg'
        >>> normalize_title("[draft] {x}.png")
        '(draft)_(x).png'
    """
    if not filename:
        return filename

    normalized = filename.translate(_FORBIDDEN_TABLE)
    normalized = normalized.replace(" ", "_")
    normalized = _UNDERSCORE_RUN.sub("_", normalized)

    # A dot at position 0 does not start an extension
    dot = normalized.rfind(".")
    if dot > 0:
        normalized = normalized[:dot].strip("_") + normalized[dot:]
    else:
        normalized = normalized.strip("_")

    if normalized:
        normalized = normalized[0].upper() + normalized[1:]

    return normalized
