"""Enumerations for commons-batch models."""

from enum import Enum
from pathlib import Path
from typing import Optional, Tuple


class Namespace(Enum):
    """
    Reserved top-level path segments of a template context.

    A placeholder key starting with one of these segments is pinned to a
    single layer of the context:
    - GLOBAL: values shared by every image in the set (<<<global.author>>>)
    - EXIF: metadata extracted from the image file (<<<exif.Model>>>)
    - UTILITY: values derived per render (<<<utility.index>>>)

    Keys without a reserved prefix are looked up in the image's own keys
    first and in the global values second.
    """
    GLOBAL = "global"
    EXIF = "exif"
    UTILITY = "utility"

    @classmethod
    def split_key(cls, key: str) -> Tuple[Optional["Namespace"], str]:
        """
        Split a placeholder key into its namespace and remaining path.

        Args:
            key: Trimmed placeholder key (e.g. "global.author" or "subject")

        Returns:
            Tuple of (namespace, path). The namespace is None for keys
            without a reserved prefix, in which case path is the whole key.

        Examples:
            >>> Namespace.split_key("exif.Make")
            (<Namespace.EXIF: 'exif'>, 'Make')
            >>> Namespace.split_key("subject")
            (None, 'subject')
        """
        head, _, rest = key.partition(".")
        for namespace in cls:
            if namespace.value == head:
                return namespace, rest
        return None, key

    @classmethod
    def is_namespaced(cls, key: str) -> bool:
        """Check if a key is pinned to a reserved namespace."""
        return cls.split_key(key)[0] is not None


class FileFormat(Enum):
    """
    Image formats recognized when reading metadata from disk.

    Grouped by type:
    - RAW formats: Camera-specific raw files (read with exifread)
    - Standard formats: Common image formats (read with Pillow)
    """
    # RAW formats
    CR2 = "cr2"      # Canon RAW 2
    CR3 = "cr3"      # Canon RAW 3
    NEF = "nef"      # Nikon RAW
    ARW = "arw"      # Sony RAW
    DNG = "dng"      # Adobe Digital Negative
    RAF = "raf"      # Fujifilm RAW
    ORF = "orf"      # Olympus RAW
    RW2 = "rw2"      # Panasonic RAW

    # Standard image formats
    JPEG = "jpg"
    PNG = "png"
    TIFF = "tiff"
    GIF = "gif"
    HEIC = "heic"
    HEIF = "heif"
    WEBP = "webp"

    UNKNOWN = "unknown"

    @classmethod
    def from_extension(cls, extension: str) -> "FileFormat":
        """
        Get FileFormat from a file extension.

        Args:
            extension: File extension (with or without leading dot)

        Returns:
            The matching FileFormat, or UNKNOWN if not recognized
        """
        ext = extension.lower().lstrip(".")

        if ext in {"jpg", "jpeg"}:
            return cls.JPEG
        if ext in {"tif", "tiff"}:
            return cls.TIFF

        for fmt in cls:
            if fmt.value == ext:
                return fmt

        return cls.UNKNOWN

    @classmethod
    def from_filename(cls, filename: str) -> "FileFormat":
        """
        Get FileFormat from a filename or file path.

        Examples:
            >>> FileFormat.from_filename("photo.jpg")
            FileFormat.JPEG
            >>> FileFormat.from_filename("/photos/IMG_1234.CR2")
            FileFormat.CR2
        """
        return cls.from_extension(Path(filename).suffix)

    @property
    def is_raw(self) -> bool:
        """Check if this format is a camera RAW format."""
        return self in (
            FileFormat.CR2, FileFormat.CR3, FileFormat.NEF,
            FileFormat.ARW, FileFormat.DNG, FileFormat.RAF,
            FileFormat.ORF, FileFormat.RW2,
        )

    @property
    def needs_exifread(self) -> bool:
        """Pillow cannot read these without plugins."""
        return self.is_raw or self in (FileFormat.HEIC, FileFormat.HEIF)

    @property
    def is_image(self) -> bool:
        """Check if this format is a supported image format."""
        return self is not FileFormat.UNKNOWN
