"""Data models for commons-batch."""

from commons_batch.models.enums import FileFormat, Namespace
from commons_batch.models.image import ImageRecord, ImageSet

__all__ = [
    "FileFormat",
    "ImageRecord",
    "ImageSet",
    "Namespace",
]
