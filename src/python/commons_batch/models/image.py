"""
ImageRecord and ImageSet models.

An ImageSet is one batch prepared for upload: two templates (title and
description), a set of global values shared by every image, and the images
themselves. Each ImageRecord carries the per-image keys typed in by the user
and the metadata extracted from its file.

These models are designed to:
- Be built from plain dictionaries (YAML image-set files)
- Keep the working order of the batch explicit
- Tell which images have a readable file format
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from commons_batch.models.enums import FileFormat


@dataclass
class ImageRecord:
    """
    A single image in an ImageSet.

    Attributes:
        id: Identifier of the image within its set
        name: Original filename, including extension
        keys: Per-image template values (the local layer)
        metadata: Metadata extracted from the file, keyed by tag name
        path: Location of the file on disk, if known
    """
    id: str
    name: str
    keys: Dict[str, str] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)
    path: Optional[Path] = None

    @classmethod
    def from_dict(cls, image_id: str, data: Dict[str, Any], base_dir: Optional[Path] = None) -> "ImageRecord":
        """
        Create an ImageRecord from an image-set entry.

        Args:
            image_id: Identifier of the image within the set
            data: Mapping with "name" and optional "keys", "metadata" and "path"
            base_dir: Directory that relative paths are resolved against

        Returns:
            An ImageRecord instance

        Raises:
            ValueError: If the entry is not a mapping, has no name or has nested key values
        """
        if not isinstance(data, dict):
            raise ValueError(f"Image '{image_id}' must be a mapping, got {type(data).__name__}")

        path = data.get("path")
        name = data.get("name") or (Path(path).name if path else None)
        if not name:
            raise ValueError(f"Image '{image_id}' has no name")

        if path is not None:
            path = Path(path)
            if base_dir is not None and not path.is_absolute():
                path = base_dir / path

        keys = data.get("keys") or {}
        if not isinstance(keys, dict):
            raise ValueError(f"Keys of image '{image_id}' must be a mapping")
        keys = _text_values(keys, f"keys of image '{image_id}'")

        metadata = data.get("metadata") or {}
        if not isinstance(metadata, dict):
            raise ValueError(f"Metadata of image '{image_id}' must be a mapping")

        return cls(
            id=str(image_id),
            name=str(name),
            keys=keys,
            metadata=dict(metadata),
            path=path,
        )

    @property
    def format(self) -> FileFormat:
        """Detected file format from the filename."""
        return FileFormat.from_filename(self.name)


@dataclass
class ImageSet:
    """
    A batch of images sharing two templates and a set of global values.

    Attributes:
        title_template: Template rendered into each image's destination filename
        template: Template rendered into each image's description
        global_values: Values shared by every image (the global layer)
        images: ImageRecords by id
        image_order: Working order of the images, by id
    """
    title_template: str = ""
    template: str = ""
    global_values: Dict[str, str] = field(default_factory=dict)
    images: Dict[str, ImageRecord] = field(default_factory=dict)
    image_order: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: Optional[Path] = None) -> "ImageSet":
        """
        Create an ImageSet from a parsed image-set document.

        Args:
            data: Mapping with "title_template", "template", "global",
                  "images" and optional "image_order"
            base_dir: Directory that relative image paths are resolved against

        Returns:
            An ImageSet instance

        Raises:
            ValueError: If a section has the wrong shape
        """
        global_values = data.get("global") or {}
        if not isinstance(global_values, dict):
            raise ValueError("'global' must be a mapping")

        raw_images = data.get("images") or {}
        if isinstance(raw_images, list):
            # A list is accepted too; ids default to the position in the list
            raw_images = {
                str(entry.get("id", position)) if isinstance(entry, dict) else str(position): entry
                for position, entry in enumerate(raw_images)
            }
        if not isinstance(raw_images, dict):
            raise ValueError("'images' must be a mapping or a list")

        images = {
            str(image_id): ImageRecord.from_dict(str(image_id), entry, base_dir)
            for image_id, entry in raw_images.items()
        }

        image_order = data.get("image_order") or []
        if not isinstance(image_order, list):
            raise ValueError("'image_order' must be a list")

        return cls(
            title_template=str(data.get("title_template") or ""),
            template=str(data.get("template") or ""),
            global_values=_text_values(global_values, "'global'"),
            images=images,
            image_order=[str(image_id) for image_id in image_order],
        )

    @property
    def ordered_ids(self) -> List[str]:
        """
        Working order of the images.

        image_order filtered to ids that still exist, or the insertion order
        of images when no order has been recorded.
        """
        if self.image_order:
            return [image_id for image_id in self.image_order if image_id in self.images]
        return list(self.images)

    @property
    def ordered_images(self) -> List[ImageRecord]:
        """ImageRecords in working order."""
        return [self.images[image_id] for image_id in self.ordered_ids]


def _text_values(values: Dict[Any, Any], section: str) -> Dict[str, str]:
    """Template values as text; None becomes "" and nested data is rejected."""
    result = {}
    for key, value in values.items():
        if isinstance(value, (dict, list, tuple, set)):
            raise ValueError(f"Value of '{key}' in {section} must be a scalar, got {type(value).__name__}")
        result[str(key)] = "" if value is None else str(value)
    return result
