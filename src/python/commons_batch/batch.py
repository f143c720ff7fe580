"""
Rendering a whole image set.

Each image is rendered on its own: a fresh context is built from the image's
keys, the set's global values, the image's metadata and its position in the
working order. The title template's output is normalized into the filename
used for upload; the description is used as rendered.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

import pandas as pd

from commons_batch.config import RenderSettings
from commons_batch.metadata import extract_metadata
from commons_batch.models.image import ImageRecord, ImageSet
from commons_batch.templating.context import build_context
from commons_batch.templating.render import count_missing, render_template
from commons_batch.templating.title import normalize_title

logger = logging.getLogger(__name__)


@dataclass
class RenderedImage:
    """
    Rendered title and description of one image.

    Attributes:
        id: Identifier of the image within its set
        name: Original filename
        index: 1-based position in the working order
        title: Normalized title, used as the destination filename
        raw_title: Title as rendered, before normalization
        description: Rendered description
        missing_count: Unresolved placeholders across title and description
    """
    id: str
    name: str
    index: int
    title: str
    raw_title: str
    description: str
    missing_count: int = 0

    @property
    def is_complete(self) -> bool:
        """True when nothing is left unresolved."""
        return self.missing_count == 0

    def to_dict(self) -> dict:
        """Convert to dictionary for pandas DataFrame."""
        return {
            "id": self.id,
            "name": self.name,
            "index": self.index,
            "title": self.title,
            "raw_title": self.raw_title,
            "description": self.description,
            "missing_count": self.missing_count,
            "is_complete": self.is_complete,
        }


def effective_value(image_keys: Mapping[str, str], global_values: Mapping[str, str], key: str) -> str:
    """
    Value shown for a per-image field before the user edits it.

    Args:
        image_keys: The image's own keys
        global_values: Values shared by the whole set
        key: Field key

    Returns:
        The image's value if set and not empty, otherwise the global value
        with the same key, otherwise ""
    """
    value = image_keys.get(key)
    if value is not None and value != "":
        return value
    return global_values.get(key) or ""


def render_image(
    image: ImageRecord,
    index: int,
    title_template: str,
    template: str,
    global_values: Optional[Mapping[str, str]] = None,
    settings: Optional[RenderSettings] = None,
) -> RenderedImage:
    """
    Render title and description for one image.

    Args:
        image: The image to render
        index: Zero-based position of the image in the working order
        title_template: Template for the destination filename
        template: Template for the description
        global_values: Values shared by the whole set
        settings: Render settings (defaults if None)

    Returns:
        RenderedImage
    """
    settings = settings or RenderSettings()

    context = build_context(
        image.name,
        index,
        local=image.keys,
        global_values=global_values,
        metadata=image.metadata,
        date_fields=settings.date_fields,
    )

    raw_title = render_template(title_template, context, settings.max_iterations)
    description = render_template(template, context, settings.max_iterations)

    return RenderedImage(
        id=image.id,
        name=image.name,
        index=context.utility.index,
        title=normalize_title(raw_title),
        raw_title=raw_title,
        description=description,
        missing_count=count_missing(raw_title) + count_missing(description),
    )


def render_image_set(image_set: ImageSet, settings: Optional[RenderSettings] = None) -> List[RenderedImage]:
    """
    Render every image of a set in working order.

    Args:
        image_set: The image set to render
        settings: Render settings (defaults if None)

    Returns:
        List of RenderedImage, in working order

    Example:
        >>> renders = render_image_set(image_set)
        >>> for rendered in renders:
        ...     print(rendered.title, rendered.missing_count)
    """
    settings = settings or RenderSettings()

    renders = [
        render_image(
            image,
            index,
            image_set.title_template,
            image_set.template,
            image_set.global_values,
            settings,
        )
        for index, image in enumerate(image_set.ordered_images)
    ]

    incomplete = sum(1 for rendered in renders if not rendered.is_complete)
    logger.info("Rendered %d images (%d with missing values)", len(renders), incomplete)
    return renders


def populate_metadata(image_set: ImageSet) -> int:
    """
    Read metadata from disk for images that have a path and no metadata yet.

    Args:
        image_set: The image set to update in place

    Returns:
        Number of images whose metadata was read
    """
    populated = 0
    for image in image_set.ordered_images:
        if image.metadata or image.path is None:
            continue
        if not image.format.is_image:
            logger.warning("Skipping metadata for %s: unsupported file type %s", image.id, image.name)
            continue
        if not image.path.exists():
            logger.warning("Image file not found for %s: %s", image.id, image.path)
            continue
        image.metadata = extract_metadata(image.path)
        populated += 1
    return populated


def find_duplicate_titles(renders: List[RenderedImage]) -> Dict[str, List[str]]:
    """
    Find normalized titles shared by more than one image.

    Two images with the same title would overwrite each other at upload.

    Args:
        renders: Rendered images

    Returns:
        Mapping of title to the ids of the images using it
    """
    by_title: Dict[str, List[str]] = defaultdict(list)
    for rendered in renders:
        by_title[rendered.title].append(rendered.id)
    return {title: ids for title, ids in by_title.items() if len(ids) > 1}


def renders_to_dataframe(renders: List[RenderedImage]) -> pd.DataFrame:
    """
    Convert rendered images to a pandas DataFrame.

    Args:
        renders: Rendered images

    Returns:
        DataFrame with one row per image
    """
    if not renders:
        return pd.DataFrame()

    return pd.DataFrame([rendered.to_dict() for rendered in renders])
