"""
commons-batch - prepare batches of images for upload to Wikimedia Commons.

This package expands user-written templates into per-image titles and
descriptions, and normalizes titles into valid Commons filenames.

Core Concepts:
- Template: text with <<<key>>> placeholders
- Context: the values one image is rendered against, in four layers
  (its own keys, global values, exif metadata, utility values)
- Title: the rendered title template, normalized into a valid filename

Usage:
    from pathlib import Path
    from commons_batch import load_image_set, render_image_set

    image_set = load_image_set(Path("imageset.yaml"))
    for rendered in render_image_set(image_set):
        print(rendered.title, rendered.missing_count)
"""

from commons_batch.__version__ import __version__
from commons_batch.batch import RenderedImage, effective_value, render_image, render_image_set
from commons_batch.config import RenderSettings, load_config, load_image_set
from commons_batch.metadata import extract_metadata
from commons_batch.models import FileFormat, ImageRecord, ImageSet, Namespace
from commons_batch.templating import (
    MISSING_PLACEHOLDER,
    TemplateContext,
    build_context,
    editable_keys,
    extract_template_keys,
    normalize_title,
    render_template,
)

__all__ = [
    "__version__",
    # Models
    "FileFormat",
    "ImageRecord",
    "ImageSet",
    "Namespace",
    # Templating
    "MISSING_PLACEHOLDER",
    "TemplateContext",
    "build_context",
    "editable_keys",
    "extract_template_keys",
    "normalize_title",
    "render_template",
    # Batch
    "RenderedImage",
    "effective_value",
    "render_image",
    "render_image_set",
    # Config and metadata
    "RenderSettings",
    "extract_metadata",
    "load_config",
    "load_image_set",
]
