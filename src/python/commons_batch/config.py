"""
Configuration management for commons-batch.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from commons_batch.models.image import ImageSet
from commons_batch.templating.render import DEFAULT_MAX_ITERATIONS
from commons_batch.templating.utility import DEFAULT_DATE_FIELDS

logger = logging.getLogger(__name__)

# Default locations to search for a config file
CONFIG_SEARCH_PATHS = [
    Path("commons_batch.yaml"),
    Path.home() / ".commons_batch" / "config.yaml",
]


@dataclass(frozen=True)
class RenderSettings:
    """
    Settings applied to every render of a batch.

    Attributes:
        max_iterations: Upper bound on substitution passes per template
        date_fields: Metadata fields holding the capture time, best first
        extract_metadata: Read metadata from image files that have none inline
    """
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    date_fields: Tuple[str, ...] = DEFAULT_DATE_FIELDS
    extract_metadata: bool = True


def _read_yaml(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping at the top of {path}")
    return data


def find_config_path(config_path: Optional[Path] = None) -> Optional[Path]:
    """
    Locate the config file for a run.

    An explicit path must exist; otherwise the first existing entry of
    CONFIG_SEARCH_PATHS is used.

    Args:
        config_path: Path given on the command line, if any

    Returns:
        Path of the config file, or None if no default location has one

    Raises:
        FileNotFoundError: If config_path is given and does not exist
    """
    if config_path is not None:
        if not config_path.is_file():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        return config_path

    return next((path for path in CONFIG_SEARCH_PATHS if path.is_file()), None)


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load the commons-batch config as a dictionary.

    Raises:
        FileNotFoundError: If no config file is found.
        ValueError: If the file is not a YAML mapping.
    """
    path = find_config_path(config_path)
    if path is None:
        searched = ", ".join(str(p) for p in CONFIG_SEARCH_PATHS)
        raise FileNotFoundError(f"No config file found (searched {searched})")

    logger.info("Loading config from %s", path)
    return _read_yaml(path)


def get_render_settings(config: Dict[str, Any]) -> RenderSettings:
    """
    Get the render settings from config.

    Missing sections and keys fall back to the defaults.

    Args:
        config: Configuration dictionary

    Returns:
        RenderSettings instance

    Raises:
        ValueError: If a setting has an invalid value
    """
    render_config = _section(config, "render")
    metadata_config = _section(config, "metadata")

    try:
        max_iterations = int(render_config.get("max_iterations", DEFAULT_MAX_ITERATIONS))
    except (TypeError, ValueError):
        raise ValueError(
            f"render.max_iterations must be an integer, got {render_config.get('max_iterations')!r}"
        ) from None
    if max_iterations < 1:
        raise ValueError(f"render.max_iterations must be at least 1, got {max_iterations}")

    date_fields = render_config.get("date_fields", list(DEFAULT_DATE_FIELDS))
    if isinstance(date_fields, str):
        date_fields = [date_fields]
    if not isinstance(date_fields, list) or not all(isinstance(f, str) for f in date_fields):
        raise ValueError("render.date_fields must be a list of field names")

    extract = metadata_config.get("extract", True)
    if not isinstance(extract, bool):
        raise ValueError(f"metadata.extract must be true or false, got {extract!r}")

    return RenderSettings(
        max_iterations=max_iterations,
        date_fields=tuple(date_fields),
        extract_metadata=extract,
    )


def _section(config: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = config.get(name) or {}
    if not isinstance(section, dict):
        raise ValueError(f"Config section '{name}' must be a mapping")
    return section


def load_settings(config_path: Optional[Path] = None) -> RenderSettings:
    """
    Load render settings, falling back to defaults when no config file exists.

    An explicit config_path that does not exist is still an error.
    """
    path = find_config_path(config_path)
    if path is None:
        logger.debug("No config file found, using default render settings")
        return RenderSettings()

    logger.info("Loading config from %s", path)
    return get_render_settings(_read_yaml(path))


def load_image_set(image_set_path: Path) -> ImageSet:
    """
    Load an image set from a YAML file.

    Relative image paths are resolved against the directory of the file.

    Args:
        image_set_path: Path to the image-set YAML file

    Returns:
        ImageSet instance

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file content has the wrong shape.
    """
    if not image_set_path.exists():
        raise FileNotFoundError(f"Image set not found: {image_set_path}")

    logger.info("Loading image set from %s", image_set_path)
    data = _read_yaml(image_set_path)
    image_set = ImageSet.from_dict(data, base_dir=image_set_path.parent)

    missing = [image_id for image_id in image_set.image_order if image_id not in image_set.images]
    if missing:
        logger.warning("image_order references unknown images: %s", ", ".join(missing))

    return image_set
