"""Pytest configuration and shared fixtures."""

from datetime import datetime
from pathlib import Path

import pytest

from commons_batch.models import ImageRecord, ImageSet
from commons_batch.templating import TemplateContext
from commons_batch.templating.utility import UtilityValues


@pytest.fixture
def empty_context() -> TemplateContext:
    """A context with every layer empty."""
    return TemplateContext()


@pytest.fixture
def sample_context() -> TemplateContext:
    """A context with all four layers populated."""
    return TemplateContext(
        local={"subject": "Sunset", "author": "Local Author"},
        global_values={"author": "Jane Doe", "license": "CC-BY-SA-4.0"},
        metadata={
            "Make": "Canon",
            "FNumber": 2.8,
            "ISO": 100,
            "DateTimeOriginal": datetime(2024, 1, 15, 10, 30),
            "GPS": {"Latitude": 52.37},
        },
        utility=UtilityValues(extension="jpg", index=3, date="2024-01-15", date_time="2024-01-15 10:30"),
    )


@pytest.fixture
def sample_image_set() -> ImageSet:
    """An image set with three images and an explicit working order."""
    return ImageSet(
        title_template="<<<subject>>> <<<utility.index>>>.<<<utility.extension>>>",
        template="<<<description>>> by <<<global.author>>> on <<<utility.date>>>",
        global_values={"author": "Jane Doe", "description": "Trip photo"},
        images={
            "a": ImageRecord(
                id="a",
                name="IMG_0001.JPG",
                keys={"subject": "Harbour at dawn"},
                metadata={"DateTimeOriginal": "2024:01:15 10:30:00"},
            ),
            "b": ImageRecord(
                id="b",
                name="IMG_0002.png",
                keys={"subject": "Old lighthouse", "description": "North side"},
                metadata={"CreateDate": "2024:01:16 08:05:00"},
            ),
            "c": ImageRecord(id="c", name="IMG_0003.jpg"),
        },
        image_order=["b", "a", "c"],
    )


@pytest.fixture
def image_set_file(tmp_path: Path) -> Path:
    """An image-set YAML file on disk."""
    path = tmp_path / "imageset.yaml"
    path.write_text(
        """
title_template: "<<<subject>>> <<<utility.date>>>.<<<utility.extension>>>"
template: "<<<description>>> by <<<global.author>>>"
global:
  author: Jane Doe
  description: Trip photo
image_order: [second, first]
images:
  first:
    name: IMG_0001.jpg
    keys: {subject: Harbour}
    metadata: {DateTimeOriginal: "2024:01:15 10:30:00"}
  second:
    path: photos/IMG_0002.jpg
    keys: {subject: "Lighthouse: north"}
""",
        encoding="utf-8",
    )
    return path
