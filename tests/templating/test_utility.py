"""Unit tests for templating.utility module."""

from datetime import date, datetime

import pytest

from commons_batch.templating.utility import (
    UtilityValues,
    derive_utility_values,
    get_extension,
    select_timestamp,
)


class TestGetExtension:
    """Tests for get_extension() function."""

    @pytest.mark.parametrize("filename,expected", [
        ("photo.jpg", "jpg"),
        ("Photo.JPG", "jpg"),
        ("my.photo.file.png", "png"),
        ("photo", ""),
        ("photo.", ""),
        (".hidden", "hidden"),
    ])
    def test_extension(self, filename, expected):
        """Test extension extraction for various filenames."""
        assert get_extension(filename) == expected


class TestSelectTimestamp:
    """Tests for select_timestamp() function."""

    def test_prefers_primary_field(self):
        """Test that DateTimeOriginal wins over CreateDate."""
        metadata = {"DateTimeOriginal": "2025:06:15 11:02:00", "CreateDate": "2024:03:11 12:55:48"}

        assert select_timestamp(metadata) == "2025:06:15 11:02:00"

    def test_falls_back_to_secondary_field(self):
        """Test fallback to CreateDate."""
        assert select_timestamp({"CreateDate": "2024:03:11 12:55:48"}) == "2024:03:11 12:55:48"

    def test_skips_empty_values(self):
        """Test that empty values do not count as available."""
        metadata = {"DateTimeOriginal": "", "CreateDate": "2024:03:11 12:55:48"}

        assert select_timestamp(metadata) == "2024:03:11 12:55:48"

    @pytest.mark.parametrize("metadata", [None, {}, {"Make": "Canon"}])
    def test_nothing_available(self, metadata):
        """Test metadata without timestamps."""
        assert select_timestamp(metadata) is None

    def test_custom_field_order(self):
        """Test a configured priority list."""
        metadata = {"DateTimeOriginal": "2025:06:15 11:02:00", "GPSDateStamp": "2020:01:01"}

        assert select_timestamp(metadata, ("GPSDateStamp", "DateTimeOriginal")) == "2020:01:01"


class TestDeriveUtilityValues:
    """Tests for derive_utility_values() function."""

    def test_extension_and_index(self):
        """Test that the index becomes 1-based and the extension lower-case."""
        values = derive_utility_values("Photo.JPG", 5)

        assert values.extension == "jpg"
        assert values.index == 6

    def test_first_image_has_index_one(self):
        """Test the zero-based to one-based conversion at the start."""
        assert derive_utility_values("photo.jpg", 0).index == 1

    def test_exif_string_date(self):
        """Test a colon-delimited EXIF timestamp."""
        values = derive_utility_values("photo.jpg", 0, {"DateTimeOriginal": "2024:01:15 10:30:00"})

        assert values.date == "2024-01-15"
        assert values.date_time == "2024-01-15 10:30"

    def test_native_datetime(self):
        """Test a datetime value."""
        values = derive_utility_values("photo.jpg", 0, {"DateTimeOriginal": datetime(2025, 6, 15, 11, 2)})

        assert values.date == "2025-06-15"
        assert values.date_time == "2025-06-15 11:02"

    def test_native_date(self):
        """Test a date value, read as midnight."""
        values = derive_utility_values("photo.jpg", 0, {"DateTimeOriginal": date(2025, 12, 25)})

        assert values.date == "2025-12-25"
        assert values.date_time == "2025-12-25 00:00"

    def test_free_form_text(self):
        """Test a textual date representation."""
        values = derive_utility_values("photo.jpg", 0, {"CreateDate": "March 11, 2024 12:55"})

        assert values.date == "2024-03-11"
        assert values.date_time == "2024-03-11 12:55"

    def test_primary_field_preferred(self):
        """Test that both values come from DateTimeOriginal when both exist."""
        values = derive_utility_values(
            "photo.jpg",
            0,
            {"DateTimeOriginal": datetime(2025, 6, 15, 11, 2), "CreateDate": datetime(2024, 3, 11, 12, 55)},
        )

        assert values.date_time == "2025-06-15 11:02"

    @pytest.mark.parametrize("metadata", [
        None,
        {},
        {"DateTimeOriginal": "not a date"},
        {"DateTimeOriginal": 12345},
        {"DateTimeOriginal": "2024:13:45 99:99:99"},
        {"DateTimeOriginal": "today"},
        {"DateTimeOriginal": "now"},
    ])
    def test_absent_dates(self, metadata):
        """Test that missing or invalid timestamps yield no date."""
        values = derive_utility_values("photo.jpg", 0, metadata)

        assert values.date is None
        assert values.date_time is None

    def test_to_dict_uses_template_names(self):
        """Test the mapping exposed to templates."""
        values = UtilityValues(extension="gif", index=4, date="2025-12-25", date_time="2025-12-25 09:30")

        assert values.to_dict() == {
            "extension": "gif",
            "index": 4,
            "date": "2025-12-25",
            "dateTime": "2025-12-25 09:30",
        }
