"""Unit tests for templating.keys module."""

import pytest

from commons_batch.models import Namespace
from commons_batch.templating.keys import editable_keys, extract_template_keys, namespaced_keys


class TestExtractTemplateKeys:
    """Tests for extract_template_keys() function."""

    def test_extract_simple_and_dotted_keys(self):
        """Test extracting plain and dotted keys."""
        keys = extract_template_keys("A <<<x>>> B <<<y.z>>> C")

        assert keys == {"x", "y.z"}
        assert len(keys) == 2

    def test_duplicates_collapse(self):
        """Test that repeated keys appear once."""
        assert extract_template_keys("<<<x>>> and <<<x>>> and <<< x >>>") == {"x"}

    def test_keys_are_trimmed(self):
        """Test that whitespace around keys is removed."""
        assert extract_template_keys("<<<  global.author  >>>") == {"global.author"}

    @pytest.mark.parametrize("template", [
        "",
        "no placeholders here",
        "<<<>>>",
        "<<<   >>>",
        "<<<unterminated",
        "unopened>>>",
        "<<key>>",
    ])
    def test_nothing_extracted(self, template):
        """Test templates that reference no keys."""
        assert extract_template_keys(template) == set()

    def test_placeholder_does_not_span_lines(self):
        """Test that a placeholder split across lines is not matched."""
        assert extract_template_keys("<<<first\nsecond>>>") == set()

    def test_empty_placeholder_next_to_valid_one(self):
        """Test that an empty placeholder does not hide its neighbour."""
        assert extract_template_keys("<<<>>><<<name>>>") == {"name"}


class TestEditableKeys:
    """Tests for editable_keys() function."""

    def test_excludes_namespaced_keys(self):
        """Test that global, exif and utility keys are filtered out."""
        keys = editable_keys(
            "<<<subject>>>.<<<utility.extension>>>",
            "<<<description>>> by <<<global.author>>> with <<<exif.Model>>>",
        )

        assert keys == ["description", "subject"]

    def test_combines_templates(self):
        """Test that keys from every template are merged and sorted."""
        assert editable_keys("<<<b>>>", "<<<a>>> <<<b>>>") == ["a", "b"]

    def test_prefix_must_be_a_whole_segment(self):
        """Test that keys merely starting with a namespace name stay editable."""
        assert editable_keys("<<<globalist>>> <<<exifdata>>>") == ["exifdata", "globalist"]

    def test_no_templates(self):
        """Test calling without templates."""
        assert editable_keys() == []


class TestNamespacedKeys:
    """Tests for namespaced_keys() function."""

    def test_global_paths(self):
        """Test listing paths referenced in the global namespace."""
        templates = ["<<<global.author>>> <<<exif.Make>>>", "<<<global.license>>> <<<global.author>>>"]

        assert namespaced_keys(templates, Namespace.GLOBAL) == ["author", "license"]
        assert namespaced_keys(templates, Namespace.EXIF) == ["Make"]
        assert namespaced_keys(templates, Namespace.UTILITY) == []

    def test_bare_namespace_is_ignored(self):
        """Test that a bare namespace name contributes no path."""
        assert namespaced_keys(["<<<global>>>"], Namespace.GLOBAL) == []
