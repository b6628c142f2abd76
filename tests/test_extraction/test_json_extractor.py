"""
Tests for JSON transcript extraction.

Tests the object walk, bookmark tag lookup, typed fields and
error handling for unreadable files.
"""

import json
import pytest
from pathlib import Path

from jsonsearch.core.exceptions import ExtractionError
from jsonsearch.extraction.json_extractor import FieldKind, FieldValue, JsonExtractor


@pytest.fixture
def extractor() -> JsonExtractor:
    """Extractor with explicit field names."""
    return JsonExtractor(
        text_field="text",
        bookmark_field="bookmark_tag",
        start_field="start",
        end_field="end"
    )


class TestFieldValue:
    """Tests for scalar classification."""

    @pytest.mark.parametrize("value,kind", [
        ("han", FieldKind.STRING),
        (3, FieldKind.INTEGER),
        (2.5, FieldKind.FLOAT),
        (True, FieldKind.BOOLEAN),
        (False, FieldKind.BOOLEAN),
    ])
    def test_scalar_kinds(self, value, kind):
        """Test that each scalar gets its kind."""
        assert FieldValue.from_json(value).kind is kind

    @pytest.mark.parametrize("value", [None, {}, [], [1, 2]])
    def test_non_scalars(self, value):
        """Test that null, objects and arrays are not fields."""
        assert FieldValue.from_json(value) is None


class TestJsonExtractor:
    """Tests for JsonExtractor.extract_tree and extract."""

    def test_every_object_becomes_a_segment(self, extractor: JsonExtractor):
        """Test that nested objects are visited in pre-order."""
        tree = {
            "bookmark_tag": "A",
            "segments": [
                {"text": "first", "inner": {"text": "nested"}},
                {"text": "second"},
            ]
        }

        records = extractor.extract_tree(tree, Path("a.json"))

        assert [r.position for r in records] == [0, 1, 2, 3]
        assert [r.text for r in records] == [None, "first", "nested", "second"]

    def test_bookmark_applies_to_whole_file(self, extractor: JsonExtractor):
        """Test that a nested tag is shared by every segment of the file."""
        tree = {
            "scenes": [
                {"text": "before the tag"},
                {"bookmark_tag": "B"},
                {"text": "after the tag"},
            ]
        }

        records = extractor.extract_tree(tree, Path("b.json"))

        assert {r.bookmark_tag for r in records} == {"B"}

    def test_file_without_bookmark(self, extractor: JsonExtractor):
        """Test that files without a tag get an empty one."""
        records = extractor.extract_tree([{"text": "hello"}], Path("c.json"))

        assert len(records) == 1
        assert records[0].bookmark_tag == ""

    def test_empty_tag_ignored(self, extractor: JsonExtractor):
        """Test that an empty tag does not hide a later one."""
        assert extractor.find_bookmark_tag([{"bookmark_tag": ""}, {"bookmark_tag": "D"}]) == "D"

    def test_offsets_and_fields(self, extractor: JsonExtractor):
        """Test that offsets are split from the remaining typed fields."""
        tree = {"start": 1.5, "end": 4, "text": "  Punch\tit  ", "speaker": "Han", "loud": True, "note": None}

        record = extractor.extract_tree(tree, Path("d.json"))[0]

        assert record.start == 1.5
        assert record.end == 4
        assert record.text == "Punch it"
        assert record.fields == {
            "speaker": FieldValue(FieldKind.STRING, "Han"),
            "loud": FieldValue(FieldKind.BOOLEAN, True),
        }

    def test_non_string_text_is_a_field(self, extractor: JsonExtractor):
        """Test that a numeric text field is not searchable text."""
        record = extractor.extract_tree({"text": 42}, Path("e.json"))[0]

        assert record.text is None
        assert record.fields["text"] == FieldValue(FieldKind.INTEGER, 42)

    def test_extract_file(self, extractor: JsonExtractor, temp_dir: Path):
        """Test parsing a file from disk."""
        path = temp_dir / "scene.json"
        path.write_text(json.dumps({"bookmark_tag": "A", "lines": [{"text": "It is a trap"}]}))

        records = extractor.extract(path)

        assert len(records) == 2
        assert records[1].text == "It is a trap"
        assert records[1].filepath == path

    def test_invalid_json_raises(self, extractor: JsonExtractor, temp_dir: Path):
        """Test that malformed JSON raises ExtractionError with the file path."""
        path = temp_dir / "broken.json"
        path.write_text("{ not json")

        with pytest.raises(ExtractionError) as exc_info:
            extractor.extract(path)

        assert "invalid json" in exc_info.value.message.lower()
        assert exc_info.value.filepath == str(path)
        assert exc_info.value.line == 1

    def test_missing_file_raises(self, extractor: JsonExtractor, temp_dir: Path):
        """Test that an unreadable file raises ExtractionError."""
        with pytest.raises(ExtractionError):
            extractor.extract(temp_dir / "missing.json")
