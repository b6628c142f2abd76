"""
JSON transcript extraction.

Turns one JSON file into a flat list of segment records: every JSON object
in the tree becomes one segment. The bookmark tag is looked up once per file
and passed down the walk in a read-only context, so no state leaks between
files or calls.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..core import get_config, get_logger, ExtractionError
from ..utils import clean_text

logger = get_logger(__name__)


class FieldKind(Enum):
    """Closed set of scalar JSON value kinds that can be stored."""
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"


@dataclass(frozen=True)
class FieldValue:
    """A typed scalar value taken from a JSON object."""
    kind: FieldKind
    value: Union[str, int, float, bool]

    @classmethod
    def from_json(cls, value: Any) -> Optional["FieldValue"]:
        """
        Classify a decoded JSON value.

        Returns:
            FieldValue for scalars, None for null, objects and arrays.
        """
        # bool is a subclass of int and must be checked first
        if isinstance(value, bool):
            return cls(FieldKind.BOOLEAN, value)
        if isinstance(value, int):
            return cls(FieldKind.INTEGER, value)
        if isinstance(value, float):
            return cls(FieldKind.FLOAT, value)
        if isinstance(value, str):
            return cls(FieldKind.STRING, value)
        return None


@dataclass
class SegmentRecord:
    """
    One JSON object extracted from a transcript file.

    Attributes:
        filepath: Source file.
        position: Zero-based order of the object within the file.
        bookmark_tag: File-scoped bookmark tag ("" when the file has none).
        text: Cleaned contents of the text field, if present.
        start: Raw value of the start field, if scalar.
        end: Raw value of the end field, if scalar.
        fields: Remaining scalar fields by name.
    """
    filepath: Path
    position: int
    bookmark_tag: str
    text: Optional[str] = None
    start: Any = None
    end: Any = None
    fields: Dict[str, FieldValue] = field(default_factory=dict)


@dataclass(frozen=True)
class ParseContext:
    """Per-file values shared by every object of the walk."""
    filepath: Path
    bookmark_tag: str


class JsonExtractor:
    """Extracts segment records from JSON transcript files."""

    def __init__(
        self,
        text_field: str = None,
        bookmark_field: str = None,
        start_field: str = None,
        end_field: str = None
    ):
        """
        Initialize the extractor with field names.

        Args:
            text_field: Name of the searchable text field.
            bookmark_field: Name of the bookmark tag field.
            start_field: Name of the start offset field.
            end_field: Name of the end offset field.

        Unset names default to the config values.
        """
        if None in (text_field, bookmark_field, start_field, end_field):
            indexing = get_config().indexing
            text_field = text_field or indexing.text_field
            bookmark_field = bookmark_field or indexing.bookmark_field
            start_field = start_field or indexing.start_field
            end_field = end_field or indexing.end_field

        self.text_field = text_field
        self.bookmark_field = bookmark_field
        self.start_field = start_field
        self.end_field = end_field

    def extract(self, filepath: Union[str, Path]) -> List[SegmentRecord]:
        """
        Parse a JSON file into segment records.

        Args:
            filepath: Path to the JSON file.

        Returns:
            Segment records in document order.

        Raises:
            ExtractionError: If the file cannot be read or is not valid JSON.
        """
        filepath = Path(filepath)

        try:
            with open(filepath, "r", encoding="utf-8") as f:
                root = json.load(f)
        except json.JSONDecodeError as e:
            raise ExtractionError(
                f"Invalid JSON: {e.msg}",
                filepath=str(filepath),
                line=e.lineno,
                column=e.colno
            ) from e
        except (OSError, UnicodeDecodeError) as e:
            raise ExtractionError(f"Cannot read file: {e}", filepath=str(filepath)) from e

        return self.extract_tree(root, filepath)

    def extract_tree(self, root: Any, filepath: Path) -> List[SegmentRecord]:
        """
        Walk an already decoded JSON tree.

        Args:
            root: Decoded JSON value.
            filepath: File the tree came from.

        Returns:
            Segment records in document order.
        """
        ctx = ParseContext(filepath=Path(filepath), bookmark_tag=self.find_bookmark_tag(root))
        records: List[SegmentRecord] = []
        self._walk(root, ctx, records)

        logger.debug(
            f"Extracted {len(records)} segments from {ctx.filepath.name} "
            f"(bookmark '{ctx.bookmark_tag}')"
        )
        return records

    def find_bookmark_tag(self, node: Any) -> str:
        """
        Find the first non-empty bookmark tag in the tree, depth first.

        Returns:
            The tag, or "" if the tree has none.
        """
        if isinstance(node, dict):
            value = node.get(self.bookmark_field)
            if isinstance(value, str) and value:
                return value
            children = node.values()
        elif isinstance(node, list):
            children = node
        else:
            return ""

        for child in children:
            found = self.find_bookmark_tag(child)
            if found:
                return found
        return ""

    def _walk(self, element: Any, ctx: ParseContext, records: List[SegmentRecord]) -> None:
        """Recursively visit objects and arrays."""
        if isinstance(element, dict):
            self._visit_object(element, ctx, records)
        elif isinstance(element, list):
            for item in element:
                self._walk(item, ctx, records)

    def _visit_object(self, obj: dict, ctx: ParseContext, records: List[SegmentRecord]) -> None:
        """Turn one object into a record, then descend into its children."""
        record = SegmentRecord(
            filepath=ctx.filepath,
            position=len(records),
            bookmark_tag=ctx.bookmark_tag
        )
        records.append(record)

        for name, value in obj.items():
            if isinstance(value, (dict, list)):
                self._walk(value, ctx, records)
                continue

            field_value = FieldValue.from_json(value)
            if field_value is None or name == self.bookmark_field:
                continue

            if name == self.text_field and field_value.kind is FieldKind.STRING:
                record.text = clean_text(value) or None
            elif name == self.start_field and field_value.kind is not FieldKind.BOOLEAN:
                record.start = value
            elif name == self.end_field and field_value.kind is not FieldKind.BOOLEAN:
                record.end = value
            else:
                record.fields[name] = field_value


if __name__ == "__main__":
    import sys

    if len(sys.argv) < 2:
        print("Usage: python -m jsonsearch.extraction.json_extractor <file.json>")
        sys.exit(1)

    extractor = JsonExtractor()
    for rec in extractor.extract(sys.argv[1]):
        print(f"[{rec.position}] {rec.bookmark_tag} {rec.start}-{rec.end}: {rec.text}")
