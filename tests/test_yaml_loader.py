"""
Tests for YAML document loading and conversion to properties.
"""

import io

import pytest

from properties_reader.framework.conversion.yaml_loader import convert_to_properties, load_yaml_document
from properties_reader.infrastructure.exceptions import (
    HierarchyTooDeepError, MultiDocumentError, ParseError, UnsupportedStructureError
)


def _stream(*lines: str) -> io.BytesIO:
    return io.BytesIO(("\n".join(lines) + "\n").encode("utf-8"))


class TestConvertToProperties:
    """Test conversion of YAML content to flat properties."""

    def test_convert_to_properties(self):
        """Test the reference document with hierarchies, lists and an empty key."""
        stream = _stream(
            "---",
            "this.is.a.standard.property: this is the value",
            "a: #This comment shouldn't appear",
            "   hierarchical:",
            "       property1: yet another value",
            "       property2: the last value",
            "list:",
            "   -list value1",
            "   -list value2",
            "anotherkey:",
            "    { nestedkey1: value1, nestedkey2: value2 }",
            "list2:",
            "   - map_key: map_value",
            "empty_key:",
            "..."
        )

        properties = convert_to_properties(stream)

        assert len(properties) == 8
        assert properties["this.is.a.standard.property"] == "this is the value"
        assert properties["a.hierarchical.property1"] == "yet another value"
        assert properties["a.hierarchical.property2"] == "the last value"
        assert properties["list"] == "-list value1 -list value2"
        assert properties["anotherkey.nestedkey1"] == "value1"
        assert properties["anotherkey.nestedkey2"] == "value2"
        assert properties["list2.map_key"] == "map_value"
        assert properties["empty_key"] == ""

    def test_comments_are_ignored(self):
        stream = _stream(
            "this.is.a.standard.property: this is the value",
            "#A very helpful comment",
            "a:",
            "   hierarchical:",
            "       property: yet another value"
        )

        properties = convert_to_properties(stream)

        assert properties == {
            "this.is.a.standard.property": "this is the value",
            "a.hierarchical.property": "yet another value",
        }

    def test_second_document_is_rejected(self):
        stream = _stream(
            "---",
            "this.is.a.standard.property: this is the value",
            "a:",
            "...",
            "---",
            "   hierarchical:",
            "       property: yet another value",
            "..."
        )

        with pytest.raises(MultiDocumentError) as exc_info:
            convert_to_properties(stream, source="File: test.yml")

        error = exc_info.value
        assert isinstance(error, ParseError)
        assert error.error_code == "MULTI_DOCUMENT_YAML"
        assert error.context["line"] == 5
        assert error.context["resource"] == "File: test.yml"

    def test_real_sequences_use_leading_comma(self):
        properties = convert_to_properties(_stream(
            "servers:",
            "  - alpha",
            "  - beta",
            "ports: [80, 443]",
            "none: []"
        ))
        assert properties == {"servers": ",alphabeta", "ports": ",80443", "none": ""}

    def test_sequence_of_mappings_keeps_last_element(self):
        properties = convert_to_properties(_stream(
            "list2:",
            "  - a: 1",
            "  - b: 2"
        ))
        assert properties == {"list2.b": "2"}

    def test_typed_scalars(self):
        properties = convert_to_properties(_stream(
            "enabled: true",
            "count: 3",
            "ratio: 0.5",
            "released: 2024-01-31",
            "quoted: 'true'"
        ))
        assert properties == {
            "enabled": "true",
            "count": "3",
            "ratio": "0.5",
            "released": "2024-01-31",
            "quoted": "true",
        }

    def test_empty_document(self):
        assert convert_to_properties(io.BytesIO(b"")) == {}
        assert convert_to_properties(_stream("# only a comment")) == {}

    def test_scalar_root_yields_nothing(self):
        assert convert_to_properties(_stream("just text")) == {}

    def test_text_input(self):
        assert convert_to_properties("a:\n  b: c\n") == {"a.b": "c"}

    def test_utf8_content(self):
        assert convert_to_properties(_stream("greeting: grüß dich")) == {"greeting": "grüß dich"}

    def test_utf16_little_endian_with_bom(self):
        content = b"\xff\xfe" + "a:\n  b: grüß\n".encode("utf-16-le")
        assert convert_to_properties(io.BytesIO(content)) == {"a.b": "grüß"}

    def test_utf16_big_endian_with_bom(self):
        content = b"\xfe\xff" + "a:\n  b: grüß\n".encode("utf-16-be")
        assert convert_to_properties(io.BytesIO(content)) == {"a.b": "grüß"}

    def test_invalid_yaml_reports_line(self):
        stream = _stream("key: value", "other: [unclosed")

        with pytest.raises(ParseError) as exc_info:
            convert_to_properties(stream, source="File: broken.yml")

        assert exc_info.value.error_code == "PARSE_ERROR"
        assert exc_info.value.context["resource"] == "File: broken.yml"
        assert "line" in exc_info.value.context

    def test_unsafe_tags_are_rejected(self):
        with pytest.raises(ParseError):
            convert_to_properties(_stream("value: !!python/object/apply:os.getcwd []"))

    def test_depth_limit(self):
        with pytest.raises(HierarchyTooDeepError) as exc_info:
            convert_to_properties(_stream("a:", "  b:", "    c: v"), max_depth=2, source="File: deep.yml")
        assert exc_info.value.context["resource"] == "File: deep.yml"

    def test_mixed_sequence_reports_resource(self):
        with pytest.raises(UnsupportedStructureError) as exc_info:
            convert_to_properties(_stream("mixed:", "  - a", "  - b: c"), source="File: mixed.yml")
        assert exc_info.value.context["resource"] == "File: mixed.yml"
        assert exc_info.value.context["path"] == "mixed"


class TestLoadYamlDocument:
    """Test single-document loading."""

    def test_returns_parsed_document(self):
        assert load_yaml_document(_stream("a: 1")) == {"a": 1}

    def test_null_document(self):
        assert load_yaml_document(_stream("~")) is None
