"""Tests for the tree processor."""

import pytest
from content_visualizer.processors import TreeProcessor
from content_visualizer.processors.tree_processor import scalar_kind, scalar_text
from content_visualizer.types import FormatKind


class TestScalarHelpers:
    """Tests for scalar naming and stringification."""

    @pytest.mark.parametrize("value,kind,text", [
        (None, "null", "null"),
        (True, "boolean", "true"),
        (False, "boolean", "false"),
        (3, "number", "3"),
        (2.5, "number", "2.5"),
        ("x", "string", "x"),
    ])
    def test_scalars(self, value, kind, text):
        """Test kind names and text of JSON scalars."""
        assert scalar_kind(value) == kind
        assert scalar_text(value) == text


class TestJsonTree:
    """Tests for JSON trees."""

    def setup_method(self):
        """Set up test fixtures."""
        self.processor = TreeProcessor()

    def test_root(self, sample_json):
        """Test the root node and its children in source order."""
        root = self.processor.process(sample_json, FormatKind.JSON)

        assert root.key == "root"
        assert root.type_hint == "{object}"
        assert [child.key for child in root.children] == [
            "name", "age", "active", "tags", "address", "nickname"
        ]

    def test_scalar_leaves(self, sample_json):
        """Test leaf values and type hints."""
        root = self.processor.process(sample_json, FormatKind.JSON)

        assert root.find("name").value == "Alice"
        assert root.find("name").type_hint == "(string)"
        assert root.find("age").type_hint == "(number)"
        assert root.find("active").value == "true"
        assert root.find("active").type_hint == "(boolean)"
        assert root.find("nickname").value == "null"
        assert root.find("nickname").type_hint == "(null)"

    def test_arrays(self, sample_json):
        """Test indexed children and item count of arrays."""
        tags = self.processor.process(sample_json, FormatKind.JSON).find("tags")

        assert tags.type_hint == "[2 items]"
        assert [child.key for child in tags.children] == ["[0]", "[1]"]
        assert tags.value is None

    def test_nested_objects(self, sample_json):
        """Test that nested objects become branches."""
        root = self.processor.process(sample_json, FormatKind.JSON)

        assert root.find("address").type_hint == "{object}"
        assert root.find("address", "city").value == "Paris"

    def test_top_level_array(self):
        """Test a document whose root is an array."""
        root = self.processor.process("[1, [2]]", FormatKind.JSON)

        assert root.key == "root"
        assert root.type_hint == "[2 items]"
        assert root.find("[1]", "[0]").value == "2"

    def test_deeply_nested_document(self):
        """Test that valid JSON nested hundreds of levels deep still builds a tree."""
        depth = 600
        root = self.processor.process("[" * depth + "]" * depth, FormatKind.JSON)

        assert root.key == "root"
        assert root.count_nodes() == depth
        assert [level for level, _ in root.walk()][-1] == depth - 1

    def test_invalid_json_gives_error_node(self):
        """Test that a parse failure yields a single error node."""
        root = self.processor.process("{broken", FormatKind.JSON)

        assert root.key == "Error"
        assert root.value
        assert root.is_leaf()


class TestXmlTree:
    """Tests for XML trees."""

    def setup_method(self):
        """Set up test fixtures."""
        self.processor = TreeProcessor()

    def test_elements_and_attributes(self, sample_xml):
        """Test attribute children and collapsed text values."""
        root = self.processor.process(sample_xml, FormatKind.XML)
        book = root.find("book")

        assert root.key == "catalog"
        assert [child.key for child in book.children] == ["@id", "@lang", "title", "price"]
        assert book.find("@id").value == "bk101"
        assert book.find("@id").type_hint == "(attribute)"
        assert book.find("title").value == "XML Guide"
        assert book.find("title").is_leaf()

    def test_text_next_to_attributes(self):
        """Test that text of an element with attributes becomes a text child."""
        root = self.processor.process('<a href="/x">link</a>', FormatKind.XML)

        assert [child.key for child in root.children] == ["@href", "#text"]
        assert root.find("#text").value == "link"

    def test_empty_element(self):
        """Test that an empty element is a leaf without a value."""
        root = self.processor.process("<empty/>", FormatKind.XML)

        assert root.key == "empty"
        assert root.value is None
        assert root.is_leaf()

    def test_html_is_parsed_as_xml(self):
        """Test that well-formed HTML builds a tree."""
        root = self.processor.process("<html><body><p>hi</p></body></html>", FormatKind.HTML)
        assert root.find("body", "p").value == "hi"

    def test_malformed_xml_gives_error_node(self):
        """Test that malformed markup yields an error node."""
        root = self.processor.process("<a><b></a>", FormatKind.XML)
        assert root.key == "Error"


class TestYamlAndTomlTree:
    """Tests for YAML and TOML trees."""

    def setup_method(self):
        """Set up test fixtures."""
        self.processor = TreeProcessor()

    def test_yaml_document(self, sample_yaml):
        """Test the YAML document root and sequence children."""
        root = self.processor.process(sample_yaml, FormatKind.YAML)

        assert root.key == "document"
        assert root.type_hint == "{mapping}"
        assert root.find("replicas").type_hint == "(number)"
        assert root.find("ports").type_hint == "[2 items]"
        assert root.find("ports", "[1]").value == "443"

    def test_yaml_stream(self):
        """Test that several documents get one indexed child each."""
        root = self.processor.process("a: 1\n---\nb: 2\n", FormatKind.YAML)

        assert root.key == "documents"
        assert root.type_hint == "[2 documents]"
        assert root.find("[1]", "b").value == "2"

    def test_yaml_dates(self):
        """Test that YAML dates are shown in ISO form."""
        root = self.processor.process("released: 2024-01-15\n", FormatKind.YAML)

        assert root.find("released").value == "2024-01-15"
        assert root.find("released").type_hint == "(date)"

    def test_invalid_yaml_gives_error_node(self):
        """Test that invalid YAML yields an error node."""
        assert self.processor.process("key: [unclosed", FormatKind.YAML).key == "Error"

    def test_toml_tables(self, sample_toml):
        """Test the TOML root and nested tables."""
        root = self.processor.process(sample_toml, FormatKind.TOML)

        assert root.key == "root"
        assert root.type_hint == "{table}"
        assert root.find("title").value == "Example"
        assert root.find("owner").type_hint == "{table}"
        assert root.find("owner", "age").value == "42"

    def test_invalid_toml_gives_error_node(self):
        """Test that invalid TOML yields an error node."""
        assert self.processor.process("= broken", FormatKind.TOML).key == "Error"


class TestFallbackTree:
    """Tests for kinds without a tree builder."""

    def test_single_content_leaf(self):
        """Test that other kinds give one leaf holding the content."""
        root = TreeProcessor().process("a,b\n1,2", FormatKind.CSV)

        assert root.key == "Content"
        assert root.value == "a,b\n1,2"
        assert root.is_leaf()

    def test_supports(self):
        """Test which kinds have a tree builder."""
        processor = TreeProcessor()

        assert processor.supports(FormatKind.TOML)
        assert not processor.supports(FormatKind.CRON)
