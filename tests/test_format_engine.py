"""Tests for the format engine."""

import json
import pytest
from content_visualizer.engines import FormatEngine
from content_visualizer.types import FormatKind


class TestJsonFormatting:
    """Tests for JSON pretty-printing and minifying."""

    def setup_method(self):
        """Set up test fixtures."""
        self.engine = FormatEngine()

    def test_format_json(self):
        """Test indentation of nested JSON."""
        formatted = self.engine.format('{"a":1,"b":[1,2]}', FormatKind.JSON)
        assert formatted == '{\n  "a": 1,\n  "b": [\n    1,\n    2\n  ]\n}'

    def test_format_keeps_key_order_and_unicode(self):
        """Test that keys keep source order and non-ASCII text is not escaped."""
        formatted = self.engine.format('{"z": "é", "a": 1}', FormatKind.JSON)
        assert formatted.index('"z"') < formatted.index('"a"')
        assert '"é"' in formatted

    def test_format_is_idempotent(self, sample_json):
        """Test that formatting formatted JSON changes nothing."""
        once = self.engine.format(sample_json, FormatKind.JSON)
        assert self.engine.format(once, FormatKind.JSON) == once

    def test_invalid_json_passes_through(self):
        """Test fail-soft formatting of invalid JSON."""
        assert self.engine.format("not json", FormatKind.JSON) == "not json"

    def test_custom_indent(self):
        """Test the configured indentation width."""
        engine = FormatEngine(json_indent=4)
        assert engine.format('{"a":1}', FormatKind.JSON) == '{\n    "a": 1\n}'

    def test_minify(self, sample_json):
        """Test that minify produces one whitespace-free line of the same document."""
        pretty = self.engine.format(sample_json, FormatKind.JSON)
        minified = self.engine.minify(pretty)

        assert "\n" not in minified
        assert ": " not in minified
        assert json.loads(minified) == json.loads(sample_json)

    def test_minify_invalid_passes_through(self):
        """Test fail-soft minifying."""
        assert self.engine.minify("{oops") == "{oops"


class TestMarkupFormatting:
    """Tests for XML and HTML pretty-printing."""

    def setup_method(self):
        """Set up test fixtures."""
        self.engine = FormatEngine()

    def test_format_xml_without_declaration(self):
        """Test indentation and that no declaration is added."""
        formatted = self.engine.format('<root><a x="1">t</a><b/></root>', FormatKind.XML)
        assert formatted == '<root>\n  <a x="1">t</a>\n  <b/>\n</root>'

    def test_format_xml_keeps_declaration(self, sample_xml):
        """Test that an existing declaration is kept."""
        formatted = self.engine.format(sample_xml, FormatKind.XML)

        assert formatted.startswith("<?xml")
        assert "\n  <book" in formatted
        assert "\n    <title>XML Guide</title>" in formatted

    def test_format_xml_is_idempotent(self):
        """Test that formatting formatted XML changes nothing."""
        once = self.engine.format("<r><a>1</a><a>2</a></r>", FormatKind.XML)
        assert self.engine.format(once, FormatKind.XML) == once

    def test_malformed_xml_passes_through(self):
        """Test fail-soft formatting of malformed XML."""
        assert self.engine.format("<a><b></a>", FormatKind.XML) == "<a><b></a>"

    def test_html_uses_xml_rules(self):
        """Test that well-formed HTML is indented."""
        formatted = self.engine.format("<html><body><p>x</p></body></html>", FormatKind.HTML)
        assert formatted == "<html>\n  <body>\n    <p>x</p>\n  </body>\n</html>"

    def test_loose_html_passes_through(self):
        """Test that HTML which is not well-formed XML is unchanged."""
        html = "<html><body><br></body></html>"
        assert self.engine.format(html, FormatKind.HTML) == html


class TestYamlAndTomlFormatting:
    """Tests for YAML and TOML pretty-printing."""

    def setup_method(self):
        """Set up test fixtures."""
        self.engine = FormatEngine()

    def test_format_yaml(self):
        """Test block style with indented sequences."""
        formatted = self.engine.format("name: svc\nports: [80, 443]", FormatKind.YAML)
        assert formatted == "name: svc\nports:\n  - 80\n  - 443"

    def test_format_yaml_stream(self):
        """Test that multi-document streams keep their separators."""
        formatted = self.engine.format("a: 1\n---\nb: 2\n", FormatKind.YAML)
        assert formatted == "---\na: 1\n---\nb: 2"

    def test_scalar_yaml_passes_through(self):
        """Test that a bare scalar is not reformatted."""
        assert self.engine.format("just text", FormatKind.YAML) == "just text"

    def test_invalid_yaml_passes_through(self):
        """Test fail-soft formatting of invalid YAML."""
        text = "key: [unclosed"
        assert self.engine.format(text, FormatKind.YAML) == text

    def test_format_toml(self):
        """Test that TOML is normalized."""
        formatted = self.engine.format('title="x"\n[owner]\nname="Tom"', FormatKind.TOML)

        assert 'title = "x"' in formatted
        assert "[owner]" in formatted
        assert 'name = "Tom"' in formatted

    def test_invalid_toml_passes_through(self):
        """Test fail-soft formatting of invalid TOML."""
        assert self.engine.format("= broken", FormatKind.TOML) == "= broken"


class TestSqlFormatting:
    """Tests for SQL keyword line-breaking."""

    def setup_method(self):
        """Set up test fixtures."""
        self.engine = FormatEngine()

    def test_breaks_before_keywords(self):
        """Test a line break before each major keyword, any case."""
        formatted = self.engine.format("select id from users where a = 1 and b = 2", FormatKind.SQL)
        assert formatted == "select id\nfrom users\nwhere a = 1\nand b = 2"

    def test_multi_word_keywords(self):
        """Test that two-word keywords stay together."""
        formatted = self.engine.format(
            "SELECT * FROM a LEFT JOIN b ON a.id = b.id ORDER BY a.id", FormatKind.SQL
        )
        assert formatted == "SELECT *\nFROM a\nLEFT JOIN b\nON a.id = b.id\nORDER BY a.id"

    def test_whole_words_only(self):
        """Test that keywords inside identifiers are not split."""
        formatted = self.engine.format("SELECT selection FROM orders", FormatKind.SQL)
        assert formatted == "SELECT selection\nFROM orders"

    def test_sql_is_idempotent(self):
        """Test that formatting formatted SQL changes nothing."""
        once = self.engine.format("SELECT a FROM t WHERE x = 1", FormatKind.SQL)
        assert self.engine.format(once, FormatKind.SQL) == once


class TestFormatEngine:
    """Tests for FormatEngine dispatch."""

    def setup_method(self):
        """Set up test fixtures."""
        self.engine = FormatEngine()

    @pytest.mark.parametrize("kind", [FormatKind.CSV, FormatKind.CRON, FormatKind.BASE64, FormatKind.MARKDOWN])
    def test_other_kinds_pass_through(self, kind):
        """Test that kinds without a formatter are unchanged."""
        assert self.engine.format("a,b\n1,2", kind) == "a,b\n1,2"

    def test_empty_input(self):
        """Test that empty input is unchanged."""
        assert self.engine.format("", FormatKind.JSON) == ""

    def test_try_format_reports_failure(self):
        """Test that the result carries the error."""
        result = self.engine.try_format("{bad", FormatKind.JSON)

        assert not result.success
        assert result.value == "{bad"
        assert result.errors

    def test_supports(self):
        """Test which kinds have formatters."""
        assert self.engine.supports(FormatKind.SQL)
        assert not self.engine.supports(FormatKind.CSV)
