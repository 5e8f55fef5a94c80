"""Tests for the Content Inspector."""

import pytest
import content_visualizer
from content_visualizer import ContentInspector, InspectionResult
from content_visualizer.models import TreeNode, ImageInfo
from content_visualizer.types import FormatKind, ViewType, ProcessingError, ErrorType


class TestContentInspector:
    """Tests for ContentInspector class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.inspector = ContentInspector(enable_parallel_processing=True, max_workers=2)

    def teardown_method(self):
        """Shut down the worker pool."""
        self.inspector.close()

    def test_initialization(self):
        """Test default configuration."""
        assert self.inspector.bytes_per_line == 16
        assert self.inspector.executor is not None
        assert self.inspector.profiler is None

    def test_invalid_bytes_per_line(self):
        """Test that a non-positive hex dump width is rejected."""
        with pytest.raises(ValueError, match="bytes_per_line"):
            ContentInspector(enable_parallel_processing=False, bytes_per_line=0)

    def test_context_manager_closes_executor(self):
        """Test that leaving the context shuts down the pool."""
        with ContentInspector() as inspector:
            assert inspector.executor is not None
        assert inspector.executor is None

    def test_classify(self, sample_json, sample_csv):
        """Test classification through the facade."""
        assert self.inspector.classify(sample_json) == FormatKind.JSON
        assert self.inspector.classify(sample_csv) == FormatKind.CSV
        assert self.inspector.classify("") is None

    def test_matching_formats(self):
        """Test that every matching format is listed, detected one first."""
        kinds = self.inspector.matching_formats("SGVsbG8=")

        assert kinds[0] == FormatKind.BASE64
        assert self.inspector.matching_formats("   ") == []

    def test_default_view_is_formatted_json(self, sample_json):
        """Test rendering the default view of JSON."""
        output = self.inspector.render_view(sample_json, FormatKind.JSON)

        assert output.startswith('{\n  "name": "Alice",')

    def test_tree_view(self, sample_json):
        """Test rendering the tree view."""
        output = self.inspector.render_view(sample_json, FormatKind.JSON, ViewType.TREE)

        assert isinstance(output, TreeNode)
        assert output.find("address", "city").value == "Paris"

    def test_table_view(self, sample_csv):
        """Test rendering the table view."""
        rows = self.inspector.render_view(sample_csv, FormatKind.CSV)

        assert len(rows) == 3
        assert rows[0]["name"] == "Alice"

    def test_claims_view(self, expired_jwt):
        """Test that the claims view of a token is its table."""
        rows = self.inspector.render_view(expired_jwt, FormatKind.JWT)

        assert any(row.get("Claim") == "role" for row in rows)

    def test_decoded_view(self):
        """Test rendering the decoded view."""
        assert self.inspector.render_view("SGVsbG8=", FormatKind.BASE64) == "Hello"

    def test_hex_view_dumps_decoded_bytes(self):
        """Test that the hex view of base64 shows the bytes it encodes."""
        dump = self.inspector.render_view("SGVsbG8=", FormatKind.BASE64, ViewType.HEX)
        assert dump.startswith("00000000  48 65 6C 6C 6F")

    def test_image_view(self, png_data_uri):
        """Test rendering the image view."""
        info = self.inspector.render_view(png_data_uri, FormatKind.BASE64_IMAGE)

        assert isinstance(info, ImageInfo)
        assert (info.width, info.height) == (16, 8)

    def test_raw_view_of_unclassified_content(self):
        """Test that text with no format only offers raw and hex views."""
        assert self.inspector.render_view("just words", None) == "just words"
        assert self.inspector.render_view("hi", None, ViewType.HEX).endswith("hi")

    def test_unsupported_view(self, sample_csv):
        """Test that requesting a view the format lacks is an error."""
        with pytest.raises(ProcessingError) as exc_info:
            self.inspector.render_view(sample_csv, FormatKind.CSV, ViewType.TREE)

        assert exc_info.value.error_type == ErrorType.UNSUPPORTED
        assert exc_info.value.context == {"kind": "csv", "view": "tree"}

    def test_hex_dump_width(self):
        """Test the configured hex dump line width."""
        with ContentInspector(enable_parallel_processing=False, bytes_per_line=8) as inspector:
            dump = inspector.to_hex_dump(bytes(range(9)))

        assert dump.split("\n")[1].startswith("00000008  08")

    def test_hex_dump_of_hex_string(self):
        """Test dumping the bytes a hex string spells."""
        assert self.inspector.to_hex_dump("cafe", FormatKind.HEX_STRING).startswith("00000000  CA FE")
        assert self.inspector.to_hex_dump(b"") == ""

    def test_malformed_content_never_raises(self):
        """Test that every operation falls back on broken input."""
        assert self.inspector.format("{broken", FormatKind.JSON) == "{broken"
        assert self.inspector.decode("%%%", FormatKind.BASE64) == "%%%"
        assert self.inspector.to_tree("{broken", FormatKind.JSON).key == "Error"
        assert self.inspector.to_rows("not.a.jwt", FormatKind.JWT)[0].is_error

    def test_profile_for(self):
        """Test looking up a visualizer profile."""
        profile = self.inspector.profile_for(FormatKind.HTML)

        assert profile.title == "HTML"
        assert profile.default_view == ViewType.RENDERED

    @pytest.mark.asyncio
    async def test_inspect(self, sample_json):
        """Test a full inspection cycle."""
        result = await self.inspector.inspect(sample_json)

        assert isinstance(result, InspectionResult)
        assert result.kind == FormatKind.JSON
        assert result.profile.title == "JSON"
        assert '"city": "Paris"' in result.formatted
        assert result.statistics.lines == 1
        assert result.warnings == []

    @pytest.mark.asyncio
    async def test_inspect_with_explicit_kind(self):
        """Test that a given kind overrides classification."""
        result = await self.inspector.inspect("a = 1", FormatKind.TOML)

        assert result.kind == FormatKind.TOML
        assert result.formatted == "a = 1"

    @pytest.mark.asyncio
    async def test_inspect_empty_content(self):
        """Test inspecting empty content."""
        result = await self.inspector.inspect("")

        assert result.kind is None
        assert result.formatted == ""
        assert result.statistics.is_empty()
        assert "Content is empty" in result.warnings

    @pytest.mark.asyncio
    async def test_inspect_without_executor(self, sample_yaml):
        """Test inspection with parallel processing disabled."""
        with ContentInspector(enable_parallel_processing=False) as inspector:
            result = await inspector.inspect(sample_yaml)

        assert result.kind == FormatKind.YAML
        assert result.to_dict()["defaultView"] == "formatted"

    def test_profiling(self, sample_json):
        """Test that operations are recorded when profiling is enabled."""
        with ContentInspector(enable_parallel_processing=False, enable_profiling=True) as inspector:
            inspector.format(sample_json, FormatKind.JSON)
            summary = inspector.get_performance_summary()

        assert summary["total_operations"] == 1
        assert summary["operations"][0]["name"] == "format:json"
        assert summary["operations"][0]["input_size"] == len(sample_json)

    def test_profiling_disabled(self):
        """Test the summary when profiling is off."""
        assert self.inspector.get_performance_summary() == {"total_operations": 0}


class TestModuleFunctions:
    """Tests for the package-level convenience functions."""

    def test_classify(self):
        """Test module-level classification."""
        assert content_visualizer.classify("[1]") == FormatKind.JSON

    def test_codecs(self):
        """Test module-level encode and decode."""
        assert content_visualizer.encode("Hello", FormatKind.BASE64) == "SGVsbG8="
        assert content_visualizer.decode("SGVsbG8=", FormatKind.BASE64) == "Hello"

    def test_format_content(self):
        """Test module-level pretty-printing."""
        assert content_visualizer.format_content('{"a":1}', FormatKind.JSON) == '{\n  "a": 1\n}'

    def test_to_hex_dump(self):
        """Test module-level hex dump with a custom width."""
        assert content_visualizer.to_hex_dump("abc", bytes_per_line=4) == "00000000  61 62 63     abc"

    def test_statistics(self):
        """Test module-level statistics."""
        assert content_visualizer.statistics(None).is_empty()
        assert content_visualizer.statistics("a\nb").lines == 2

    def test_to_tree_and_rows(self, sample_ini):
        """Test module-level tree and table builders."""
        assert content_visualizer.to_tree('{"a": 1}', FormatKind.JSON).find("a").value == "1"
        assert content_visualizer.to_rows(sample_ini, FormatKind.INI)[0]["Key"] == "host"
