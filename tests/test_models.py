"""Tests for data models."""

import pytest
from content_visualizer.models import TreeNode, TableRow, ContentStatistics, ImageInfo, render_table


class TestTreeNode:
    """Tests for TreeNode class."""

    def test_leaf(self):
        """Test creating a leaf node."""
        node = TreeNode(key="name", value="Alice", type_hint="(string)")

        assert node.is_leaf()
        assert node.has_value
        assert node.count_nodes() == 1

    def test_empty_leaf(self):
        """Test that a node with neither value nor children is an empty leaf."""
        node = TreeNode(key="empty")

        assert node.is_leaf()
        assert not node.has_value

    def test_value_and_children_rejected(self):
        """Test that a node cannot carry both a value and children."""
        with pytest.raises(ValueError, match="cannot carry both"):
            TreeNode(key="bad", value="x", children=[TreeNode(key="child")])

    def test_none_key_rejected(self):
        """Test validation of a missing key."""
        with pytest.raises(ValueError, match="key cannot be None"):
            TreeNode(key=None)

    def test_add_child(self):
        """Test turning a node into a branch."""
        node = TreeNode(key="root")
        node.add_child(TreeNode(key="a", value="1"))

        assert not node.is_leaf()
        assert node.find("a").value == "1"

    def test_add_child_to_valued_node(self):
        """Test that a valued leaf cannot gain children."""
        with pytest.raises(ValueError):
            TreeNode(key="leaf", value="x").add_child(TreeNode(key="child"))

    def test_find_missing_path(self):
        """Test that an unknown path gives None."""
        assert TreeNode(key="root").find("nope") is None

    def test_walk_and_render(self):
        """Test document order traversal and indented rendering."""
        root = TreeNode(key="root", type_hint="{object}", children=[
            TreeNode(key="a", value="1", type_hint="(number)"),
            TreeNode(key="b", type_hint="[1 items]", children=[TreeNode(key="[0]", value="x")]),
        ])

        assert [(depth, node.key) for depth, node in root.walk()] == [
            (0, "root"), (1, "a"), (1, "b"), (2, "[0]")
        ]
        assert root.render() == "root {object}\n  a (number): 1\n  b [1 items]\n    [0]: x"

    def test_to_dict(self):
        """Test conversion to dictionary."""
        node = TreeNode(key="root", type_hint="{object}", children=[TreeNode(key="a", value="1")])

        assert node.to_dict() == {
            "key": "root",
            "typeHint": "{object}",
            "children": [{"key": "a", "value": "1"}],
        }


class TestTableRow:
    """Tests for TableRow class."""

    def test_of_pads_and_stringifies(self):
        """Test building a row from parallel sequences."""
        row = TableRow.of(("A", "B", "C"), (1, None))

        assert row.to_dict() == {"A": "1", "B": "", "C": ""}
        assert row.columns == ("A", "B", "C")
        assert row["A"] == "1"

    def test_error_row(self):
        """Test the synthetic error row."""
        row = TableRow.error("boom")

        assert row.is_error
        assert row.columns == ("Error",)
        assert row.get("Error") == "boom"

    def test_blank(self):
        """Test separator detection."""
        assert TableRow.of(("A", "B"), ("", "")).is_blank()
        assert not TableRow.of(("A", "B"), ("x", "")).is_blank()

    def test_non_string_cell_rejected(self):
        """Test validation of cell values."""
        with pytest.raises(ValueError, match="must be a string"):
            TableRow(cells={"A": 1})

    def test_render_table(self):
        """Test aligned rendering with a header per column set."""
        rows = [
            TableRow.of(("Key", "Value"), ("a", "1")),
            TableRow.of(("Key", "Value"), ("long", "2")),
            TableRow.error("bad"),
        ]

        assert render_table(rows).split("\n") == [
            "Key  | Value",
            "---- | -----",
            "a    | 1",
            "long | 2",
            "Error",
            "-----",
            "bad",
        ]

    def test_render_empty_table(self):
        """Test that no rows render as empty text."""
        assert render_table([]) == ""


class TestContentStatistics:
    """Tests for ContentStatistics class."""

    def test_counts(self):
        """Test lines, characters and UTF-8 bytes."""
        stats = ContentStatistics.from_text("héllo\r\nworld\rthree\nfour")

        assert stats.lines == 4
        assert stats.characters == 23
        assert stats.bytes == 24

    def test_trailing_newline_counts_a_line(self):
        """Test that text ending in a newline has an empty last line."""
        assert ContentStatistics.from_text("a\n").lines == 2

    def test_empty(self):
        """Test statistics of empty content."""
        stats = ContentStatistics.from_text("")

        assert stats.is_empty()
        assert (stats.lines, stats.characters, stats.bytes) == (0, 0, 0)
        assert stats.summary() == "Empty content"

    def test_summary(self):
        """Test thousands separators in the summary."""
        stats = ContentStatistics(lines=1234, characters=5678, bytes=9012)
        assert stats.summary() == "Lines: 1,234 | Characters: 5,678 | Bytes: 9,012"

    def test_negative_rejected(self):
        """Test validation of negative counts."""
        with pytest.raises(ValueError, match="lines must be non-negative"):
            ContentStatistics(lines=-1, characters=0, bytes=0)


class TestImageInfo:
    """Tests for ImageInfo class."""

    def test_summary_with_dimensions(self):
        """Test the summary of an image with known size."""
        info = ImageInfo(format="PNG", mime_type="image/png", estimated_size_bytes=2048, width=16, height=8)
        assert info.summary() == "16 x 8 px | PNG | 2,048 bytes"

    def test_summary_without_dimensions(self):
        """Test the summary of an image with unknown size."""
        info = ImageInfo(format="JPEG", mime_type="image/jpeg", estimated_size_bytes=10)
        assert info.summary() == "JPEG | 10 bytes"

    def test_to_dict(self):
        """Test conversion to dictionary."""
        info = ImageInfo(format="GIF", mime_type="image/gif", estimated_size_bytes=3)
        assert info.to_dict()["mimeType"] == "image/gif"
