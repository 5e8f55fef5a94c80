"""Data models for the Content Visualizer."""

from .tree_node import TreeNode
from .table_row import TableRow, render_table
from .content_statistics import ContentStatistics
from .image_info import ImageInfo

__all__ = ["TreeNode", "TableRow", "render_table", "ContentStatistics", "ImageInfo"]
