"""Structural normalizers producing tree and table views."""

from .tree_processor import TreeProcessor
from .table_processor import TableProcessor

__all__ = ["TreeProcessor", "TableProcessor"]
