"""
Content Visualizer - Content classification and transformation engine.

Recognizes what a piece of text is (JSON, a JWT, a cron expression, a
base64 blob...) and turns it into something readable: pretty-printed
text, a tree, a table of fields, a decoded payload or a hex dump.
"""

from typing import List, Optional, Union

from .inspector import ContentInspector, InspectionResult
from .detector import FormatDetector, classify, is_base64_image
from .engines import CodecEngine, FormatEngine, ImageDecoder
from .processors import TreeProcessor, TableProcessor
from .models import TreeNode, TableRow, ContentStatistics, ImageInfo
from .types import FormatKind, FormatFamily, ViewType, CodecResult, FormatResult, ProcessingError
from .views import VisualizerProfile, get_profile

__version__ = "1.0.0"

# Shared instance behind the module-level functions; it holds no mutable state
_inspector = ContentInspector(enable_parallel_processing=False)


def format_content(text: str, kind: FormatKind) -> str:
    """Pretty-print content, returning it unchanged when it cannot be formatted."""
    return _inspector.format(text, kind)


def decode(text: str, kind: FormatKind) -> str:
    """Decode content of the given kind, returning it unchanged when malformed."""
    return _inspector.decode(text, kind)


def encode(text: str, kind: FormatKind) -> str:
    """Encode content into the given kind, returning it unchanged on failure."""
    return _inspector.encode(text, kind)


def to_tree(text: str, kind: FormatKind) -> TreeNode:
    """Build the tree view of nested content."""
    return _inspector.to_tree(text, kind)


def to_rows(text: str, kind: FormatKind) -> List[TableRow]:
    """Extract the table view of flat or key-value content."""
    return _inspector.to_rows(text, kind)


def to_hex_dump(data: Union[bytes, bytearray, str, None], bytes_per_line: int = 16) -> str:
    """Render bytes, or the UTF-8 bytes of text, as a hex dump."""
    return _inspector.codec_engine.to_hex_dump(data, bytes_per_line)


def statistics(text: Optional[str]) -> ContentStatistics:
    """Count lines, characters and UTF-8 bytes of the content."""
    return ContentStatistics.from_text(text or "")


__all__ = [
    "ContentInspector",
    "InspectionResult",
    "FormatDetector",
    "CodecEngine",
    "FormatEngine",
    "ImageDecoder",
    "TreeProcessor",
    "TableProcessor",
    "TreeNode",
    "TableRow",
    "ContentStatistics",
    "ImageInfo",
    "FormatKind",
    "FormatFamily",
    "ViewType",
    "CodecResult",
    "FormatResult",
    "ProcessingError",
    "VisualizerProfile",
    "get_profile",
    "classify",
    "is_base64_image",
    "format_content",
    "decode",
    "encode",
    "to_tree",
    "to_rows",
    "to_hex_dump",
    "statistics",
]
