"""Main Content Inspector implementation."""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Union
from .types import FormatKind, ViewType, ProcessingError, ErrorType
from .detector import FormatDetector
from .engines import CodecEngine, FormatEngine, ImageDecoder
from .processors import TreeProcessor, TableProcessor
from .models import TreeNode, TableRow, ContentStatistics, ImageInfo
from .views import VisualizerProfile, get_profile
from .error_handler import ErrorHandler
from .profiler import PerformanceProfiler
from .utils.validation import ValidationUtils


ViewOutput = Union[str, TreeNode, List[TableRow], Optional[ImageInfo]]


@dataclass
class InspectionResult:
    """Result of a full inspection cycle."""
    kind: Optional[FormatKind]
    profile: VisualizerProfile
    formatted: str
    statistics: ContentStatistics
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result to a dictionary for JSON serialization."""
        return {
            "kind": self.kind.value if self.kind else None,
            "title": self.profile.title,
            "views": [view.value for view in self.profile.supported_views],
            "defaultView": self.profile.default_view.value,
            "statistics": self.statistics.to_dict(),
            "warnings": list(self.warnings),
        }


class ContentInspector:
    """
    Classifies, decodes, formats and normalizes text content.

    The inspector is the single entry point a display surface talks to.
    Every operation takes the content and, where it matters, the format
    kind the caller wants it treated as; malformed content never raises.
    """

    def __init__(self, logger: Optional[logging.Logger] = None,
                 enable_parallel_processing: bool = True,
                 max_workers: Optional[int] = None,
                 enable_profiling: bool = False,
                 bytes_per_line: int = 16,
                 json_indent: int = 2,
                 cron_occurrences: int = 5,
                 clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize the Content Inspector.

        Args:
            logger: Optional logger instance
            enable_parallel_processing: Run formatting in a worker thread pool during ``inspect``
            max_workers: Maximum number of worker threads (None = auto-detect)
            enable_profiling: Record timing and memory for each operation
            bytes_per_line: Width of hex dump lines
            json_indent: Indentation for formatted JSON and XML
            cron_occurrences: Number of upcoming runs listed for cron expressions
            clock: Callable returning the current time (defaults to ``datetime.now``)

        Raises:
            ValueError: If bytes_per_line is not positive
        """
        self.logger = logger or logging.getLogger(__name__)

        width_validation = ValidationUtils.validate_bytes_per_line(bytes_per_line)
        if not width_validation.is_valid:
            raise ValueError(width_validation.errors[0].message)
        for warning in width_validation.warnings:
            self.logger.warning(warning)

        self.bytes_per_line = bytes_per_line
        self.enable_parallel_processing = enable_parallel_processing
        self.max_workers = max_workers

        if enable_parallel_processing:
            self.executor = ThreadPoolExecutor(max_workers=max_workers)
        else:
            self.executor = None

        self.error_handler = ErrorHandler(self.logger)
        self.detector = FormatDetector(self.logger)
        self.codec_engine = CodecEngine(self.logger)
        self.format_engine = FormatEngine(self.logger, json_indent=json_indent)
        self.image_decoder = ImageDecoder(self.logger)
        self.tree_processor = TreeProcessor(self.error_handler, self.logger)
        self.table_processor = TableProcessor(
            self.error_handler,
            self.logger,
            clock=clock,
            cron_occurrences=cron_occurrences
        )
        self.profiler = PerformanceProfiler(self.logger) if enable_profiling else None

    def close(self):
        """Shut down the worker thread pool."""
        if self.executor is not None:
            self.executor.shutdown(wait=True)
            self.executor = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _profiled(self, operation_name: str, text: str, operation: Callable[[], Any]) -> Any:
        if self.profiler is None:
            return operation()

        input_size = len((text or "").encode("utf-8", errors="surrogatepass"))
        with self.profiler.profile_operation(operation_name, input_size) as profiler:
            result = operation()
            profiler.record_output(len(result) if isinstance(result, (str, bytes, list)) else 0)
        return result

    def classify(self, text: Optional[str]) -> Optional[FormatKind]:
        """
        Detect the format of the content.

        Returns:
            The detected FormatKind, or None when no heuristic matches
        """
        return self.detector.detect_format(text)

    def matching_formats(self, text: Optional[str]) -> List[FormatKind]:
        """List every format whose heuristic matches, most specific first."""
        return self.detector.matching_formats(text)

    def is_base64_image(self, text: Optional[str]) -> bool:
        """Check if the content appears to be a base64-encoded image."""
        return self.detector.is_base64_image(text)

    def format(self, text: str, kind: FormatKind) -> str:
        """Pretty-print content, returning it unchanged when it cannot be formatted."""
        return self._profiled(f"format:{kind.value}", text,
                              lambda: self.format_engine.format(text, kind))

    def minify(self, text: str) -> str:
        """Minify JSON content, returning it unchanged when it is not valid JSON."""
        return self._profiled("minify:json", text, lambda: self.format_engine.minify(text))

    def decode(self, text: str, kind: FormatKind) -> str:
        """Decode content of the given kind, returning it unchanged when malformed."""
        return self._profiled(f"decode:{kind.value}", text,
                              lambda: self.codec_engine.decode(text, kind))

    def encode(self, text: str, kind: FormatKind) -> str:
        """Encode content into the given kind, returning it unchanged on failure."""
        return self._profiled(f"encode:{kind.value}", text,
                              lambda: self.codec_engine.encode(text, kind))

    def to_tree(self, text: str, kind: FormatKind) -> TreeNode:
        """Build the tree view of nested content."""
        return self._profiled(f"tree:{kind.value}", text,
                              lambda: self.tree_processor.process(text, kind))

    def to_rows(self, text: str, kind: FormatKind) -> List[TableRow]:
        """Extract the table view of flat or key-value content."""
        return self._profiled(f"table:{kind.value}", text,
                              lambda: self.table_processor.process(text, kind))

    def to_hex_dump(self, data: Union[bytes, bytearray, str, None],
                    kind: Optional[FormatKind] = None) -> str:
        """
        Render content as a hex dump.

        Args:
            data: Raw bytes, or text
            kind: For base64, hex-string and gzip text, dump the decoded bytes
                instead of the text itself

        Returns:
            Hex dump, empty for empty input
        """
        if isinstance(data, str):
            data = self.codec_engine.content_bytes(data, kind)
        return self.codec_engine.to_hex_dump(data, self.bytes_per_line)

    def statistics(self, text: Optional[str]) -> ContentStatistics:
        """Count lines, characters and UTF-8 bytes of the content."""
        return ContentStatistics.from_text(text or "")

    def image_info(self, text: Optional[str]) -> Optional[ImageInfo]:
        """Describe a base64-embedded image, or None if the content is not one."""
        return self.image_decoder.get_info(text)

    def decode_image(self, text: Optional[str]) -> Optional[bytes]:
        """Decode image bytes from a data URI or raw base64."""
        return self.image_decoder.decode(text)

    def profile_for(self, kind: Optional[FormatKind]) -> VisualizerProfile:
        """Get the visualizer profile (title and views) for a kind."""
        return get_profile(kind)

    def render_view(self, text: str, kind: Optional[FormatKind], view: Optional[ViewType] = None) -> ViewOutput:
        """
        Produce one view of the content.

        Args:
            text: Raw content
            kind: Format kind of the content, or None for unclassified text
            view: View to render; defaults to the kind's default view

        Returns:
            Text for raw, formatted, syntax, hex, rendered and decoded views,
            a TreeNode for the tree view, table rows for table and claims
            views, and ImageInfo (or None) for the image view

        Raises:
            ProcessingError: If the kind does not offer the view
        """
        profile = get_profile(kind)
        view = view or profile.default_view

        view_validation = ValidationUtils.validate_view(kind, view)
        if not view_validation.is_valid:
            raise ProcessingError(
                view_validation.errors[0].message,
                ErrorType.UNSUPPORTED,
                context={"kind": kind.value if kind else None, "view": view.value}
            )

        if view in (ViewType.RAW, ViewType.RENDERED):
            return text
        if view in (ViewType.FORMATTED, ViewType.SYNTAX_HIGHLIGHTED):
            return self.format(text, kind)
        if view == ViewType.TREE:
            return self.to_tree(text, kind)
        if view in (ViewType.TABLE, ViewType.CLAIMS):
            return self.to_rows(text, kind)
        if view == ViewType.HEX:
            return self.to_hex_dump(text, kind)
        if view == ViewType.DECODED:
            return self.decode(text, kind)
        return self.image_info(text)

    async def inspect(self, text: str, kind: Optional[FormatKind] = None) -> InspectionResult:
        """
        Run a full inspection cycle: classify, pretty-print and count.

        Args:
            text: Raw content
            kind: Format kind to use; classified from the content when omitted

        Returns:
            InspectionResult with the kind, its visualizer profile, the
            formatted content and statistics
        """
        validation = self.error_handler.validate_input(text)
        for warning in validation.warnings:
            self.logger.warning(warning)

        if kind is None:
            kind = self.classify(text)
        profile = get_profile(kind)

        if kind is None:
            formatted = text or ""
        elif self.executor is not None:
            loop = asyncio.get_running_loop()
            formatted = await loop.run_in_executor(self.executor, self.format, text, kind)
        else:
            formatted = self.format(text, kind)

        statistics = self.statistics(text)
        self.logger.info(
            f"Inspected content as {profile.title}: {statistics.summary()}"
        )

        return InspectionResult(
            kind=kind,
            profile=profile,
            formatted=formatted,
            statistics=statistics,
            warnings=list(validation.warnings) + [e.message for e in validation.errors],
        )

    def get_performance_summary(self) -> Dict[str, Any]:
        """Get the profiler's summary, or an empty summary when profiling is off."""
        if self.profiler is None:
            return {"total_operations": 0}
        return self.profiler.get_performance_summary()
