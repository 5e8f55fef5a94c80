"""Core type definitions for the Content Visualizer."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional


class FormatFamily(Enum):
    """Enumeration of format families."""
    DATA = "data"
    ENCODED = "encoded"
    SECURITY = "security"
    STRUCTURED = "structured"
    BINARY = "binary"


class FormatKind(Enum):
    """Enumeration of recognized content formats."""
    # Data formats
    JSON = "json"
    XML = "xml"
    HTML = "html"
    YAML = "yaml"
    TOML = "toml"
    CSV = "csv"
    TSV = "tsv"
    INI = "ini"
    MARKDOWN = "markdown"
    SQL = "sql"
    GRAPHQL = "graphql"

    # Encoded data
    BASE64 = "base64"
    BASE64_IMAGE = "base64-image"
    URL_ENCODED = "url-encoded"
    HTML_ENTITIES = "html-entities"
    UNICODE_ESCAPE = "unicode-escape"
    HEX_STRING = "hex-string"
    GZIP = "gzip"
    DEFLATE = "deflate"

    # Security
    JWT = "jwt"
    SAML = "saml"
    CERTIFICATE = "certificate"

    # Structured strings
    CONNECTION_STRING = "connection-string"
    URI = "uri"
    QUERY_STRING = "query-string"
    REGEX = "regex"
    CRON = "cron"

    # Binary / low-level
    HEX_DUMP = "hex-dump"
    GUID = "guid"
    TIMESTAMP = "timestamp"
    IP_ADDRESS = "ip-address"

    @property
    def family(self) -> FormatFamily:
        """Family this format belongs to."""
        return _FAMILIES[self]

    @classmethod
    def parse(cls, name: str) -> 'FormatKind':
        """
        Resolve a format kind from its value or member name.

        Args:
            name: Value ("url-encoded") or member name ("URL_ENCODED"), case-insensitive

        Returns:
            Matching FormatKind

        Raises:
            ValueError: If no kind matches
        """
        normalized = name.strip().lower().replace("_", "-")
        for kind in cls:
            if kind.value == normalized or kind.value.replace("-", "") == normalized.replace("-", ""):
                return kind
        raise ValueError(f"Unknown format kind: {name}")


_FAMILIES = {
    FormatKind.JSON: FormatFamily.DATA,
    FormatKind.XML: FormatFamily.DATA,
    FormatKind.HTML: FormatFamily.DATA,
    FormatKind.YAML: FormatFamily.DATA,
    FormatKind.TOML: FormatFamily.DATA,
    FormatKind.CSV: FormatFamily.DATA,
    FormatKind.TSV: FormatFamily.DATA,
    FormatKind.INI: FormatFamily.DATA,
    FormatKind.MARKDOWN: FormatFamily.DATA,
    FormatKind.SQL: FormatFamily.DATA,
    FormatKind.GRAPHQL: FormatFamily.DATA,
    FormatKind.BASE64: FormatFamily.ENCODED,
    FormatKind.BASE64_IMAGE: FormatFamily.ENCODED,
    FormatKind.URL_ENCODED: FormatFamily.ENCODED,
    FormatKind.HTML_ENTITIES: FormatFamily.ENCODED,
    FormatKind.UNICODE_ESCAPE: FormatFamily.ENCODED,
    FormatKind.HEX_STRING: FormatFamily.ENCODED,
    FormatKind.GZIP: FormatFamily.ENCODED,
    FormatKind.DEFLATE: FormatFamily.ENCODED,
    FormatKind.JWT: FormatFamily.SECURITY,
    FormatKind.SAML: FormatFamily.SECURITY,
    FormatKind.CERTIFICATE: FormatFamily.SECURITY,
    FormatKind.CONNECTION_STRING: FormatFamily.STRUCTURED,
    FormatKind.URI: FormatFamily.STRUCTURED,
    FormatKind.QUERY_STRING: FormatFamily.STRUCTURED,
    FormatKind.REGEX: FormatFamily.STRUCTURED,
    FormatKind.CRON: FormatFamily.STRUCTURED,
    FormatKind.HEX_DUMP: FormatFamily.BINARY,
    FormatKind.GUID: FormatFamily.BINARY,
    FormatKind.TIMESTAMP: FormatFamily.BINARY,
    FormatKind.IP_ADDRESS: FormatFamily.BINARY,
}


class ViewType(Enum):
    """Enumeration of the views a visualizer can offer."""
    RAW = "raw"
    FORMATTED = "formatted"
    SYNTAX_HIGHLIGHTED = "syntax"
    TREE = "tree"
    TABLE = "table"
    HEX = "hex"
    RENDERED = "rendered"
    IMAGE = "image"
    CLAIMS = "claims"
    DECODED = "decoded"


class ErrorType(Enum):
    """Enumeration of error types."""
    SYNTAX = "syntax"
    ENCODING = "encoding"
    COMPRESSION = "compression"
    STRUCTURE = "structure"
    UNSUPPORTED = "unsupported"
    SIZE = "size"


@dataclass
class CodecResult:
    """Result of an encode or decode attempt."""
    success: bool
    value: str
    errors: Optional[List[str]] = None


@dataclass
class FormatResult:
    """Result of a pretty-print or minify attempt."""
    success: bool
    value: str
    errors: Optional[List[str]] = None


@dataclass
class ValidationError:
    """Validation error details."""
    type: ErrorType
    message: str
    location: Optional[str] = None


@dataclass
class ValidationResult:
    """Result of input validation."""
    is_valid: bool
    errors: List[ValidationError]
    warnings: List[str] = field(default_factory=list)


@dataclass
class ErrorResponse:
    """Response for error handling."""
    can_recover: bool
    suggested_action: str
    partial_results: Optional[Any] = None


class ProcessingError(Exception):
    """Custom exception for content processing errors."""

    def __init__(self, message: str, error_type: ErrorType, context: Optional[Any] = None):
        super().__init__(message)
        self.error_type = error_type
        self.context = context


# Abstract base classes for interfaces

class CodecEngineInterface(ABC):
    """Abstract interface for the codec library."""

    @abstractmethod
    def decode(self, text: str, kind: FormatKind) -> str:
        """Decode text of the given kind, returning the input unchanged on failure."""
        pass

    @abstractmethod
    def encode(self, text: str, kind: FormatKind) -> str:
        """Encode text into the given kind, returning the input unchanged on failure."""
        pass


class FormatEngineInterface(ABC):
    """Abstract interface for the pretty-printer."""

    @abstractmethod
    def format(self, text: str, kind: FormatKind) -> str:
        """Pretty-print text of the given kind, returning the input unchanged on failure."""
        pass


class ContentProcessorInterface(ABC):
    """Abstract interface for structural normalizers."""

    @abstractmethod
    def process(self, text: str, kind: FormatKind) -> Any:
        """Normalize text of the given kind into its display structure."""
        pass


class ErrorHandlerInterface(ABC):
    """Abstract interface for error handling."""

    @abstractmethod
    def validate_input(self, text: str) -> ValidationResult:
        """Validate input content."""
        pass

    @abstractmethod
    def handle_processing_error(self, error: ProcessingError) -> ErrorResponse:
        """Handle processing errors."""
        pass
