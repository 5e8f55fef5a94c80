"""Heuristic format detection for raw text content."""

import logging
import re
from typing import Callable, List, NamedTuple, Optional, Tuple
from .types import FormatKind


class Heuristic(NamedTuple):
    """A single detection rule: the kind it yields and its match predicate."""
    kind: FormatKind
    matches: Callable[[str], bool]


JSON_PATTERN = re.compile(r"^\s*[\[{]")
XML_PATTERN = re.compile(r"^\s*<[?!]?\w")
HTML_PATTERN = re.compile(r"^\s*<!DOCTYPE\s+html|<html|<head|<body", re.IGNORECASE)
YAML_PATTERN = re.compile(r"^---\s*$|^\w+:\s+", re.MULTILINE)
# A key must be followed by a value so padded base64 ("YQ==") is not taken as TOML
TOML_PATTERN = re.compile(r"^\s*\[[\w.-]+\]|^\s*\w+\s*=\s*[^\s=]", re.MULTILINE)
INI_PATTERN = re.compile(r"^\s*\[[\w\s]+\]\s*$", re.MULTILINE)
CSV_PATTERN = re.compile(r"^[^,\n]+,[^,\n]+")
JWT_PATTERN = re.compile(r"^eyJ[A-Za-z0-9_-]+\.eyJ[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+$")
BASE64_PATTERN = re.compile(r"^[A-Za-z0-9+/]+=*$")
DATA_URI_PATTERN = re.compile(r"^data:[\w/+-]+;base64,")
URL_ENCODED_PATTERN = re.compile(r"%[0-9A-Fa-f]{2}")
GUID_PATTERN = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)
CONNECTION_STRING_PATTERN = re.compile(
    r"(Data Source|Server|Initial Catalog|Database|User Id|Password|Integrated Security)=",
    re.IGNORECASE,
)
URI_PATTERN = re.compile(
    r"^(?:(?:https?|ftps?|sftp|wss?|file)://|(?:mailto|tel):)", re.IGNORECASE
)
SQL_PATTERN = re.compile(
    r"^\s*(SELECT|INSERT|UPDATE|DELETE|CREATE|ALTER|DROP|EXEC|WITH)\s+", re.IGNORECASE
)
_CRON_FIELD = r"(\*(?:/\d+)?|[\d,\-/]+)"
CRON_PATTERN = re.compile(r"^" + r"\s+".join([_CRON_FIELD] * 5) + r"$")
IP_ADDRESS_PATTERN = re.compile(
    r"^(\d{1,3}\.){3}\d{1,3}$|^([0-9a-fA-F]{0,4}:){2,7}[0-9a-fA-F]{0,4}$"
)
HEX_STRING_PATTERN = re.compile(r"^[0-9A-Fa-f]+$")
UNIX_TIMESTAMP_PATTERN = re.compile(r"^\d{10,13}$")

# Base64 prefixes of PNG, JPEG, GIF, BMP and WebP magic bytes
IMAGE_BASE64_PREFIXES = ("iVBORw0KGgo", "/9j/", "R0lGOD", "Qk0", "UklGR")


def _is_csv(text: str) -> bool:
    return bool(CSV_PATTERN.search(text)) and "\n" in text


def _is_base64(text: str) -> bool:
    return len(text) >= 4 and bool(BASE64_PATTERN.match(text))


def _is_hex_string(text: str) -> bool:
    return len(text) >= 2 and len(text) % 2 == 0 and bool(HEX_STRING_PATTERN.match(text))


def _searches(pattern: re.Pattern) -> Callable[[str], bool]:
    return lambda text: pattern.search(text) is not None


# Most specific first; the first matching heuristic wins.
HEURISTICS: Tuple[Heuristic, ...] = (
    Heuristic(FormatKind.JWT, _searches(JWT_PATTERN)),
    Heuristic(FormatKind.BASE64_IMAGE, _searches(DATA_URI_PATTERN)),
    Heuristic(FormatKind.GUID, _searches(GUID_PATTERN)),
    Heuristic(FormatKind.IP_ADDRESS, _searches(IP_ADDRESS_PATTERN)),
    Heuristic(FormatKind.TIMESTAMP, _searches(UNIX_TIMESTAMP_PATTERN)),
    Heuristic(FormatKind.URI, _searches(URI_PATTERN)),
    Heuristic(FormatKind.SQL, _searches(SQL_PATTERN)),
    Heuristic(FormatKind.CRON, _searches(CRON_PATTERN)),
    Heuristic(FormatKind.CONNECTION_STRING, _searches(CONNECTION_STRING_PATTERN)),
    Heuristic(FormatKind.HTML, _searches(HTML_PATTERN)),
    Heuristic(FormatKind.XML, _searches(XML_PATTERN)),
    Heuristic(FormatKind.JSON, _searches(JSON_PATTERN)),
    Heuristic(FormatKind.YAML, _searches(YAML_PATTERN)),
    Heuristic(FormatKind.TOML, _searches(TOML_PATTERN)),
    Heuristic(FormatKind.INI, _searches(INI_PATTERN)),
    Heuristic(FormatKind.CSV, _is_csv),
    Heuristic(FormatKind.URL_ENCODED, _searches(URL_ENCODED_PATTERN)),
    Heuristic(FormatKind.BASE64, _is_base64),
    Heuristic(FormatKind.HEX_STRING, _is_hex_string),
)


def classify(text: Optional[str]) -> Optional[FormatKind]:
    """
    Classify text into a format kind.

    Args:
        text: Raw content, possibly empty or None

    Returns:
        The FormatKind of the first matching heuristic, or None when the
        input is empty, whitespace-only or matches nothing
    """
    if not text or not text.strip():
        return None

    trimmed = text.strip()
    for heuristic in HEURISTICS:
        if heuristic.matches(trimmed):
            return heuristic.kind
    return None


def is_base64_image(text: Optional[str]) -> bool:
    """
    Check if text looks like a base64-encoded image.

    Accepts a ``data:image/...`` URI or raw base64 that starts with the
    encoded magic bytes of a PNG, JPEG, GIF, BMP or WebP file.
    """
    if not text or not text.strip():
        return False

    trimmed = text.strip()
    if trimmed[:11].lower() == "data:image/":
        return True
    return trimmed.startswith(IMAGE_BASE64_PREFIXES)


class FormatDetector:
    """
    Heuristic format detector for raw text content.

    Tests the trimmed content against an ordered, precompiled chain of
    heuristics. The order encodes a specificity-before-generality policy:
    a GUID also satisfies the hex and base64 alphabets, and HTML is a
    structural subset of XML, so the narrower rule is always tried first.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the format detector.

        Args:
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.heuristics = HEURISTICS

    def detect_format(self, text: Optional[str]) -> Optional[FormatKind]:
        """
        Detect the format of the provided content.

        Args:
            text: The string content to analyze

        Returns:
            The detected FormatKind, or None if no format is detected
        """
        kind = classify(text)
        if kind is None:
            self.logger.debug("No format heuristic matched")
        else:
            self.logger.debug(f"Detected format: {kind.value}")
        return kind

    def matching_formats(self, text: Optional[str]) -> List[FormatKind]:
        """
        List every format whose heuristic matches, in priority order.

        The first element, if any, is what ``detect_format`` returns.
        """
        if not text or not text.strip():
            return []

        trimmed = text.strip()
        return [h.kind for h in self.heuristics if h.matches(trimmed)]

    def is_base64_image(self, text: Optional[str]) -> bool:
        """Check if the content appears to be a base64-encoded image."""
        return is_base64_image(text)
