"""Format-aware pretty-printing of structured content."""

import json
import logging
import re
import tomllib
from typing import Any, Callable, Dict, List, Optional
from xml.dom import minidom
from xml.parsers.expat import ExpatError

import tomli_w
import yaml

from ..types import FormatEngineInterface, FormatKind, FormatResult


SQL_KEYWORDS = (
    "SELECT", "FROM", "WHERE", "AND", "OR", "ORDER BY", "GROUP BY", "HAVING",
    "JOIN", "LEFT JOIN", "RIGHT JOIN", "INNER JOIN", "OUTER JOIN", "ON",
    "INSERT INTO", "VALUES", "UPDATE", "SET", "DELETE", "CREATE", "ALTER", "DROP",
)

# Longest keywords first so "LEFT JOIN" wins over "JOIN"
SQL_KEYWORD_PATTERN = re.compile(
    r"\b(" + "|".join(
        re.escape(k).replace(r"\ ", r"\s+") for k in sorted(SQL_KEYWORDS, key=len, reverse=True)
    ) + r")\b",
    re.IGNORECASE,
)

FORMAT_ERRORS = (
    ValueError, TypeError, RecursionError, ExpatError,
    yaml.YAMLError, tomllib.TOMLDecodeError,
)


class _IndentedSequenceDumper(yaml.SafeDumper):
    """Safe dumper that indents block sequences under their parent key."""

    def increase_indent(self, flow=False, indentless=False):
        return super().increase_indent(flow, False)


def _strip_blank_text_nodes(node: minidom.Node) -> None:
    for child in list(node.childNodes):
        if child.nodeType == child.TEXT_NODE and not child.data.strip():
            node.removeChild(child)
        elif child.hasChildNodes():
            _strip_blank_text_nodes(child)


class FormatEngine(FormatEngineInterface):
    """
    Pretty-printer for structured content.

    JSON, XML (also used for HTML), YAML and TOML are parsed and
    re-serialized with indentation; SQL gets line breaks before its major
    keywords. Anything that fails to parse is returned unchanged.
    """

    def __init__(self, logger: Optional[logging.Logger] = None, json_indent: int = 2):
        """
        Initialize the format engine.

        Args:
            logger: Optional logger instance
            json_indent: Indentation width for JSON and XML output
        """
        self.logger = logger or logging.getLogger(__name__)
        self.json_indent = json_indent
        self._formatters: Dict[FormatKind, Callable[[str], str]] = {
            FormatKind.JSON: self.format_json,
            FormatKind.XML: self.format_xml,
            FormatKind.HTML: self.format_xml,
            FormatKind.YAML: self.format_yaml,
            FormatKind.TOML: self.format_toml,
            FormatKind.SQL: self.format_sql,
        }

    def supports(self, kind: FormatKind) -> bool:
        """Check if the kind has a dedicated formatter."""
        return kind in self._formatters

    def try_format(self, text: str, kind: FormatKind) -> FormatResult:
        """
        Pretty-print content, reporting failure instead of hiding it.

        Args:
            text: Content to format
            kind: Format kind selecting the formatter

        Returns:
            FormatResult with the formatted text, or the original text and errors
        """
        formatter = self._formatters.get(kind)
        if not text or formatter is None:
            return FormatResult(success=True, value=text)

        try:
            return FormatResult(success=True, value=formatter(text))
        except FORMAT_ERRORS as e:
            self.logger.debug(f"Formatting as {kind.value} failed: {e}")
            return FormatResult(success=False, value=text, errors=[str(e)])

    def format(self, text: str, kind: FormatKind) -> str:
        """
        Format content based on its kind.

        Args:
            text: Content to format
            kind: Format kind of the content

        Returns:
            Formatted content, or the original content if formatting fails
        """
        return self.try_format(text, kind).value

    def minify(self, text: str) -> str:
        """
        Minify JSON content into a single whitespace-free line.

        Args:
            text: JSON content

        Returns:
            Minified JSON, or the original content if it is not valid JSON
        """
        if not text:
            return text
        try:
            return json.dumps(json.loads(text), separators=(",", ":"), ensure_ascii=False)
        except (ValueError, RecursionError) as e:
            self.logger.debug(f"Minifying JSON failed: {e}")
            return text

    def format_json(self, text: str) -> str:
        """Format JSON content with indentation."""
        return json.dumps(json.loads(text), indent=self.json_indent, ensure_ascii=False)

    def format_xml(self, text: str) -> str:
        """
        Format XML content with indentation.

        The XML declaration is kept only if the input started with one.
        """
        document = minidom.parseString(text.strip())
        _strip_blank_text_nodes(document)
        pretty = document.toprettyxml(indent=" " * self.json_indent)

        lines: List[str] = [line for line in pretty.splitlines() if line.strip()]
        if not text.lstrip()[:5].lower() == "<?xml":
            lines = lines[1:]
        return "\n".join(lines)

    def format_yaml(self, text: str) -> str:
        """Format YAML content, one document or a stream of several."""
        documents: List[Any] = list(yaml.safe_load_all(text))
        if not documents or not all(isinstance(d, (dict, list)) for d in documents):
            raise ValueError("YAML content has no mapping or sequence to format")

        options = dict(
            Dumper=_IndentedSequenceDumper,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
        if len(documents) == 1:
            return yaml.dump(documents[0], **options).rstrip("\n")
        return yaml.dump_all(documents, explicit_start=True, **options).rstrip("\n")

    def format_toml(self, text: str) -> str:
        """Format TOML content by round-tripping it through a TOML document model."""
        return tomli_w.dumps(tomllib.loads(text)).rstrip("\n")

    def format_sql(self, text: str) -> str:
        """
        Format SQL content with a line break before each major keyword.

        This is line-oriented, not a SQL parser: keywords inside string
        literals are broken out as well.
        """
        result = SQL_KEYWORD_PATTERN.sub(lambda m: "\n" + m.group(0), text)
        lines = [line.rstrip() for line in re.split(r"\r?\n", result)]
        return "\n".join(line for line in lines if line.strip()).lstrip()
