"""Tree builder for nested document formats."""

import json
import logging
import tomllib
from datetime import date, datetime, time
from typing import Any, Callable, Dict, List, Optional
from xml.dom import minidom
from xml.parsers.expat import ExpatError

import yaml

from ..types import ContentProcessorInterface, FormatKind
from ..models import TreeNode
from ..error_handler import ErrorHandler


TREE_ERRORS = (ValueError, TypeError, RecursionError, ExpatError, yaml.YAMLError)


def scalar_kind(value: Any) -> str:
    """Name the kind of a parsed scalar: string, number, boolean, null or a date/time kind."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, datetime):
        return "datetime"
    if isinstance(value, date):
        return "date"
    if isinstance(value, time):
        return "time"
    return type(value).__name__.lower()


def scalar_text(value: Any) -> str:
    """Stringify a parsed scalar the way it would be written in JSON."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


class TreeProcessor(ContentProcessorInterface):
    """
    Builds a generic TreeNode hierarchy from JSON, XML/HTML, YAML or TOML.

    Maps become branches with one child per key in source order, sequences
    become branches whose children are keyed ``[0]``, ``[1]``..., and
    scalars become leaves with a ``(kind)`` type hint. Content that fails
    to parse yields a single ``Error`` node.
    """

    def __init__(self, error_handler: Optional[ErrorHandler] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the tree processor.

        Args:
            error_handler: Optional ErrorHandler instance
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.error_handler = error_handler or ErrorHandler(self.logger)
        self._builders: Dict[FormatKind, Callable[[str], TreeNode]] = {
            FormatKind.JSON: self.parse_json,
            FormatKind.XML: self.parse_xml,
            FormatKind.HTML: self.parse_xml,
            FormatKind.YAML: self.parse_yaml,
            FormatKind.TOML: self.parse_toml,
        }

    def supports(self, kind: FormatKind) -> bool:
        """Check if the kind has a dedicated tree builder."""
        return kind in self._builders

    def process(self, text: str, kind: FormatKind) -> TreeNode:
        """
        Build a tree from content of the given kind.

        Args:
            text: Raw content
            kind: Format kind selecting the parser

        Returns:
            Root TreeNode; a single ``Content`` leaf for kinds without a
            tree builder, or an ``Error`` leaf when parsing fails
        """
        builder = self._builders.get(kind)
        if builder is None:
            return TreeNode(key="Content", value=text)

        try:
            root = builder(text)
        except TREE_ERRORS as e:
            return self.error_handler.error_node(e, kind.value)

        self.logger.debug(f"Built {kind.value} tree with {root.count_nodes()} nodes")
        return root

    def parse_json(self, text: str) -> TreeNode:
        """Build a tree from JSON."""
        return self.value_to_node("root", json.loads(text), "{object}")

    def parse_yaml(self, text: str) -> TreeNode:
        """
        Build a tree from a YAML stream.

        A single document becomes the ``document`` node; a stream of several
        becomes a ``documents`` node with one indexed child per document.
        """
        documents: List[Any] = list(yaml.safe_load_all(text))
        if len(documents) == 1:
            return self.value_to_node("document", documents[0], "{mapping}")
        if not documents:
            return TreeNode(key="document", value="", type_hint="(null)")

        children = [self.value_to_node(f"[{i}]", doc, "{mapping}") for i, doc in enumerate(documents)]
        return TreeNode(key="documents", type_hint=f"[{len(documents)} documents]", children=children)

    def parse_toml(self, text: str) -> TreeNode:
        """Build a tree from TOML."""
        return self.value_to_node("root", tomllib.loads(text), "{table}")

    def parse_xml(self, text: str) -> TreeNode:
        """Build a tree from XML (or well-formed HTML) rooted at the document element."""
        document = minidom.parseString(text.strip())
        return self.element_to_node(document.documentElement)

    def value_to_node(self, key: str, value: Any, mapping_hint: str) -> TreeNode:
        """
        Convert a parsed map/sequence/scalar value into a TreeNode.

        Args:
            key: Key of the node (property name or ``[index]``)
            value: Parsed document value
            mapping_hint: Type hint used for maps (``{object}``, ``{mapping}``, ``{table}``)

        Returns:
            TreeNode for the value and its descendants
        """
        # Plain loops keep each nesting level to a single stack frame
        if isinstance(value, dict):
            node = TreeNode(key=key, type_hint=mapping_hint, children=[])
            for k, v in value.items():
                node.children.append(self.value_to_node(str(k), v, mapping_hint))
            return node

        if isinstance(value, (list, tuple)):
            node = TreeNode(key=key, type_hint=f"[{len(value)} items]", children=[])
            for i, item in enumerate(value):
                node.children.append(self.value_to_node(f"[{i}]", item, mapping_hint))
            return node

        return TreeNode(key=key, value=scalar_text(value), type_hint=f"({scalar_kind(value)})")

    def element_to_node(self, element: minidom.Element) -> TreeNode:
        """
        Convert an XML element into a TreeNode.

        Attributes become ``@name`` children. Text of an element without
        attributes or child elements becomes the node's own value; text
        that sits next to attributes or elements becomes a ``#text`` child.
        """
        attributes = [
            TreeNode(key=f"@{name}", value=value, type_hint="(attribute)")
            for name, value in element.attributes.items()
        ]

        elements: List[TreeNode] = []
        text_parts: List[str] = []
        for child in element.childNodes:
            if child.nodeType == child.ELEMENT_NODE:
                elements.append(self.element_to_node(child))
            elif child.nodeType in (child.TEXT_NODE, child.CDATA_SECTION_NODE):
                text_parts.append(child.data)

        text = "".join(text_parts).strip()
        if not attributes and not elements:
            return TreeNode(key=element.tagName, value=text or None)

        children = attributes
        if text:
            children.append(TreeNode(key="#text", value=text, type_hint="(text)"))
        children.extend(elements)
        return TreeNode(key=element.tagName, children=children)
