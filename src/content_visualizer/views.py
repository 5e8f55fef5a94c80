"""Visualizer profiles: the title and views offered for each format kind."""

from dataclasses import dataclass
from typing import Dict, Tuple
from .types import FormatKind, ViewType


@dataclass(frozen=True)
class VisualizerProfile:
    """Title, supported views and default view of one format's visualizer."""
    title: str
    supported_views: Tuple[ViewType, ...]
    default_view: ViewType

    def __post_init__(self):
        if self.default_view not in self.supported_views:
            raise ValueError(f"default view {self.default_view.value} is not a supported view")

    def supports(self, view: ViewType) -> bool:
        """Check if the view is offered."""
        return view in self.supported_views


V = ViewType

VISUALIZER_PROFILES: Dict[FormatKind, VisualizerProfile] = {
    FormatKind.JSON: VisualizerProfile("JSON", (V.FORMATTED, V.TREE, V.RAW), V.FORMATTED),
    FormatKind.XML: VisualizerProfile("XML", (V.FORMATTED, V.TREE, V.RAW), V.FORMATTED),
    FormatKind.HTML: VisualizerProfile("HTML", (V.FORMATTED, V.RENDERED, V.TREE, V.RAW), V.RENDERED),
    FormatKind.YAML: VisualizerProfile("YAML", (V.FORMATTED, V.TREE, V.RAW), V.FORMATTED),
    FormatKind.TOML: VisualizerProfile("TOML", (V.FORMATTED, V.TREE, V.RAW), V.FORMATTED),
    FormatKind.CSV: VisualizerProfile("CSV", (V.TABLE, V.RAW), V.TABLE),
    FormatKind.TSV: VisualizerProfile("TSV", (V.TABLE, V.RAW), V.TABLE),
    FormatKind.INI: VisualizerProfile("INI", (V.FORMATTED, V.TABLE, V.RAW), V.TABLE),
    FormatKind.MARKDOWN: VisualizerProfile("Markdown", (V.RENDERED, V.RAW), V.RENDERED),
    FormatKind.SQL: VisualizerProfile("SQL", (V.FORMATTED, V.SYNTAX_HIGHLIGHTED, V.RAW), V.FORMATTED),
    FormatKind.GRAPHQL: VisualizerProfile("GraphQL", (V.FORMATTED, V.SYNTAX_HIGHLIGHTED, V.RAW), V.FORMATTED),
    FormatKind.BASE64: VisualizerProfile("Base64", (V.DECODED, V.HEX, V.RAW), V.DECODED),
    FormatKind.BASE64_IMAGE: VisualizerProfile("Base64 Image", (V.IMAGE, V.RAW), V.IMAGE),
    FormatKind.URL_ENCODED: VisualizerProfile("URL Encoded", (V.DECODED, V.RAW), V.DECODED),
    FormatKind.HTML_ENTITIES: VisualizerProfile("HTML Entities", (V.DECODED, V.RAW), V.DECODED),
    FormatKind.UNICODE_ESCAPE: VisualizerProfile("Unicode Escape", (V.DECODED, V.RAW), V.DECODED),
    FormatKind.HEX_STRING: VisualizerProfile("Hex String", (V.DECODED, V.HEX, V.RAW), V.DECODED),
    FormatKind.GZIP: VisualizerProfile("GZip", (V.DECODED, V.RAW), V.DECODED),
    FormatKind.DEFLATE: VisualizerProfile("Deflate", (V.DECODED, V.RAW), V.DECODED),
    FormatKind.JWT: VisualizerProfile("JWT", (V.CLAIMS, V.DECODED, V.RAW), V.CLAIMS),
    FormatKind.SAML: VisualizerProfile("SAML", (V.TREE, V.CLAIMS, V.RAW), V.TREE),
    FormatKind.CERTIFICATE: VisualizerProfile("Certificate", (V.TABLE, V.RAW), V.TABLE),
    FormatKind.CONNECTION_STRING: VisualizerProfile("Connection String", (V.TABLE, V.RAW), V.TABLE),
    FormatKind.URI: VisualizerProfile("URI", (V.TABLE, V.RAW), V.TABLE),
    FormatKind.QUERY_STRING: VisualizerProfile("Query String", (V.TABLE, V.RAW), V.TABLE),
    FormatKind.REGEX: VisualizerProfile("Regex", (V.FORMATTED, V.RAW), V.FORMATTED),
    FormatKind.CRON: VisualizerProfile("Cron Expression", (V.TABLE, V.RAW), V.TABLE),
    FormatKind.HEX_DUMP: VisualizerProfile("Hex Dump", (V.HEX, V.RAW), V.HEX),
    FormatKind.GUID: VisualizerProfile("GUID/UUID", (V.TABLE, V.RAW), V.TABLE),
    FormatKind.TIMESTAMP: VisualizerProfile("Timestamp", (V.TABLE, V.RAW), V.TABLE),
    FormatKind.IP_ADDRESS: VisualizerProfile("IP Address", (V.TABLE, V.RAW), V.TABLE),
}

RAW_PROFILE = VisualizerProfile("Text", (V.RAW, V.HEX), V.RAW)


def get_profile(kind) -> VisualizerProfile:
    """Get the visualizer profile for a kind; unclassified content gets a plain text profile."""
    if kind is None:
        return RAW_PROFILE
    return VISUALIZER_PROFILES[kind]
