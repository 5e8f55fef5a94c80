"""Reversible codecs for encoded string content."""

import base64
import gzip
import html
import json
import logging
import re
import zlib
from typing import Callable, Dict, Optional, Union
from urllib.parse import quote_plus, unquote_plus
from ..types import CodecEngineInterface, CodecResult, FormatKind


UNICODE_SURROGATE_PAIR_PATTERN = re.compile(
    r"\\u([dD][89abAB][0-9a-fA-F]{2})\\u([dD][c-fC-F][0-9a-fA-F]{2})"
)
UNICODE_ESCAPE_PATTERN = re.compile(r"\\u([0-9A-Fa-f]{4})")
HEX_ESCAPE_PATTERN = re.compile(r"\\x([0-9A-Fa-f]{2})")

CODEC_ERRORS = (ValueError, zlib.error, OSError, EOFError)


def _strip_whitespace(text: str) -> str:
    return "".join(text.split())


def _b64decode(text: str) -> bytes:
    return base64.b64decode(_strip_whitespace(text), validate=True)


def _to_text(data: bytes) -> str:
    return data.decode("utf-8")


def _raw_decode_base64(text: str) -> str:
    return _to_text(_b64decode(text))


def _raw_encode_base64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def _raw_decode_base64url(text: str) -> str:
    data = _strip_whitespace(text).replace("-", "+").replace("_", "/")
    remainder = len(data) % 4
    if remainder == 1:
        raise ValueError("Invalid base64url length")
    if remainder:
        data += "=" * (4 - remainder)
    return _to_text(base64.b64decode(data, validate=True))


def _raw_decode_url(text: str) -> str:
    return unquote_plus(text, errors="strict")


def _raw_encode_url(text: str) -> str:
    return quote_plus(text, safe="")


def _raw_decode_html_entities(text: str) -> str:
    return html.unescape(text)


def _raw_encode_html_entities(text: str) -> str:
    return html.escape(text, quote=True)


def _surrogate_pair(match: re.Match) -> str:
    high = int(match.group(1), 16)
    low = int(match.group(2), 16)
    return chr(0x10000 + ((high - 0xD800) << 10) + (low - 0xDC00))


def _code_unit(match: re.Match) -> str:
    code_point = int(match.group(1), 16)
    # Unpaired surrogates stay as written
    if 0xD800 <= code_point <= 0xDFFF:
        return match.group(0)
    return chr(code_point)


def _raw_decode_unicode_escape(text: str) -> str:
    result = UNICODE_SURROGATE_PAIR_PATTERN.sub(_surrogate_pair, text)
    result = UNICODE_ESCAPE_PATTERN.sub(_code_unit, result)
    return HEX_ESCAPE_PATTERN.sub(lambda m: chr(int(m.group(1), 16)), result)


def _hex_bytes(text: str) -> bytes:
    hex_digits = text.strip().replace(" ", "").replace("-", "")
    if len(hex_digits) % 2 != 0:
        raise ValueError("Hex string has an odd number of digits")
    return bytes.fromhex(hex_digits)


def _raw_decode_hex_string(text: str) -> str:
    return _to_text(_hex_bytes(text))


def _raw_encode_hex_string(text: str) -> str:
    return text.encode("utf-8").hex().upper()


def _raw_decompress_gzip(text: str) -> str:
    return _to_text(gzip.decompress(_b64decode(text)))


def _raw_compress_gzip(text: str) -> str:
    compressed = gzip.compress(text.encode("utf-8"), mtime=0)
    return base64.b64encode(compressed).decode("ascii")


def _raw_decompress_deflate(text: str) -> str:
    data = _b64decode(text)
    try:
        return _to_text(zlib.decompress(data, -zlib.MAX_WBITS))
    except zlib.error:
        # zlib-wrapped streams carry a two byte header before the raw deflate data
        return _to_text(zlib.decompress(data))


def _raw_compress_deflate(text: str) -> str:
    compressor = zlib.compressobj(wbits=-zlib.MAX_WBITS)
    compressed = compressor.compress(text.encode("utf-8")) + compressor.flush()
    return base64.b64encode(compressed).decode("ascii")


def _raw_decode_jwt(text: str) -> str:
    parts = text.strip().split(".")
    if len(parts) < 2:
        raise ValueError("JWT must have at least a header and a payload segment")
    header = json.loads(_raw_decode_base64url(parts[0]))
    payload = json.loads(_raw_decode_base64url(parts[1]))
    return (
        f"Header:\n{json.dumps(header, indent=2, ensure_ascii=False)}\n\n"
        f"Payload:\n{json.dumps(payload, indent=2, ensure_ascii=False)}"
    )


def attempt(operation: Callable[[str], str], text: str) -> CodecResult:
    """
    Run a raw codec operation, capturing failure in the result.

    Args:
        operation: Raw codec function that raises on malformed input
        text: Input text

    Returns:
        CodecResult whose value is the output on success or the untouched input on failure
    """
    try:
        return CodecResult(success=True, value=operation(text))
    except CODEC_ERRORS as e:
        return CodecResult(success=False, value=text, errors=[str(e)])


def _decoder(operation: Callable[[str], str]) -> Callable[[str], str]:
    def decode(text: str) -> str:
        if not text or not text.strip():
            return text
        return attempt(operation, text).value
    decode.__name__ = operation.__name__.replace("_raw_", "")
    decode.__doc__ = "Decode text, returning it unchanged when it is malformed."
    return decode


def _encoder(operation: Callable[[str], str]) -> Callable[[str], str]:
    def encode(text: str) -> str:
        if not text:
            return text
        return attempt(operation, text).value
    encode.__name__ = operation.__name__.replace("_raw_", "")
    encode.__doc__ = "Encode text, returning it unchanged when it cannot be encoded."
    return encode


decode_base64 = _decoder(_raw_decode_base64)
encode_base64 = _encoder(_raw_encode_base64)
decode_base64url = _decoder(_raw_decode_base64url)
decode_url = _decoder(_raw_decode_url)
encode_url = _encoder(_raw_encode_url)
decode_html_entities = _decoder(_raw_decode_html_entities)
encode_html_entities = _encoder(_raw_encode_html_entities)
decode_unicode_escape = _decoder(_raw_decode_unicode_escape)
decode_hex_string = _decoder(_raw_decode_hex_string)
encode_hex_string = _encoder(_raw_encode_hex_string)
decompress_gzip = _decoder(_raw_decompress_gzip)
compress_gzip = _encoder(_raw_compress_gzip)
decompress_deflate = _decoder(_raw_decompress_deflate)
compress_deflate = _encoder(_raw_compress_deflate)
decode_jwt = _decoder(_raw_decode_jwt)


BYTE_DECODERS: Dict[FormatKind, Callable[[str], bytes]] = {
    FormatKind.BASE64: _b64decode,
    FormatKind.BASE64_IMAGE: lambda text: _b64decode(text.split(",", 1)[-1]),
    FormatKind.HEX_STRING: _hex_bytes,
    FormatKind.GZIP: lambda text: gzip.decompress(_b64decode(text)),
}


def content_bytes(text: str, kind: Optional[FormatKind] = None) -> bytes:
    """
    Get the bytes a piece of content stands for.

    Base64, hex and GZip content yields its decoded bytes; anything else,
    or encoded content that does not decode, yields its UTF-8 encoding.
    """
    decoder = BYTE_DECODERS.get(kind)
    if decoder is not None and text and text.strip():
        try:
            return decoder(text)
        except CODEC_ERRORS:
            pass
    return (text or "").encode("utf-8", errors="surrogatepass")


def to_hex_dump(data: Union[bytes, bytearray, str, None], bytes_per_line: int = 16) -> str:
    """
    Render bytes as a hex dump.

    Each line holds an 8-digit hex offset, the space separated hex bytes
    (with an extra gap after the eighth) and an ASCII sidebar in which
    bytes outside 0x20-0x7E show as ``.``.

    Args:
        data: Bytes, or text that is dumped as its UTF-8 encoding
        bytes_per_line: Number of bytes per line (default 16)

    Returns:
        The formatted dump, or an empty string for empty or absent input
    """
    if not data:
        return ""
    if bytes_per_line <= 0:
        raise ValueError("bytes_per_line must be positive")
    if isinstance(data, str):
        data = data.encode("utf-8", errors="surrogatepass")

    lines = []
    for offset in range(0, len(data), bytes_per_line):
        chunk = data[offset:offset + bytes_per_line]
        hex_column = []
        for index in range(bytes_per_line):
            hex_column.append(f"{chunk[index]:02X} " if index < len(chunk) else "   ")
            if index == 7:
                hex_column.append(" ")
        ascii_column = "".join(chr(b) if 0x20 <= b < 0x7F else "." for b in chunk)
        lines.append(f"{offset:08X}  {''.join(hex_column)} {ascii_column}")

    return "\n".join(lines)


class CodecEngine(CodecEngineInterface):
    """
    Dispatches encode and decode requests to the codec for a format kind.

    Every codec is single-purpose: a GZip payload stored inside another
    encoding has to be unwrapped by the caller one step at a time. Kinds
    without a codec pass through unchanged.
    """

    DECODERS: Dict[FormatKind, Callable[[str], str]] = {
        FormatKind.BASE64: _raw_decode_base64,
        FormatKind.URL_ENCODED: _raw_decode_url,
        FormatKind.QUERY_STRING: _raw_decode_url,
        FormatKind.HTML_ENTITIES: _raw_decode_html_entities,
        FormatKind.UNICODE_ESCAPE: _raw_decode_unicode_escape,
        FormatKind.HEX_STRING: _raw_decode_hex_string,
        FormatKind.GZIP: _raw_decompress_gzip,
        FormatKind.DEFLATE: _raw_decompress_deflate,
        FormatKind.JWT: _raw_decode_jwt,
    }

    ENCODERS: Dict[FormatKind, Callable[[str], str]] = {
        FormatKind.BASE64: _raw_encode_base64,
        FormatKind.URL_ENCODED: _raw_encode_url,
        FormatKind.QUERY_STRING: _raw_encode_url,
        FormatKind.HTML_ENTITIES: _raw_encode_html_entities,
        FormatKind.HEX_STRING: _raw_encode_hex_string,
        FormatKind.GZIP: _raw_compress_gzip,
        FormatKind.DEFLATE: _raw_compress_deflate,
    }

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the codec engine.

        Args:
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    def supports_decode(self, kind: FormatKind) -> bool:
        """Check if a decoder exists for the kind."""
        return kind in self.DECODERS

    def supports_encode(self, kind: FormatKind) -> bool:
        """Check if an encoder exists for the kind."""
        return kind in self.ENCODERS

    def try_decode(self, text: str, kind: FormatKind) -> CodecResult:
        """
        Decode text of the given kind, reporting failure instead of hiding it.

        Args:
            text: Encoded content
            kind: Format kind selecting the codec

        Returns:
            CodecResult with the decoded text, or the original text and errors
        """
        operation = self.DECODERS.get(kind)
        if operation is None:
            return CodecResult(success=True, value=text)
        if not text or not text.strip():
            return CodecResult(success=True, value=text)

        result = attempt(operation, text)
        if not result.success:
            self.logger.debug(f"Decoding as {kind.value} failed: {'; '.join(result.errors or [])}")
        return result

    def try_encode(self, text: str, kind: FormatKind) -> CodecResult:
        """
        Encode text into the given kind, reporting failure instead of hiding it.

        Args:
            text: Plain content
            kind: Format kind selecting the codec

        Returns:
            CodecResult with the encoded text, or the original text and errors
        """
        operation = self.ENCODERS.get(kind)
        if operation is None or not text:
            return CodecResult(success=True, value=text)

        result = attempt(operation, text)
        if not result.success:
            self.logger.debug(f"Encoding as {kind.value} failed: {'; '.join(result.errors or [])}")
        return result

    def decode(self, text: str, kind: FormatKind) -> str:
        """
        Decode text of the given kind.

        Args:
            text: Encoded content
            kind: Format kind selecting the codec

        Returns:
            Decoded text, or the original text when it is malformed
        """
        return self.try_decode(text, kind).value

    def encode(self, text: str, kind: FormatKind) -> str:
        """
        Encode text into the given kind.

        Args:
            text: Plain content
            kind: Format kind selecting the codec

        Returns:
            Encoded text, or the original text when it cannot be encoded
        """
        return self.try_encode(text, kind).value

    def to_hex_dump(self, data: Union[bytes, bytearray, str, None], bytes_per_line: int = 16) -> str:
        """Render bytes or text as a hex dump."""
        return to_hex_dump(data, bytes_per_line)

    def content_bytes(self, text: str, kind: Optional[FormatKind] = None) -> bytes:
        """Get the decoded bytes of encoded content, or its UTF-8 bytes."""
        return content_bytes(text, kind)
