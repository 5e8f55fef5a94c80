"""Decoding of base64 images and data URIs."""

import base64
import binascii
import logging
import re
import struct
from typing import Optional, Tuple
from ..models import ImageInfo


DATA_URI_PATTERN = re.compile(r"^data:(?P<mime>[\w/+-]+);base64,(?P<data>.+)$", re.DOTALL)

# (magic bytes, format name, mime type)
IMAGE_SIGNATURES = (
    (b"\x89PNG\r\n\x1a\n", "PNG", "image/png"),
    (b"\xff\xd8\xff", "JPEG", "image/jpeg"),
    (b"GIF87a", "GIF", "image/gif"),
    (b"GIF89a", "GIF", "image/gif"),
    (b"BM", "BMP", "image/bmp"),
)


def _sniff(data: bytes) -> Optional[Tuple[str, str]]:
    for magic, name, mime in IMAGE_SIGNATURES:
        if data.startswith(magic):
            return name, mime
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "WEBP", "image/webp"
    return None


def _dimensions(data: bytes, image_format: str) -> Tuple[Optional[int], Optional[int]]:
    try:
        if image_format == "PNG" and data[12:16] == b"IHDR":
            return struct.unpack(">II", data[16:24])
        if image_format == "GIF":
            return struct.unpack("<HH", data[6:10])
        if image_format == "BMP":
            width, height = struct.unpack("<ii", data[18:26])
            return width, abs(height)
    except struct.error:
        pass
    return None, None


def mime_type_from_data_uri(text: Optional[str]) -> Optional[str]:
    """Extract the MIME type from a data URI, or None if it is not one."""
    if not text or not text.strip():
        return None
    match = DATA_URI_PATTERN.match(text.strip())
    return match.group("mime") if match else None


def _payload(text: str) -> str:
    trimmed = text.strip()
    if trimmed[:5].lower() == "data:":
        match = DATA_URI_PATTERN.match(trimmed)
        if not match:
            raise ValueError("Malformed data URI")
        return match.group("data")
    return trimmed


def decode_image(text: Optional[str]) -> Optional[bytes]:
    """
    Decode a data URI or raw base64 string into image bytes.

    Returns None when the content is empty or not valid base64.
    """
    if not text or not text.strip():
        return None
    try:
        return base64.b64decode("".join(_payload(text).split()), validate=True)
    except (ValueError, binascii.Error):
        return None


class ImageDecoder:
    """Extracts bytes and metadata from base64-embedded images."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the image decoder.

        Args:
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    def decode(self, text: Optional[str]) -> Optional[bytes]:
        """Decode image bytes from a data URI or raw base64."""
        return decode_image(text)

    def get_info(self, text: Optional[str]) -> Optional[ImageInfo]:
        """
        Get metadata about a base64-embedded image.

        Args:
            text: Data URI or raw base64 content

        Returns:
            ImageInfo, or None if the content does not decode to a known image format
        """
        data = decode_image(text)
        if not data:
            self.logger.debug("Content is not decodable base64 image data")
            return None

        sniffed = _sniff(data)
        if sniffed is None:
            self.logger.debug("Decoded bytes carry no known image signature")
            return None

        image_format, sniffed_mime = sniffed
        width, height = _dimensions(data, image_format)
        payload = "".join(_payload(text).split())

        return ImageInfo(
            format=image_format,
            mime_type=mime_type_from_data_uri(text) or sniffed_mime,
            estimated_size_bytes=len(payload) * 3 // 4,
            width=width,
            height=height,
        )
