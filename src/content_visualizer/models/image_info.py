"""Image metadata model."""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class ImageInfo:
    """
    Metadata about an embedded base64 image.

    Dimensions are only known for formats whose header is parsed
    (PNG, GIF and BMP).
    """

    format: str
    mime_type: Optional[str]
    estimated_size_bytes: int
    width: Optional[int] = None
    height: Optional[int] = None

    def __post_init__(self):
        """Validate image info after initialization."""
        if self.estimated_size_bytes < 0:
            raise ValueError("estimated_size_bytes must be non-negative")

    def summary(self) -> str:
        """Human readable one-line summary."""
        parts = []
        if self.width is not None and self.height is not None:
            parts.append(f"{self.width} x {self.height} px")
        parts.append(self.format)
        parts.append(f"{self.estimated_size_bytes:,} bytes")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert image info to dictionary for JSON serialization."""
        return {
            "format": self.format,
            "mimeType": self.mime_type,
            "estimatedSizeBytes": self.estimated_size_bytes,
            "width": self.width,
            "height": self.height,
        }
