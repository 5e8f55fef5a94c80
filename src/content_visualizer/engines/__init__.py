"""Codec, formatting and image engines for the Content Visualizer."""

from .codec_engine import CodecEngine, content_bytes, to_hex_dump
from .format_engine import FormatEngine
from .image_decoder import ImageDecoder

__all__ = ["CodecEngine", "FormatEngine", "ImageDecoder", "content_bytes", "to_hex_dump"]
