"""Pytest configuration and fixtures."""

import base64
import struct
import pytest
import jwt
from datetime import datetime, timezone


# HMAC keys shorter than the digest size trigger a PyJWT warning
JWT_SECRET = "content-visualizer-test-secret-key-0123456789"


def make_png(width: int, height: int) -> bytes:
    """Build the header of a PNG file (signature plus IHDR chunk)."""
    ihdr = struct.pack(">II", width, height) + b"\x08\x06\x00\x00\x00"
    return b"\x89PNG\r\n\x1a\n" + struct.pack(">I", 13) + b"IHDR" + ihdr + b"\x00\x00\x00\x00"


@pytest.fixture
def fixed_now():
    """A fixed local 'current time' for time dependent tables."""
    return datetime(2024, 1, 1, 12, 0, 0)


@pytest.fixture
def fixed_clock(fixed_now):
    """Clock callable returning the fixed time."""
    return lambda: fixed_now


@pytest.fixture
def sample_json():
    """Small nested JSON document."""
    return '{"name": "Alice", "age": 30, "active": true, "tags": ["a", "b"], "address": {"city": "Paris"}, "nickname": null}'


@pytest.fixture
def sample_xml():
    """XML document with attributes, text and nested elements."""
    return '<?xml version="1.0"?><catalog><book id="bk101" lang="en"><title>XML Guide</title><price>44.95</price></book></catalog>'


@pytest.fixture
def sample_yaml():
    """YAML mapping with a sequence."""
    return "name: service\nreplicas: 3\nports:\n  - 80\n  - 443\n"


@pytest.fixture
def sample_toml():
    """TOML document with a table."""
    return 'title = "Example"\n\n[owner]\nname = "Tom"\nage = 42\n'


@pytest.fixture
def sample_csv():
    """CSV with a header, a short record and an over-long record."""
    return "name,age,city\nAlice,30,Paris\nBob,25\nCarol,41,Rome,extra\n"


@pytest.fixture
def sample_ini():
    """INI with comments, sections and a value containing '='."""
    return "; global comment\n[database]\nhost = localhost\nport=5432\n# another comment\n\n[auth]\ntoken = abc=def\n"


@pytest.fixture
def expired_jwt():
    """HS256 token whose exp lies in 2001."""
    return jwt.encode(
        {"iss": "issuer.example", "sub": "user-1", "aud": ["api", "web"],
         "iat": 999990000, "exp": 1000000000, "role": "admin"},
        JWT_SECRET,
        algorithm="HS256",
        headers={"kid": "key-1"},
    )


@pytest.fixture
def valid_jwt():
    """HS256 token expiring a day after the fixed clock, without issuer."""
    exp = int(datetime(2024, 1, 2, 12, 0, tzinfo=timezone.utc).timestamp())
    return jwt.encode({"sub": "user-2", "exp": exp}, JWT_SECRET, algorithm="HS256")


@pytest.fixture
def png_base64():
    """Raw base64 of a 16x8 PNG header."""
    return base64.b64encode(make_png(16, 8)).decode("ascii")


@pytest.fixture
def png_data_uri(png_base64):
    """Data URI of a 16x8 PNG header."""
    return f"data:image/png;base64,{png_base64}"


@pytest.fixture
def jwt_secret():
    """HMAC secret used to sign test tokens."""
    return JWT_SECRET


@pytest.fixture
def png_factory():
    """Builder for PNG headers of a given size."""
    return make_png
