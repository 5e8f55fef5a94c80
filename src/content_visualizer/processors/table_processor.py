"""Row extraction for flat, tabular and key-value formats."""

import csv
import io
import ipaddress
import json
import logging
import re
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence
from urllib.parse import parse_qsl, unquote_plus, urlsplit

import jwt

from ..types import ContentProcessorInterface, FormatKind
from ..models import TableRow
from ..models.content_statistics import LINE_BREAK_PATTERN
from ..error_handler import ErrorHandler
from ..utils.cron import CronExpression, CRON_FIELDS


INI_COLUMNS = ("Section", "Key", "Value")
CONNECTION_STRING_COLUMNS = ("Property", "Value")
QUERY_STRING_COLUMNS = ("Parameter", "Value", "Decoded Value")
JWT_COLUMNS = ("Claim", "Value", "Type")
URI_COLUMNS = ("Component", "Value")
CRON_COLUMNS = ("Field", "Value", "Description")
PROPERTY_COLUMNS = ("Property", "Value")
KEY_VALUE_COLUMNS = ("Key", "Value")

STANDARD_CLAIMS = ("iss", "aud", "sub", "iat", "nbf", "exp")
TIME_CLAIMS = (("iat", "Issued At (iat)"), ("nbf", "Not Before (nbf)"), ("exp", "Expires (exp)"))

DEFAULT_PORTS = {"http": 80, "https": 443, "ftp": 21, "ftps": 990, "sftp": 22, "ws": 80, "wss": 443}

UUID_VERSIONS = {
    1: "time-based",
    2: "DCE security",
    3: "name-based (MD5)",
    4: "random",
    5: "name-based (SHA-1)",
    6: "reordered time-based",
    7: "Unix epoch time-based",
    8: "custom",
}

TIMESTAMP_PATTERN = re.compile(r"^-?\d+$")
# Numbers with more digits than this are read as milliseconds
SECONDS_MAX_DIGITS = 10
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

KEY_VALUE_SEPARATOR = re.compile(r"[=:\t]")

TABLE_ERRORS = (
    ValueError, TypeError, KeyError, IndexError, OverflowError, OSError,
    csv.Error, jwt.PyJWTError,
)


def _flag(value: bool) -> str:
    return "True" if value else "False"


def _claim_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def _epoch_text(value: Any) -> str:
    try:
        return datetime.fromtimestamp(float(value), tz=timezone.utc).isoformat()
    except (TypeError, ValueError, OverflowError, OSError):
        return _claim_text(value)


def _format_duration(delta: timedelta) -> str:
    return str(timedelta(seconds=int(delta.total_seconds())))


def _lines(text: str) -> List[str]:
    return [line for line in LINE_BREAK_PATTERN.split(text) if line]


def _unique_headers(header: Sequence[str]) -> List[str]:
    names: List[str] = []
    for index, raw in enumerate(header):
        name = raw.strip() or f"Column{index + 1}"
        candidate, suffix = name, 2
        while candidate in names:
            candidate = f"{name}_{suffix}"
            suffix += 1
        names.append(candidate)
    return names


def _ipv4_class(first_octet: int) -> str:
    if first_octet < 128:
        return "A"
    if first_octet < 192:
        return "B"
    if first_octet < 224:
        return "C"
    if first_octet < 240:
        return "D (multicast)"
    return "E (reserved)"


def _is_private_ipv4(octets: bytes) -> bool:
    return (
        octets[0] == 10
        or (octets[0] == 172 and 16 <= octets[1] <= 31)
        or (octets[0] == 192 and octets[1] == 168)
    )


def _uuid_variant(clock_seq_byte: int) -> str:
    if clock_seq_byte & 0x80 == 0:
        return "NCS (reserved)"
    if clock_seq_byte & 0xC0 == 0x80:
        return "RFC 4122"
    if clock_seq_byte & 0xE0 == 0xC0:
        return "Microsoft (reserved)"
    return "Future (reserved)"


class TableProcessor(ContentProcessorInterface):
    """
    Extracts ordered table rows from flat and key-value formats.

    Each format kind has its own extraction rule and fixed column names.
    Kinds without a dedicated rule use a generic key/value split. Any
    failure becomes a single error row rather than an exception.
    """

    def __init__(self, error_handler: Optional[ErrorHandler] = None,
                 logger: Optional[logging.Logger] = None,
                 clock: Optional[Callable[[], datetime]] = None,
                 cron_occurrences: int = 5):
        """
        Initialize the table processor.

        Args:
            error_handler: Optional ErrorHandler instance
            logger: Optional logger instance
            clock: Callable returning the current time, used for JWT expiry
                and cron schedules (defaults to local ``datetime.now``)
            cron_occurrences: Number of upcoming cron runs to list
        """
        self.logger = logger or logging.getLogger(__name__)
        self.error_handler = error_handler or ErrorHandler(self.logger)
        self.clock = clock or datetime.now
        self.cron_occurrences = cron_occurrences
        self._builders: Dict[FormatKind, Callable[[str], List[TableRow]]] = {
            FormatKind.CSV: lambda text: self.parse_delimited(text, ","),
            FormatKind.TSV: lambda text: self.parse_delimited(text, "\t"),
            FormatKind.INI: self.parse_ini,
            FormatKind.CONNECTION_STRING: self.parse_connection_string,
            FormatKind.QUERY_STRING: self.parse_query_string,
            FormatKind.JWT: self.parse_jwt,
            FormatKind.URI: self.parse_uri,
            FormatKind.CRON: self.parse_cron,
            FormatKind.GUID: self.parse_guid,
            FormatKind.TIMESTAMP: self.parse_timestamp,
            FormatKind.IP_ADDRESS: self.parse_ip_address,
        }

    def supports(self, kind: FormatKind) -> bool:
        """Check if the kind has a dedicated row extraction rule."""
        return kind in self._builders

    def process(self, text: str, kind: FormatKind) -> List[TableRow]:
        """
        Extract table rows from content of the given kind.

        Args:
            text: Raw content
            kind: Format kind selecting the extraction rule

        Returns:
            Ordered rows, or a single error row when extraction fails
        """
        builder = self._builders.get(kind, self.parse_key_value)
        try:
            rows = builder(text or "")
        except TABLE_ERRORS as e:
            return [self.error_handler.error_row(e, kind.value)]

        self.logger.debug(f"Extracted {len(rows)} {kind.value} rows")
        return rows

    def _now(self) -> datetime:
        return self.clock()

    def parse_delimited(self, text: str, delimiter: str) -> List[TableRow]:
        """
        Parse CSV or TSV: the first record is the header, one row per later record.

        Missing trailing fields are empty; surplus fields get ``ColumnN`` names.
        """
        # newline=None turns bare \r and \r\n line breaks into \n before csv sees them
        records = [record for record in csv.reader(io.StringIO(text, newline=None), delimiter=delimiter) if record]
        if not records:
            return []

        header = _unique_headers(records[0])
        rows = []
        for record in records[1:]:
            columns = header + [f"Column{i + 1}" for i in range(len(header), len(record))]
            rows.append(TableRow.of(columns, record))
        return rows

    def parse_ini(self, text: str) -> List[TableRow]:
        """Parse INI into section/key/value rows, skipping blanks and ``;``/``#`` comments."""
        rows = []
        section = ""
        for line in _lines(text):
            stripped = line.strip()
            if not stripped or stripped.startswith((";", "#")):
                continue

            if stripped.startswith("[") and stripped.endswith("]"):
                section = stripped[1:-1]
                continue

            key, separator, value = stripped.partition("=")
            if separator and key.strip():
                rows.append(TableRow.of(INI_COLUMNS, (section, key.strip(), value.strip())))
        return rows

    def parse_connection_string(self, text: str) -> List[TableRow]:
        """Split a connection string on ``;`` into property/value rows."""
        rows = []
        for segment in text.split(";"):
            key, separator, value = segment.strip().partition("=")
            if separator and key.strip():
                rows.append(TableRow.of(CONNECTION_STRING_COLUMNS, (key.strip(), value.strip())))
        return rows

    def parse_query_string(self, text: str) -> List[TableRow]:
        """
        Parse ``&``-joined ``key=value`` pairs into parameter, raw and decoded value rows.

        A leading ``?`` (or everything up to the first ``?``) and any
        ``#fragment`` are ignored.
        """
        query = text.strip()
        if "?" in query:
            query = query.split("?", 1)[1]
        query = query.split("#", 1)[0]

        rows = []
        for segment in query.split("&"):
            if not segment:
                continue
            key, _, raw_value = segment.partition("=")
            name = unquote_plus(key) or "(empty)"
            rows.append(TableRow.of(QUERY_STRING_COLUMNS, (name, raw_value, unquote_plus(raw_value))))
        return rows

    def parse_jwt(self, text: str) -> List[TableRow]:
        """
        Decode a JWT's header and payload into claim rows.

        The signature is not verified. Rows are header claims, standard
        payload claims, an expiry status row, then custom claims.
        """
        token = text.strip()
        header = jwt.get_unverified_header(token)
        claims = jwt.decode(token, options={"verify_signature": False})

        rows = [
            TableRow.of(JWT_COLUMNS, ("Algorithm", header.get("alg", ""), "Header")),
            TableRow.of(JWT_COLUMNS, ("Type", header.get("typ", ""), "Header")),
        ]
        for name, value in header.items():
            if name not in ("alg", "typ"):
                rows.append(TableRow.of(JWT_COLUMNS, (name, _claim_text(value), "Header")))

        if "iss" in claims:
            rows.append(TableRow.of(JWT_COLUMNS, ("Issuer (iss)", _claim_text(claims["iss"]), "Payload")))
        if "aud" in claims:
            audience = claims["aud"]
            if isinstance(audience, list):
                audience = ", ".join(str(a) for a in audience)
            rows.append(TableRow.of(JWT_COLUMNS, ("Audience (aud)", _claim_text(audience), "Payload")))
        if "sub" in claims:
            rows.append(TableRow.of(JWT_COLUMNS, ("Subject (sub)", _claim_text(claims["sub"]), "Payload")))
        for name, label in TIME_CLAIMS:
            if name in claims:
                rows.append(TableRow.of(JWT_COLUMNS, (label, _epoch_text(claims[name]), "Payload")))

        rows.append(TableRow.of(JWT_COLUMNS, ("Status", self._expiry_status(claims.get("exp")), "Info")))

        for name, value in claims.items():
            if name not in STANDARD_CLAIMS:
                rows.append(TableRow.of(JWT_COLUMNS, (name, _claim_text(value), "Custom")))
        return rows

    def _expiry_status(self, exp: Any) -> str:
        if exp is None:
            return "Valid (no expiry)"
        try:
            expires = datetime.fromtimestamp(float(exp), tz=timezone.utc)
        except (TypeError, ValueError, OverflowError, OSError):
            return f"Unknown (unreadable exp: {_claim_text(exp)})"

        now = self._now().astimezone(timezone.utc)
        if now > expires:
            return "EXPIRED"
        return f"Valid (expires in {_format_duration(expires - now)})"

    def parse_uri(self, text: str) -> List[TableRow]:
        """Break a URI into its components, then one row per query parameter."""
        parts = urlsplit(text.strip())
        if not parts.scheme:
            raise ValueError("Invalid URI: the scheme could not be determined")

        scheme = parts.scheme.lower()
        host = parts.hostname or ""
        explicit_port = parts.port
        default_port = DEFAULT_PORTS.get(scheme)
        if explicit_port is not None:
            port = explicit_port
        else:
            port = default_port if default_port is not None else -1
        user_info = parts.netloc.rpartition("@")[0]
        path = parts.path or ("/" if parts.netloc else "")

        rows = [
            TableRow.of(URI_COLUMNS, ("Scheme", scheme)),
            TableRow.of(URI_COLUMNS, ("Host", host)),
            TableRow.of(URI_COLUMNS, ("Port", port)),
            TableRow.of(URI_COLUMNS, ("Path", path)),
            TableRow.of(URI_COLUMNS, ("Query", f"?{parts.query}" if parts.query else "")),
            TableRow.of(URI_COLUMNS, ("Fragment", f"#{parts.fragment}" if parts.fragment else "")),
            TableRow.of(URI_COLUMNS, ("User Info", user_info)),
            TableRow.of(URI_COLUMNS, ("Is Default Port", _flag(explicit_port is None or explicit_port == default_port))),
            TableRow.of(URI_COLUMNS, ("Is Loopback", _flag(self._is_loopback_host(scheme, host)))),
        ]

        for key, value in parse_qsl(parts.query, keep_blank_values=True):
            rows.append(TableRow.of(URI_COLUMNS, (f"Query: {key}", value)))
        return rows

    @staticmethod
    def _is_loopback_host(scheme: str, host: str) -> bool:
        if not host:
            return scheme == "file"
        if host == "localhost":
            return True
        try:
            return ipaddress.ip_address(host).is_loopback
        except ValueError:
            return False

    def parse_cron(self, text: str) -> List[TableRow]:
        """
        Describe a cron expression and list its next occurrences.

        Rows are the five schedule fields with their valid ranges, a blank
        separator, then up to ``cron_occurrences`` upcoming run times.
        """
        expression = CronExpression(text)
        rows = [
            TableRow.of(CRON_COLUMNS, (field.name, token, field.description))
            for field, token in zip(CRON_FIELDS, expression.tokens)
        ]
        rows.append(TableRow.of(CRON_COLUMNS, ("", "", "")))

        occurrences = expression.next_occurrences(self._now(), self.cron_occurrences)
        for index, moment in enumerate(occurrences, start=1):
            rows.append(TableRow.of(CRON_COLUMNS, (
                f"Next Run {index}",
                moment.strftime("%Y-%m-%d %H:%M"),
                moment.strftime("%A"),
            )))
        if not occurrences:
            rows.append(TableRow.of(CRON_COLUMNS, ("Next Run", "", "No occurrence in the next five years")))
        return rows

    def parse_guid(self, text: str) -> List[TableRow]:
        """List the textual forms of a GUID followed by its version and variant."""
        raw = text.strip()
        if raw.startswith("(") and raw.endswith(")"):
            raw = raw[1:-1]
        value = uuid.UUID(raw)

        canonical = str(value)
        version = value.bytes[6] >> 4
        version_name = UUID_VERSIONS.get(version)

        return [
            TableRow.of(PROPERTY_COLUMNS, ("Standard (D)", canonical)),
            TableRow.of(PROPERTY_COLUMNS, ("No Hyphens (N)", value.hex)),
            TableRow.of(PROPERTY_COLUMNS, ("Braces (B)", f"{{{canonical}}}")),
            TableRow.of(PROPERTY_COLUMNS, ("Parentheses (P)", f"({canonical})")),
            TableRow.of(PROPERTY_COLUMNS, ("Uppercase", canonical.upper())),
            TableRow.of(PROPERTY_COLUMNS, ("Version", f"{version} ({version_name})" if version_name else str(version))),
            TableRow.of(PROPERTY_COLUMNS, ("Variant", _uuid_variant(value.bytes[8]))),
        ]

    def parse_timestamp(self, text: str) -> List[TableRow]:
        """
        Render a Unix timestamp in several forms.

        Up to ten digits are seconds, more are milliseconds.
        """
        raw = text.strip()
        if not TIMESTAMP_PATTERN.match(raw):
            raise ValueError(f"'{raw}' is not a numeric Unix timestamp")

        number = int(raw)
        is_milliseconds = len(raw.lstrip("-")) > SECONDS_MAX_DIGITS
        if is_milliseconds:
            moment = EPOCH + timedelta(milliseconds=number)
        else:
            moment = EPOCH + timedelta(seconds=number)
        local = moment.astimezone()
        iso_year, iso_week, _ = moment.isocalendar()

        return [
            TableRow.of(PROPERTY_COLUMNS, ("Input", raw)),
            TableRow.of(PROPERTY_COLUMNS, ("Unit", "Milliseconds" if is_milliseconds else "Seconds")),
            TableRow.of(PROPERTY_COLUMNS, ("UTC", moment.strftime("%Y-%m-%d %H:%M:%S UTC"))),
            TableRow.of(PROPERTY_COLUMNS, ("Local", local.strftime("%Y-%m-%d %H:%M:%S %Z").strip())),
            TableRow.of(PROPERTY_COLUMNS, ("ISO 8601", moment.isoformat(
                timespec="milliseconds" if is_milliseconds else "seconds"))),
            TableRow.of(PROPERTY_COLUMNS, ("Day of Week", moment.strftime("%A"))),
            TableRow.of(PROPERTY_COLUMNS, ("Day of Year", moment.timetuple().tm_yday)),
            TableRow.of(PROPERTY_COLUMNS, ("ISO Week", f"{iso_week} ({iso_year})")),
        ]

    def parse_ip_address(self, text: str) -> List[TableRow]:
        """Describe an IPv4 or IPv6 address."""
        address = ipaddress.ip_address(text.strip())

        if address.version == 4:
            octets = address.packed
            number = int(address)
            return [
                TableRow.of(PROPERTY_COLUMNS, ("Address", str(address))),
                TableRow.of(PROPERTY_COLUMNS, ("Version", "IPv4")),
                TableRow.of(PROPERTY_COLUMNS, ("Binary", ".".join(f"{o:08b}" for o in octets))),
                TableRow.of(PROPERTY_COLUMNS, ("Decimal", number)),
                TableRow.of(PROPERTY_COLUMNS, ("Hex", f"0x{number:08X}")),
                TableRow.of(PROPERTY_COLUMNS, ("Is Private", _flag(_is_private_ipv4(octets)))),
                TableRow.of(PROPERTY_COLUMNS, ("Is Loopback", _flag(octets[0] == 127))),
                TableRow.of(PROPERTY_COLUMNS, ("Class", _ipv4_class(octets[0]))),
            ]

        return [
            TableRow.of(PROPERTY_COLUMNS, ("Address", str(address))),
            TableRow.of(PROPERTY_COLUMNS, ("Version", "IPv6")),
            TableRow.of(PROPERTY_COLUMNS, ("Full Form", address.exploded)),
            TableRow.of(PROPERTY_COLUMNS, ("Is Loopback", _flag(address.is_loopback))),
            TableRow.of(PROPERTY_COLUMNS, ("Is Link Local", _flag(address.is_link_local))),
            TableRow.of(PROPERTY_COLUMNS, ("Is Site Local", _flag(address.is_site_local))),
        ]

    def parse_key_value(self, text: str) -> List[TableRow]:
        """Split each line on its first ``=``, ``:`` or tab into key/value rows."""
        rows = []
        for line in _lines(text):
            match = KEY_VALUE_SEPARATOR.search(line)
            if match and match.start() > 0:
                key, value = line[:match.start()], line[match.end():]
                rows.append(TableRow.of(KEY_VALUE_COLUMNS, (key.strip(), value.strip())))
            else:
                rows.append(TableRow.of(KEY_VALUE_COLUMNS, (line.strip(), "")))
        return rows
