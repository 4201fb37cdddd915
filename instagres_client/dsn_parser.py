"""
Connection string parser for Instagres databases
Parses PostgreSQL URIs in the format:
postgres[ql]://username[:password]@host[:port]/database[?param1=value1&param2=value2]
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple
from urllib.parse import parse_qsl, unquote, urlsplit

from .exceptions import ErrorKind, InstagresError

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = ("postgres", "postgresql")
DEFAULT_PORT = "5432"

SCHEME_ERROR = "Connection string must use postgres:// or postgresql:// scheme"
MISSING_COMPONENTS_ERROR = (
    "Connection string missing required components (host, user, or database)"
)


@dataclass(frozen=True)
class ParsedConnection:
    """Parsed connection string components"""

    host: str
    port: str
    database: str
    user: str
    password: str
    dsn: str
    options: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        # Read-only view so options cannot drift from the dsn
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    def __hash__(self) -> int:
        return hash(
            (
                self.host,
                self.port,
                self.database,
                self.user,
                self.password,
                self.dsn,
                frozenset(self.options.items()),
            )
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "host": self.host,
            "port": self.port,
            "database": self.database,
            "user": self.user,
            "password": self.password,
            "dsn": self.dsn,
            "options": dict(self.options),
        }

    def connect_kwargs(self) -> Dict[str, str]:
        """
        Keyword arguments for a libpq-style driver connect call

        Query options (sslmode, channel_binding, ...) are passed along as
        libpq connection parameters.
        """
        kwargs = dict(self.options)
        kwargs.update(
            host=self.host,
            port=self.port,
            dbname=self.database,
            user=self.user,
            password=self.password,
        )
        return kwargs


def _split_host_port(hostport: str) -> Tuple[str, str]:
    # Bracketed IPv6 literals keep their brackets, as in the DSN host field
    if hostport.startswith("["):
        end = hostport.find("]")
        if end == -1:
            raise InstagresError(ErrorKind.INVALID_FORMAT, "Failed to parse connection string")
        host = hostport[: end + 1]
        rest = hostport[end + 1 :]
        port = rest[1:] if rest.startswith(":") else ""
        return host, port

    host, _, port = hostport.partition(":")
    return host, port


def build_dsn(host: str, port: str, database: str, options: Mapping[str, str]) -> str:
    """Build the pgsql driver DSN; only sslmode=require is carried over"""
    dsn = f"pgsql:host={host};port={port};dbname={database}"
    if options.get("sslmode") == "require":
        dsn += ";sslmode=require"
    return dsn


class ConnectionStringParser:
    """Parser for PostgreSQL connection strings returned by Instagres"""

    @staticmethod
    def parse(connection_string: str) -> ParsedConnection:
        """
        Parse a PostgreSQL connection string

        Args:
            connection_string: postgres:// or postgresql:// URI

        Returns:
            ParsedConnection: Parsed connection components

        Raises:
            InstagresError: INVALID_FORMAT if the string is not a usable
                PostgreSQL URI
        """
        if not isinstance(connection_string, str):
            raise InstagresError(
                ErrorKind.INVALID_FORMAT, "Connection string must be a string"
            )

        # urlsplit lowercases the scheme, so check the raw prefix
        raw_scheme, sep, _ = connection_string.partition("://")
        if not sep or raw_scheme not in ALLOWED_SCHEMES:
            raise InstagresError(ErrorKind.INVALID_FORMAT, SCHEME_ERROR)

        try:
            parsed = urlsplit(connection_string)
        except ValueError as e:
            raise InstagresError(
                ErrorKind.INVALID_FORMAT, f"Failed to parse connection string: {e}"
            ) from e

        userinfo, at, hostport = parsed.netloc.rpartition("@")
        host, port = _split_host_port(hostport)
        raw_user, _, raw_password = userinfo.partition(":")

        if not host or not at or not raw_user or not parsed.path:
            raise InstagresError(ErrorKind.INVALID_FORMAT, MISSING_COMPONENTS_ERROR)

        options: Dict[str, str] = {}
        if parsed.query:
            # Later duplicates overwrite earlier ones
            for key, value in parse_qsl(parsed.query, keep_blank_values=True):
                options[key] = value

        port = port or DEFAULT_PORT
        database = parsed.path[1:] if parsed.path.startswith("/") else parsed.path

        logger.debug("Parsed connection string for host=%s database=%s", host, database)

        return ParsedConnection(
            host=host,
            port=port,
            database=database,
            user=unquote(raw_user),
            password=unquote(raw_password),
            dsn=build_dsn(host, port, database, options),
            options=options,
        )


def parse_connection_string(connection_string: str) -> ParsedConnection:
    return ConnectionStringParser.parse(connection_string)
