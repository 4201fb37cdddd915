"""
Instagres Python SDK

A Python SDK for Neon Instagres - instant, claimable PostgreSQL databases
with zero configuration.
"""

from .instagres_client import (
    InstagresClient,
    ClientConfig,
    ClaimableDatabase,
    SchemaValidator,
    create_claimable_database,
    generate_uuid,
    get_claim_url,
)

from .dsn_parser import (
    ConnectionStringParser,
    ParsedConnection,
    parse_connection_string,
)

from .exceptions import ErrorKind, InstagresError

__version__ = "1.0.0"

__all__ = [
    "InstagresClient",
    "ClientConfig",
    "ClaimableDatabase",
    "SchemaValidator",
    "create_claimable_database",
    "generate_uuid",
    "get_claim_url",
    # Connection strings
    "ConnectionStringParser",
    "ParsedConnection",
    "parse_connection_string",
    # Errors
    "ErrorKind",
    "InstagresError",
]
