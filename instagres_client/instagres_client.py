"""
Instagres Python SDK
Creates instant, claimable Neon PostgreSQL databases
"""

import json
import logging
import os
import types
import uuid
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, Optional, Type, Union, cast

import jsonschema  # type: ignore[import-untyped]
import requests  # type: ignore[import-untyped]

from .exceptions import ErrorKind, InstagresError

logger = logging.getLogger(__name__)

# Load the common schema
SCHEMA_PATH = Path(__file__).parent / "schema" / "instagres.schema.json"
with open(SCHEMA_PATH) as f:
    SCHEMA = json.load(f)

DEFAULT_HOST = "https://neon.new"
DEFAULT_REFERRER = "neon/instagres"
USER_AGENT = "Instagres-PythonSDK/1.0.0"


@dataclass
class ClientConfig:
    host: str = DEFAULT_HOST
    referrer: str = DEFAULT_REFERRER
    connect_timeout: float = 10.0
    timeout: float = 30.0

    def __post_init__(self):
        self.host = self.host.rstrip("/")
        if self.connect_timeout > self.timeout:
            raise InstagresError(
                ErrorKind.INVALID_FORMAT,
                "connect_timeout must not exceed timeout",
            )

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Build a config from INSTAGRES_* environment variables"""
        config: Dict[str, Any] = {}
        if "INSTAGRES_HOST" in os.environ:
            config["host"] = os.environ["INSTAGRES_HOST"]
        if "INSTAGRES_REFERRER" in os.environ:
            config["referrer"] = os.environ["INSTAGRES_REFERRER"]
        return SchemaValidator.validate_client_config(config)


@dataclass(frozen=True)
class ClaimableDatabase:
    connection_string: str
    claim_url: str
    expires_at: str

    def as_dict(self) -> Dict[str, str]:
        return asdict(self)


class SchemaValidator:
    @staticmethod
    def validate_against_schema(
        data: Any, schema_ref: str, kind: ErrorKind = ErrorKind.INVALID_FORMAT
    ) -> None:
        """Validate data against a specific schema reference"""
        try:
            schema_def = cast(Dict[str, Any], SCHEMA["definitions"][schema_ref])
            jsonschema.validate(data, schema_def)
        except jsonschema.ValidationError as e:
            raise InstagresError(
                kind, f"Schema validation failed: {e.message}"
            ) from e

    @staticmethod
    def validate_client_config(config: Dict[str, Any]) -> ClientConfig:
        SchemaValidator.validate_against_schema(config, "ClientConfig")
        return ClientConfig(**config)

    @staticmethod
    def validate_database_info(info: Any) -> Dict[str, str]:
        """Check the fetched database info carries the fields we hand back"""
        if not isinstance(info, dict):
            raise InstagresError(
                ErrorKind.INVALID_RESPONSE, "Invalid JSON response from API"
            )

        for field_name in ("connection_string", "expires_at"):
            if info.get(field_name) is None:
                raise InstagresError(
                    ErrorKind.INVALID_RESPONSE,
                    f"API response missing {field_name} field",
                )

        SchemaValidator.validate_against_schema(
            info, "DatabaseInfo", ErrorKind.INVALID_RESPONSE
        )
        return cast(Dict[str, str], info)


def generate_uuid() -> str:
    """Generate a random UUID v4 string"""
    return str(uuid.uuid4())


def _normalize_db_id(db_id: Union[str, uuid.UUID]) -> str:
    if isinstance(db_id, uuid.UUID):
        return str(db_id)
    try:
        return str(uuid.UUID(db_id))
    except (TypeError, ValueError, AttributeError) as e:
        raise InstagresError(
            ErrorKind.INVALID_FORMAT, f"Invalid database id: {db_id!r}"
        ) from e


class InstagresClient:
    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize Instagres client

        Args:
            config: Configuration dictionary (host, referrer, connect_timeout,
                timeout). Falls back to INSTAGRES_* environment variables.
        """
        if config is None:
            self.config = ClientConfig.from_env()
        else:
            self.config = SchemaValidator.validate_client_config(dict(config))

        self.session = requests.Session()
        self.session.headers.update(
            {
                "Content-Type": "application/json",
                "User-Agent": USER_AGENT,
            }
        )

    @property
    def _timeout(self):
        return (self.config.connect_timeout, self.config.timeout)

    def _database_url(self, db_id: str) -> str:
        return f"{self.config.host}/api/v1/database/{db_id}"

    def get_claim_url(self, db_id: Union[str, uuid.UUID]) -> str:
        """Claim URL for a database; built locally, never fetched"""
        return f"{self.config.host}/database/{db_id}"

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        try:
            response = self.session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as e:
            raise InstagresError(
                ErrorKind.NETWORK,
                f"HTTP request failed: {e}",
                {"method": method, "url": url},
            ) from e
        logger.debug("%s %s -> %s", method, url, response.status_code)
        return response

    def create_claimable_database(
        self,
        referrer: Optional[str] = None,
        db_id: Optional[Union[str, uuid.UUID]] = None,
    ) -> ClaimableDatabase:
        """
        Create a claimable database and fetch its connection details

        Args:
            referrer: Referrer identifier sent to the service; defaults to the
                configured referrer, an empty string sends none
            db_id: Optional database UUID (generated when omitted)

        Returns:
            ClaimableDatabase: connection string, claim URL and expiry

        Raises:
            InstagresError: NETWORK on transport failure or unexpected
                status, INVALID_RESPONSE when the details are unusable
        """
        db_id = generate_uuid() if db_id is None else _normalize_db_id(db_id)
        if referrer is None:
            referrer = self.config.referrer

        url = self._database_url(db_id)
        params = {"referrer": referrer} if referrer else None

        response = self._request("POST", url, params=params)
        if response.status_code not in (200, 201):
            raise InstagresError(
                ErrorKind.NETWORK,
                f"Failed to create database. HTTP status: {response.status_code}",
                {"status": response.status_code, "db_id": db_id},
            )

        response = self._request("GET", url)
        if response.status_code != 200:
            raise InstagresError(
                ErrorKind.NETWORK,
                f"Failed to retrieve database information. HTTP status: {response.status_code}",
                {"status": response.status_code, "db_id": db_id},
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise InstagresError(
                ErrorKind.INVALID_RESPONSE, "Invalid JSON response from API"
            ) from e

        info = SchemaValidator.validate_database_info(payload)
        logger.info("Created claimable database %s (expires %s)", db_id, info["expires_at"])

        return ClaimableDatabase(
            connection_string=info["connection_string"],
            claim_url=self.get_claim_url(db_id),
            expires_at=info["expires_at"],
        )

    def close(self):
        """Close the underlying HTTP session"""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type: Optional[Type[BaseException]], exc_val: Optional[BaseException], exc_tb: Optional[types.TracebackType]) -> None:
        self.close()


def create_claimable_database(
    referrer: Optional[str] = None,
    db_id: Optional[Union[str, uuid.UUID]] = None,
) -> ClaimableDatabase:
    """Create a claimable database with a client configured from the environment"""
    with InstagresClient() as client:
        return client.create_claimable_database(referrer, db_id)


def get_claim_url(db_id: Union[str, uuid.UUID]) -> str:
    return f"{ClientConfig.from_env().host}/database/{db_id}"
