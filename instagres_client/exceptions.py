"""Error type shared by the Instagres SDK"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Kinds of failure surfaced by the SDK"""

    INVALID_FORMAT = "INVALID_FORMAT"
    NETWORK = "NETWORK"
    INVALID_RESPONSE = "INVALID_RESPONSE"


class InstagresError(Exception):
    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details = details or {}

    def __repr__(self) -> str:
        return f"InstagresError({self.kind.value}, {self.message!r})"
