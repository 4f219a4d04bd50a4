from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    FORMAT = "format"
    TRANSPORT = "transport"
    UNKNOWN = "unknown"


class ConfigError(ValueError):
    """Raised at startup when required configuration is missing."""


class TwentyIError(Exception):
    """
    Single error type crossing the client boundary.
    - kind: one of ErrorKind, used by callers and the degradation rules
    - http_status: upstream status when a response was received
    - cause: upstream body or transport exception, for diagnostics only
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        http_status: Optional[int] = None,
        cause: Any = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.http_status = http_status
        self.cause = cause

    def __repr__(self) -> str:
        return (
            f"TwentyIError(kind={self.kind.value!r}, "
            f"http_status={self.http_status!r}, message={self.message!r})"
        )


_STATUS_KINDS = {
    400: ErrorKind.VALIDATION,
    403: ErrorKind.FORBIDDEN,
    404: ErrorKind.NOT_FOUND,
}


def kind_for_status(status_code: int) -> ErrorKind:
    return _STATUS_KINDS.get(status_code, ErrorKind.UNKNOWN)


__all__ = ["ErrorKind", "ConfigError", "TwentyIError", "kind_for_status"]
