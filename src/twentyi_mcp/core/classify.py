from __future__ import annotations

import re
from typing import Any, Dict, Optional

import httpx

from .errors import ErrorKind, TwentyIError, kind_for_status
from .normalize import is_html

HTML_PREVIEW_CHARS = 200
BODY_SNIPPET_CHARS = 500

_TAG_RE = re.compile(r"<[^>]*>")


def html_preview(text: str, limit: int = HTML_PREVIEW_CHARS) -> str:
    """Strip tags from the first ``limit`` characters of an HTML body."""
    return _TAG_RE.sub(" ", (text or "")[:limit]).strip()


def classify_http_error(resp: httpx.Response, *, context: str) -> TwentyIError:
    """Map a non-2xx response to a TwentyIError."""
    status = resp.status_code

    if is_html(resp.headers.get("content-type")):
        preview = html_preview(resp.text)
        return TwentyIError(
            ErrorKind.FORMAT,
            f"API returned HTML error page ({status}) in {context}: {preview}",
            http_status=status,
            cause={"status": status, "body": preview},
        )

    body: Any = None
    message: Optional[str] = None
    try:
        parsed = resp.json()
    except ValueError:
        body = (resp.text or "")[:BODY_SNIPPET_CHARS]
    else:
        body = parsed
        if isinstance(parsed, dict):
            message = parsed.get("message") or parsed.get("error")

    message = message or resp.reason_phrase or "request failed"
    cause: Dict[str, Any] = {"status": status, "body": body}
    return TwentyIError(
        kind_for_status(status),
        f"{status} {context}: {message}",
        http_status=status,
        cause=cause,
    )


def classify_transport_error(exc: Exception, *, context: str) -> TwentyIError:
    """Map an exception raised before any response arrived."""
    if isinstance(exc, httpx.InvalidURL):
        return TwentyIError(
            ErrorKind.VALIDATION, f"Invalid URL for {context}: {exc}", cause=exc
        )
    if isinstance(exc, RuntimeError):
        message = f"Client closed, cannot send {context}: {exc}"
    elif isinstance(exc, httpx.TimeoutException):
        message = f"Request timeout calling {context}"
    elif isinstance(exc, (httpx.ConnectError, httpx.NetworkError)):
        message = f"Network error calling {context}: {exc}"
    else:
        message = f"Transport error calling {context}: {exc}"
    return TwentyIError(ErrorKind.TRANSPORT, message, cause=exc)


__all__ = [
    "html_preview",
    "classify_http_error",
    "classify_transport_error",
    "HTML_PREVIEW_CHARS",
]
