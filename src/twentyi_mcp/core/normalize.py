"""
Response body normalization.

The 20i API does not hold to a single JSON contract. Bodies have been seen as
JSON objects, JSON arrays, JSON strings (bare reseller UUIDs), empty bodies,
HTML pages and JavaScript-object-literal-like text. Everything a successful
response carries is funnelled through ``normalize_payload`` so callers only
ever receive a parsed value, or a ``TwentyIError`` of kind ``format``.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import httpx

from .errors import ErrorKind, TwentyIError

UNPARSEABLE_PREVIEW_CHARS = 100


def is_html(content_type: Optional[str]) -> bool:
    return bool(content_type) and "text/html" in content_type.lower()


def _looks_like_object_literal(text: str) -> bool:
    return ":" in text and not text.startswith(("{", "["))


def normalize_payload(
    body: Any,
    *,
    content_type: Optional[str] = None,
    status_code: Optional[int] = None,
    context: str = "request",
) -> Any:
    """
    Turn a raw body into a parsed JSON value.
    - dict/list bodies pass through untouched
    - strings are trimmed and parsed; blank strings count as absent
    - object-literal-like text (has ':' but is not '{...}'/'[...]') is rejected
    - HTML and other unparseable text raise a format error
    - absent values (None, blank) become {}
    """
    if body is None:
        return {}

    if isinstance(body, (dict, list)):
        return body

    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")

    if not isinstance(body, str):
        # Already-parsed primitive (number, bool)
        return body

    text = body.strip()
    if not text:
        return {}

    html = is_html(content_type)

    # An HTML page with inline styles would otherwise trip the object-literal
    # check and get a misleading message.
    if _looks_like_object_literal(text) and not (html and text.startswith("<")):
        raise TwentyIError(
            ErrorKind.FORMAT,
            f"API returned invalid format in {context} (JavaScript object "
            "literal instead of JSON). The API endpoint or authentication "
            "may be incorrect.",
            http_status=status_code,
            cause=text[:UNPARSEABLE_PREVIEW_CHARS],
        )

    try:
        parsed = json.loads(text)
    except ValueError as exc:
        if html:
            raise TwentyIError(
                ErrorKind.FORMAT,
                f"API returned HTML instead of JSON in {context}. "
                f"Status: {status_code}. This usually indicates an "
                "authentication error or invalid endpoint.",
                http_status=status_code,
                cause=text[:UNPARSEABLE_PREVIEW_CHARS],
            ) from exc
        raise TwentyIError(
            ErrorKind.FORMAT,
            f"API returned unparseable response in {context}: "
            f"{text[:UNPARSEABLE_PREVIEW_CHARS]}...",
            http_status=status_code,
            cause=text[:UNPARSEABLE_PREVIEW_CHARS],
        ) from exc

    return {} if parsed is None else parsed


def check_error_envelope(payload: Any, *, status_code: int, context: str) -> None:
    """Raise when a 2xx body reports a failure in-band."""
    if not isinstance(payload, dict):
        return

    if payload.get("error"):
        raise TwentyIError(
            ErrorKind.UNKNOWN,
            f"API returned error in {context}: {payload['error']}",
            http_status=status_code,
            cause=payload,
        )

    if payload.get("status") == "error":
        message = payload.get("message") or "Unknown error"
        raise TwentyIError(
            ErrorKind.UNKNOWN,
            f"API returned error status in {context}: {message}",
            http_status=status_code,
            cause=payload,
        )


def normalize_response(
    resp: httpx.Response, *, context: str, check_envelope: bool = True
) -> Any:
    """
    Normalize the body of a successful httpx response.
    check_envelope=False leaves in-band error keys to the caller.
    """
    if not resp.content:
        return {}

    payload = normalize_payload(
        resp.text,
        content_type=resp.headers.get("content-type"),
        status_code=resp.status_code,
        context=context,
    )
    if check_envelope:
        check_error_envelope(payload, status_code=resp.status_code, context=context)
    return payload


__all__ = [
    "is_html",
    "normalize_payload",
    "normalize_response",
    "check_error_envelope",
    "UNPARSEABLE_PREVIEW_CHARS",
]
