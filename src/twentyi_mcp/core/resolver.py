"""
Reseller identifier resolution.

Most account-scoped paths look like ``/reseller/{id}/...`` and the id is only
known after asking ``GET /reseller``. That endpoint answers in several shapes:

- ``{"id": "...", "name": ...}``
- ``[{"id": "...", ...}]``
- ``"0f8b7d7c-d878-4356-9b00-e6210a26fff1"`` (a bare UUID JSON string)

``coerce_reseller_identity`` folds all of them into a ``ResellerIdentity``.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import TYPE_CHECKING, Any, Optional

from pydantic import ValidationError

from .errors import ErrorKind, TwentyIError
from .models import ResellerIdentity

if TYPE_CHECKING:  # pragma: no cover
    from .client import TwentyIClient

RESELLER_INFO_PATH = "/reseller"

UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.I
)

log = logging.getLogger("twentyi_mcp.core.resolver")


def _unresolvable(payload: Any) -> TwentyIError:
    return TwentyIError(
        ErrorKind.UNKNOWN,
        "Cannot determine account identifier from account information "
        f"(got {type(payload).__name__})",
        cause=payload,
    )


def coerce_reseller_identity(payload: Any) -> ResellerIdentity:
    """Fold any observed /reseller response shape into a ResellerIdentity."""
    if isinstance(payload, list):
        if not payload:
            raise _unresolvable(payload)
        payload = payload[0]

    if isinstance(payload, str):
        candidate = payload.strip()
        if UUID_RE.match(candidate):
            return ResellerIdentity(id=candidate)
        raise _unresolvable(payload)

    if not isinstance(payload, dict):
        raise _unresolvable(payload)

    ident = payload.get("id")
    # bool is an int subclass but never a valid id
    if isinstance(ident, bool) or not isinstance(ident, (str, int)):
        raise _unresolvable(payload)
    ident = str(ident).strip()
    if not ident:
        raise _unresolvable(payload)

    try:
        return ResellerIdentity.model_validate({**payload, "id": ident})
    except ValidationError as exc:  # pragma: no cover - id already checked
        raise _unresolvable(payload) from exc


async def resolve_reseller(
    client: "TwentyIClient", *, tool: Optional[str] = None
) -> ResellerIdentity:
    """Ask the API for the caller's reseller identity (always a fresh request)."""
    payload = await client.get(
        RESELLER_INFO_PATH, tool=tool or "resolve_reseller", check_envelope=False
    )
    return coerce_reseller_identity(payload)


class ResellerResolver:
    """
    Per-client reseller resolution.

    Without caching every call re-resolves, so an account change is seen
    immediately. With ``cache=True`` the first successful answer is kept for
    the lifetime of the client, and concurrent first callers share one
    in-flight request. Failures are never cached.
    """

    def __init__(self, client: "TwentyIClient", *, cache: bool = False):
        self.client = client
        self.cache = cache
        self._cached: Optional[ResellerIdentity] = None
        self._inflight: Optional[asyncio.Task] = None

    async def resolve(self, *, tool: Optional[str] = None) -> ResellerIdentity:
        if not self.cache:
            return await resolve_reseller(self.client, tool=tool)

        if self._cached is not None:
            return self._cached

        if self._inflight is None:
            self._inflight = asyncio.ensure_future(self._resolve_and_store(tool))
        # shield: one waiter being cancelled must not cancel the shared request
        return await asyncio.shield(self._inflight)

    async def _resolve_and_store(self, tool: Optional[str]) -> ResellerIdentity:
        try:
            identity = await resolve_reseller(self.client, tool=tool)
            self._cached = identity
            log.debug("reseller.cached", extra={"reseller_id": identity.id})
            return identity
        finally:
            self._inflight = None

    def invalidate(self) -> None:
        self._cached = None


__all__ = [
    "RESELLER_INFO_PATH",
    "UUID_RE",
    "coerce_reseller_identity",
    "resolve_reseller",
    "ResellerResolver",
]
