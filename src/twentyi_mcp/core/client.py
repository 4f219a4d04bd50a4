import base64
import logging
import time
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from .classify import classify_http_error, classify_transport_error
from .config import Credentials, load_credentials
from .errors import TwentyIError
from .normalize import normalize_response
from .observability import log_event
from .resolver import ResellerResolver

DEFAULT_BASE_URL = "https://api.20i.com"
DEFAULT_TIMEOUT_SECONDS = 30.0


def bearer_token(api_key: str) -> str:
    """20i expects the general API key base64-encoded as a bearer token."""
    return base64.b64encode(api_key.encode("utf-8")).decode("ascii")


def path_segment(value: Any) -> str:
    """Quote a caller-supplied value so it stays one path segment."""
    return quote(str(value), safe="")


class TwentyIClient:
    """
    Shared HTTP client for the 20i REST API.
    - Handles auth, base URL and the fixed request timeout
    - Never retries; timeouts and network failures surface as transport errors
    - Returns normalized JSON values (never None, never an unparsed string body)
    - Raises TwentyIError for every failure; no httpx exception escapes
    - No business logic; tools own endpoint-specific decisions
    """

    def __init__(
        self,
        *,
        credentials: Credentials,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        cache_reseller_id: bool = False,
        logger: Optional[logging.Logger] = None,
        http: Optional[httpx.AsyncClient] = None,
    ):
        base_url = (base_url or "").rstrip("/")
        if not base_url:
            raise ValueError("base_url must be provided.")
        if not credentials.api_key:
            raise ValueError("credentials.api_key must be provided.")

        self.credentials = credentials
        self.base_url = base_url
        self.timeout_seconds = timeout_seconds
        self.log = logger or logging.getLogger("twentyi_mcp.core.client")

        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {bearer_token(credentials.api_key)}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=timeout_seconds,
        )
        self.reseller = ResellerResolver(self, cache=cache_reseller_id)

    @classmethod
    def from_env(cls, **kwargs) -> "TwentyIClient":
        return cls(credentials=load_credentials(), **kwargs)

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "TwentyIClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        tool: Optional[str] = None,
        check_envelope: bool = True,
    ) -> Any:
        """
        Core request method.
        - Raises TwentyIError(validation) when the URL cannot be built
        - Raises TwentyIError(transport) when no response was received,
          including sends on a closed client
        - Raises TwentyIError classified by status on non-2xx responses
        - Raises TwentyIError(format) when a 2xx body cannot be normalized
        - Returns the normalized body on success ({} for empty bodies)
        """
        method = method.upper()
        context = f"{method} {url}"
        start = time.perf_counter()
        status: Any = None
        error_type: Optional[str] = None

        try:
            try:
                resp = await self.http.request(method, url, params=params, json=json)
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                status = "exception"
                error_type = type(exc).__name__
                raise classify_transport_error(exc, context=context) from exc
            except RuntimeError as exc:
                # httpx raises a bare RuntimeError for sends on a closed client
                if not self.http.is_closed:
                    raise
                status = "exception"
                error_type = type(exc).__name__
                raise classify_transport_error(exc, context=context) from exc

            status = resp.status_code
            if resp.status_code < 200 or resp.status_code >= 300:
                err = classify_http_error(resp, context=context)
                error_type = err.kind.value
                raise err

            try:
                return normalize_response(
                    resp, context=context, check_envelope=check_envelope
                )
            except TwentyIError as exc:
                error_type = exc.kind.value
                raise
        finally:
            log_event(
                "op_call",
                logger=self.log,
                tool=tool,
                method=method,
                endpoint=url,
                status=status,
                duration_ms=int((time.perf_counter() - start) * 1000),
                error_type=error_type,
            )

    async def get(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        tool: Optional[str] = None,
        check_envelope: bool = True,
    ) -> Any:
        return await self.request(
            "GET", url, params=params, tool=tool, check_envelope=check_envelope
        )

    async def post(self, url: str, *, json: Any = None, tool: Optional[str] = None) -> Any:
        return await self.request("POST", url, json=json, tool=tool)

    async def put(self, url: str, *, json: Any = None, tool: Optional[str] = None) -> Any:
        return await self.request("PUT", url, json=json, tool=tool)

    async def patch(
        self, url: str, *, json: Any = None, tool: Optional[str] = None
    ) -> Any:
        return await self.request("PATCH", url, json=json, tool=tool)

    async def delete(self, url: str, *, tool: Optional[str] = None) -> Any:
        return await self.request("DELETE", url, tool=tool)
