"""Core domain surface for twentyi-mcp (transport-agnostic)."""

from .classify import classify_http_error, classify_transport_error, html_preview
from .client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS, TwentyIClient
from .config import Credentials, load_credentials
from .degradation import (
    ACCOUNT_BALANCE,
    DOMAIN_VERIFICATION,
    DegradationRule,
    degrade,
)
from .errors import ConfigError, ErrorKind, TwentyIError
from .models import AccountBalance, ResellerIdentity
from .normalize import normalize_payload, normalize_response
from .registry import (
    build_operation_table,
    discover_tool_modules,
    invoke,
    iter_tool_functions,
    register_discovered_tools,
)
from .resolver import ResellerResolver, coerce_reseller_identity, resolve_reseller

__all__ = [
    # Client
    "TwentyIClient",
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT_SECONDS",
    # Config
    "Credentials",
    "load_credentials",
    # Errors
    "ErrorKind",
    "TwentyIError",
    "ConfigError",
    "classify_http_error",
    "classify_transport_error",
    "html_preview",
    # Normalization
    "normalize_payload",
    "normalize_response",
    # Reseller resolution
    "ResellerIdentity",
    "ResellerResolver",
    "coerce_reseller_identity",
    "resolve_reseller",
    # Degradation
    "AccountBalance",
    "DegradationRule",
    "degrade",
    "ACCOUNT_BALANCE",
    "DOMAIN_VERIFICATION",
    # Registry helpers
    "build_operation_table",
    "discover_tool_modules",
    "invoke",
    "iter_tool_functions",
    "register_discovered_tools",
]
