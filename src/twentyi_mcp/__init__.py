"""twentyi_mcp package exports."""

from .core import (
    ConfigError,
    Credentials,
    ErrorKind,
    ResellerIdentity,
    TwentyIClient,
    TwentyIError,
    invoke,
    load_credentials,
    register_discovered_tools,
)

__all__ = [
    "TwentyIClient",
    "Credentials",
    "load_credentials",
    "ErrorKind",
    "TwentyIError",
    "ConfigError",
    "ResellerIdentity",
    "invoke",
    "register_discovered_tools",
]
