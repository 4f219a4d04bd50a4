from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from .errors import ConfigError

API_KEY_ENV = "TWENTYI_API_KEY"
OAUTH_KEY_ENV = "TWENTYI_OAUTH_KEY"
COMBINED_KEY_ENV = "TWENTYI_COMBINED_KEY"

REQUIRED_ENV = (API_KEY_ENV, OAUTH_KEY_ENV, COMBINED_KEY_ENV)


@dataclass(frozen=True)
class Credentials:
    """
    20i API keys. Only api_key is used to authenticate requests today;
    oauth_key and combined_key are carried for other auth schemes.
    """

    api_key: str = field(repr=False)
    oauth_key: str = field(repr=False)
    combined_key: str = field(repr=False)


def load_credentials(*, use_dotenv: bool = True) -> Credentials:
    """Load all three 20i keys from the environment (optional .env)."""
    if use_dotenv:
        load_dotenv()

    values = {name: os.getenv(name, "").strip() for name in REQUIRED_ENV}
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise ConfigError(
            "Missing required credential(s): "
            + ", ".join(missing)
            + f". Set {', '.join(REQUIRED_ENV)} in the environment."
        )

    return Credentials(
        api_key=values[API_KEY_ENV],
        oauth_key=values[OAUTH_KEY_ENV],
        combined_key=values[COMBINED_KEY_ENV],
    )


__all__ = [
    "Credentials",
    "load_credentials",
    "API_KEY_ENV",
    "OAUTH_KEY_ENV",
    "COMBINED_KEY_ENV",
    "REQUIRED_ENV",
]
