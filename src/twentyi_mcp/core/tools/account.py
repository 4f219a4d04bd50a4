from __future__ import annotations

from typing import Any, Dict

from twentyi_mcp.core.client import TwentyIClient, path_segment
from twentyi_mcp.core.degradation import ACCOUNT_BALANCE, degrade


async def get_reseller_info(client: TwentyIClient) -> Dict[str, Any]:
    """Return the reseller account behind the configured API key."""
    identity = await client.reseller.resolve(tool="get_reseller_info")
    return identity.model_dump()


async def get_account_balance(client: TwentyIClient) -> Dict[str, Any]:
    """
    Return the reseller account balance.

    New or zero-balance accounts answer 403/404 or an empty object; those
    come back as a zero balance with an explanatory message instead of an
    error.
    """
    reseller = await client.reseller.resolve(tool="get_account_balance")
    return await degrade(
        ACCOUNT_BALANCE,
        client.get(
            f"/reseller/{path_segment(reseller.id)}/accountBalance",
            tool="get_account_balance",
            check_envelope=False,
        ),
        reseller_id=reseller.id,
    )
