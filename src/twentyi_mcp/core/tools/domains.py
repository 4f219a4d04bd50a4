from __future__ import annotations

from typing import Any

from twentyi_mcp.core.client import TwentyIClient, path_segment
from twentyi_mcp.core.degradation import DOMAIN_VERIFICATION, degrade


async def list_domains(client: TwentyIClient) -> Any:
    """List all domains on the account."""
    return await client.get("/domain", tool="list_domains")


async def get_domain_info(client: TwentyIClient, domain_id: str) -> Any:
    """Get details for one domain registered through the reseller."""
    reseller = await client.reseller.resolve(tool="get_domain_info")
    path = f"/reseller/{path_segment(reseller.id)}/domain/{path_segment(domain_id)}"
    return await client.get(path, tool="get_domain_info")


async def get_dns_records(client: TwentyIClient, domain_id: str) -> Any:
    """Get DNS records for a domain."""
    reseller = await client.reseller.resolve(tool="get_dns_records")
    path = f"/reseller/{path_segment(reseller.id)}/domain/{path_segment(domain_id)}"
    return await client.get(f"{path}/dns", tool="get_dns_records")


async def get_domain_verification_status(client: TwentyIClient) -> Any:
    """
    Get verification status for domains requiring verification.
    An account with nothing awaiting verification answers 404; that is []
    here.
    """
    return await degrade(
        DOMAIN_VERIFICATION,
        client.get("/domainVerification", tool="get_domain_verification_status"),
    )


async def get_domain_periods(client: TwentyIClient) -> Any:
    """List the registration periods available per TLD."""
    return await client.get("/domain-period", tool="get_domain_periods")
