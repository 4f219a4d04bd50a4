from __future__ import annotations

from typing import Any

from twentyi_mcp.core.client import TwentyIClient, path_segment


async def list_hosting_packages(client: TwentyIClient) -> Any:
    return await client.get("/package", tool="list_hosting_packages")


async def get_hosting_package_info(client: TwentyIClient, package_id: str) -> Any:
    """Get details for one hosting package."""
    return await client.get(
        f"/package/{path_segment(package_id)}", tool="get_hosting_package_info"
    )
