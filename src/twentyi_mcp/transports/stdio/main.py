from __future__ import annotations

import asyncio
import os

from mcp.server.fastmcp import FastMCP

from twentyi_mcp.core.client import TwentyIClient
from twentyi_mcp.core.logging import setup_logging
from twentyi_mcp.core.registry import register_discovered_tools


def create_app(client: TwentyIClient) -> FastMCP:
    app = FastMCP("twentyi-mcp")
    register_discovered_tools(app, lambda: client)
    return app


async def main() -> None:
    setup_logging(os.getenv("TWENTYI_LOG_LEVEL", "INFO"))
    # Fails fast on missing credentials, before the stdio stream opens.
    client = TwentyIClient.from_env(
        cache_reseller_id=os.getenv("TWENTYI_CACHE_RESELLER_ID", "").lower()
        in ("1", "true", "yes"),
    )

    app = create_app(client)
    try:
        await app.run_stdio_async()
    finally:
        await client.aclose()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
