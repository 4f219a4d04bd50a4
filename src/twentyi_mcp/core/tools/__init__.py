"""Endpoint tools discovered by twentyi_mcp.core.registry."""
