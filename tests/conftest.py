import pytest
from twentyi_mcp.core.client import TwentyIClient
from twentyi_mcp.core.config import Credentials


@pytest.fixture
def credentials():
    return Credentials(
        api_key="test-api-key",
        oauth_key="test-oauth-key",
        combined_key="test-combined-key",
    )


@pytest.fixture
def client(credentials):
    return TwentyIClient(credentials=credentials)
