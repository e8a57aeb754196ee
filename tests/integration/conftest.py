"""Pytest fixtures for integration tests"""

import os

import pytest
import pytest_asyncio

from rhclient import Config, RobinhoodClient


def validate_robinhood_environment():
    """Validate required credentials are set for integration tests."""
    required_vars = ["ROBINHOOD_USERNAME", "ROBINHOOD_PASSWORD"]

    missing_vars = [var for var in required_vars if not os.getenv(var)]
    if missing_vars:
        raise ValueError(
            f"Missing required environment variables: {missing_vars}"
        )


@pytest.fixture(scope="module")
def live_config() -> Config:
    """Load real credentials from environment for integration tests."""
    validate_robinhood_environment()
    return Config.from_env()


@pytest_asyncio.fixture
async def live_client(live_config: Config):
    client = RobinhoodClient(config=live_config)
    await client.connect()
    yield client
    await client.disconnect()
