"""Pytest configuration and fixtures for integration tests."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from dotenv import load_dotenv

from pyebeco import EbecoClient, EbecoConfig
from pyebeco.const import DEFAULT_BASE_URL


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator


# Load .env file from project root
env_path = Path(__file__).parents[2] / ".env"
load_dotenv(env_path)


@pytest.fixture(scope="session")
def integration_config() -> EbecoConfig:
    """Load integration test configuration from environment.

    Returns:
        Client configuration with real API credentials.
    """
    username = os.getenv("EBECO_USERNAME")
    password = os.getenv("EBECO_PASSWORD")

    if not username or not password:
        pytest.skip("Create a .env file with EBECO_USERNAME and EBECO_PASSWORD to run integration tests")

    return EbecoConfig(
        username=username,
        password=password,
        api_host=os.getenv("EBECO_API_HOST", DEFAULT_BASE_URL),
    )


@pytest.fixture
async def integration_client(integration_config: EbecoConfig) -> AsyncGenerator[EbecoClient]:
    """Create a logged in client against the real API."""
    async with EbecoClient(config=integration_config) as client:
        await client.login()
        yield client
