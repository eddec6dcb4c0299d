from unittest.mock import AsyncMock

import pytest
import redis.exceptions

from mateauth.api_client import ApiClient
from mateauth.models import WalletSession
from mateauth.token_store import MemoryTokenStore


@pytest.fixture
def api():
    """ApiClient double; every endpoint is an AsyncMock."""
    return AsyncMock(spec=ApiClient)


@pytest.fixture
def empty_store():
    return MemoryTokenStore()


@pytest.fixture
def wallet_store():
    return MemoryTokenStore(WalletSession(token="local-token", address="0xabc"))


class UnreachableStore:
    """Token store whose backend is down; every call raises like redis.asyncio does."""

    async def _fail(self, *args):
        raise redis.exceptions.ConnectionError("Error 111 connecting to 127.0.0.1:1. Connection refused.")

    get_token = get_address = has = set = clear = aclose = _fail


@pytest.fixture
def unreachable_store():
    return UnreachableStore()
