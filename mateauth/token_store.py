from __future__ import annotations

import logging
from typing import Optional, Protocol

import redis.asyncio as redis
from pydantic import ValidationError

from .config import Settings
from .models import WalletSession

logger = logging.getLogger(__name__)


class TokenStore(Protocol):
    async def get_token(self) -> Optional[str]: ...
    async def get_address(self) -> Optional[str]: ...
    async def has(self) -> bool: ...
    async def set(self, token: str, address: str) -> None: ...
    async def clear(self) -> None: ...
    async def aclose(self) -> None: ...


def _checked(token: str, address: str) -> WalletSession:
    # token and address only ever exist together
    if not token or not address:
        raise ValueError("wallet session needs both a token and an address")
    return WalletSession(token=token, address=address)


class MemoryTokenStore:
    def __init__(self, session: Optional[WalletSession] = None):
        self.session = session

    async def get_token(self) -> Optional[str]:
        return self.session.token if self.session else None

    async def get_address(self) -> Optional[str]:
        return self.session.address if self.session else None

    async def has(self) -> bool:
        return self.session is not None

    async def set(self, token: str, address: str) -> None:
        self.session = _checked(token, address)

    async def clear(self) -> None:
        self.session = None

    async def aclose(self) -> None:
        pass


class RedisTokenStore:
    def __init__(self, host: str, port: int, key: str, ttl_sec: int = 0):
        self.r = redis.Redis(host=host, port=port, decode_responses=True)
        self.key = key
        self.ttl = ttl_sec

    async def get(self) -> Optional[WalletSession]:
        raw = await self.r.get(self.key)
        if not raw:
            return None
        try:
            return WalletSession.model_validate_json(raw)
        except ValidationError:
            logger.warning("Discarding unreadable wallet session at %s", self.key)
            return None

    async def get_token(self) -> Optional[str]:
        s = await self.get()
        return s.token if s else None

    async def get_address(self) -> Optional[str]:
        s = await self.get()
        return s.address if s else None

    async def has(self) -> bool:
        return await self.get() is not None

    async def set(self, token: str, address: str) -> None:
        session = _checked(token, address)
        await self.r.set(self.key, session.model_dump_json(), ex=self.ttl or None)

    async def clear(self) -> None:
        await self.r.delete(self.key)

    async def aclose(self) -> None:
        await self.r.aclose()


def build_store(s: Settings) -> TokenStore:
    if s.TOKEN_STORE == "memory":
        return MemoryTokenStore()
    if s.TOKEN_STORE == "redis":
        return RedisTokenStore(s.REDIS_HOST, s.REDIS_PORT, s.WALLET_SESSION_KEY, s.WALLET_SESSION_TTL_SEC)
    raise ValueError(f"unknown TOKEN_STORE: {s.TOKEN_STORE!r}")
