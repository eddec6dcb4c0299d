from __future__ import annotations

import logging

from .api_client import ApiClient
from .token_store import TokenStore

logger = logging.getLogger(__name__)


class TokenValidator:
    def __init__(self, api: ApiClient, store: TokenStore):
        self.api = api
        self.store = store

    async def validate(self) -> bool:
        """True when the backend accepts the stored wallet token. Never raises."""
        try:
            token = await self.store.get_token()
        except Exception:
            logger.exception("Could not read the stored wallet token")
            return False
        if not token:
            return False
        try:
            await self.api.validate_token(token)
        except Exception as e:
            logger.info("Stored wallet token rejected: %s", e)
            try:
                await self.store.clear()
            except Exception:
                logger.exception("Could not clear the wallet session")
            return False
        return True
