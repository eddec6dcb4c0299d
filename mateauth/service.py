from __future__ import annotations

import logging
from typing import Optional

from .api_client import ApiClient
from .models import FlowOutcome, GoogleSession, LinkDecision
from .token_store import TokenStore
from .validator import TokenValidator

logger = logging.getLogger(__name__)


class AuthFlowService:
    """Reconciles the stored wallet session with the server-side Google session.

    Steps run strictly one after another: the resolver may write the wallet
    session, and the flow re-reads the store after it.
    """

    def __init__(self, api: ApiClient, store: TokenStore, validator: Optional[TokenValidator] = None):
        self.api = api
        self.store = store
        self.validator = validator or TokenValidator(api, store)

    async def resolve_auto_link(self, google: Optional[GoogleSession]) -> LinkDecision:
        wallet_has_token = await self._has_token()
        google_ok = bool(google and google.ok)

        # 1) Google session already carries a wallet session
        if google is not None and google.has_wallet_pair:
            return await self._inject(google.token, google.wallet_address)

        # 2) nothing to link with
        if google_ok and not wallet_has_token:
            return LinkDecision.TO_LINK

        # 3) link server-side using the wallet token
        if wallet_has_token and google_ok:
            try:
                token = await self.store.get_token()
                if not token:
                    return LinkDecision.TO_LINK
                link = await self.api.link_wallet(token)
                if not link.ok:
                    logger.info("Server refused wallet link: %s", link.error)
                    return LinkDecision.TO_LINK
                if link.has_wallet_pair:
                    return await self._inject(link.token, link.wallet_address)
                refreshed = await self.api.fetch_session()
            except Exception as e:
                logger.warning("Automatic wallet link failed: %s", e)
                return LinkDecision.TO_LINK
            if refreshed.has_wallet_pair:
                return await self._inject(refreshed.token, refreshed.wallet_address)
            # link reported ok but nothing proves it
            return LinkDecision.TO_LINK

        return LinkDecision.SKIP

    async def run(self) -> FlowOutcome:
        try:
            google: Optional[GoogleSession] = await self.api.fetch_session()
        except Exception as e:
            logger.warning("Google session lookup failed: %s", e)
            google = None

        decision = await self.resolve_auto_link(google)

        # the resolver may have written the store
        wallet_has_token = await self._has_token()
        google_ok = bool(google and google.ok)

        if not google_ok and not wallet_has_token:
            return FlowOutcome.GO_TO_LOGIN
        if decision is LinkDecision.TO_LINK:
            return FlowOutcome.GO_TO_LINK

        if not await self.validator.validate():
            if wallet_has_token and google_ok:
                try:
                    await self.api.unlink_by_session()
                except Exception:
                    logger.exception("Unlink after rejected wallet token failed")
            await self._clear()
            return FlowOutcome.GO_TO_LOGIN

        if not await self._address():
            await self._clear()
            return FlowOutcome.GO_TO_LOGIN

        return FlowOutcome.PROCEED

    async def start(self) -> FlowOutcome:
        """Startup entry: drop a stale wallet session, then run the flow."""
        if await self.validator.validate() and not await self._address():
            await self._clear()
        outcome = await self.run()
        logger.info("Auth flow finished: %s", outcome.value)
        return outcome

    # Store access below degrades instead of raising: an unreachable store
    # reads as "no wallet session".

    async def _has_token(self) -> bool:
        try:
            return await self.store.has()
        except Exception:
            logger.exception("Wallet session store unreadable")
            return False

    async def _address(self) -> Optional[str]:
        try:
            return await self.store.get_address()
        except Exception:
            logger.exception("Wallet session store unreadable")
            return None

    async def _inject(self, token: str, address: str) -> LinkDecision:
        try:
            await self.store.set(token, address)
        except Exception:
            logger.exception("Could not store the linked wallet session")
            return LinkDecision.TO_LINK
        return LinkDecision.OK

    async def _clear(self) -> None:
        try:
            await self.store.clear()
        except Exception:
            logger.exception("Could not clear the wallet session")
