from __future__ import annotations

import logging
from typing import Any, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from .errors import MissingCredential, RequestFailed
from .models import (
    GoogleSession,
    GoogleSessionByWallet,
    LinkResult,
    UnlinkResult,
    VerifyPayload,
    VerifyResult,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _error_message(r: httpx.Response, fallback: str) -> str:
    message = f"{fallback}: {r.status_code}"
    try:
        data = r.json()
    except ValueError:
        if r.text:
            message = r.text
        return message
    if isinstance(data, dict) and data.get("error"):
        message = str(data["error"])
    return message


def _parse(model: Type[M], data: Any, path: str) -> M:
    # a body that does not parse is an empty result, not a failure
    if not isinstance(data, dict):
        logger.warning("Unparsable response body from %s, using empty result", path)
        return model()
    try:
        return model.model_validate(data)
    except ValidationError as e:
        bad = {err["loc"][0] for err in e.errors() if err["loc"]}
        logger.warning("Dropping malformed fields %s from %s", sorted(map(str, bad)), path)

    # keep whatever did validate, so ok/token/wallet_address survive a bad profile
    kept = {k: v for k, v in data.items() if k not in bad}
    try:
        return model.model_validate(kept)
    except ValidationError:
        return model()


class ApiClient:
    """Google identity / wallet link endpoints plus the generic token check.

    One httpx client is kept for the lifetime of the object so that session
    cookies set by the backend are sent back on later calls.
    """

    def __init__(
        self,
        base_url: str,
        app: str,
        timeout_sec: float = 8.0,
        cookies: Optional[dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.app = app
        self.timeout = timeout_sec
        self._http = httpx.AsyncClient(timeout=timeout_sec, cookies=cookies, transport=transport)

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @property
    def cookies(self) -> httpx.Cookies:
        return self._http.cookies

    def _headers(self, token: Optional[str] = None) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        token: Optional[str] = None,
        bearer: bool = False,
        json: Optional[dict] = None,
    ) -> Any:
        if bearer and not token:
            raise MissingCredential()

        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, path)
        r = await self._http.request(method, url, headers=self._headers(token), json=json)
        if not r.is_success:
            raise RequestFailed(_error_message(r, f"{method} {url} failed"), r.status_code, method, url)

        try:
            return r.json()
        except ValueError:
            return None

    # GOOGLE SESSION
    async def fetch_session(self) -> GoogleSession:
        path = f"/google-me/{self.app}"
        return _parse(GoogleSession, await self._request("GET", path), path)

    async def fetch_session_by_wallet(self, token: Optional[str]) -> GoogleSessionByWallet:
        path = f"/google-me-by-wallet/{self.app}"
        data = await self._request("GET", path, token, bearer=True)
        return _parse(GoogleSessionByWallet, data, path)

    # LINKING
    async def link_wallet(self, token: Optional[str]) -> LinkResult:
        # the server ignores the body
        path = f"/google-link-web3-wallet/{self.app}"
        data = await self._request("POST", path, token, bearer=True, json={})
        return _parse(LinkResult, data, path)

    async def unlink_by_token(self, token: Optional[str]) -> UnlinkResult:
        path = f"/google-unlink-web3-wallet-by-token/{self.app}"
        data = await self._request("POST", path, token, bearer=True, json={})
        return _parse(UnlinkResult, data, path)

    async def unlink_by_session(self) -> UnlinkResult:
        path = f"/google-unlink-web3-wallet-by-session/{self.app}"
        return _parse(UnlinkResult, await self._request("POST", path), path)

    # LOGIN
    async def verify_identity(self, id_token: str, nonce: str, provider: str = "google") -> VerifyResult:
        """Exchange a provider ID token and its nonce for a server session.

        The backend sets its session cookie on success, which later cookie
        based calls on this client pick up.
        """
        path = f"/oauth2/verify/{self.app}"
        payload = VerifyPayload(provider=provider, id_token=id_token, nonce=nonce)
        data = await self._request("POST", path, json=payload.model_dump(by_alias=True))
        return _parse(VerifyResult, data, path)

    async def validate_token(self, token: Optional[str]) -> None:
        """Raises RequestFailed when the backend rejects the token."""
        await self._request("GET", "/validate-token", token, bearer=True)
