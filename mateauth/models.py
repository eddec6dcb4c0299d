from __future__ import annotations

from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class GoogleProfile(BaseModel):
    model_config = ConfigDict(extra="allow")

    sub: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    picture: Optional[str] = None


class GoogleSession(BaseModel):
    """Cookie-session lookup result. Every field may be missing; missing means unknown."""

    ok: Optional[bool] = None
    token: Optional[str] = None
    wallet_address: Optional[str] = None  # None: not linked yet
    profile: Optional[GoogleProfile] = None
    error: Optional[str] = None

    @property
    def has_wallet_pair(self) -> bool:
        return bool(self.ok and self.token and self.wallet_address)


class GoogleSessionByWallet(BaseModel):
    ok: Optional[bool] = None
    wallet_address: Optional[str] = None
    google_sub: Optional[str] = None
    token: Optional[str] = None
    linked_at: Optional[Union[float, str]] = None  # epoch seconds or ISO string
    profile: Optional[GoogleProfile] = None
    error: Optional[str] = None


class LinkResult(GoogleSessionByWallet):
    @property
    def has_wallet_pair(self) -> bool:
        return bool(self.ok and self.token and self.wallet_address)


class UnlinkResult(BaseModel):
    ok: Optional[bool] = None
    error: Optional[str] = None


class VerifyPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    provider: Literal["google"] = "google"
    id_token: str = Field(alias="idToken")
    nonce: str


class VerifyResult(BaseModel):
    ok: Optional[bool] = None
    # the server may hand out a wallet token together with the session
    token: Optional[str] = None
    profile: Optional[GoogleProfile] = None
    wallet_address: Optional[str] = None
    error: Optional[str] = None


class WalletSession(BaseModel):
    token: str
    address: str


class FlowOutcome(str, Enum):
    PROCEED = "proceed"
    GO_TO_LOGIN = "go-to-login"
    GO_TO_LINK = "go-to-link"


class LinkDecision(str, Enum):
    OK = "ok"
    TO_LINK = "to-link"
    SKIP = "skip"
