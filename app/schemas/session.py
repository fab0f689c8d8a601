"""Session token schemas."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel


class TokenPair(BaseModel):
    """Access/refresh token pair issued for one session."""

    access_token: str
    refresh_token: str


class AccountClaims(BaseModel):
    """Verified claims carried by an access or refresh token."""

    sub: UUID
    type: Literal["access", "refresh"]
    iat: datetime
    exp: datetime
    jti: str

    @property
    def account_id(self) -> UUID:
        return self.sub
