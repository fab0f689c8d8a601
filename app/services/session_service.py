"""Session lifecycle: issuing, verifying, rotating and revoking token pairs."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import UUID

import structlog
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError
from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.core.errors import InvalidToken, PersistenceUnavailable
from app.core.security import decode_token, hash_token, sign_token, verify_token_hash
from app.models.refresh_token import RefreshToken
from app.schemas.session import AccountClaims, TokenPair

logger = structlog.get_logger(__name__)

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"

# Dialects with a single-statement INSERT ... ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {"postgresql": postgresql.insert, "sqlite": sqlite.insert}


@dataclass(frozen=True)
class SessionConfig:
    """Signing keys and lifetimes, built once at startup."""

    access_secret_key: str
    refresh_secret_key: str
    algorithm: str = "HS256"
    access_token_ttl: timedelta = timedelta(hours=12)
    refresh_token_ttl: timedelta = timedelta(days=7)

    def __post_init__(self) -> None:
        if not self.access_secret_key or not self.refresh_secret_key:
            raise ValueError("Both JWT access and refresh secret keys must be set")
        if self.access_secret_key == self.refresh_secret_key:
            raise ValueError("JWT access and refresh secret keys must differ")

    @classmethod
    def from_settings(cls, settings: Settings) -> "SessionConfig":
        return cls(
            access_secret_key=settings.JWT_ACCESS_SECRET_KEY,
            refresh_secret_key=settings.JWT_REFRESH_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
            access_token_ttl=timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES),
            refresh_token_ttl=timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS),
        )


class SessionManager:
    """
    Issues and verifies access/refresh token pairs.

    Each account has at most one live refresh token. Its hash is stored in
    ``refresh_tokens`` and replaced on every issue or rotation, so issuing a
    new session invalidates the previous refresh token.
    """

    def __init__(self, db: AsyncSession, config: SessionConfig) -> None:
        """Initialize session manager with database session and signing config."""
        self.db = db
        self.config = config

    async def issue_session(self, account_id: UUID) -> TokenPair:
        """
        Mint a token pair and store the refresh token's hash.

        Args:
            account_id: Account the session belongs to

        Returns:
            Newly issued TokenPair

        Raises:
            PersistenceUnavailable: If the credential record could not be written
        """
        claims = {"sub": str(account_id)}
        access_token = sign_token(
            {**claims, "type": ACCESS_TOKEN},
            self.config.access_secret_key,
            self.config.access_token_ttl,
            self.config.algorithm,
        )
        refresh_token = sign_token(
            {**claims, "type": REFRESH_TOKEN},
            self.config.refresh_secret_key,
            self.config.refresh_token_ttl,
            self.config.algorithm,
        )

        token_hash = await run_in_threadpool(hash_token, refresh_token)
        await self._store_token_hash(account_id, token_hash)

        logger.info("session_issued", user_id=str(account_id))
        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    async def rotate_session(self, account_id: UUID) -> TokenPair:
        """
        Reissue a full token pair after a successful refresh verification.

        The stored hash is overwritten, so the presented refresh token stops
        verifying as soon as this returns.
        """
        pair = await self.issue_session(account_id)
        logger.info("session_rotated", user_id=str(account_id))
        return pair

    def verify_access(self, token: str) -> AccountClaims:
        """
        Verify an access token's signature and expiry.

        Raises:
            TokenExpired: If the token has expired
            InvalidToken: If the token is malformed, forged or not an access token
        """
        payload = decode_token(token, self.config.access_secret_key, self.config.algorithm)
        return self._to_claims(payload, ACCESS_TOKEN)

    async def verify_refresh(self, token: str) -> AccountClaims:
        """
        Verify a refresh token's signature, expiry and stored hash.

        A correctly signed token whose hash no longer matches the stored record
        was superseded by a later issue or rotation and is rejected.

        Raises:
            TokenExpired: If the token has expired
            InvalidToken: If the token is malformed, forged, revoked or superseded
            PersistenceUnavailable: If the credential record could not be read
        """
        payload = decode_token(token, self.config.refresh_secret_key, self.config.algorithm)
        claims = self._to_claims(payload, REFRESH_TOKEN)

        try:
            result = await self.db.execute(
                select(RefreshToken)
                .where(RefreshToken.user_id == claims.account_id)
                .execution_options(populate_existing=True)
            )
            record = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("persistence_error", operation="verify_refresh", error=str(e))
            raise PersistenceUnavailable() from e

        if record is None:
            logger.info("refresh_token_rejected", user_id=str(claims.account_id), reason="no_session")
            raise InvalidToken("Session has been revoked")

        matches = await run_in_threadpool(verify_token_hash, token, record.token_hash)
        if not matches:
            logger.info("refresh_token_rejected", user_id=str(claims.account_id), reason="superseded")
            raise InvalidToken("Refresh token has been superseded")

        return claims

    async def revoke(self, account_id: UUID) -> None:
        """Delete the account's credential record, ending its session."""
        try:
            await self.db.execute(delete(RefreshToken).where(RefreshToken.user_id == account_id))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("persistence_error", operation="revoke", error=str(e))
            raise PersistenceUnavailable() from e

        logger.info("session_revoked", user_id=str(account_id))

    async def _store_token_hash(self, account_id: UUID, token_hash: str) -> None:
        """Upsert the account's single credential record in one statement."""
        now = datetime.utcnow()
        values = {
            "user_id": account_id,
            "token_hash": token_hash,
            "created_at": now,
            "updated_at": now,
        }

        dialect = self.db.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise RuntimeError(f"Unsupported database dialect for session storage: {dialect}")

        stmt = insert(RefreshToken).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[RefreshToken.user_id],
            set_={"token_hash": stmt.excluded.token_hash, "updated_at": now},
        )

        try:
            await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("persistence_error", operation="store_token_hash", error=str(e))
            raise PersistenceUnavailable() from e

    @staticmethod
    def _to_claims(payload: dict, expected_type: str) -> AccountClaims:
        try:
            claims = AccountClaims.model_validate(payload)
        except ValidationError as e:
            raise InvalidToken("Malformed token claims") from e
        if claims.type != expected_type:
            raise InvalidToken(f"Expected a {expected_type} token")
        return claims
