"""Password hashing, refresh-token hashing and JWT signing."""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from app.config import settings
from app.core.errors import InvalidToken, TokenExpired

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

# JWTs are longer than bcrypt's 72-byte input limit and share a common
# prefix, so tokens are digested with SHA-256 before bcrypt.
token_context = CryptContext(
    schemes=["bcrypt_sha256"],
    deprecated="auto",
    bcrypt_sha256__rounds=settings.BCRYPT_ROUNDS,
)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def hash_token(token: str) -> str:
    """Salted one-way hash of a refresh token for server-side storage."""
    return token_context.hash(token)


def verify_token_hash(token: str, token_hash: str) -> bool:
    """Check a presented refresh token against its stored hash."""
    try:
        return token_context.verify(token, token_hash)
    except ValueError:
        # Stored value is not a recognizable hash
        return False


def sign_token(claims: dict[str, Any], key: str, ttl: timedelta, algorithm: str) -> str:
    """
    Sign a JWT carrying ``claims`` that expires ``ttl`` from now.

    Adds ``iat``, ``exp`` and a random ``jti`` so two tokens minted for the
    same subject in the same second never collide.
    """
    now = datetime.now(timezone.utc)
    to_encode = dict(claims)
    to_encode.update({"iat": now, "exp": now + ttl, "jti": uuid.uuid4().hex})
    return jwt.encode(to_encode, key, algorithm=algorithm)


def decode_token(token: str, key: str, algorithm: str) -> dict[str, Any]:
    """
    Verify a JWT signature and expiry and return its claims.

    Raises:
        TokenExpired: If the token is past its ``exp``
        InvalidToken: If the token is malformed or the signature does not match
    """
    try:
        return jwt.decode(token, key, algorithms=[algorithm])
    except ExpiredSignatureError as e:
        raise TokenExpired() from e
    except JWTError as e:
        raise InvalidToken() from e
