"""Core application modules."""

from app.core.security import (
    decode_token,
    get_password_hash,
    hash_token,
    sign_token,
    verify_password,
    verify_token_hash,
)
from app.core.state_machine import ResumeStatusPolicy

__all__ = [
    "decode_token",
    "get_password_hash",
    "hash_token",
    "sign_token",
    "verify_password",
    "verify_token_hash",
    "ResumeStatusPolicy",
]
