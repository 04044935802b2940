"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic
salting and configurable work factor.  bcrypt is CPU-bound, so the
``*_async`` variants run it in a worker thread to keep the event loop free.
"""

from __future__ import annotations

import asyncio

import bcrypt

DEFAULT_ROUNDS = 10

# bcrypt only consumes the first 72 bytes; newer releases reject longer input.
_MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode()[:_MAX_PASSWORD_BYTES]


class PasswordHasher:
    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a password with bcrypt (auto-salted, output differs per call)."""
        return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=self.rounds)).decode()

    def verify(self, password: str, password_hash: str) -> bool:
        """Constant-time comparison against a bcrypt hash."""
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode())
        except (ValueError, TypeError, AttributeError):
            return False

    async def hash_async(self, password: str) -> str:
        return await asyncio.to_thread(self.hash, password)

    async def verify_async(self, password: str, password_hash: str) -> bool:
        return await asyncio.to_thread(self.verify, password, password_hash)
