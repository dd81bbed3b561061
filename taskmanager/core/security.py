"""
Password hashing with bcrypt.

Hashing is CPU-bound, so both operations run in the thread pool and the
event loop keeps serving other requests meanwhile.
"""

import bcrypt
from fastapi.concurrency import run_in_threadpool

# bcrypt only looks at the first 72 bytes of a password.
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class PasswordHasher:
    """Salted, slow password hashing."""

    def __init__(self, rounds: int = 10):
        self.rounds = rounds
        # Used when the account does not exist so login takes the same time.
        self._dummy_hash = bcrypt.hashpw(b"dummy-password", bcrypt.gensalt(rounds)).decode()

    def hash_sync(self, password: str) -> str:
        return bcrypt.hashpw(_encode(password), bcrypt.gensalt(self.rounds)).decode("utf-8")

    def verify_sync(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
        except ValueError:
            # Stored value is not a bcrypt hash.
            return False

    async def hash(self, password: str) -> str:
        """Hash a password for storage."""
        return await run_in_threadpool(self.hash_sync, password)

    async def verify(self, password: str, password_hash: str) -> bool:
        """Check a password against a stored hash."""
        return await run_in_threadpool(self.verify_sync, password, password_hash)

    async def verify_dummy(self, password: str) -> bool:
        """Spend the same effort as a real check; always False."""
        await run_in_threadpool(self.verify_sync, password, self._dummy_hash)
        return False
