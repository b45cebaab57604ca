from typing import Any

from passlib.context import CryptContext

class PasswordHasher:
    """Credential verifier backed by passlib (argon2).

    Extra keyword options go straight to ``CryptContext``, e.g.
    ``argon2__rounds=1`` for cheap hashes in tests.
    """

    def __init__(self, schemes: list[str] | None = None, **options: Any):
        self._ctx = CryptContext(schemes=schemes or ["argon2"], deprecated="auto", **options)

    def hash(self, plaintext: str) -> str:
        return self._ctx.hash(plaintext)

    def verify(self, plaintext: str, hashed: str) -> bool:
        return self._ctx.verify(plaintext, hashed)
