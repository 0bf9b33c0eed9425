"""
FitTrack Backend — User Domain Types
======================================

What:  User value and the PasswordHash value type.
Why:   Passwords are hashed the moment they enter the system; only the
       bcrypt output is ever stored, logged or serialized.
How:   passlib's CryptContext with the bcrypt scheme. The cost factor is
       chosen per call (Settings.password_hash_rounds in production, the
       bcrypt minimum in tests).
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from passlib.context import CryptContext

DEFAULT_ROUNDS = 12

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
)


class PasswordHash:
    """
    An opaque bcrypt hash.

    set() replaces the hash from a plaintext; matches() compares a candidate
    plaintext against it. A wrong password is a normal negative result
    (False), not an error. The plaintext itself is never kept.
    """

    __slots__ = ("_hash",)

    def __init__(self, hashed: Optional[bytes] = None):
        self._hash = hashed

    @classmethod
    def from_plaintext(cls, plaintext: str, rounds: int = DEFAULT_ROUNDS) -> "PasswordHash":
        password = cls()
        password.set(plaintext, rounds=rounds)
        return password

    @property
    def hash(self) -> Optional[bytes]:
        return self._hash

    @property
    def is_set(self) -> bool:
        return self._hash is not None

    def set(self, plaintext: str, rounds: int = DEFAULT_ROUNDS) -> bytes:
        """
        Hash `plaintext` with bcrypt at the given cost and keep the result.

        Raises:
            ValueError: empty password, or longer than bcrypt's 72-byte limit
        """
        if not plaintext:
            raise ValueError("Password cannot be empty")
        if len(plaintext.encode("utf-8")) > 72:
            raise ValueError("Password cannot be longer than 72 bytes")
        hasher = pwd_context.handler("bcrypt").using(rounds=rounds)
        self._hash = hasher.hash(plaintext).encode("ascii")
        return self._hash

    def matches(self, plaintext: str) -> bool:
        """
        True when `plaintext` hashes to the stored value.

        Raises:
            ValueError: no hash has been set, or the stored hash is malformed
        """
        if self._hash is None:
            raise ValueError("No password hash has been set")
        return pwd_context.verify(plaintext, self._hash.decode("ascii"))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PasswordHash):
            return NotImplemented
        return self._hash == other._hash

    def __repr__(self) -> str:
        return "PasswordHash(<set>)" if self.is_set else "PasswordHash(<unset>)"


@dataclass
class User:
    """A registered user. id and timestamps are assigned by the store."""

    username: str
    email: str
    password_hash: PasswordHash = field(default_factory=PasswordHash)
    bio: str = ""
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
