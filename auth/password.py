"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic salting and a
configurable work factor.  Stored verifiers are *layered*: the plaintext
is hashed once, then each bcrypt output is hashed again, ``layers``
passes in total.

Every pass uses the salt drawn for the first pass.  A chain where each
pass draws its own salt cannot be replayed from a candidate password,
so it could never verify a login.  The layer count is kept in front of
the bcrypt string::

    10$2b$12$<22-char salt><31-char hash>
"""

from __future__ import annotations

import bcrypt

# bcrypt ignores (or, in recent releases, rejects) input beyond 72 bytes.
MAX_PASSWORD_BYTES = 72

_BCRYPT_SALT_LENGTH = 29  # "$2b$12$" + 22 salt chars


def _chain(password: str, salt: bytes, passes: int) -> bytes:
    value = password.encode()
    for _ in range(passes):
        value = bcrypt.hashpw(value, salt)
    return value


def derive_verifier(password: str, *, rounds: int = 12, layers: int = 10) -> str:
    """Run ``layers`` bcrypt passes, each over the previous pass's output."""
    if layers < 1:
        raise ValueError("layers must be >= 1")
    salt = bcrypt.gensalt(rounds=rounds)
    return f"{layers}{_chain(password, salt, layers).decode()}"


def verify_password(password: str, verifier: str) -> bool:
    """
    Check a candidate password against a stored layered verifier.

    Replays the first ``layers - 1`` passes with the stored salt, then lets
    ``bcrypt.checkpw`` do the final pass and the constant-time comparison.
    Malformed verifiers never raise; they simply do not match.
    """
    try:
        layers_text, sep, bcrypt_hash = verifier.partition("$")
        layers = int(layers_text)
        if not sep or layers < 1:
            return False
        final_hash = ("$" + bcrypt_hash).encode()
        salt = final_hash[:_BCRYPT_SALT_LENGTH]
        candidate = _chain(password, salt, layers - 1)
        return bcrypt.checkpw(candidate, final_hash)
    except (ValueError, TypeError):
        return False
