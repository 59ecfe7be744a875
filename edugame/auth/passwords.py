# edugame/auth/passwords.py
import bcrypt
from flask import current_app, has_app_context

DEFAULT_ROUNDS = 10
# bcrypt only looks at the first 72 bytes; hashes written by older clients did the same
MAX_PASSWORD_BYTES = 72


def _rounds(rounds=None):
    if rounds is not None:
        return rounds
    if has_app_context():
        return current_app.config.get("BCRYPT_ROUNDS", DEFAULT_ROUNDS)
    return DEFAULT_ROUNDS


def _encode(plaintext: str) -> bytes:
    return plaintext.encode("utf-8")[:MAX_PASSWORD_BYTES]


def hash_password(plaintext: str, rounds: int | None = None) -> str:
    """Salted bcrypt hash; a fresh salt on every call."""
    if not plaintext:
        raise ValueError("password must not be empty")
    hashed = bcrypt.hashpw(_encode(plaintext), bcrypt.gensalt(rounds=_rounds(rounds)))
    return hashed.decode("utf-8")


def verify_password(plaintext: str, hashed: str) -> bool:
    """True when ``plaintext`` matches ``hashed``.

    Mismatches return False. A malformed hash raises ValueError.
    """
    if not hashed:
        raise ValueError("stored password hash is empty")
    return bcrypt.checkpw(_encode(plaintext or ""), hashed.encode("utf-8"))
