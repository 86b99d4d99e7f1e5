"""Password hashing for app_user.password_hash.

The password is SHA-256 digested and base64 encoded before bcrypt, which
only reads the first 72 bytes of its input.
"""

import base64
import hashlib

import bcrypt

_ENCODING = "utf-8"


def _bcrypt_input(password: str) -> bytes:
    digest = hashlib.sha256(password.encode(_ENCODING)).digest()
    return base64.b64encode(digest)


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(_bcrypt_input(password), bcrypt.gensalt()).decode(_ENCODING)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """False for a mismatch, a missing hash or a hash bcrypt cannot parse."""
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(_bcrypt_input(plain_password), hashed_password.encode(_ENCODING))
    except (ValueError, TypeError):
        return False
