"""Salted scrypt password hashes, stored as `salt:key` in hex."""

import hashlib
import hmac
import secrets

SALT_LENGTH = 16
KEY_LENGTH = 64

# scrypt cost parameters (N, r, p); these match hashes created by earlier
# deployments of the platform, so they must not change without a migration.
SCRYPT_N = 16384
SCRYPT_R = 8
SCRYPT_P = 1


def _derive_key(password: str, salt: str) -> bytes:
    return hashlib.scrypt(
        password.encode(),
        salt=salt.encode(),
        n=SCRYPT_N,
        r=SCRYPT_R,
        p=SCRYPT_P,
        dklen=KEY_LENGTH,
    )


def hash_password(password: str) -> str:
    """Hash a password with a fresh random salt."""
    salt = secrets.token_hex(SALT_LENGTH)
    return f"{salt}:{_derive_key(password, salt).hex()}"


def verify_password(password: str, password_hash: str | None) -> bool:
    """Check a password against a stored hash in constant time.

    Missing or malformed hashes (e.g. users who sign in through an external
    identity provider) never verify.
    """
    if not password_hash:
        return False
    salt, _, key = password_hash.partition(":")
    if not salt or not key:
        return False
    try:
        expected = bytes.fromhex(key)
    except ValueError:
        return False
    return hmac.compare_digest(_derive_key(password, salt), expected)
