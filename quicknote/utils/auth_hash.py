"""Password hashing for note protection.

Records are stored as ``salt$hash``:

- salt: 16 random bytes, hex-encoded, truncated to 20 characters
- hash: PBKDF2-HMAC-SHA512 of the password with the salt string,
  10,000 rounds, 512-byte key, hex-encoded

The format is fixed so that ``.meta`` files written by earlier deployments
keep verifying. PBKDF2 comes from passlib's digest helpers.
"""
from __future__ import annotations

import hmac
import secrets

from passlib.crypto.digest import pbkdf2_hmac

from quicknote.exceptions import InvalidHashRecord, PasswordHashError

PBKDF2_DIGEST = "sha512"
PBKDF2_ROUNDS = 10_000
PBKDF2_KEYLEN = 512
SALT_BYTES = 16
SALT_LENGTH = 20
RECORD_SEPARATOR = "$"


def _derive(password: str, salt: str) -> str:
    try:
        key = pbkdf2_hmac(PBKDF2_DIGEST, password.encode("utf-8"), salt.encode("utf-8"), PBKDF2_ROUNDS, PBKDF2_KEYLEN)
    except (ValueError, TypeError) as exc:
        # includes UnicodeEncodeError for lone surrogates in JSON input
        raise PasswordHashError(context={"reason": type(exc).__name__}) from exc
    return key.hex()


def _new_salt() -> str:
    try:
        return secrets.token_hex(SALT_BYTES)[:SALT_LENGTH]
    except (OSError, NotImplementedError) as exc:
        raise PasswordHashError("No entropy source for salt", context={"reason": type(exc).__name__}) from exc


def split_hash_record(record: str) -> tuple[str, str]:
    """Split a stored record into ``(salt, hash_hex)``.

    Raises InvalidHashRecord if the separator is missing or either part is empty.
    """
    if not isinstance(record, str) or RECORD_SEPARATOR not in record:
        raise InvalidHashRecord(context={"reason": "missing separator"})
    salt, expected = record.split(RECORD_SEPARATOR, 1)
    if not salt or not expected:
        raise InvalidHashRecord(context={"reason": "empty salt or hash"})
    return salt, expected


def hash_password(plain: str) -> str:
    """Hash a plaintext password and return the ``salt$hash`` record."""
    if plain is None:
        raise ValueError("Password must not be None")
    salt = _new_salt()
    return f"{salt}{RECORD_SEPARATOR}{_derive(plain, salt)}"


def verify_password(plain: str, record: str) -> bool:
    """Verify a plaintext password against a stored ``salt$hash`` record.

    Returns True if the password matches, False otherwise. A malformed record
    raises InvalidHashRecord rather than reading as a mismatch.
    """
    salt, expected = split_hash_record(record)
    if plain is None:
        return False
    # constant-time compare
    return hmac.compare_digest(_derive(plain, salt), expected)
