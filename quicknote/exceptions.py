"""Application exceptions.

QuicknoteError (base)
├── NoteStorageError   → 500, filesystem read/write/delete failed
├── InvalidHashRecord  → 500, stored ``salt$hash`` record is malformed
├── InvalidRequestBody → 400, POST body is not a usable JSON or form payload
└── PasswordHashError  → 500, entropy source or PBKDF2 failed

``message`` is safe to log; ``context`` carries debug details (note name,
path) that are logged but never returned to the client.
"""
from __future__ import annotations

from typing import Any, Optional


class QuicknoteError(Exception):
    def __init__(self, message: str = "Unexpected error", context: Optional[dict[str, Any]] = None):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class NoteStorageError(QuicknoteError):
    def __init__(self, message: str = "Note storage operation failed", context: Optional[dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class InvalidHashRecord(QuicknoteError):
    def __init__(self, message: str = "Malformed password hash record", context: Optional[dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class InvalidRequestBody(QuicknoteError):
    def __init__(self, message: str = "invalid request body", context: Optional[dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class PasswordHashError(QuicknoteError):
    def __init__(self, message: str = "Password hashing failed", context: Optional[dict[str, Any]] = None):
        super().__init__(message=message, context=context)
