from __future__ import annotations

import re
import secrets

# no 0/1/6/8, no i/l/o/u/v
NOTE_NAME_ALPHABET = "234579abcdefghjkmnpqrstwxyz"
NOTE_NAME_LENGTH = 5
MAX_NOTE_NAME_LENGTH = 64

_NOTE_NAME_RE = re.compile(r"[A-Za-z0-9_-]+")


def generate_note_name() -> str:
    """Return a short random note name.

    Names are not checked against existing notes. With 27**5 (~14.3M)
    possible names a collision is rare, and it only means landing on a note
    someone else already started.
    """
    return "".join(secrets.choice(NOTE_NAME_ALPHABET) for _ in range(NOTE_NAME_LENGTH))


def is_valid_note_name(name: str | None) -> bool:
    if not name or len(name) > MAX_NOTE_NAME_LENGTH:
        return False
    return _NOTE_NAME_RE.fullmatch(name) is not None
