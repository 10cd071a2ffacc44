import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from quicknote.exceptions import NoteStorageError
from quicknote.utils.note_names import is_valid_note_name

logger = logging.getLogger(__name__)

META_SUFFIX = ".meta"


def _content_path(base_dir: Path, note_name: str) -> Path:
    # names are validated by the router; keep the store strict anyway to avoid path issues
    if not is_valid_note_name(note_name):
        raise ValueError("Invalid note name")
    return base_dir / note_name


def _meta_path(base_dir: Path, note_name: str) -> Path:
    return _content_path(base_dir, note_name).with_name(note_name + META_SUFFIX)


@dataclass(frozen=True)
class NoteMetadata:
    has_password: bool = False
    password_hash: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"hasPassword": self.has_password}
        if self.has_password and self.password_hash:
            out["passwordHash"] = self.password_hash
        return out


@dataclass(frozen=True)
class CorruptMetadata:
    reason: str


MetadataParseResult = Union[NoteMetadata, CorruptMetadata]


def parse_metadata(raw: str) -> MetadataParseResult:
    try:
        data = json.loads(raw)
    except ValueError as exc:
        return CorruptMetadata(reason=f"invalid JSON: {exc}")
    if not isinstance(data, dict):
        return CorruptMetadata(reason="metadata is not an object")

    # Any truthy flag keeps the note locked. A missing or broken hash then
    # fails verification with InvalidHashRecord instead of unlocking the note.
    flag = data.get("hasPassword")
    has_password = bool(flag) or isinstance(flag, (list, dict))
    if not has_password:
        return NoteMetadata()

    password_hash = data.get("passwordHash")
    if not isinstance(password_hash, str) or not password_hash:
        password_hash = None
    return NoteMetadata(has_password=True, password_hash=password_hash)


class NotesStore:
    """Note content and metadata kept as plain files in one directory.

    ``<name>`` holds the text, ``<name>.meta`` the JSON metadata record.
    Writes overwrite in place; concurrent writers to the same note race and
    the last one wins.
    """

    def __init__(self, base_dir: Path):
        self.base_dir = base_dir

    def ensure_dir(self) -> None:
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise NoteStorageError("Could not create save directory", context={"path": str(self.base_dir)}) from exc

    def load_metadata(self, note_name: str) -> MetadataParseResult:
        path = _meta_path(self.base_dir, note_name)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return NoteMetadata()
        except UnicodeDecodeError:
            return CorruptMetadata(reason="metadata is not UTF-8")
        except OSError as exc:
            raise NoteStorageError("Could not read note metadata", context={"note": note_name}) from exc
        return parse_metadata(raw)

    def read_metadata(self, note_name: str) -> NoteMetadata:
        result = self.load_metadata(note_name)
        if isinstance(result, CorruptMetadata):
            logger.warning("Corrupt metadata for note %s, treating as unprotected: %s", note_name, result.reason)
            return NoteMetadata()
        return result

    def write_metadata(self, note_name: str, metadata: NoteMetadata) -> None:
        path = _meta_path(self.base_dir, note_name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(metadata.to_dict()), encoding="utf-8")
        except OSError as exc:
            raise NoteStorageError("Could not write note metadata", context={"note": note_name}) from exc

    def read_content(self, note_name: str) -> Optional[str]:
        path = _content_path(self.base_dir, note_name)
        try:
            # newline="" keeps \r\n exactly as the client sent it
            with path.open("r", encoding="utf-8", newline="") as f:
                return f.read()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise NoteStorageError("Could not read note content", context={"note": note_name}) from exc

    def write_content(self, note_name: str, text: str) -> None:
        path = _content_path(self.base_dir, note_name)
        try:
            if text:
                path.parent.mkdir(parents=True, exist_ok=True)
                with path.open("w", encoding="utf-8", newline="") as f:
                    f.write(text)
            else:
                # empty text means no note
                path.unlink(missing_ok=True)
        except OSError as exc:
            raise NoteStorageError("Could not save note content", context={"note": note_name}) from exc
