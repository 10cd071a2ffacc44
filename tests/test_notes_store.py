import json

import pytest

from quicknote.exceptions import NoteStorageError
from quicknote.storage.notes_store import (
    CorruptMetadata,
    NoteMetadata,
    parse_metadata,
)


def test_missing_metadata_defaults_to_unprotected(store):
    assert store.load_metadata("abcde") == NoteMetadata(has_password=False)
    assert store.read_metadata("abcde").has_password is False


def test_metadata_round_trip_uses_meta_file(store, tmp_path):
    store.write_metadata("abcde", NoteMetadata(has_password=True, password_hash="salt$hash"))
    raw = json.loads((tmp_path / "abcde.meta").read_text(encoding="utf-8"))
    assert raw == {"hasPassword": True, "passwordHash": "salt$hash"}
    assert store.read_metadata("abcde") == NoteMetadata(True, "salt$hash")


def test_cleared_password_drops_hash(store, tmp_path):
    store.write_metadata("abcde", NoteMetadata(has_password=True, password_hash="salt$hash"))
    store.write_metadata("abcde", NoteMetadata(has_password=False))
    raw = json.loads((tmp_path / "abcde.meta").read_text(encoding="utf-8"))
    assert raw == {"hasPassword": False}


@pytest.mark.parametrize("raw", ["{not json", "[]", '"text"', ""])
def test_corrupt_metadata_is_reported(raw):
    assert isinstance(parse_metadata(raw), CorruptMetadata)


@pytest.mark.parametrize(
    "raw, expected_hash",
    [
        ('{"hasPassword": true}', None),
        ('{"hasPassword": true, "passwordHash": ""}', None),
        ('{"hasPassword": "yes", "passwordHash": "salt$hash"}', "salt$hash"),
        ('{"hasPassword": 1, "passwordHash": 5}', None),
    ],
)
def test_truthy_flag_keeps_note_locked(raw, expected_hash):
    assert parse_metadata(raw) == NoteMetadata(has_password=True, password_hash=expected_hash)


@pytest.mark.parametrize("raw", ["{}", '{"hasPassword": false}', '{"hasPassword": 0}', '{"hasPassword": ""}'])
def test_falsy_flag_reads_as_unprotected(raw):
    assert parse_metadata(raw) == NoteMetadata()


def test_legacy_cleared_record_parses():
    # older records keep an empty hash after the password is cleared
    assert parse_metadata('{"hasPassword": false, "passwordHash": ""}') == NoteMetadata(False, None)


def test_corrupt_metadata_reads_as_unprotected(store, tmp_path, caplog):
    (tmp_path / "abcde.meta").write_text("{broken", encoding="utf-8")
    assert isinstance(store.load_metadata("abcde"), CorruptMetadata)
    with caplog.at_level("WARNING"):
        assert store.read_metadata("abcde") == NoteMetadata()
    assert "Corrupt metadata" in caplog.text


def test_content_round_trip(store, tmp_path):
    assert store.read_content("abcde") is None
    store.write_content("abcde", "hello\r\nworld")
    assert (tmp_path / "abcde").exists()
    assert store.read_content("abcde") == "hello\r\nworld"


def test_empty_content_deletes_file(store, tmp_path):
    store.write_content("abcde", "hello")
    store.write_content("abcde", "")
    assert not (tmp_path / "abcde").exists()
    assert store.read_content("abcde") is None
    # deleting again is fine
    store.write_content("abcde", "")


def test_content_and_metadata_are_independent(store):
    store.write_metadata("abcde", NoteMetadata(True, "salt$hash"))
    assert store.read_content("abcde") is None
    store.write_content("abcde", "text")
    store.write_content("abcde", "")
    assert store.read_metadata("abcde").has_password is True


def test_unsafe_names_rejected(store):
    with pytest.raises(ValueError):
        store.read_content("../etc/passwd")


def test_io_failure_becomes_storage_error(store, tmp_path):
    # a directory where the content file should be
    (tmp_path / "abcde").mkdir()
    with pytest.raises(NoteStorageError):
        store.read_content("abcde")
    with pytest.raises(NoteStorageError):
        store.write_content("abcde", "hello")


def test_ensure_dir_creates_save_dir(tmp_path):
    from quicknote.storage.notes_store import NotesStore

    s = NotesStore(tmp_path / "nested" / "save")
    s.ensure_dir()
    assert (tmp_path / "nested" / "save").is_dir()
