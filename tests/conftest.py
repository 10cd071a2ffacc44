import pytest
from fastapi.testclient import TestClient

from quicknote.main import create_app
from quicknote.storage.notes_store import NotesStore


@pytest.fixture()
def store(tmp_path):
    # isolate save dir per test
    return NotesStore(tmp_path)


@pytest.fixture()
def client(tmp_path):
    return TestClient(create_app(tmp_path))
