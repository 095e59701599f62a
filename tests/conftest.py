import os
import tempfile

# api.py builds its adapters at import time; keep it offline and off the real history file
os.environ.setdefault("RECOGNIZER_ADAPTER", "mock")
os.environ.setdefault("HISTORY_PATH", os.path.join(tempfile.mkdtemp(prefix="smartplate-"), "history.json"))

import pytest
from fastapi.testclient import TestClient

from smartplate.adapters.recognition.mock_recognizer import MockRecognizer, SAMPLE
from smartplate.adapters.storage.memory import MemoryStorage
from smartplate.orchestrator.contracts import RecognitionResult, ScanRecord
from smartplate.orchestrator.state_machine import Controller
from smartplate.services.history_store import HistoryStore
from smartplate.services.status_store import StatusStore

JPEG_URL = "data:image/jpeg;base64,/9j/4AAQSkZJRg=="
PNG_URL = "data:image/png;base64,iVBORw0KGgo="


def make_record(n: int, **overrides) -> ScanRecord:
    data = RecognitionResult(**{**SAMPLE, "plate_number": f"PLATE{n}"})
    record = ScanRecord.from_recognition(
        record_id=str(1_700_000_000_000 + n),
        timestamp=1_700_000_000_000 + n,
        image_url=JPEG_URL,
        data=data,
    )
    return record.model_copy(update=overrides) if overrides else record


@pytest.fixture
def status():
    return StatusStore()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def history(storage, status):
    store = HistoryStore(storage, status)
    store.load()
    return store


@pytest.fixture
def controller(status, history):
    return Controller(recognizer=MockRecognizer(status), history=history, status_store=status)


@pytest.fixture
def client(monkeypatch, controller):
    from smartplate.services import api
    monkeypatch.setattr(api, "controller", controller)
    return TestClient(api.app)
