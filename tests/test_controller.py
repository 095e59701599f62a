import threading

import pytest

from smartplate.adapters.recognition.mock_recognizer import MockRecognizer, SAMPLE
from smartplate.orchestrator import errors
from smartplate.orchestrator.contracts import RecognitionResult
from smartplate.orchestrator.state_machine import Controller, parse_data_url

from conftest import JPEG_URL, PNG_URL, make_record


class FailingRecognizer:
    name = "failing"

    def __init__(self, exc=None):
        self.exc = exc or errors.RecognitionError("empty payload")

    def recognize(self, image_b64, mime_type="image/jpeg"):
        raise self.exc


class RecordingRecognizer:
    name = "recording"

    def __init__(self):
        self.calls = []

    def recognize(self, image_b64, mime_type="image/jpeg"):
        self.calls.append((image_b64, mime_type))
        return RecognitionResult(**SAMPLE)


class BlockingRecognizer:
    name = "blocking"

    def __init__(self):
        self.started = threading.Event()
        self.release = threading.Event()

    def recognize(self, image_b64, mime_type="image/jpeg"):
        self.started.set()
        self.release.wait(timeout=5)
        return RecognitionResult(**SAMPLE)


def test_parse_data_url():
    payload = parse_data_url(PNG_URL)
    assert payload.mime_type == "image/png"
    assert payload.data == "iVBORw0KGgo="
    assert payload.data_url == PNG_URL


@pytest.mark.parametrize("bad", ["hello", "data:image/png,abc", "data:image/png;base64,", "http://x/y.png"])
def test_parse_data_url_rejects(bad):
    with pytest.raises(errors.InvalidImageError):
        parse_data_url(bad)


def test_initial_state(controller):
    s = controller.snapshot()
    assert (s.image, s.processing, s.result, s.error, s.history) == (None, False, None, None, [])


def test_recognize_without_image(controller):
    out = controller.recognize()
    assert not out.ok
    assert out.error_code == errors.ERR_NO_IMAGE


def test_successful_recognition_builds_record(controller):
    controller.select_image(JPEG_URL)
    out = controller.recognize()

    assert out.ok
    record = controller.result
    assert record is out.result
    assert record.plate_number == "ABC123"
    assert record.region == "CA"
    assert record.vehicle.model_dump() == {"make": "Toyota", "model": "Camry", "color": "Blue", "type": "Sedan"}
    assert record.confidence == "High"
    assert record.image_url == JPEG_URL
    assert controller.history.records[0] == record
    assert controller.error is None
    assert not controller.processing


def test_failed_recognition_sets_error(controller):
    controller.recognizer = FailingRecognizer()
    controller.select_image(JPEG_URL)
    out = controller.recognize()

    assert not out.ok
    assert out.error_code == errors.ERR_RECOGNITION
    assert controller.error == errors.RECOGNITION_FAILED_MESSAGE
    assert controller.result is None
    assert len(controller.history) == 0
    assert not controller.processing


def test_failed_retry_keeps_previous_result(controller):
    controller.select_image(JPEG_URL)
    controller.recognize()
    first = controller.result

    controller.recognizer = FailingRecognizer()
    controller.recognize()
    assert controller.result == first
    assert controller.error == errors.RECOGNITION_FAILED_MESSAGE
    assert len(controller.history) == 1


def test_unexpected_error_is_contained(controller):
    controller.recognizer = FailingRecognizer(ValueError("bug"))
    controller.select_image(JPEG_URL)
    out = controller.recognize()
    assert out.error_code == errors.ERR_UNKNOWN
    assert controller.error
    assert not controller.processing


def test_retry_clears_error(controller):
    controller.recognizer = FailingRecognizer()
    controller.select_image(JPEG_URL)
    controller.recognize()
    controller.recognizer = MockRecognizer(controller.status)
    assert controller.recognize().ok
    assert controller.error is None


def test_select_and_clear_image_reset_result_and_error(controller):
    controller.select_image(JPEG_URL)
    controller.recognize()
    controller.error = "stale"

    controller.select_image(PNG_URL)
    assert controller.image == PNG_URL
    assert controller.result is None and controller.error is None

    controller.recognize()
    controller.clear_image()
    assert controller.image is None
    assert controller.result is None and controller.error is None
    assert len(controller.history) == 2


def test_mime_type_forwarded(status, history):
    recognizer = RecordingRecognizer()
    c = Controller(recognizer=recognizer, history=history, status_store=status)
    c.select_image(PNG_URL)
    c.recognize()
    assert recognizer.calls == [("iVBORw0KGgo=", "image/png")]


def test_ids_are_time_derived_and_unique(status, history):
    c = Controller(recognizer=MockRecognizer(status), history=history, status_store=status,
                   clock=lambda: 1_700_000_000.0)
    c.select_image(JPEG_URL)
    first = c.recognize().result
    second = c.recognize().result
    assert first.id == "1700000000000"
    assert first.timestamp == 1_700_000_000_000
    assert second.id == "1700000000001"


def test_history_capped_newest_first(controller):
    controller.select_image(JPEG_URL)
    ids = [controller.recognize().result.id for _ in range(12)]
    records = controller.history.records
    assert len(records) == 10
    assert [r.id for r in records] == list(reversed(ids))[:10]


def test_second_recognition_rejected_while_in_flight(status, history):
    recognizer = BlockingRecognizer()
    c = Controller(recognizer=recognizer, history=history, status_store=status)
    c.select_image(JPEG_URL)

    outcomes = []
    worker = threading.Thread(target=lambda: outcomes.append(c.recognize()))
    worker.start()
    assert recognizer.started.wait(timeout=5)

    assert c.processing
    busy = c.recognize()
    assert busy.error_code == errors.ERR_BUSY
    assert c.select_image(PNG_URL) is False
    assert c.clear_image() is False

    recognizer.release.set()
    worker.join(timeout=5)

    assert outcomes[0].ok
    assert not c.processing
    assert len(c.history) == 1
    assert c.image == JPEG_URL


def test_delete_history_item(controller, history):
    history.prepend(make_record(1))
    history.prepend(make_record(2))
    assert controller.delete_history_item(make_record(1).id)
    assert not controller.delete_history_item("missing")
    assert [r.plate_number for r in history.records] == ["PLATE2"]


def test_clear_history_requires_confirmation(controller, history):
    history.prepend(make_record(1))
    assert controller.clear_history() is False
    assert len(history) == 1
    assert controller.clear_history(confirmed=True) is True
    assert len(history) == 0
