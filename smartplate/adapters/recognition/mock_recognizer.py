from smartplate.adapters.recognition.base import Recognizer
from smartplate.orchestrator.contracts import RecognitionResult

SAMPLE = {
    "plate_number": "ABC123",
    "region": "CA",
    "vehicle_make": "Toyota",
    "vehicle_model": "Camry",
    "vehicle_color": "Blue",
    "vehicle_type": "Sedan",
    "confidence_score": "High",
}


class MockRecognizer(Recognizer):
    name = "mock"

    def __init__(self, status_store, reply: dict | None = None):
        self.status = status_store
        self.reply = dict(reply or SAMPLE)

    def recognize(self, image_b64: str, mime_type: str = "image/jpeg") -> RecognitionResult:
        # Mock: ignore the image, return the canned reply
        self.status.log(f"mock_recognizer: {self.reply['plate_number']}")
        return RecognitionResult(**self.reply)
