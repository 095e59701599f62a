import json

from pydantic import ValidationError

from smartplate.orchestrator.contracts import RecognitionResult
from smartplate.orchestrator.errors import RecognitionError

PROMPT = (
    "Please analyze this image of a vehicle and identify the license plate information.\n"
    "Extract the plate number clearly. Also identify the region/country if possible, "
    "and provide vehicle details (make, model, color, type).\n"
    "Return the data in a structured JSON format."
)

# field name -> hint for the model; the reply is not checked against the hints
FIELD_DESCRIPTIONS: dict[str, str] = {
    "plate_number": "The alphanumeric characters on the license plate.",
    "region": "The state, province, or country of the plate.",
    "vehicle_make": "Brand of the vehicle (e.g., Toyota, Tesla).",
    "vehicle_model": "Model of the vehicle (e.g., Camry, Model 3).",
    "vehicle_color": "Predominant color of the vehicle.",
    "vehicle_type": "Type of vehicle (e.g., Sedan, SUV, Truck).",
    "confidence_score": "Confidence level (High, Medium, Low).",
}

REQUIRED_FIELDS = list(FIELD_DESCRIPTIONS)


def json_schema() -> dict:
    """Standard JSON-schema form of the extraction schema."""
    return {
        "type": "object",
        "properties": {
            name: {"type": "string", "description": desc}
            for name, desc in FIELD_DESCRIPTIONS.items()
        },
        "required": list(REQUIRED_FIELDS),
    }


def parse_payload(payload) -> RecognitionResult:
    """Validate an untrusted reply (JSON text or already-decoded dict)."""
    if payload is None or (isinstance(payload, str) and not payload.strip()):
        raise RecognitionError("empty response from provider")
    if isinstance(payload, str):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as e:
            raise RecognitionError(f"response is not JSON: {e}") from e
    if not isinstance(payload, dict):
        raise RecognitionError(f"expected a JSON object, got {type(payload).__name__}")
    try:
        return RecognitionResult.model_validate(payload)
    except ValidationError as e:
        missing = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
        raise RecognitionError(f"response does not match schema: {missing}") from e


class Recognizer:
    name = "base"

    def recognize(self, image_b64: str, mime_type: str = "image/jpeg") -> RecognitionResult:
        """Return RecognitionResult for a base64 image; raise RecognitionError on failure."""
        raise NotImplementedError
