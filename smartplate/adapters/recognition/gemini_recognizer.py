"""
Gemini plate recognizer.

Calls the Gemini REST `generateContent` endpoint with the image inline and a
response schema, so the model replies with a JSON object holding the seven
plate/vehicle fields.

Requires GEMINI_API_KEY (or API_KEY) in smartplate/.env or the environment.
"""
import os

import httpx

from smartplate.adapters.recognition.base import (
    FIELD_DESCRIPTIONS, PROMPT, REQUIRED_FIELDS, Recognizer, parse_payload,
)
from smartplate.orchestrator.contracts import RecognitionResult
from smartplate.orchestrator.errors import RecognitionError

GEMINI_API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-3-flash-preview")


def response_schema() -> dict:
    # Gemini's OpenAPI-subset schema uses upper-case type names
    return {
        "type": "OBJECT",
        "properties": {
            name: {"type": "STRING", "description": desc}
            for name, desc in FIELD_DESCRIPTIONS.items()
        },
        "required": list(REQUIRED_FIELDS),
    }


class GeminiRecognizer(Recognizer):
    name = "gemini"

    def __init__(self, status_store, api_key: str | None = None, model: str | None = None,
                 timeout: float | None = None, client: httpx.Client | None = None):
        self.status = status_store
        self._api_key = api_key if api_key is not None else (os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY"))
        self.model = model or GEMINI_MODEL
        self.timeout = timeout if timeout is not None else float(os.getenv("GEMINI_TIMEOUT", "60"))
        self._client = client
        self._ready = bool(self._api_key)
        if self._ready:
            self.status.log(f"gemini_recognizer: ready (model={self.model})")
        else:
            self.status.log("gemini_recognizer: GEMINI_API_KEY not set")

    def _build_payload(self, image_b64: str, mime_type: str) -> dict:
        return {
            "contents": [
                {
                    "parts": [
                        {"inline_data": {"mime_type": mime_type, "data": image_b64}},
                        {"text": PROMPT},
                    ],
                }
            ],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": response_schema(),
            },
        }

    def _post(self, url: str, payload: dict, headers: dict) -> httpx.Response:
        if self._client is not None:
            return self._client.post(url, json=payload, headers=headers, timeout=self.timeout)
        return httpx.post(url, json=payload, headers=headers, timeout=self.timeout)

    def recognize(self, image_b64: str, mime_type: str = "image/jpeg") -> RecognitionResult:
        if not self._ready:
            raise RecognitionError("gemini recognizer has no API key")

        url = GEMINI_API_URL.format(model=self.model)
        headers = {"x-goog-api-key": self._api_key, "Content-Type": "application/json"}
        try:
            resp = self._post(url, self._build_payload(image_b64, mime_type), headers)
        except httpx.HTTPError as e:
            self.status.log(f"gemini_recognizer: transport error: {e}")
            raise RecognitionError(f"transport error: {e}") from e

        if not resp.is_success:
            self.status.log(f"gemini_recognizer: HTTP {resp.status_code} — {resp.text[:300]}")
            raise RecognitionError(f"provider returned HTTP {resp.status_code}")

        text = self._extract_text(resp)
        self.status.log(f"gemini_recognizer: raw={text[:200]!r}")
        result = parse_payload(text)
        self.status.log(f"gemini_recognizer: → {result.plate_number} ({result.confidence_score})")
        return result

    @staticmethod
    def _extract_text(resp: httpx.Response) -> str:
        try:
            body = resp.json()
            parts = body["candidates"][0]["content"]["parts"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise RecognitionError("Failed to get response from AI") from e
        text = "".join(p.get("text", "") for p in parts if isinstance(p, dict))
        if not text:
            raise RecognitionError("Failed to get response from AI")
        return text
