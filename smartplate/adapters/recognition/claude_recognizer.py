"""
Claude plate recognizer.

Sends the image to Claude via the Anthropic API and forces a single tool
call whose input schema is the plate/vehicle schema; the tool input is the
structured reply.

Requires ANTHROPIC_API_KEY in environment (smartplate/.env or system env).
"""
import os

from smartplate.adapters.recognition.base import PROMPT, Recognizer, json_schema, parse_payload
from smartplate.orchestrator.contracts import RecognitionResult
from smartplate.orchestrator.errors import RecognitionError

CLAUDE_MODEL = os.getenv("CLAUDE_MODEL", "claude-haiku-4-5-20251001")
TOOL_NAME = "report_plate"


class ClaudeRecognizer(Recognizer):
    name = "claude"

    def __init__(self, status_store, client=None, model: str | None = None):
        self.status = status_store
        self.model = model or CLAUDE_MODEL
        self._client = client
        self._ready = client is not None
        if client is None:
            self._init_client()

    def _init_client(self):
        api_key = os.getenv("ANTHROPIC_API_KEY")
        if not api_key:
            self.status.log("claude_recognizer: ANTHROPIC_API_KEY not set")
            return
        import anthropic
        self._client = anthropic.Anthropic(api_key=api_key)
        self._ready = True
        self.status.log(f"claude_recognizer: ready ({self.model})")

    def recognize(self, image_b64: str, mime_type: str = "image/jpeg") -> RecognitionResult:
        if not self._ready or self._client is None:
            raise RecognitionError("claude recognizer has no API key")

        try:
            message = self._client.messages.create(
                model=self.model,
                max_tokens=512,
                tools=[{
                    "name": TOOL_NAME,
                    "description": "Report the license plate and vehicle details found in the image.",
                    "input_schema": json_schema(),
                }],
                tool_choice={"type": "tool", "name": TOOL_NAME},
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {
                                "type": "image",
                                "source": {
                                    "type": "base64",
                                    "media_type": mime_type,
                                    "data": image_b64,
                                },
                            },
                            {"type": "text", "text": PROMPT},
                        ],
                    }
                ],
            )
        except Exception as e:
            self.status.log(f"claude_recognizer: API error: {e}")
            raise RecognitionError(f"API error: {e}") from e

        payload = None
        for block in message.content:
            if getattr(block, "type", None) == "tool_use" and block.name == TOOL_NAME:
                payload = block.input
                break
        if payload is None:
            self.status.log("claude_recognizer: no tool_use block in response")
            raise RecognitionError("Failed to get response from AI")

        result = parse_payload(payload)
        self.status.log(f"claude_recognizer: → {result.plate_number} ({result.confidence_score})")
        return result
