import os
from fastapi import FastAPI, HTTPException, Query
from dotenv import load_dotenv
from smartplate.services.models import (
    SelectImageRequest, SelectImageResponse, RecognizeResponse,
    HistoryResponse, DeleteResponse, ClearHistoryResponse, StatusResponse,
)
from smartplate.services.status_store import StatusStore
from smartplate.services.history_store import HistoryStore
from smartplate.orchestrator.state_machine import Controller
from smartplate.orchestrator import errors
from smartplate.adapters.storage.json_file import JsonFileStorage
from smartplate.adapters.storage.memory import MemoryStorage
from smartplate.adapters.recognition.mock_recognizer import MockRecognizer
from smartplate.web.view import PageView, build_view

load_dotenv(dotenv_path="smartplate/.env", override=False)

app = FastAPI(title="smartplate api")

status = StatusStore()


def build_recognizer(status_store):
    """
    Recognizer from RECOGNIZER_ADAPTER: gemini | claude | mock (default: gemini).
    A provider without an API key stays selected; every recognition then fails
    with the user-facing error until the key is configured.
    """
    adapter = os.getenv("RECOGNIZER_ADAPTER", "gemini").lower()

    if adapter == "mock":
        return MockRecognizer(status_store)

    if adapter == "claude":
        from smartplate.adapters.recognition.claude_recognizer import ClaudeRecognizer
        rec = ClaudeRecognizer(status_store)
    else:
        if adapter != "gemini":
            status_store.log(f"recognizer: unknown RECOGNIZER_ADAPTER={adapter!r}, using gemini")
        from smartplate.adapters.recognition.gemini_recognizer import GeminiRecognizer
        rec = GeminiRecognizer(status_store)

    if not rec._ready:
        status_store.log(f"recognizer: {type(rec).__name__} has no API key, recognitions will fail")
    return rec


def build_storage(status_store):
    """Storage from STORAGE_ADAPTER: json | memory (default: json)."""
    adapter = os.getenv("STORAGE_ADAPTER", "json").lower()
    if adapter == "memory":
        status_store.log("storage: memory (history is lost on restart)")
        return MemoryStorage()
    store = JsonFileStorage()
    status_store.log(f"storage: {store.path}")
    return store


recognizer = build_recognizer(status)
status.log(f"recognizer: {type(recognizer).__name__}")

storage = build_storage(status)

history = HistoryStore(storage, status)
history.load()

controller = Controller(recognizer=recognizer, history=history, status_store=status)


@app.get("/state", response_model=PageView)
def get_state():
    return build_view(controller.snapshot())


@app.post("/image", response_model=SelectImageResponse)
def select_image(req: SelectImageRequest):
    try:
        accepted = controller.select_image(req.image)
    except errors.InvalidImageError as e:
        raise HTTPException(status_code=422, detail=str(e))
    if not accepted:
        return SelectImageResponse(ok=False, error_code=errors.ERR_BUSY)
    return SelectImageResponse(ok=True)


@app.delete("/image", response_model=SelectImageResponse)
def clear_image():
    if not controller.clear_image():
        return SelectImageResponse(ok=False, error_code=errors.ERR_BUSY)
    return SelectImageResponse(ok=True)


@app.post("/recognize", response_model=RecognizeResponse)
def recognize():
    """Run one recognition on the current image. Blocks until the provider answers."""
    out = controller.recognize()
    return RecognizeResponse(
        ok=out.ok,
        duration_ms=out.duration_ms,
        error_code=out.error_code,
        error=out.error,
        result=out.result,
    )


@app.get("/history", response_model=HistoryResponse)
def get_history():
    return HistoryResponse(items=controller.history.records)


@app.delete("/history/{record_id}", response_model=DeleteResponse)
def delete_history_item(record_id: str):
    removed = controller.delete_history_item(record_id)
    return DeleteResponse(ok=True, removed=removed)


@app.delete("/history", response_model=ClearHistoryResponse)
def clear_history(confirm: bool = Query(False)):
    """Clear all history. The page asks the user first and sends confirm=true."""
    cleared = controller.clear_history(confirmed=confirm)
    return ClearHistoryResponse(ok=True, cleared=cleared)


@app.get("/status", response_model=StatusResponse)
def get_status():
    return StatusResponse(
        busy=controller.processing,
        recognizer=controller.recognizer.name,
        history_count=len(controller.history),
        logs=controller.status.logs,
    )


@app.get("/health")
def health():
    """Report which adapters are active."""
    return {
        "api": True,
        "recognizer": controller.recognizer.name,
        "storage": str(getattr(controller.history.storage, "path", "memory")),
        "all_ok": True,
    }
