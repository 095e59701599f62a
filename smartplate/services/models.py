from pydantic import BaseModel, Field
from typing import Optional

from smartplate.orchestrator.contracts import ScanRecord


class SelectImageRequest(BaseModel):
    image: str = Field(min_length=1)  # data URL: "data:image/jpeg;base64,..."


class SelectImageResponse(BaseModel):
    ok: bool
    error_code: Optional[str] = None


class RecognizeResponse(BaseModel):
    ok: bool
    duration_ms: int
    error_code: Optional[str] = None
    error: Optional[str] = None
    result: Optional[ScanRecord] = None


class HistoryResponse(BaseModel):
    items: list[ScanRecord]


class DeleteResponse(BaseModel):
    ok: bool
    removed: bool


class ClearHistoryResponse(BaseModel):
    ok: bool
    cleared: bool


class StatusResponse(BaseModel):
    busy: bool
    recognizer: str
    history_count: int
    logs: list[str]
