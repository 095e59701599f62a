"""
Page view model.

Everything the page shows is derived here from a controller snapshot; the
browser script only paints it and posts user intents back.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from smartplate.orchestrator.state_machine import ControllerState

RECOGNIZE_LABEL = "Recognize License Plate"
BUSY_LABEL = "Analyzing Image..."
CLEAR_CONFIRM = "Are you sure you want to clear all history?"


class DetailItem(BaseModel):
    label: str
    value: str


class ResultPanel(BaseModel):
    plate_number: str
    region: str
    confidence_badge: str
    details: list[DetailItem]


class HistoryItem(BaseModel):
    id: str
    thumbnail: str
    date: str
    plate_number: str
    summary: str


class PageView(BaseModel):
    show_upload: bool
    preview: Optional[str] = None
    recognize_label: str = RECOGNIZE_LABEL
    recognize_disabled: bool = False
    busy: bool = False
    error: Optional[str] = None
    result: Optional[ResultPanel] = None
    history: list[HistoryItem] = []
    show_history: bool = False
    clear_confirm: str = CLEAR_CONFIRM


def format_date(timestamp_ms: int) -> str:
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%m/%d/%Y")


def build_view(state: ControllerState) -> PageView:
    result = None
    if state.result is not None:
        r = state.result
        result = ResultPanel(
            plate_number=r.plate_number,
            region=r.region,
            confidence_badge=f"{r.confidence} Confidence",
            details=[
                DetailItem(label="Make", value=r.vehicle.make),
                DetailItem(label="Model", value=r.vehicle.model),
                DetailItem(label="Color", value=r.vehicle.color),
                DetailItem(label="Type", value=r.vehicle.type),
            ],
        )

    history = [
        HistoryItem(
            id=item.id,
            thumbnail=item.image_url,
            date=format_date(item.timestamp),
            plate_number=item.plate_number,
            summary=f"{item.vehicle.make} {item.vehicle.model}",
        )
        for item in state.history
    ]

    return PageView(
        show_upload=state.image is None,
        preview=state.image,
        recognize_label=BUSY_LABEL if state.processing else RECOGNIZE_LABEL,
        recognize_disabled=state.processing,
        busy=state.processing,
        error=state.error,
        result=result,
        history=history,
        show_history=bool(history),
    )
