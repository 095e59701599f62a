from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class RecognitionResult(BaseModel):
    """Raw provider reply. Every field is required; confidence is free text."""
    model_config = ConfigDict(frozen=True)

    plate_number: StrictStr
    region: StrictStr
    vehicle_make: StrictStr
    vehicle_model: StrictStr
    vehicle_color: StrictStr
    vehicle_type: StrictStr
    confidence_score: StrictStr


class VehicleDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    make: str
    model: str
    color: str
    type: str


class ScanRecord(BaseModel):
    # persisted with the camelCase keys the page reads
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    timestamp: int                      # epoch milliseconds
    image_url: str = Field(alias="imageUrl")
    plate_number: str = Field(alias="plateNumber")
    region: str
    vehicle: VehicleDetails
    confidence: str

    @classmethod
    def from_recognition(cls, record_id: str, timestamp: int, image_url: str,
                         data: RecognitionResult) -> "ScanRecord":
        return cls(
            id=record_id,
            timestamp=timestamp,
            image_url=image_url,
            plate_number=data.plate_number,
            region=data.region,
            vehicle=VehicleDetails(
                make=data.vehicle_make,
                model=data.vehicle_model,
                color=data.vehicle_color,
                type=data.vehicle_type,
            ),
            confidence=data.confidence_score,
        )


@dataclass
class ImagePayload:
    data_url: str       # full "data:<mime>;base64,<data>" string, kept for the record
    mime_type: str
    data: str           # base64 part only, sent to the provider


@dataclass
class RecognizeOutcome:
    ok: bool
    duration_ms: int
    error_code: Optional[str] = None
    error: Optional[str] = None
    result: Optional[ScanRecord] = None
