import threading
import time
from dataclasses import dataclass
from typing import Optional

from smartplate.orchestrator.contracts import ImagePayload, RecognizeOutcome, ScanRecord
from smartplate.orchestrator import errors

DEFAULT_MIME = "image/jpeg"


def parse_data_url(data_url: str) -> ImagePayload:
    """Split "data:<mime>;base64,<data>" into its parts."""
    header, sep, data = data_url.partition(",")
    if not sep or not header.startswith("data:") or not data:
        raise errors.InvalidImageError("image must be a base64 data URL")
    meta = header[len("data:"):].split(";")
    if "base64" not in meta[1:]:
        raise errors.InvalidImageError("image data URL must be base64 encoded")
    mime = meta[0] or DEFAULT_MIME
    return ImagePayload(data_url=data_url, mime_type=mime, data=data)


@dataclass
class ControllerState:
    image: Optional[str]
    processing: bool
    result: Optional[ScanRecord]
    error: Optional[str]
    history: list[ScanRecord]


class Controller:
    """
    Page state machine: current image, in-flight flag, last result, last error.

    Only one recognition runs at a time; the busy check-and-set is locked
    because web handlers run on a thread pool.
    """

    def __init__(self, recognizer, history, status_store, clock=time.time):
        self.recognizer = recognizer
        self.history = history
        self.status = status_store
        self._clock = clock
        self._lock = threading.Lock()
        self._image: Optional[ImagePayload] = None
        self.result: Optional[ScanRecord] = None
        self.error: Optional[str] = None

    @property
    def processing(self) -> bool:
        return self.status.busy

    @property
    def image(self) -> Optional[str]:
        return self._image.data_url if self._image else None

    def snapshot(self) -> ControllerState:
        return ControllerState(
            image=self.image,
            processing=self.processing,
            result=self.result,
            error=self.error,
            history=self.history.records,
        )

    def select_image(self, data_url: str) -> bool:
        payload = parse_data_url(data_url)
        with self._lock:
            if self.status.busy:
                self.status.log("controller: select_image rejected: busy")
                return False
            self._image = payload
            self.result = None
            self.error = None
        self.status.log(f"controller: image selected ({payload.mime_type}, {len(payload.data)} b64 chars)")
        return True

    def clear_image(self) -> bool:
        with self._lock:
            if self.status.busy:
                self.status.log("controller: clear_image rejected: busy")
                return False
            self._image = None
            self.result = None
            self.error = None
        self.status.log("controller: image cleared")
        return True

    def recognize(self) -> RecognizeOutcome:
        with self._lock:
            if self.status.busy:
                self.status.log("controller: recognize rejected: busy")
                return RecognizeOutcome(ok=False, duration_ms=0, error_code=errors.ERR_BUSY)
            if self._image is None:
                return RecognizeOutcome(ok=False, duration_ms=0, error_code=errors.ERR_NO_IMAGE)
            self.status.set_busy(True)
            self.error = None
            image = self._image

        t0 = time.time()
        try:
            self.status.log(f"controller: recognize start via {self.recognizer.name}")
            data = self.recognizer.recognize(image.data, image.mime_type)

            now_ms = int(self._clock() * 1000)
            record = ScanRecord.from_recognition(
                record_id=self._new_id(now_ms),
                timestamp=now_ms,
                image_url=image.data_url,
                data=data,
            )
            self.result = record
            self.history.prepend(record)

            dt = int((time.time() - t0) * 1000)
            self.status.log(f"controller: recognized {record.plate_number} dt={dt}ms")
            return RecognizeOutcome(ok=True, duration_ms=dt, result=record)

        except errors.RecognitionError as e:
            dt = int((time.time() - t0) * 1000)
            self.status.log(f"controller: recognition failed: {e}")
            self.error = errors.RECOGNITION_FAILED_MESSAGE
            return RecognizeOutcome(ok=False, duration_ms=dt, error_code=errors.ERR_RECOGNITION,
                                    error=self.error)
        except Exception as e:
            dt = int((time.time() - t0) * 1000)
            self.status.log(f"controller: error {type(e).__name__}: {e}")
            self.error = errors.RECOGNITION_FAILED_MESSAGE
            return RecognizeOutcome(ok=False, duration_ms=dt, error_code=errors.ERR_UNKNOWN,
                                    error=self.error)
        finally:
            self.status.set_busy(False)

    def delete_history_item(self, record_id: str) -> bool:
        removed = self.history.remove(record_id)
        self.status.log(f"controller: delete {record_id} removed={removed}")
        return removed

    def clear_history(self, confirmed: bool = False) -> bool:
        if not confirmed:
            self.status.log("controller: clear_history needs confirmation")
            return False
        self.history.clear()
        self.status.log("controller: history cleared")
        return True

    def _new_id(self, now_ms: int) -> str:
        # time-derived; bumped past any id already in history
        candidate = now_ms
        while self.history.contains(str(candidate)):
            candidate += 1
        return str(candidate)
