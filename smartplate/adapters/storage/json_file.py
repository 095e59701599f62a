"""
JSON file storage.

All keys live in one JSON object on disk. Writes go to a temp file next to
the target and are swapped in with os.replace; a per-instance lock keeps
read-modify-write cycles and the temp file to one writer at a time.
HISTORY_PATH env var (default smartplate/data/history.json) selects the file.
"""
import json
import os
import threading
from pathlib import Path

from smartplate.adapters.storage.base import KeyValueStorage
from smartplate.orchestrator.errors import PersistenceError

DEFAULT_PATH = Path(__file__).resolve().parent.parent.parent / "data" / "history.json"


class JsonFileStorage(KeyValueStorage):
    def __init__(self, path: str | Path | None = None):
        self.path = Path(path or os.getenv("HISTORY_PATH") or DEFAULT_PATH)
        self._lock = threading.Lock()

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise PersistenceError(f"cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceError(f"{self.path} does not hold a JSON object")
        return data

    def _write_all(self, data: dict[str, str]) -> None:
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as e:
            raise PersistenceError(f"cannot write {self.path}: {e}") from e

    def get_item(self, key: str) -> str | None:
        with self._lock:
            value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            try:
                data = self._read_all()
            except PersistenceError:
                # unreadable file gets overwritten, like a corrupt localStorage entry
                data = {}
            data[key] = value
            self._write_all(data)

    def remove_item(self, key: str) -> None:
        with self._lock:
            try:
                data = self._read_all()
            except PersistenceError:
                data = {}
            data.pop(key, None)
            if self.path.exists():
                self._write_all(data)
