"""
In-process status: the recognition busy flag and the component log lines
(recognizer, history_store, controller) served by GET /status.
"""
from dataclasses import dataclass, field
from typing import List


@dataclass
class StatusStore:
    busy: bool = False
    logs: List[str] = field(default_factory=list)

    def set_busy(self, v: bool):
        self.busy = v

    def log(self, msg: str):
        self.logs.append(msg)
        if len(self.logs) > 200:
            self.logs = self.logs[-200:]
