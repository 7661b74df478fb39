from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List
import threading


@dataclass
class LogLine:
    text: str
    at: datetime

    def render(self) -> str:
        return f"{self.at:%H:%M:%S} {self.text}"


class LogSink:
    """
    Thread-safe log buffer.
    - Controller, timer threads and the server output pump call .write()
    - UI drains with .drain()
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._lines: List[LogLine] = []

    def write(self, text: str) -> None:
        line = LogLine(text=str(text), at=datetime.now())
        with self._lock:
            self._lines.append(line)

    def drain(self, max_lines: int = 500) -> List[str]:
        with self._lock:
            if not self._lines:
                return []
            take = self._lines[:max_lines]
            self._lines = self._lines[max_lines:]
        return [l.render() for l in take]
