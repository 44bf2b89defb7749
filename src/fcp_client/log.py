"""Append-only textual log of client activity."""

from __future__ import annotations

import json
import threading
from typing import Any


def _render(value: Any) -> str:
    def default(obj: Any) -> Any:
        if isinstance(obj, (bytes, bytearray, memoryview)):
            return "[BUF]"
        return str(obj)

    if isinstance(value, (bytes, bytearray, memoryview)):
        return json.dumps("[BUF]")
    return json.dumps(value, default=default)


class EventLog:
    """Append-only list of log lines.

    Each line is the JSON rendering of the logged values joined by spaces;
    byte buffers are rendered as ``[BUF]``. Safe to append from several
    threads; ordering across concurrent calls is not meaningful.
    """

    def __init__(self) -> None:
        self._entries: list[str] = []
        self._lock = threading.Lock()

    def append(self, *values: Any) -> str:
        line = " ".join(_render(v) for v in values)
        with self._lock:
            self._entries.append(line)
        return line

    @property
    def entries(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
