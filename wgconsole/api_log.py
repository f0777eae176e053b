"""Request log kept for every proxied router call.

Each call records exactly one :class:`ApiLogEntry`; the book keeps the most
recent entries in memory for the console's log panel and mirrors every entry
to the ``wgconsole.api`` logger.
"""
import logging
import threading
from collections import deque
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Deque, Dict, List, Optional

logger = logging.getLogger("wgconsole.api")


@dataclass
class ApiLogEntry:
    method: str
    path: str
    duration_ms: int
    status: Optional[int] = None
    request_headers: Dict[str, str] = field(default_factory=dict)
    response_headers: Dict[str, str] = field(default_factory=dict)
    response_body: Optional[str] = None
    error: Optional[str] = None
    ts: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        data = asdict(self)
        data["ts"] = self.ts.isoformat()
        return data


class ApiLogBook:
    def __init__(self, capacity: int = 200):
        self._entries: Deque[ApiLogEntry] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def add(self, entry: ApiLogEntry) -> None:
        with self._lock:
            self._entries.append(entry)
        extra = {
            "method": entry.method,
            "path": entry.path,
            "status": entry.status,
            "duration_ms": entry.duration_ms,
        }
        if entry.error:
            extra["error"] = entry.error
            logger.warning("%s %s failed: %s", entry.method, entry.path, entry.error, extra=extra)
        else:
            logger.info("%s %s -> %s", entry.method, entry.path, entry.status, extra=extra)

    def entries(self) -> List[ApiLogEntry]:
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
