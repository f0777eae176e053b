import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Deque, List

logger = logging.getLogger("wgconsole.notify")


@dataclass
class Notification:
    title: str
    description: str = ""
    variant: str = "default"  # default | destructive
    ts: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_error(self) -> bool:
        return self.variant == "destructive"


class Notifier:
    """Operator-facing toasts raised by controller actions."""

    def __init__(self, capacity: int = 100):
        self._items: Deque[Notification] = deque(maxlen=capacity)
        self._total = 0
        self._lock = threading.Lock()

    def notify(self, title: str, description: str = "", variant: str = "default") -> Notification:
        note = Notification(title=title, description=description, variant=variant)
        with self._lock:
            self._items.append(note)
            self._total += 1
        extra = {"title": title, "variant": variant}
        if note.is_error:
            logger.warning("%s: %s", title, description, extra=extra)
        else:
            logger.info("%s: %s", title, description, extra=extra)
        return note

    def error(self, title: str, description: str = "") -> Notification:
        return self.notify(title, description, variant="destructive")

    def items(self) -> List[Notification]:
        with self._lock:
            return list(self._items)

    def mark(self) -> int:
        """Running count of notifications; pass it to ``since()`` later."""
        with self._lock:
            return self._total

    def since(self, mark: int) -> List[Notification]:
        with self._lock:
            count = min(max(0, self._total - mark), len(self._items))
            return list(self._items)[len(self._items) - count:]

    def clear(self) -> None:
        with self._lock:
            self._items.clear()
