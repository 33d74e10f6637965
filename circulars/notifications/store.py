import json
import threading
import time
import uuid
from dataclasses import asdict, replace
from pathlib import Path

from circulars.logging.logger import Log
from circulars.notifications.models import Notification


class NotificationStore:
    """User-facing notification list persisted to a flat JSON file.

    Loaded once on construction and flushed to disk on every mutation.
    Newest notifications come first.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path
        self._lock = threading.Lock()
        self._items: list[Notification] = self._load()

    @property
    def items(self) -> list[Notification]:
        with self._lock:
            return list(self._items)

    @property
    def unread_count(self) -> int:
        with self._lock:
            return sum(1 for n in self._items if not n.read)

    def add(self, title: str, message: str, type: str = "info") -> Notification:
        notification = Notification(
            id=str(uuid.uuid4()),
            title=title,
            message=message,
            created_at=int(time.time() * 1000),
            type=type,
        )
        with self._lock:
            self._items.insert(0, notification)
            self._flush()
        return notification

    def mark_all_read(self) -> None:
        with self._lock:
            self._items = [replace(n, read=True) for n in self._items]
            self._flush()

    def clear_all(self) -> None:
        with self._lock:
            self._items = []
            self._flush()

    def _load(self) -> list[Notification]:
        if self._path is None or not self._path.exists():
            return []
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            Log.warning(f"Ignoring unreadable notifications file {self._path}: {exc}")
            return []
        if not isinstance(raw, list):
            return []
        items: list[Notification] = []
        for entry in raw:
            try:
                items.append(Notification(**entry))
            except TypeError:
                Log.warning(f"Skipping malformed notification entry: {entry!r}")
        return items

    def _flush(self) -> None:
        if self._path is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = [asdict(n) for n in self._items]
        self._path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
