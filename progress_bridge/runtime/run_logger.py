from __future__ import annotations

import json
from dataclasses import fields, is_dataclass
from pathlib import Path
from typing import Any, Dict

from progress_bridge.runtime.events import TaskNotificationEvent


def _jsonable(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        record = {"type": type(value).__name__}
        record.update({f.name: _jsonable(getattr(value, f.name)) for f in fields(value)})
        return record
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def notification_to_record(event: TaskNotificationEvent) -> Dict[str, Any]:
    """Nested dataclasses become dicts tagged with their class name under "type"."""
    return _jsonable(event)


class NotificationLog:
    """
    JSONL log of converted notifications.
    Appends one JSON record per notification.
    """

    def __init__(self, log_path: Path):
        self._log_path = log_path
        self._log_path.parent.mkdir(parents=True, exist_ok=True)

    def append(self, event: TaskNotificationEvent) -> None:
        with self._log_path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(notification_to_record(event), ensure_ascii=False))
            f.write("\n")
