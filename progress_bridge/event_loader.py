from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List

import yaml
from pydantic import ValidationError

from progress_bridge.models import EVENT_ADAPTER, ProgressEvent


class EventLoadError(ValueError):
    pass


def _read_raw(path: Path) -> List[Any]:
    text = path.read_text(encoding="utf-8")

    if path.suffix == ".jsonl":
        raw = []
        for lineno, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                raw.append(json.loads(line))
            except json.JSONDecodeError as e:
                raise EventLoadError(f"{path}:{lineno}: invalid JSON: {e}") from e
        return raw

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise EventLoadError(f"{path}: invalid YAML: {e}") from e

    # Either a bare list or {"events": [...]}
    if isinstance(data, dict):
        data = data.get("events")
    if not isinstance(data, list):
        raise EventLoadError(f"{path}: expected a list of events")
    return data


def load_events(events_path: str | Path) -> List[ProgressEvent]:
    path = Path(events_path)
    try:
        raw = _read_raw(path)
    except (OSError, UnicodeDecodeError) as e:
        raise EventLoadError(f"Cannot read {path}: {e}") from e

    loaded: List[ProgressEvent] = []
    for index, entry in enumerate(raw):
        try:
            loaded.append(EVENT_ADAPTER.validate_python(entry))
        except ValidationError as e:
            raise EventLoadError(f"{path}: event #{index} is invalid: {e}") from e
    return loaded
