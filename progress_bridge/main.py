from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from progress_bridge.config import BridgeConfig, get_config
from progress_bridge.engine.bundle import BundleError, MessageBundle
from progress_bridge.engine.converter import EventConverter
from progress_bridge.event_loader import EventLoadError, load_events
from progress_bridge.runtime.events import TaskId, TaskNotificationEvent
from progress_bridge.runtime.run_logger import NotificationLog, notification_to_record


DEFAULT_TASK_ID = "cli"


def usage() -> None:
    print("Commands:")
    print("  python -m progress_bridge.main convert <events-file> [--operation-id ID] [--task-id ID] [--out PATH]")
    print("  python -m progress_bridge.main progress <events-file> [--task-id ID]")
    print("  python -m progress_bridge.main legacy-progress '<description>' [--task-id ID]")
    print("  python -m progress_bridge.main legacy-notify '<text>' [--task-id ID]")
    print("")
    print("Examples:")
    print("  python -m progress_bridge.main convert tests/fixtures/events.yaml --operation-id build-1")
    print("  python -m progress_bridge.main legacy-progress 'Download https://repo.example.org/libs/foo.jar'")


def _option(args: List[str], name: str) -> Optional[str]:
    if name not in args:
        return None
    i = args.index(name)
    if i + 1 >= len(args):
        raise ValueError(f"Missing value for {name}")
    return args[i + 1]


def _emit(event: Optional[TaskNotificationEvent], log: Optional[NotificationLog] = None) -> None:
    if event is None:
        return
    print(json.dumps(notification_to_record(event), ensure_ascii=False))
    if log is not None:
        log.append(event)


def _converter(config: BridgeConfig) -> EventConverter:
    bundle = MessageBundle.load(config.messages_path)
    return EventConverter(bundle=bundle, max_depth=config.max_depth)


def cmd_convert(
    converter: EventConverter, events_path: Path, operation_id: str, task_id: TaskId, out: Optional[Path]
) -> int:
    try:
        progress_events = load_events(events_path)
    except EventLoadError as e:
        print(f"❌ {e}")
        return 1

    log = NotificationLog(out) if out is not None else None
    for event in progress_events:
        _emit(converter.create_task_notification_event(task_id, operation_id, event), log)
    return 0


def cmd_progress(converter: EventConverter, events_path: Path, task_id: TaskId) -> int:
    try:
        progress_events = load_events(events_path)
    except EventLoadError as e:
        print(f"❌ {e}")
        return 1

    for index, event in enumerate(progress_events):
        _emit(converter.convert_progress_build_event(task_id, index, event))
    return 0


def cmd_legacy_progress(converter: EventConverter, description: str, task_id: TaskId) -> int:
    event = converter.legacy_convert_progress_build_event(task_id, 0, description)
    if event is None:
        print(f"⚠️ No progress title for: {description}")
        return 0
    _emit(event)
    return 0


def cmd_legacy_notify(text: str, task_id: TaskId) -> int:
    _emit(EventConverter.legacy_convert_task_notification_event(task_id, text))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) < 2:
        usage()
        return 2

    try:
        config = get_config()
        task_id = TaskId(project_id=_option(args, "--task-id") or DEFAULT_TASK_ID)
        operation_id = _option(args, "--operation-id") or config.operation_id
        out = _option(args, "--out")
    except ValueError as e:
        print(f"❌ {e}")
        return 2

    logging.basicConfig(level=config.log_level, format="%(levelname)s %(name)s: %(message)s")

    cmd = args[0]
    try:
        converter = _converter(config)
        if cmd == "convert":
            return cmd_convert(converter, Path(args[1]), operation_id, task_id, Path(out) if out else None)

        if cmd == "progress":
            return cmd_progress(converter, Path(args[1]), task_id)

        if cmd == "legacy-progress":
            return cmd_legacy_progress(converter, args[1], task_id)

        if cmd == "legacy-notify":
            return cmd_legacy_notify(args[1], task_id)
    except BundleError as e:
        print(f"❌ {e}")
        return 1

    usage()
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
