from __future__ import annotations

import re
from typing import Callable, Optional

from progress_bridge.models import ProgressEvent, TaskProgressEvent, TestProgressEvent


Translate = Callable[..., str]

DOWNLOAD_PREFIX = "Download "
TASK_PREFIX = "Task: "
BUILD = "Build"
BUILD_MODEL_PREFIXES = ("Build model ", "Build parameterized model")
CONFIGURE_PREFIXES = ("Configure project ", "Cross-configure project ")

_SEPARATORS = re.compile(r"[/\\]")


def file_name(path: str) -> str:
    """Last path segment; trailing separators are ignored. Handles URLs too."""
    trimmed = path.rstrip("/\\")
    if not trimmed:
        return ""
    return _SEPARATORS.split(trimmed)[-1]


def _download_title(name: str, translate: Translate) -> str:
    return translate("progress.title.download", file_name(name[len(DOWNLOAD_PREFIX):]))


def convert_build_event_display_name(event: ProgressEvent, translate: Translate) -> Optional[str]:
    operation_name = event.descriptor.name
    if operation_name.startswith(DOWNLOAD_PREFIX):
        return _download_title(operation_name, translate)
    if isinstance(event, TaskProgressEvent):
        return translate("progress.title.run.tasks")
    if isinstance(event, TestProgressEvent):
        return translate("progress.title.run.tests")
    if event.display_name.startswith(CONFIGURE_PREFIXES):
        return translate("progress.title.configure.projects")
    return None


def legacy_convert_build_event_display_name(description: str, translate: Translate) -> Optional[str]:
    """
    Same classification for callers that only have the free-text description
    of an event, e.g. "Task: :app:compileJava" or "Build model 'Foo'".
    """
    if description.startswith(DOWNLOAD_PREFIX):
        return _download_title(description, translate)
    if description.startswith(TASK_PREFIX):
        return translate("progress.title.run.tasks")
    if description == BUILD:
        return translate("progress.title.build")
    if description.startswith(BUILD_MODEL_PREFIXES):
        return translate("progress.title.build.model")
    if description.startswith(CONFIGURE_PREFIXES):
        return translate("progress.title.configure.projects")
    return None
