import logging

import pytest

from progress_bridge import models
from progress_bridge.engine.converter import EventConverter, legacy_convert_task_notification_event
from progress_bridge.runtime import events


LOGGER = "progress_bridge.event_processing"
TASK_ID = events.TaskId(project_id="demo")


class CancelledResult(models.OperationResult):
    kind: str = "cancelled"


class TaskCustomEvent(models.TaskProgressEvent):
    kind: str = "task_custom"


@pytest.fixture
def converter():
    return EventConverter()


def _compile_task() -> models.TaskOperationDescriptor:
    build = models.OperationDescriptor(name="Run build", display_name="Run build")
    return models.TaskOperationDescriptor(
        name=":app:compileJava",
        display_name="Task :app:compileJava",
        task_path=":app:compileJava",
        parent=build,
    )


def _finish(result) -> models.TaskFinishEvent:
    return models.TaskFinishEvent(event_time=1500, descriptor=_compile_task(), result=result)


def _warnings(caplog):
    return [r for r in caplog.records if r.levelno == logging.WARNING]


def test_task_start_is_started_build_event(converter):
    event = models.TaskStartEvent(event_time=1000, descriptor=_compile_task())
    n = converter.create_task_notification_event(TASK_ID, "op", event)

    assert isinstance(n, events.BuildNotificationEvent)
    assert n.task_id == TASK_ID
    assert n.build_event == events.StartBuildEvent(
        event_id="[op] > [Task :app:compileJava] > [Run build]",
        parent_id=TASK_ID,
        event_time=1000,
        message=":app:compileJava",
    )
    assert n.description == ":app:compileJava"


@pytest.mark.parametrize(
    "result, expected",
    [
        (models.TaskSuccessResult(up_to_date=True), events.SuccessEventResult(up_to_date=True)),
        (models.TaskSuccessResult(up_to_date=False), events.SuccessEventResult(up_to_date=False)),
        (models.SuccessResult(), events.SuccessEventResult(up_to_date=False)),
        (models.TaskFailureResult(failures=[models.Failure(message="boom")]), events.FailureEventResult()),
        (models.FailureResult(), events.FailureEventResult()),
        (models.TaskSkippedResult(skip_message="NO-SOURCE"), events.SkippedEventResult()),
    ],
)
def test_task_finish_results(converter, result, expected):
    n = converter.create_task_notification_event(TASK_ID, "op", _finish(result))

    assert isinstance(n.build_event, events.FinishBuildEvent)
    assert n.build_event.result == expected
    assert n.build_event.event_id == "[op] > [Task :app:compileJava] > [Run build]"
    assert n.build_event.event_time == 1500


def test_unknown_task_result_is_dropped_with_one_warning(converter, caplog):
    event = _finish(models.TaskSuccessResult())
    event.result = CancelledResult()

    with caplog.at_level(logging.WARNING, logger=LOGGER):
        assert converter.create_task_notification_event(TASK_ID, "op", event) is None

    warnings = _warnings(caplog)
    assert len(warnings) == 1
    assert "CancelledResult" in warnings[0].getMessage()


def test_task_status_is_copied_verbatim(converter):
    event = models.TaskStatusEvent(
        event_time=1200, descriptor=_compile_task(), total=10, progress=42, unit="files"
    )
    n = converter.create_task_notification_event(TASK_ID, "op", event)

    assert n.build_event == events.ProgressBuildEvent(
        event_id="[op] > [Task :app:compileJava] > [Run build]",
        parent_id=TASK_ID,
        event_time=1200,
        message=":app:compileJava",
        total=10,
        progress=42,
        unit="files",
    )


def test_unknown_task_event_falls_back_to_plain_notification(converter, caplog):
    event = TaskCustomEvent(descriptor=_compile_task())

    with caplog.at_level(logging.WARNING, logger=LOGGER):
        n = converter.create_task_notification_event(TASK_ID, "op", event)

    assert type(n) is events.TaskNotificationEvent
    assert n == events.TaskNotificationEvent(TASK_ID, ":app:compileJava")
    warnings = _warnings(caplog)
    assert len(warnings) == 1
    assert "TaskCustomEvent" in warnings[0].getMessage()


def test_progress_build_event_for_task(converter):
    event = models.TaskStartEvent(event_time=1000, descriptor=_compile_task())
    n = converter.convert_progress_build_event(TASK_ID, "progress-1", event)

    assert n.build_event == events.ProgressBuildEvent(
        event_id="progress-1",
        parent_id=None,
        event_time=1000,
        message="Running tasks...",
        total=-1,
        progress=-1,
        unit="",
    )


def test_progress_build_event_for_download(converter):
    descriptor = models.OperationDescriptor(name="Download libs/foo.jar", display_name="Download libs/foo.jar")
    event = models.StatusEvent(event_time=3000, descriptor=descriptor, total=100, progress=25, unit="bytes")
    n = converter.convert_progress_build_event(TASK_ID, 7, event)

    assert n.build_event.message == "Downloading foo.jar..."
    assert (n.build_event.total, n.build_event.progress, n.build_event.unit) == (100, 25, "bytes")
    assert n.build_event.event_id == 7


def test_progress_build_event_without_title(converter):
    descriptor = models.OperationDescriptor(name="something unrelated", display_name="something unrelated")
    assert converter.convert_progress_build_event(TASK_ID, 1, models.StartEvent(descriptor=descriptor)) is None


def test_legacy_progress_build_event(converter):
    n = converter.legacy_convert_progress_build_event(TASK_ID, "id", "Task: :app:compileJava")

    assert n.build_event == events.ProgressBuildEvent("id", None, 0, "Running tasks...", -1, -1, "")
    assert converter.legacy_convert_progress_build_event(TASK_ID, "id", "Build").build_event.message == "Building..."
    assert converter.legacy_convert_progress_build_event(TASK_ID, "id", "something unrelated") is None


def test_legacy_task_notification_is_verbatim():
    n = legacy_convert_task_notification_event(TASK_ID, "hello")
    assert type(n) is events.TaskNotificationEvent
    assert n.description == "hello"
    assert n.task_id == TASK_ID


def test_injected_translator_is_used():
    converter = EventConverter(bundle=lambda key, *args: "|".join((key,) + args))
    n = converter.legacy_convert_progress_build_event(TASK_ID, 1, "Download a/b/c.zip")
    assert n.build_event.message == "progress.title.download|c.zip..."


def test_unknown_task_event_with_cyclic_chain(caplog):
    injected = logging.getLogger("build.injected")
    converter = EventConverter(logger=injected)
    event = TaskCustomEvent(descriptor=_compile_task())
    task = event.descriptor
    task.parent.parent = task

    with caplog.at_level(logging.WARNING):
        n = converter.create_task_notification_event(TASK_ID, "op", event)

    assert n == events.TaskNotificationEvent(TASK_ID, ":app:compileJava")
    assert [r.name for r in caplog.records] == ["build.injected", "build.injected"]
    assert "Cyclic" in caplog.records[0].getMessage()
    assert "TaskCustomEvent" in caplog.records[1].getMessage()
    assert "Task :app:compileJava" in caplog.records[1].getMessage()
